import argparse
import json as json
import logging
import sys as sys

import numpy as np

import data

logger = logging.getLogger(__name__)

DEFAULT_PARAMS = {
    # intrinsic popularity of the k-th agent is 1 / k**alpha
    "alpha_proposers": 1.0,
    "alpha_responders": 1.0,
    # fraction of pairs sharing interests, and their popularity boost
    "percent": 0.05,
    "factor": 10,
}


def load_params(filename=None):
    params = dict(DEFAULT_PARAMS)
    if filename is not None:
        with open(filename, "r") as f:
            overrides = json.load(f)
        unknown = set(overrides) - set(DEFAULT_PARAMS)
        if unknown:
            raise ValueError("unknown parameters {}".format(sorted(unknown)))
        params.update(overrides)
    return params


"""
Generate a popularity profile for n proposers and n responders
- some proposers are intrinsically more popular
- some responders are intrinsically more popular
- some proposer-responder pairs share interests
We define pop[p,s] = popularity p and s give each other

Pr[p prefers s1 to s2] = pop[p,s1] / (pop[p,s1] + pop[p,s2])
Pr[s prefers p1 to p2] = pop[p1,s] / (pop[p1,s] + pop[p2,s])

Multiplying all popularity by a constant
does not change the distribution

Because we deal with large popularity, we store the log
With both alphas at 0 and percent at 0, preferences are uniform
"""


def generate_logpop(n, params, rng):
    logpop = np.zeros((n, n))
    ids = np.arange(1, n + 1)

    # step 1: some proposers are intrinsically more popular
    logpop -= params["alpha_proposers"] * np.log(ids)[:, None]

    # step 2: some responders are intrinsically more popular
    logpop -= params["alpha_responders"] * np.log(ids)[None, :]

    # step 3: some pairs share interests
    for _ in range(int(params["percent"] * n * n)):
        p, s = rng.integers(n, size=2)
        logpop[p, s] += np.log(params["factor"])

    return logpop


"""
Recall that we want a distribution such that
Pr[a > b] = pop[a] / (pop[a] + pop[b])

We draw without replacement with proba proportional to pop
 <=> sort by increasing X[i] drawn from Exp(pop[i])
 <=> sort by increasing Y[i] = log(-log(Unif))-log(pop[i])
"""


def draw_pref(logpop, rng):
    r = np.log(-np.log(rng.random(len(logpop))))
    return [int(i) for i in np.argsort(r - logpop, kind="stable")]


def draw_profile(logpop, rng):
    n = logpop.shape[0]
    prefP = [draw_pref(logpop[p, :], rng) for p in range(n)]
    prefS = [draw_pref(logpop[:, s], rng) for s in range(n)]
    return prefP, prefS


def random_instance(n, params=None, seed=None):
    rng = np.random.default_rng(seed)
    params = params or DEFAULT_PARAMS
    logger.debug("drawing instance of size %d with %s, seed %s", n, params, seed)
    logpop = generate_logpop(n, params, rng)
    prefP, prefS = draw_profile(logpop, rng)
    return {
        "n": n,
        "proposers": ["P{}".format(i + 1) for i in range(n)],
        "responders": ["R{}".format(i + 1) for i in range(n)],
        "prefP": prefP,
        "prefS": prefS,
    }


def _build_parser():
    p = argparse.ArgumentParser(
        description="Draw a random instance and save it as text and json."
    )
    p.add_argument("n", type=int, help="number of proposers and of responders")
    p.add_argument("output", help="output file name, without extension")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--params", default=None, help="json file of model parameters")
    return p


if __name__ == "__main__":
    args = _build_parser().parse_args()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    if args.n < 1:
        print("n must be positive", file=sys.stderr)
        sys.exit(1)

    params = load_params(args.params)
    print("Drawing instance of size {}...".format(args.n))
    instance = random_instance(args.n, params, args.seed)

    print("Saving instance to file " + args.output + "...")
    data.serialize(instance, args.output)

    print("Done.")
