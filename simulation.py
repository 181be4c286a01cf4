import argparse
import logging
import sys as sys

import numpy as np
import pandas as pd

import da
import data
import popularities as pop

logger = logging.getLogger(__name__)

DEFAULT_SIZES = [10, 50, 100]
DEFAULT_NB_RUNS = 100


def run_experiment(n, params, rng):
    # draws full preferences
    logpop = pop.generate_logpop(n, params, rng)
    prefP, prefS = pop.draw_profile(logpop, rng)
    instance = {
        "n": n,
        "proposers": list(range(n)),
        "responders": list(range(n)),
        "prefP": prefP,
        "prefS": prefS,
    }

    # run deferred acceptance
    engine = da.MatchingEngine(da.PreferenceStore(prefP, prefS))
    state = engine.run()
    matchP = state.proposer_matches()

    rankP, rankS = data.match_ranks(instance, matchP)
    return {
        "n": n,
        "nb_proposals": engine.nbProposals,
        "avg_rank_proposers": float(np.average(rankP)),
        "avg_rank_responders": float(np.average(rankS)),
        "nb_favourite_proposers": int(np.count_nonzero(rankP == 1)),
        "nb_favourite_responders": int(np.count_nonzero(rankS == 1)),
    }


def run_experiments(sizes, nb_runs, params, seed=None):
    rng = np.random.default_rng(seed)
    rows = []
    for n in sizes:
        logger.info("running %d experiments of size %d", nb_runs, n)
        for _ in range(nb_runs):
            rows.append(run_experiment(n, params, rng))
    return pd.DataFrame(rows)


def summarize(df):
    """[min, mean, max] of every statistic, one row per size"""
    return df.groupby("n").agg(["min", "mean", "max"])


def _build_parser():
    p = argparse.ArgumentParser(
        description="Statistics of deferred acceptance on random instances."
    )
    p.add_argument("--sizes", type=int, nargs="+", default=DEFAULT_SIZES)
    p.add_argument("--runs", type=int, default=DEFAULT_NB_RUNS)
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--params", default=None, help="json file of model parameters")
    p.add_argument("--output", default=None, help="csv file receiving every run")
    p.add_argument("--verbose", action="store_true")
    return p


if __name__ == "__main__":
    args = _build_parser().parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    # the engine logs every transition at debug level
    logging.getLogger("da").setLevel(logging.WARNING)

    params = pop.load_params(args.params)
    df = run_experiments(args.sizes, args.runs, params, args.seed)
    if args.output is not None:
        df.to_csv(args.output, index=False)

    with pd.option_context("display.max_columns", None, "display.width", 200):
        print(
            "\n******\nStatistics on {} experiments per size [min,mean,max]\n".format(
                args.runs
            ),
            file=sys.stderr,
        )
        print(summarize(df), file=sys.stderr)
