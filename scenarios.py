import argparse
import logging

import matplotlib as mpl

mpl.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.backends.backend_pdf import PdfPages

import da
import data
import popularities as pop

logger = logging.getLogger(__name__)

"""nb is the number of proposers, and of responders"""
nb = 80

"""
In each scenario the popularity model changes:
- uniform preferences on both sides
- responders agree on who the best proposers are, and vice versa
- a few pairs share strong interests
"""
scenarios = [
    ("Uniform", {"alpha_proposers": 0, "alpha_responders": 0, "percent": 0}),
    ("Popular proposers", {"alpha_proposers": 2, "alpha_responders": 0}),
    ("Popular responders", {"alpha_proposers": 0, "alpha_responders": 2}),
    ("Shared interests", {"percent": 0.2, "factor": 100}),
]


def run_scenario(n, params, rng):
    logpop = pop.generate_logpop(n, params, rng)
    prefP, prefS = pop.draw_profile(logpop, rng)
    instance = {
        "n": n,
        "proposers": list(range(n)),
        "responders": list(range(n)),
        "prefP": prefP,
        "prefS": prefS,
    }
    matchP, _ = da.deferred_acceptance(prefP, prefS)
    rankP, rankS = data.match_ranks(instance, matchP)
    return logpop, matchP, rankP, rankS


def plot_scenarios(n, scenarios, filename, seed=None):
    rng = np.random.default_rng(seed)
    results = []

    with PdfPages(filename) as pdf:
        for name, overrides in scenarios:
            params = dict(pop.DEFAULT_PARAMS, **overrides)
            logpop, matchP, rankP, rankS = run_scenario(n, params, rng)
            results.append((name, rankP, rankS))
            logger.info(
                "%s: average ranks %.2f for proposers, %.2f for responders",
                name,
                np.average(rankP),
                np.average(rankS),
            )

            plt.figure(figsize=(6, 5), tight_layout=True)
            plt.title(name)

            plt.imshow(logpop, origin="lower", cmap="viridis")
            plt.xlabel("responders")
            plt.ylabel("proposers")
            plt.colorbar()

            plt.plot(matchP, range(n), "r.", markersize=3)

            pdf.savefig()
            plt.close()

        #####################################
        plt.figure(figsize=(10, 3), tight_layout=True)
        bins = np.arange(1, n + 2) - 0.5

        ax = plt.subplot(1, 2, 1)
        ax.title.set_text("Rank of the match, proposers")
        for name, rankP, _ in results:
            plt.hist(rankP, bins=bins, histtype="step", label=name)
        plt.legend()

        ax = plt.subplot(1, 2, 2)
        ax.title.set_text("Rank of the match, responders")
        for name, _, rankS in results:
            plt.hist(rankS, bins=bins, histtype="step", label=name)
        plt.legend()

        pdf.savefig()
        plt.close()

    return results


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Plot matching scenarios to a pdf.")
    parser.add_argument("--n", type=int, default=nb)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--output", default="fig.pdf")
    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    logging.getLogger("da").setLevel(logging.WARNING)

    plot_scenarios(args.n, scenarios, args.output, args.seed)
