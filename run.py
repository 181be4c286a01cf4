"""
read an instance file, compute the proposer-optimal stable matching
and print one line "<proposer> / <responder>" per proposer
"""

import argparse
import logging
import sys as sys

import da
import data

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "program1data.txt"


def solve(instance):
    engine = da.MatchingEngine(
        da.PreferenceStore(instance["prefP"], instance["prefS"])
    )
    state = engine.run()
    return state.proposer_matches(), engine.nbProposals


def _build_parser():
    p = argparse.ArgumentParser(
        description="Proposer-optimal stable matching by deferred acceptance."
    )
    p.add_argument("filename", nargs="?", default=DEFAULT_FILENAME)
    p.add_argument("--stats", action="store_true", help="print matching statistics")
    p.add_argument(
        "--save", default=None, help="also save the instance as <SAVE>.txt and .json"
    )
    p.add_argument("--verbose", action="store_true")
    return p


def main(argv=None):
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        instance = data.read_instance(args.filename)
    except data.DataFileError as e:
        print(
            "Error: the data file or file path is incorrect, {}".format(e),
            file=sys.stderr,
        )
        return 1
    except data.InputError as e:
        print(
            "Error: invalid data in {}, {}".format(args.filename, e), file=sys.stderr
        )
        return 1

    try:
        matchP, nb_proposals = solve(instance)
    except da.MatchingError as e:
        print("Error: {}".format(e), file=sys.stderr)
        return 1

    if args.stats:
        data.print_result(instance, matchP, nb_proposals)
    else:
        for line in data.format_matches(instance, matchP):
            print(line)

    if args.save is not None:
        try:
            data.serialize(instance, args.save)
        except OSError as e:
            print(
                "Error: cannot save instance to {}, {}".format(args.save, e),
                file=sys.stderr,
            )
            return 1
        logger.info("instance saved to %s.txt and %s.json", args.save, args.save)
    return 0


if __name__ == "__main__":
    sys.exit(main())
