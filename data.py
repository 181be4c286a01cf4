import json as json
import logging

import numpy as np

logger = logging.getLogger(__name__)

"""
An instance is a dict
  "n"          : number of proposers, and of responders
  "proposers"  : names of the proposers, index is the proposer id
  "responders" : names of the responders, index is the responder id
  "prefP"      : prefP[p] = responders ids by decreasing preference of p
  "prefS"      : prefS[s] = proposers ids by decreasing preference of s
Ids are 0-based in memory and 1-based in the text format.
"""


class InputError(ValueError):
    """malformed input text, lineno is 1-based"""

    def __init__(self, lineno, message):
        self.lineno = lineno
        self.message = message
        super().__init__("line {}: {}".format(lineno, message))


class DataFileError(Exception):
    def __init__(self, filename, cause):
        self.filename = filename
        self.cause = cause
        super().__init__("cannot read {}: {}".format(filename, cause))


"""parse one line of 1-based ids into a 0-based permutation of range(n)"""


def parse_preferences(line, lineno, n, who):
    tokens = line.split()
    if len(tokens) != n:
        raise InputError(
            lineno, "{} lists {} preferences, expected {}".format(who, len(tokens), n)
        )
    pr = []
    for token in tokens:
        try:
            rank = int(token)
        except ValueError:
            raise InputError(
                lineno, "{}: '{}' is not an id".format(who, token)
            ) from None
        if not 1 <= rank <= n:
            raise InputError(
                lineno, "{}: id {} out of range 1..{}".format(who, rank, n)
            )
        if rank - 1 in pr:
            raise InputError(lineno, "{}: id {} listed twice".format(who, rank))
        pr.append(rank - 1)
    return pr


def parse_instance(lines):
    lines = [line.rstrip("\r\n") for line in lines]
    while lines and not lines[-1].strip():
        lines.pop()
    if not lines:
        raise InputError(1, "empty input")

    header = lines[0].strip()
    try:
        n = int(header)
    except ValueError:
        n = 0
    if n < 1:
        raise InputError(1, "'{}' is not a positive number of agents".format(header))
    if len(lines) < 4 * n + 1:
        raise InputError(
            len(lines) + 1,
            "expected {} lines, input ends after {}".format(4 * n + 1, len(lines)),
        )
    if len(lines) > 4 * n + 1:
        raise InputError(4 * n + 2, "unexpected trailing data")

    def read_names(start, side):
        names = []
        for i in range(n):
            name = lines[start + i].strip()
            if not name:
                raise InputError(
                    start + i + 1, "empty name for {} {}".format(side, i + 1)
                )
            names.append(name)
        return names

    def read_profile(start, names):
        return [
            parse_preferences(lines[start + i], start + i + 1, n, names[i])
            for i in range(n)
        ]

    # layout: n, proposers names, their lists, responders names, their lists
    proposers = read_names(1, "proposer")
    prefP = read_profile(n + 1, proposers)
    responders = read_names(2 * n + 1, "responder")
    prefS = read_profile(3 * n + 1, responders)

    return {
        "n": n,
        "proposers": proposers,
        "responders": responders,
        "prefP": prefP,
        "prefS": prefS,
    }


def read_instance(filename):
    try:
        with open(filename, "r", encoding="utf-8") as f:
            lines = f.readlines()
    except (OSError, UnicodeDecodeError) as e:
        raise DataFileError(filename, e) from e
    instance = parse_instance(lines)
    logger.info("loaded %d pairs of agents from %s", instance["n"], filename)
    return instance


def format_instance(instance):
    def ids(pr):
        return " ".join(str(i + 1) for i in pr)

    lines = [str(instance["n"])]
    lines += instance["proposers"]
    lines += [ids(pr) for pr in instance["prefP"]]
    lines += instance["responders"]
    lines += [ids(pr) for pr in instance["prefS"]]
    return "\n".join(lines) + "\n"


"""save instance as text input file and json"""


def serialize(instance, filename):
    with open(filename + ".txt", "w") as f:
        f.write(format_instance(instance))

    with open(filename + ".json", "w") as f:
        json.dump(instance, f)


def deserialize(filename):
    with open(filename + ".json", "r") as f:
        return json.load(f)


def format_matches(instance, matchP):
    proposers, responders = instance["proposers"], instance["responders"]
    return [
        "{} / {}".format(proposers[p], responders[s]) for p, s in enumerate(matchP)
    ]


"""
rank (1 is the favourite) of the partner in the list of each agent
returns (rankP, rankS) as numpy arrays indexed by proposer and responder ids
"""


def match_ranks(instance, matchP):
    n = instance["n"]
    rankP = np.zeros(n, dtype=int)
    rankS = np.zeros(n, dtype=int)
    for p, s in enumerate(matchP):
        rankP[p] = 1 + instance["prefP"][p].index(s)
        rankS[s] = 1 + instance["prefS"][s].index(p)
    return rankP, rankS


def print_result(instance, matchP, nb_proposals):
    for line in format_matches(instance, matchP):
        print(line)

    n = instance["n"]
    rankP, rankS = match_ranks(instance, matchP)

    print("\n")
    print("Statistics")
    print("\tNumber of proposals {} (at most {}).".format(nb_proposals, n * n))
    print(
        "\tProposers matched to their favourite responder {} / {}.".format(
            np.count_nonzero(rankP == 1), n
        )
    )
    print(
        "\tAverage rank of the match in the lists of proposers {:.2f}.".format(
            np.average(rankP)
        )
    )
    print(
        "\tResponders matched to their favourite proposer {} / {}.".format(
            np.count_nonzero(rankS == 1), n
        )
    )
    print(
        "\tAverage rank of the match in the lists of responders {:.2f}.".format(
            np.average(rankS)
        )
    )
