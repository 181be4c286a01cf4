"""
stability checks for a one-to-one matching with complete preferences
matchP[p] = responder matched to the proposer p
"""

import itertools


def ranks(profile):
    # rank[a][b] = rank of b in the list of a, 0 is the favourite
    return [{b: r for r, b in enumerate(pr)} for pr in profile]


def blocking_pairs(prefP, prefS, matchP):
    rankP, rankS = ranks(prefP), ranks(prefS)
    matchS = [None] * len(prefS)
    for p, s in enumerate(matchP):
        matchS[s] = p

    result = []
    for p, pr in enumerate(prefP):
        # only responders p prefers to its own partner can block
        for s in pr[: rankP[p][matchP[p]]]:
            if rankS[s][p] < rankS[s][matchS[s]]:
                result.append((p, s))
    return result


def is_stable(prefP, prefS, matchP):
    return not blocking_pairs(prefP, prefS, matchP)


"""
every stable matching, by brute force over the n! perfect matchings
only usable for small n
"""


def all_stable_matchings(prefP, prefS):
    n = len(prefP)
    return [
        list(matchP)
        for matchP in itertools.permutations(range(n))
        if is_stable(prefP, prefS, matchP)
    ]


def is_proposer_optimal(prefP, prefS, matchP):
    rankP = ranks(prefP)
    if not is_stable(prefP, prefS, matchP):
        return False
    for other in all_stable_matchings(prefP, prefS):
        for p in range(len(prefP)):
            if rankP[p][other[p]] < rankP[p][matchP[p]]:
                return False
    return True
