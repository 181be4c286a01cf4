"""
proposer-proposing deferred acceptance
takes as input complete preference lists over two sets of equal size
"""

import logging

import numpy as np

logger = logging.getLogger(__name__)

ACCEPT, REPLACE, REJECT = "accept", "replace", "reject"


class MatchingError(Exception):
    pass


class InvalidPreferences(MatchingError, ValueError):
    """A preference list is not a permutation of the opposite set."""

    def __init__(self, side, agent, reason):
        self.side = side
        self.agent = agent
        self.reason = reason
        super().__init__("{} {}: {}".format(side, agent, reason))


class PreferenceExhausted(MatchingError):
    """A proposer has been rejected by every responder of its list."""

    def __init__(self, proposer):
        self.proposer = proposer
        super().__init__(
            "proposer {} has no valid choice left".format(proposer)
        )


def check_preferences(prefP, prefS):
    """raise InvalidPreferences unless both profiles are n permutations of range(n)"""
    n = len(prefP)
    if n == 0:
        raise InvalidPreferences("proposer", None, "empty profile")
    if len(prefS) != n:
        raise InvalidPreferences(
            "responder", None, "{} responders for {} proposers".format(len(prefS), n)
        )
    expected = set(range(n))
    for side, profile in (("proposer", prefP), ("responder", prefS)):
        for agent, pr in enumerate(profile):
            if len(pr) != n:
                raise InvalidPreferences(
                    side, agent, "{} entries, expected {}".format(len(pr), n)
                )
            if set(pr) != expected:
                raise InvalidPreferences(
                    side, agent, "not a permutation of 0..{}".format(n - 1)
                )


def _square_table(profile, n, side):
    try:
        table = np.array(profile, dtype=int)
    except ValueError:
        table = None
    if table is None or table.shape != (n, n):
        raise InvalidPreferences(side, None, "preferences must form an n x n table")
    return table


class PreferenceStore:
    """
    Preferences of both sides for one matching run.

    Proposer lists are kept whole; curP[p] is the position of the front of
    the remaining preferences of p, so popping never mutates the lists.
    Responder lists are inverted once into a rank table.
    """

    def __init__(self, prefP, prefS):
        self.n = len(prefP)
        self.prefP = _square_table(prefP, self.n, "proposer")

        # rankS[s][p] = rank of p in the list of s, 1 is the favourite
        pr = _square_table(prefS, self.n, "responder")
        self.rankS = np.zeros((self.n, self.n), dtype=int)
        self.rankS[np.arange(self.n)[:, None], pr] = np.arange(1, self.n + 1)

        # curP[p] = rank of the next proposal from p
        self.curP = np.zeros(self.n, dtype=int)

    def next_choice(self, p):
        if self.curP[p] >= self.n:
            raise PreferenceExhausted(p)
        return int(self.prefP[p, self.curP[p]])

    def pop_choice(self, p):
        if self.curP[p] >= self.n:
            raise PreferenceExhausted(p)
        self.curP[p] += 1

    def remaining(self, p):
        return [int(s) for s in self.prefP[p, self.curP[p]:]]

    def rank(self, s, p):
        return int(self.rankS[s, p])

    def reset(self):
        self.curP[:] = 0


class MatchState:
    """tentative assignment of responders; None marks a free responder"""

    def __init__(self, n):
        self.n = n
        # matchS[s] = tentative match of s
        self.matchS = [None] * n
        self.isMatchedP = [False] * n
        self.nbUnmatched = n

    def is_converged(self):
        return self.nbUnmatched == 0

    def proposer_matches(self):
        # matchP[p] = match of p
        matchP = [None] * self.n
        for s, p in enumerate(self.matchS):
            if p is not None:
                matchP[p] = s
        return matchP


def accept(state, p, s):
    state.matchS[s] = p
    state.isMatchedP[p] = True
    state.nbUnmatched -= 1


def replace(state, store, p, s):
    current = state.matchS[s]
    state.matchS[s] = p
    state.isMatchedP[p] = True
    state.isMatchedP[current] = False
    # s rejected its former partner, who never proposes to s again
    store.pop_choice(current)
    return current


def reject(store, p):
    store.pop_choice(p)


class MatchingEngine:
    def __init__(self, store):
        self.store = store
        self.state = MatchState(store.n)
        self.nbProposals = 0

    def propose(self, p):
        """one proposal from the free proposer p, returns the transition taken"""
        state, store = self.state, self.store
        s = store.next_choice(p)
        current = state.matchS[s]
        self.nbProposals += 1

        if current is None:
            accept(state, p, s)
            logger.debug("%d proposes to %d: accepted", p, s)
            return ACCEPT
        if store.rank(s, p) < store.rank(s, current):
            replace(state, store, p, s)
            logger.debug("%d proposes to %d: replaces %d", p, s, current)
            return REPLACE
        reject(store, p)
        logger.debug("%d proposes to %d: rejected", p, s)
        return REJECT

    def run(self):
        state = self.state
        while not state.is_converged():
            for p in range(state.n):
                if state.is_converged():
                    break
                if not state.isMatchedP[p]:
                    self.propose(p)

        logger.info(
            "converged after %d proposals for %d proposers", self.nbProposals, state.n
        )
        return state


def deferred_acceptance(prefP, prefS):
    check_preferences(prefP, prefS)
    engine = MatchingEngine(PreferenceStore(prefP, prefS))
    state = engine.run()
    return state.proposer_matches(), list(state.matchS)
