RANDOM = "random"
SHORTEST = "shortest"
POLICIES = (RANDOM, SHORTEST)


class Dispatcher:
    """Routes each arrival to one of a set of queues.

    Both policies consume exactly one uniform draw per packet, so runs that
    differ only in policy see the same arrival and service samples.
    """

    policy = None

    def __init__(self, variates):
        self.variates = variates

    def candidates(self, queues):
        raise NotImplementedError

    def select(self, queues):
        if not queues:
            raise ValueError("no queues to dispatch to")
        choices = self.candidates(queues)
        return choices[self.variates.index(len(choices))]


class RandomDispatcher(Dispatcher):
    policy = RANDOM

    def candidates(self, queues):
        return list(queues)


class ShortestQueueDispatcher(Dispatcher):
    policy = SHORTEST

    def candidates(self, queues):
        shortest = min(q.length for q in queues)
        return [q for q in queues if q.length == shortest]


def make_dispatcher(policy, variates):
    if policy == RANDOM:
        return RandomDispatcher(variates)
    if policy == SHORTEST:
        return ShortestQueueDispatcher(variates)
    raise ValueError(f"unknown dispatch policy {policy!r}, expected one of {POLICIES}")
