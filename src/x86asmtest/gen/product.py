"""bounded enumeration of argument combinations"""

from x86asmtest.gen import args_table


def args_cartesian_prod(domains):
    """every combination of one entry per domain, as tuples.

    The rightmost domain varies fastest.  No domains give one empty
    combination; an empty domain gives no combinations.
    """
    domains = [tuple(domain) for domain in domains]
    if any(len(domain) == 0 for domain in domains):
        return []

    combinations = []
    counters = [0] * len(domains)
    while True:
        combinations.append(tuple(domain[i]
                                  for (domain, i) in zip(domains, counters)))
        # odometer step: bump the rightmost counter, carry leftwards
        pos = len(domains) - 1
        while pos >= 0:
            counters[pos] += 1
            if counters[pos] < len(domains[pos]):
                break
            counters[pos] = 0
            pos -= 1
        if pos < 0:
            return combinations


class Sampler:
    """takes the capped ("peeked") part of each operand class domain.

    By default the cap is a prefix of the domain.  With rotate=True each
    peek of a class continues where the previous one stopped (wrapping
    around), so successive operands and forms walk the whole curated
    list.  Either way the result only depends on the order of peeks.
    """

    def __init__(self, rotate=False):
        self.rotate = rotate
        self.__cursors = {}

    def peek_count(self, key):
        return min(args_table.peeks(key), len(args_table.lookup(key)))

    def peek(self, key):
        domain = args_table.lookup(key)
        count = self.peek_count(key)
        if not self.rotate:
            return domain[:count]
        start = self.__cursors.get(key, 0)
        self.__cursors[key] = (start + count) % len(domain) if domain else 0
        return tuple(domain[(start + i) % len(domain)] for i in range(count))

    def combinations(self, keys):
        return args_cartesian_prod([self.peek(key) for key in keys])
