from typing import List

from .common import (
    MAX_ITEMS,
    FragmentFormatError,
    InvalidInputError,
    RankOutOfRangeError,
)


class Fenwick:
    """Binary indexed tree over presence bits of the pool {0..n-1}."""

    def __init__(self, n, filled=False):
        self.n = n
        self.bit = [0] * (n + 1)
        if filled:
            # linear-time build of an all-ones tree
            for i in range(1, n + 1):
                self.bit[i] += 1
                j = i + (i & -i)
                if j <= n:
                    self.bit[j] += self.bit[i]

    def add(self, i, delta):
        while i <= self.n:
            self.bit[i] += delta
            i += i & -i

    def sum(self, i):
        s = 0
        while i > 0:
            s += self.bit[i]
            i -= i & -i
        return s

    def find_kth(self, k):
        """
        Returns the 1-based position of the (k+1)-th remaining element.
        Descends the tree instead of binary searching over prefix sums.
        """
        pos = 0
        step = 1 << self.n.bit_length()
        while step:
            nxt = pos + step
            if nxt <= self.n and self.bit[nxt] <= k:
                pos = nxt
                k -= self.bit[nxt]
            step >>= 1
        return pos + 1


def validate_permutation(perm: List[int]):
    n = len(perm)
    if n == 0:
        raise InvalidInputError("Permutation cannot be empty")
    if n > MAX_ITEMS:
        raise InvalidInputError(f"N too large for this header encoding (max {MAX_ITEMS})")
    seen = bytearray(n)
    for v in perm:
        if not isinstance(v, int) or isinstance(v, bool) or v < 0 or v >= n:
            raise InvalidInputError(f"Invalid element in permutation: {v!r}")
        if seen[v]:
            raise InvalidInputError(f"Duplicate element in permutation: {v}")
        seen[v] = 1


def digits_from_permutation(perm: List[int]) -> List[int]:
    """
    Lehmer digits of `perm`: digit i is how many not-yet-used elements
    are smaller than perm[i]. Digit i lies in [0, n-1-i].
    Time: O(n log n)
    """
    n = len(perm)
    fw = Fenwick(n, filled=True)
    digits = []
    for p in perm:
        x = p + 1
        digits.append(fw.sum(x - 1))
        fw.add(x, -1)
    return digits


def rank_from_digits(digits: List[int]) -> int:
    """
    Factorial-base value of the digits:
    d[0]*(n-1)! + d[1]*(n-2)! + ... + d[n-1]*0!
    """
    n = len(digits)
    rank = 0
    for i, d in enumerate(digits):
        rank = rank * (n - i) + d
    return rank


def digits_from_rank(rank: int, n: int) -> List[int]:
    if rank < 0:
        raise RankOutOfRangeError(f"Rank must be non-negative, got {rank}")
    digits = [0] * n
    x = rank
    for i in range(1, n + 1):
        x, digits[n - i] = divmod(x, i)
    if x != 0:
        # rank >= n!
        raise RankOutOfRangeError(f"Rank out of range for N={n}")
    return digits


def permutation_from_digits(digits: List[int]) -> List[int]:
    n = len(digits)
    fw = Fenwick(n, filled=True)
    perm = []
    for i, d in enumerate(digits):
        if not 0 <= d <= n - 1 - i:
            raise FragmentFormatError(f"Lehmer digit {d} out of range at position {i}")
        pos = fw.find_kth(d)
        fw.add(pos, -1)
        perm.append(pos - 1)
    return perm


def rank_permutation(perm: List[int]) -> int:
    """
    Returns the Lehmer rank of `perm` among permutations of {0..n-1}.
    Rank ∈ [0, n! - 1].
    """
    validate_permutation(perm)
    return rank_from_digits(digits_from_permutation(perm))


def unrank_permutation(rank: int, n: int) -> List[int]:
    return permutation_from_digits(digits_from_rank(rank, n))
