"""
Unit tests for the combinatorial rank engine in tier_link.lehmer_code.
"""

import itertools
import math
import random

import pytest

from tier_link.common import FragmentFormatError, InvalidInputError, RankOutOfRangeError
from tier_link.lehmer_code import (
    Fenwick,
    digits_from_permutation,
    digits_from_rank,
    permutation_from_digits,
    rank_from_digits,
    rank_permutation,
    unrank_permutation,
    validate_permutation,
)


class TestFenwick:

    def test_filled_prefix_sums(self):
        fw = Fenwick(10, filled=True)
        assert [fw.sum(i) for i in range(11)] == list(range(11))

    def test_find_kth_skips_removed(self):
        fw = Fenwick(5, filled=True)
        fw.add(1, -1)
        fw.add(3, -1)
        # remaining 1-based positions: 2, 4, 5
        assert [fw.find_kth(k) for k in range(3)] == [2, 4, 5]


class TestDigits:

    def test_known_digits(self):
        perm = [3, 1, 7, 0, 2, 4, 5, 6, 8, 9]
        assert digits_from_permutation(perm) == [3, 1, 5, 0, 0, 0, 0, 0, 0, 0]

    def test_digit_bounds(self):
        rng = random.Random(7)
        perm = list(range(60))
        rng.shuffle(perm)
        digits = digits_from_permutation(perm)
        assert len(digits) == 60
        assert all(0 <= d <= 59 - i for i, d in enumerate(digits))

    def test_permutation_from_digits_inverts(self):
        rng = random.Random(11)
        perm = list(range(120))
        rng.shuffle(perm)
        assert permutation_from_digits(digits_from_permutation(perm)) == perm

    def test_permutation_from_digits_rejects_bad_digit(self):
        with pytest.raises(FragmentFormatError):
            permutation_from_digits([0, 2, 0])


class TestRank:

    def test_known_rank(self):
        assert rank_from_digits([3, 1, 5, 0, 0, 0, 0, 0, 0, 0]) == (
            3 * math.factorial(9) + math.factorial(8) + 5 * math.factorial(7)
        )

    def test_all_permutations_of_four_are_a_bijection(self):
        ranks = [rank_from_digits(digits_from_permutation(list(p)))
                 for p in itertools.permutations(range(4))]
        assert sorted(ranks) == list(range(24))

    def test_lexicographic_order(self):
        perms = [list(p) for p in itertools.permutations(range(5))]
        assert [rank_permutation(p) for p in perms] == list(range(120))

    def test_identity_and_reverse(self):
        n = 30
        assert rank_permutation(list(range(n))) == 0
        assert rank_permutation(list(reversed(range(n)))) == math.factorial(n) - 1

    def test_single_element(self):
        assert rank_permutation([0]) == 0
        assert unrank_permutation(0, 1) == [0]

    def test_unrank_beyond_64_bits(self):
        n = 40
        rank = math.factorial(n) - 12345
        assert rank > 2 ** 64
        assert rank_permutation(unrank_permutation(rank, n)) == rank

    def test_digits_from_rank_out_of_range(self):
        with pytest.raises(RankOutOfRangeError):
            digits_from_rank(math.factorial(6), 6)
        with pytest.raises(RankOutOfRangeError):
            digits_from_rank(-1, 6)

    def test_digits_from_rank_top_value(self):
        assert digits_from_rank(math.factorial(6) - 1, 6) == [5, 4, 3, 2, 1, 0]


class TestValidatePermutation:

    @pytest.mark.parametrize("perm", [[], [0, 0], [1, 2], [0, -1], [0, 1.0], [True]])
    def test_rejects(self, perm):
        with pytest.raises(InvalidInputError):
            validate_permutation(perm)

    def test_accepts(self):
        validate_permutation([2, 0, 1])
