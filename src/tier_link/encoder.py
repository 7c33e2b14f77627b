import logging
from typing import Dict, List, Optional, Tuple

from .byte_codec import big_int_to_bytes, encode16, to_base64url
from .common import (
    FORMAT_VERSION,
    TIER_NOT,
    TIER_SOMEWHAT,
    TIER_VERY,
    DuplicateIndexError,
    IndexOutOfRangeError,
    InvalidCutPointsError,
    TierLinkCommon,
    check_item_count,
)
from .lehmer_code import digits_from_permutation, rank_from_digits, validate_permutation

logger = logging.getLogger(__name__)


def encode_permutation_to_bytes(perm: List[int], k1: int, k2: int) -> bytes:
    """
    Header + rank bytes for a permutation of 0..N-1 cut into three groups.

    k1 is the size of the first group ("very"), k2 of the second ("somewhat");
    the third group is whatever is left and is not stored.
    """
    return _rank_and_payload(perm, k1, k2)[1]


def _rank_and_payload(perm: List[int], k1: int, k2: int) -> Tuple[int, bytes]:
    validate_permutation(perm)
    n = len(perm)
    if k1 < 0 or k2 < 0 or k1 + k2 > n:
        raise InvalidCutPointsError(k1, k2, n)

    rank = rank_from_digits(digits_from_permutation(perm))
    header = bytes([FORMAT_VERSION]) + encode16(k1) + encode16(k2)
    return rank, header + big_int_to_bytes(rank)


class TierLinkEncoder(TierLinkCommon):
    n: int

    permutation: List[int]
    k1: int
    k2: int

    rank: int
    payload: bytes
    fragment: str

    def __init__(self, state: Dict, n: int, with_marker: Optional[bool] = None):
        self.n = check_item_count(n)
        self._state = state or {}

        self._canonicalize()
        self.rank, self.payload = _rank_and_payload(self.permutation, self.k1, self.k2)
        self.fragment = self._add_marker(to_base64url(self.payload), with_marker)

        logger.debug(
            "Encoded tier state N=%d k1=%d k2=%d into %d bytes",
            self.n, self.k1, self.k2, len(self.payload),
        )

    def _canonicalize(self):
        # very ++ somewhat ++ not, with every unlisted index appended to
        # "not" in ascending order so the encoding is unique.
        seen: Dict[int, str] = {}  # index -> tier it was first listed in
        very = self._checked_tier(TIER_VERY, seen)
        somewhat = self._checked_tier(TIER_SOMEWHAT, seen)
        not_ = self._checked_tier(TIER_NOT, seen)

        if len(very) + len(somewhat) + len(not_) < self.n:
            not_.extend(i for i in range(self.n) if i not in seen)

        self.permutation = very + somewhat + not_
        self.k1 = len(very)
        self.k2 = len(somewhat)

    def _checked_tier(self, tier: str, seen: Dict[int, str]) -> List[int]:
        out = []
        for x in self._state.get(tier) or []:
            if not isinstance(x, int) or isinstance(x, bool) or x < 0 or x >= self.n:
                raise IndexOutOfRangeError(f"Index out of range in {tier}: {x!r} (N={self.n})")
            if x in seen:
                raise DuplicateIndexError(x, tier, seen[x])
            seen[x] = tier
            out.append(x)
        return out


def encode_tier_state_to_fragment(state: Dict, n: int, with_marker: Optional[bool] = None) -> str:
    """
    Encode a tier state ({"very": [...], "somewhat": [...], "not": [...]})
    over items 0..n-1 into a base64url fragment.

    Indices missing from all three tiers are appended to "not" in ascending
    order. With `with_marker` left at None the configured default applies
    (a leading "#", ready for a URL fragment).
    """
    return TierLinkEncoder(state, n, with_marker=with_marker).fragment
