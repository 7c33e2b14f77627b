import logging
from typing import Dict, List, NamedTuple

from .byte_codec import bytes_to_big_int, decode16, from_base64url
from .common import (
    FORMAT_VERSION,
    HEADER_SIZE,
    TIER_NOT,
    TIER_SOMEWHAT,
    TIER_VERY,
    FragmentFormatError,
    InvalidCutPointsError,
    InvalidInputError,
    TierLinkCommon,
    UnsupportedVersionError,
    check_item_count,
)
from .lehmer_code import digits_from_rank, permutation_from_digits, validate_permutation

logger = logging.getLogger(__name__)


class DecodedPermutation(NamedTuple):
    perm: List[int]  # very ++ somewhat ++ not
    k1: int
    k2: int


class TierLinkDecoder(TierLinkCommon):
    n: int

    permutation: List[int]
    k1: int
    k2: int
    rank: int

    def __init__(self, fragment: str, n: int):
        self.n = check_item_count(n)

        payload = from_base64url(self._strip_marker(fragment))
        self._parse_header(payload)
        self.rank = bytes_to_big_int(payload[HEADER_SIZE:])
        self._rebuild_permutation()

        logger.debug(
            "Decoded fragment N=%d k1=%d k2=%d from %d bytes",
            self.n, self.k1, self.k2, len(payload),
        )

    def _parse_header(self, payload: bytes):
        if len(payload) < HEADER_SIZE:
            raise FragmentFormatError(
                f"Fragment too short: {len(payload)} bytes, header needs {HEADER_SIZE}"
            )

        version = payload[0]
        if version != FORMAT_VERSION:
            logger.warning("Rejecting fragment with version %d (supported: %d)", version, FORMAT_VERSION)
            raise UnsupportedVersionError(version)

        self.k1 = decode16(payload, 1)
        self.k2 = decode16(payload, 3)
        if self.k1 + self.k2 > self.n:
            raise InvalidCutPointsError(self.k1, self.k2, self.n)

    def _rebuild_permutation(self):
        digits = digits_from_rank(self.rank, self.n)
        self.permutation = permutation_from_digits(digits)
        # Unreachable with a correct rank engine; kept for future header formats.
        try:
            validate_permutation(self.permutation)
        except InvalidInputError as e:
            raise FragmentFormatError(f"Decoded permutation is invalid: {e}") from e

    def get_decoded_permutation(self) -> DecodedPermutation:
        return DecodedPermutation(list(self.permutation), self.k1, self.k2)

    def get_tier_state(self) -> Dict[str, List[int]]:
        k1, k2 = self.k1, self.k2
        return {
            TIER_VERY: self.permutation[:k1],
            TIER_SOMEWHAT: self.permutation[k1:k1 + k2],
            TIER_NOT: self.permutation[k1 + k2:],
        }


def decode_fragment_to_permutation(fragment: str, n: int) -> DecodedPermutation:
    """Low-level: fragment (with or without marker) -> permutation and cut points."""
    return TierLinkDecoder(fragment, n).get_decoded_permutation()


def decode_fragment_to_tier_state(fragment: str, n: int) -> Dict[str, List[int]]:
    """
    Decode a base64url fragment, with or without the leading marker, back
    into {"very": [...], "somewhat": [...], "not": [...]}.

    N is not part of the payload; the caller must know which dataset the
    fragment belongs to.

    :raises FragmentFormatError: for malformed, truncated, foreign-version
        or out-of-range fragments.
    :raises InvalidInputError: if n is not an integer in [1, 65535].
    """
    return TierLinkDecoder(fragment, n).get_tier_state()
