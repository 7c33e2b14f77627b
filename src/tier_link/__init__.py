from .byte_codec import (
    big_int_to_bytes,
    bytes_to_big_int,
    decode16,
    encode16,
    from_base64url,
    to_base64url,
)
from .category_order import category_permutation, decode_category_order, encode_category_order
from .common import (
    FORMAT_VERSION,
    MAX_ITEMS,
    TIER_NAMES,
    DuplicateIndexError,
    FragmentFormatError,
    IndexOutOfRangeError,
    InvalidCutPointsError,
    InvalidInputError,
    RankOutOfRangeError,
    TierLinkError,
    UnsupportedVersionError,
)
from .decoder import (
    DecodedPermutation,
    TierLinkDecoder,
    decode_fragment_to_permutation,
    decode_fragment_to_tier_state,
)
from .encoder import TierLinkEncoder, encode_permutation_to_bytes, encode_tier_state_to_fragment
from .lehmer_code import (
    digits_from_permutation,
    digits_from_rank,
    permutation_from_digits,
    rank_from_digits,
    rank_permutation,
    unrank_permutation,
)
