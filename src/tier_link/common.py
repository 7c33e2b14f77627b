import os

# Header layout: [version:u8][k1:u16 BE][k2:u16 BE] followed by the rank bytes.
FORMAT_VERSION = 1
HEADER_SIZE = 1 + 2 + 2
MAX_ITEMS = 0xFFFF

DEFAULT_FRAGMENT_MARKER = "#"

TIER_VERY = "very"
TIER_SOMEWHAT = "somewhat"
TIER_NOT = "not"
TIER_NAMES = (TIER_VERY, TIER_SOMEWHAT, TIER_NOT)

_FALSE_STRINGS = ("0", "false", "no", "off")


class TierLinkError(ValueError):
    """Base class for everything the codec raises."""


class InvalidInputError(TierLinkError):
    """The caller handed in something the codec cannot encode."""


class IndexOutOfRangeError(InvalidInputError):
    pass


class DuplicateIndexError(InvalidInputError):
    def __init__(self, index: int, tier: str, first_tier: str):
        if first_tier == tier:
            message = f"Duplicate index {index} in {tier}"
        else:
            message = f"Duplicate index {index} in {tier} (already in {first_tier})"
        super().__init__(message)
        self.index = index
        self.tier = tier
        self.first_tier = first_tier


class FragmentFormatError(TierLinkError):
    """The fragment is corrupted, truncated or was produced for another format."""


class UnsupportedVersionError(FragmentFormatError):
    def __init__(self, version: int):
        super().__init__(f"Unsupported version {version}")
        self.version = version


class RankOutOfRangeError(FragmentFormatError):
    pass


class InvalidCutPointsError(InvalidInputError, FragmentFormatError):
    def __init__(self, k1: int, k2: int, n: int):
        super().__init__(f"Invalid cut points k1={k1}, k2={k2} for N={n}")
        self.k1 = k1
        self.k2 = k2
        self.n = n


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() not in _FALSE_STRINGS


def check_item_count(n) -> int:
    # bool is an int subclass, but True is not a dataset size
    if not isinstance(n, int) or isinstance(n, bool) or n < 1 or n > MAX_ITEMS:
        raise InvalidInputError(f"N must be an integer in [1, {MAX_ITEMS}], got {n!r}")
    return n


class TierLinkCommon:
    """Shared configuration and fragment-marker handling for encoder and decoder."""

    fragment_marker: str = os.environ.get("TIER_LINK_FRAGMENT_MARKER", DEFAULT_FRAGMENT_MARKER)
    with_marker: bool = _env_flag("TIER_LINK_WITH_MARKER", True)

    def _add_marker(self, fragment: str, with_marker=None) -> str:
        if with_marker is None:
            with_marker = self.with_marker
        return f"{self.fragment_marker}{fragment}" if with_marker else fragment

    def _strip_marker(self, fragment: str) -> str:
        if not isinstance(fragment, str):
            raise FragmentFormatError(f"Fragment must be a string, got {type(fragment).__name__}")
        if self.fragment_marker and fragment.startswith(self.fragment_marker):
            return fragment[len(self.fragment_marker):]
        return fragment
