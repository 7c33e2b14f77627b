import binascii
import re

from Crypto.Util.number import bytes_to_long, long_to_bytes
from jwcrypto.common import base64url_decode, base64url_encode

from .common import FragmentFormatError, InvalidInputError

_BASE64URL_RE = re.compile(r"[A-Za-z0-9_-]*")


def encode16(n: int) -> bytes:
    if not isinstance(n, int) or isinstance(n, bool) or n < 0 or n > 0xFFFF:
        raise InvalidInputError(f"u16 out of range: {n!r}")
    return n.to_bytes(2, byteorder="big")


def decode16(data: bytes, offset: int = 0) -> int:
    chunk = data[offset:offset + 2]
    if len(chunk) != 2:
        raise FragmentFormatError(f"Need 2 bytes at offset {offset}, got {len(chunk)}")
    return int.from_bytes(chunk, byteorder="big")


def big_int_to_bytes(x: int) -> bytes:
    """
    Minimal big-endian representation of a non-negative integer.
    Zero is a single zero byte; non-zero values carry no leading zero bytes.
    """
    if not isinstance(x, int) or isinstance(x, bool) or x < 0:
        raise InvalidInputError(f"Expected a non-negative integer, got {x!r}")
    if x == 0:
        return b"\x00"
    return long_to_bytes(x)


def bytes_to_big_int(data: bytes) -> int:
    # empty input -> 0
    return bytes_to_long(bytes(data))


def to_base64url(data: bytes) -> str:
    return base64url_encode(bytes(data))


def from_base64url(text: str) -> bytes:
    if not isinstance(text, str):
        raise FragmentFormatError(f"Not a base64url string: {text!r}")
    # tolerate up to two trailing padding characters
    unpadded = text.rstrip("=")
    if len(text) - len(unpadded) > 2 or not _BASE64URL_RE.fullmatch(unpadded):
        raise FragmentFormatError(f"Not a base64url string: {text!r}")
    try:
        return base64url_decode(unpadded)
    except (binascii.Error, ValueError) as e:
        raise FragmentFormatError(f"Invalid base64url string {text!r}: {e}") from e
