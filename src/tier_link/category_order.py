"""
Compact storage of a user's category ordering.

A reordering of the dataset's canonical category list is a permutation of
a handful of elements, so it is stored as its Lehmer rank alone: no header,
no cut points, just the minimal big-endian rank bytes in base64url.
"""

from typing import List

from .byte_codec import big_int_to_bytes, bytes_to_big_int, from_base64url, to_base64url
from .common import InvalidInputError
from .lehmer_code import rank_permutation, unrank_permutation


def category_permutation(order: List[str], canonical: List[str]) -> List[int]:
    if not order or len(order) != len(canonical):
        return list(range(len(canonical)))

    index = {cat: i for i, cat in enumerate(canonical)}
    perm = []
    for cat in order:
        if cat not in index:
            raise InvalidInputError(f"Category {cat!r} not found in canonical order")
        perm.append(index[cat])
    return perm


def encode_category_order(order: List[str], canonical: List[str]) -> str:
    # Nothing to store when the order is unset or matches the canonical one.
    if not order or len(order) != len(canonical) or list(order) == list(canonical):
        return ""
    rank = rank_permutation(category_permutation(order, canonical))
    return to_base64url(big_int_to_bytes(rank))


def decode_category_order(fragment: str, canonical: List[str]) -> List[str]:
    if not fragment or not canonical:
        return []
    rank = bytes_to_big_int(from_base64url(fragment))
    return [canonical[i] for i in unrank_permutation(rank, len(canonical))]
