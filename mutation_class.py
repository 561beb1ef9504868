#!/usr/bin/env python3
"""Weak/strong substitution classes (GC-biased gene conversion filters)."""
from enum import IntEnum

WEAK = frozenset("AT")
STRONG = frozenset("GC")
BASES = WEAK | STRONG


class MutationClass(IntEnum):
    ALL = 0
    WS = 1       # weak -> strong
    SW = 2       # strong -> weak
    SS = 3
    WW = 4
    SS_WW = 5

    @property
    def label(self) -> str:
        return "SS+WW" if self is MutationClass.SS_WW else self.name


def _is_weak(base: str) -> bool:
    # anything outside ACGT is a wildcard and satisfies either side
    return base in WEAK or base not in BASES


def _is_strong(base: str) -> bool:
    return base in STRONG or base not in BASES


def classify(reference: str, alternate: str, reversed_: bool, requested) -> bool:
    """
    Whether a site passes the requested class filter.

    `reversed_` is True when a matching divergence record makes the
    alternate allele ancestral; WS and SW then swap. SS, WW and SS+WW
    ignore direction. A site whose two alleles are both wildcards is
    rejected by every class except ALL.
    """
    requested = MutationClass(requested)
    if requested is MutationClass.ALL:
        return True

    ref = reference.upper()
    alt = alternate.upper()
    if ref not in BASES and alt not in BASES:
        return False

    strong_pair = _is_strong(ref) and _is_strong(alt)
    weak_pair = _is_weak(ref) and _is_weak(alt)
    if requested is MutationClass.SS:
        return strong_pair
    if requested is MutationClass.WW:
        return weak_pair
    if requested is MutationClass.SS_WW:
        return strong_pair or weak_pair

    weak_to_strong = _is_weak(ref) and _is_strong(alt)
    strong_to_weak = _is_strong(ref) and _is_weak(alt)
    if reversed_:
        weak_to_strong, strong_to_weak = strong_to_weak, weak_to_strong
    if requested is MutationClass.WS:
        return weak_to_strong
    return strong_to_weak
