#!/usr/bin/env python3
"""
Forward-only merge scans over position-sorted annotation lists.

Both the annotation list and the stream of queries are sorted by
(chromosome, position), so a cursor only ever moves forward and a whole
pass costs O(entries + queries).
"""
from typing import Any, Optional, Sequence


class IntervalCursor:
    """Interval containment scan over entries with chromosome/start/stop (inclusive)."""

    def __init__(self, entries: Sequence[Any]):
        self.entries = entries
        self.index = 0

    def find(self, chromosome: int, position: int) -> tuple[bool, int, Optional[str]]:
        """
        Return (contains, cursor index, label of the containing entry or None).
        An entry lying ahead of the query is left under the cursor since a later
        query may still fall inside it.
        """
        entries = self.entries
        while self.index < len(entries):
            e = entries[self.index]
            if chromosome == e.chromosome:
                if e.start <= position <= e.stop:
                    return True, self.index, getattr(e, "label", None)
                if position < e.start:
                    break
            elif chromosome < e.chromosome:
                break
            self.index += 1
        return False, self.index, None


class PositionCursor:
    """Exact (chromosome, position) match scan over entries with chromosome/position."""

    def __init__(self, entries: Sequence[Any]):
        self.entries = entries
        self.index = 0

    def lookup(self, chromosome: int, position: int) -> tuple[bool, int, Optional[Any]]:
        entries = self.entries
        while self.index < len(entries):
            e = entries[self.index]
            if chromosome == e.chromosome:
                if position == e.position:
                    return True, self.index, e
                if position < e.position:
                    break
            elif chromosome < e.chromosome:
                break
            self.index += 1
        return False, self.index, None
