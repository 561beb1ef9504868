#!/usr/bin/env python3
"""Streaming VCF rows as typed variant records."""
import re
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Iterator, Optional

FIRST_SAMPLE_COL = 9
MIN_FIELDS = 5
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


class GenotypeCall(IntEnum):
    HOM_REF = 0
    HOM_ALT = 1
    HET = 2
    MISSING = 9


def classify_genotype(token: str) -> GenotypeCall:
    """
    Classify a GT token from its first and third characters (e.g. "0/1", "1|1").
    A single-character token is read as both alleles; "." marks a missing allele.
    """
    a = token[:1]
    b = token[2:3] if len(token) >= 3 else a
    if a in ("", ".") or b in ("", "."):
        return GenotypeCall.MISSING
    if a == "0" and b == "0":
        return GenotypeCall.HOM_REF
    if a == "1" and b == "1":
        return GenotypeCall.HOM_ALT
    return GenotypeCall.HET


def atoi(token: str) -> int:
    m = _LEADING_INT.match(token)
    return int(m.group(1)) if m else 0


@dataclass(frozen=True)
class VariantRecord:
    chromosome: int
    position: int
    reference: str
    alternate: str
    calls: tuple[GenotypeCall, ...]

    @classmethod
    def from_fields(cls, fields: list[str], lineno: int = 0) -> "VariantRecord":
        if len(fields) < MIN_FIELDS:
            raise ValueError(f"VCF line {lineno}: expected at least {MIN_FIELDS} fields, got {len(fields)}")
        calls = tuple(classify_genotype(t) for t in fields[FIRST_SAMPLE_COL:])
        return cls(atoi(fields[0]), atoi(fields[1]), fields[3][:1], fields[4][:1], calls)


class VariantStream:
    """
    Iterate the data rows of a VCF. Meta lines and any row whose first field
    does not start with a digit are passed over; the `#CHROM` header sets
    `samples`. Records are produced one at a time and never kept.
    """

    def __init__(self, lines: Iterable[str]):
        self.lines = lines
        self.samples: Optional[list[str]] = None
        self.lineno = 0

    @property
    def n_individuals(self) -> Optional[int]:
        return None if self.samples is None else len(self.samples)

    def __iter__(self) -> Iterator[VariantRecord]:
        for raw in self.lines:
            self.lineno += 1
            line = raw.rstrip("\r\n").replace("\r", "")
            fields = [t for t in line.split("\t") if t]
            if not fields:
                continue
            if fields[0] == "#CHROM":
                self.samples = fields[FIRST_SAMPLE_COL:]
                continue
            if not fields[0][0].isdigit():
                continue
            yield VariantRecord.from_fields(fields, self.lineno)
