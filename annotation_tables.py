#!/usr/bin/env python3
"""
Loaders for the position-sorted annotation files consumed by the
merge-join: MUMmer show-coords blocks, MUMmer show-snps substitutions,
gene tables, target regions and candidate site lists.

Every file is tab-delimited, may be gzip-compressed, and is assumed to be
sorted by (chromosome, position); nothing here re-sorts or checks order.
"""
import gzip
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd

from forward_cursor import IntervalCursor, PositionCursor

LABEL_MAX = 49

# show-coords -H -T: S1 E1 S2 E2 LEN1 LEN2 %IDY TAGR TAGQ
COORD_CHROM_COL = 7
# show-snps -C -I -H -T: P1 SUB1 SUB2 P2 BUFF DIST FRM1 FRM2 TAGR TAGQ
DIV_CHROM_COL = 8


@dataclass(frozen=True)
class Region:
    chromosome: int
    start: int
    stop: int
    label: Optional[str] = None


@dataclass(frozen=True)
class AlignmentBlock:
    chromosome: int
    start: int
    stop: int


@dataclass(frozen=True)
class DivergenceSite:
    chromosome: int
    position: int
    reference: str
    alternate: str


@dataclass(frozen=True)
class CandidateSite:
    chromosome: int
    position: int


def open_text(path: str):
    if str(path).endswith(".gz"):
        return gzip.open(path, "rt")
    return open(path, "r")


def read_fields(path: str, width: int) -> pd.DataFrame:
    """
    Tokenise a whole file into a string DataFrame with at least `width`
    columns. Runs of tabs count as one separator and CR/LF are stripped;
    missing trailing fields are NaN.
    """
    with open_text(path) as fh:
        lines = pd.Series(fh.read().split("\n"), dtype=object)
    lines = lines.str.replace("\r", "", regex=False)
    lines = lines[lines.str.strip("\t").str.len() > 0]
    if lines.empty:
        return pd.DataFrame(columns=range(width), dtype=object)
    fields = lines.str.strip("\t").str.split(r"\t+", regex=True, expand=True)
    fields = fields.reindex(columns=range(max(width, fields.shape[1])))
    return fields.astype(object).reset_index(drop=True)


def leading_int(col: pd.Series) -> np.ndarray:
    # atoi: leading integer or 0
    digits = col.astype(object).where(col.notna(), "").astype(str)
    digits = digits.str.extract(r"^\s*([+-]?\d+)", expand=False).fillna("0")
    return pd.to_numeric(digits).astype(np.int64).to_numpy()


def starts_with_digit(col: pd.Series) -> pd.Series:
    return col.str.match(r"^\d", na=False)


def load_alignment_mask(path: str) -> list[AlignmentBlock]:
    """Alignable blocks from show-coords; rows whose reference tag is not numeric are dropped."""
    f = read_fields(path, COORD_CHROM_COL + 1)
    f = f[starts_with_digit(f[COORD_CHROM_COL])]
    chrom = leading_int(f[COORD_CHROM_COL])
    start = leading_int(f[0])
    stop = leading_int(f[1])
    return [AlignmentBlock(int(c), int(s), int(e)) for c, s, e in zip(chrom, start, stop)]


def load_genes(path: str) -> list[Region]:
    """Gene table: name, chromosome, start, stop. Names are cut to 49 characters."""
    f = read_fields(path, 4)
    labels = f[0].fillna("").astype(str).str.slice(0, LABEL_MAX)
    chrom = leading_int(f[1])
    start = leading_int(f[2])
    stop = leading_int(f[3])
    return [Region(int(c), int(s), int(e), lab)
            for lab, c, s, e in zip(labels.tolist(), chrom, start, stop)]


def load_targets(path: str) -> list[Region]:
    """Unnamed target regions: chromosome, start, stop."""
    f = read_fields(path, 3)
    chrom = leading_int(f[0])
    start = leading_int(f[1])
    stop = leading_int(f[2])
    return [Region(int(c), int(s), int(e)) for c, s, e in zip(chrom, start, stop)]


def load_candidate_sites(path: str,
                         mask: list[AlignmentBlock],
                         targets: Optional[list[Region]] = None) -> list[CandidateSite]:
    """
    Sites file (chromosome, position) filtered at load time to positions that
    fall inside an alignment block and, when targets are given, a target region.
    Rows that do not begin with a digit (headers, comments) are skipped.
    """
    f = read_fields(path, 2)
    f = f[starts_with_digit(f[0])]
    chrom = leading_int(f[0])
    pos = leading_int(f[1])

    mask_cursor = IntervalCursor(mask)
    target_cursor = IntervalCursor(targets) if targets else None
    kept = []
    for c, p in zip(chrom.tolist(), pos.tolist()):
        aligned, _, _ = mask_cursor.find(c, p)
        if not aligned:
            continue
        if target_cursor is not None:
            inside, _, _ = target_cursor.find(c, p)
            if not inside:
                continue
        kept.append(CandidateSite(c, p))
    return kept


def load_divergence(path: str, sites: Optional[list[CandidateSite]] = None) -> list[DivergenceSite]:
    """
    Fixed differences from show-snps: position, reference base, alternate base
    and the numeric reference tag. With `sites`, only substitutions at a
    candidate site are kept.
    """
    f = read_fields(path, DIV_CHROM_COL + 1)
    f = f[starts_with_digit(f[DIV_CHROM_COL])]
    chrom = leading_int(f[DIV_CHROM_COL])
    pos = leading_int(f[0])
    ref = f[1].fillna("").astype(str).str.slice(0, 1).tolist()
    alt = f[2].fillna("").astype(str).str.slice(0, 1).tolist()
    table = [DivergenceSite(int(c), int(p), r, a)
             for c, p, r, a in zip(chrom, pos, ref, alt)]
    if sites is None:
        return table

    site_cursor = PositionCursor(sites)
    return [d for d in table if site_cursor.lookup(d.chromosome, d.position)[0]]
