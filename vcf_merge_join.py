#!/usr/bin/env python3
"""
Single forward pass over a VCF, joined against the alignment mask, gene or
candidate-site list and divergence table through forward-only cursors.

Both modes share the per-row chain: locate the row in its region list,
resolve the ancestral direction from the divergence table, apply the
weak/strong class filter, then hand the genotype calls to an aggregator.
"""
from typing import Iterable, Optional, TextIO

from allele_aggregators import GeneDaf, GeneDafAggregator, SfsAggregator
from annotation_tables import AlignmentBlock, CandidateSite, DivergenceSite, Region
from forward_cursor import IntervalCursor, PositionCursor
from mutation_class import classify
from run_report import warn
from variant_records import VariantRecord, VariantStream


def ancestral_direction(div_cursor: PositionCursor, record: VariantRecord) -> Optional[bool]:
    """
    True when a divergence record at this position makes the alternate allele
    ancestral, False when there is none, None when the site must be dropped:
    a reference mismatch is reported, an alternate mismatch is not.
    """
    found, _, site = div_cursor.lookup(record.chromosome, record.position)
    if not found:
        return False
    if record.reference != site.reference:
        warn(f"ref alleles differ at chr {record.chromosome} pos {record.position}")
        return None
    if record.alternate != site.alternate:
        return None
    return True


def gene_daf(lines: Iterable[str],
             genes: list[Region],
             mask: list[AlignmentBlock],
             divergence: list[DivergenceSite],
             mutation_class: int,
             out: TextIO) -> list[GeneDaf]:
    """Write per-gene DAF rows to `out` as each gene is left behind; return them too."""
    gene_cursor = IntervalCursor(genes)
    mask_cursor = IntervalCursor(mask)
    div_cursor = PositionCursor(divergence)
    agg = GeneDafAggregator(out)

    for record in VariantStream(lines):
        in_gene, _, gene = gene_cursor.find(record.chromosome, record.position)
        if not in_gene:
            continue
        aligned, _, _ = mask_cursor.find(record.chromosome, record.position)
        if not aligned:
            continue
        agg.enter_gene(gene)

        reversed_ = ancestral_direction(div_cursor, record)
        if reversed_ is None:
            continue
        if not classify(record.reference, record.alternate, reversed_, mutation_class):
            continue
        agg.add_site(record.calls, reversed_)

    return agg.finish()


def site_frequency_spectrum(lines: Iterable[str],
                            sites: list[CandidateSite],
                            divergence: list[DivergenceSite],
                            mutation_class: int) -> SfsAggregator:
    """
    Unfolded SFS over the candidate sites present in the VCF. The histogram
    is sized from the `#CHROM` header, which must precede the first data row.
    """
    stream = VariantStream(lines)
    site_cursor = PositionCursor(sites)
    div_cursor = PositionCursor(divergence)
    agg = None

    for record in stream:
        if agg is None:
            if stream.n_individuals is None:
                raise SystemExit(f"Could not parse #CHROM header before data row at VCF line {stream.lineno}.")
            agg = SfsAggregator(stream.n_individuals)

        candidate, _, _ = site_cursor.lookup(record.chromosome, record.position)
        if not candidate:
            continue
        reversed_ = ancestral_direction(div_cursor, record)
        if reversed_ is None:
            continue
        if not classify(record.reference, record.alternate, reversed_, mutation_class):
            continue
        agg.add_site(record.calls, reversed_)

    if agg is None:
        if stream.n_individuals is None:
            raise SystemExit("Could not parse #CHROM header to infer sample count.")
        agg = SfsAggregator(stream.n_individuals)
    return agg
