#!/usr/bin/env python3
"""
Accumulators fed by the merge-join: a per-gene derived allele frequency
table and a genome-wide unfolded SFS with divergence counts.
"""
from dataclasses import dataclass
from typing import Optional, Sequence, TextIO

import numpy as np

from variant_records import GenotypeCall

DAF_HEADER = "gene\tDAF\tnSites"


@dataclass(frozen=True)
class GeneDaf:
    gene: str
    derived: int
    called: int
    sites: int

    @property
    def daf(self) -> float:
        return (self.derived / self.called) if self.called else float("nan")

    def format(self) -> str:
        return f"{self.gene}\t{self.daf:f}\t{self.sites}"


class GeneDafAggregator:
    """
    Running derived/called allele counts for the gene currently being walked.
    A row is written each time the gene changes and once more at the end;
    genes that never received a qualifying site are not written.
    """

    def __init__(self, out: TextIO):
        self.out = out
        self.gene: Optional[str] = None
        self.rows: list[GeneDaf] = []
        self._reset()

    def _reset(self):
        self.derived = 0
        self.called = 0
        self.sites = 0

    def enter_gene(self, gene: str):
        if self.gene is None:
            print(DAF_HEADER, file=self.out)
        elif gene != self.gene:
            self.flush()
        self.gene = gene

    def add_site(self, calls: Sequence[GenotypeCall], reversed_: bool):
        derived_call = GenotypeCall.HOM_REF if reversed_ else GenotypeCall.HOM_ALT
        for call in calls:
            if call == derived_call:
                self.derived += 1
            if call != GenotypeCall.MISSING:
                self.called += 1
        self.sites += 1

    def flush(self):
        if self.gene is not None and self.sites > 0:
            row = GeneDaf(self.gene, self.derived, self.called, self.sites)
            self.rows.append(row)
            print(row.format(), file=self.out)
        self._reset()

    def finish(self) -> list[GeneDaf]:
        self.flush()
        return self.rows


class SfsAggregator:
    """
    Histogram of per-site derived allele counts over `n_individuals` plus the
    number of sites used and how many of them were fixed differences.

    Individuals without a homozygous call are imputed from the majority
    homozygous state of the site; ties fall on the ancestral side.
    """

    def __init__(self, n_individuals: int):
        self.n_individuals = n_individuals
        self.sfs = np.zeros(n_individuals + 1, dtype=np.int64)
        self.total_sites = 0
        self.divergent_sites = 0

    def derived_count(self, calls: Sequence[GenotypeCall], reversed_: bool) -> int:
        g = np.asarray(calls, dtype=np.int8)
        n_alt = int(np.count_nonzero(g == GenotypeCall.HOM_ALT))
        n_ref = int(np.count_nonzero(g == GenotypeCall.HOM_REF))
        n_other = g.size - n_alt - n_ref
        if reversed_:
            return n_ref + (n_other if n_ref > n_alt else 0)
        return n_alt + (n_other if n_alt > n_ref else 0)

    def add_site(self, calls: Sequence[GenotypeCall], reversed_: bool):
        if len(calls) > self.n_individuals:
            raise ValueError(f"Site has {len(calls)} genotypes but the header declares {self.n_individuals} individuals.")
        # absent trailing columns are missing calls and get imputed like any other
        calls = list(calls) + [GenotypeCall.MISSING] * (self.n_individuals - len(calls))
        self.sfs[self.derived_count(calls, reversed_)] += 1
        self.total_sites += 1
        if reversed_:
            self.divergent_sites += 1

    def write(self, out: TextIO):
        print(" ".join(str(int(c)) for c in self.sfs), file=out)
        print(f"{self.total_sites} {self.divergent_sites}", file=out)
