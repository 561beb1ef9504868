import io
import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
from annotation_tables import AlignmentBlock, CandidateSite, DivergenceSite, Region
from vcf_merge_join import gene_daf, site_frequency_spectrum

HEADER = "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\ts1\ts2\n"


def vcf(*rows):
    lines = ["##fileformat=VCFv4.2\n", HEADER]
    for chrom, pos, ref, alt, *gts in rows:
        lines.append("\t".join([str(chrom), str(pos), ".", ref, alt, "50", "PASS", ".", "GT", *gts]) + "\n")
    return lines


MASK = [AlignmentBlock(1, 100, 200)]
GENES = [Region(1, 120, 180, "G1")]


def run_genes(lines, divergence=(), gc=0, genes=GENES, mask=MASK):
    out = io.StringIO()
    rows = gene_daf(lines, list(genes), list(mask), list(divergence), gc, out)
    return rows, out.getvalue()


def test_single_site_weak_to_strong():
    rows, text = run_genes(vcf((1, 150, "A", "G", "0/0", "1/1")), gc=1)
    assert text == "gene\tDAF\tnSites\nG1\t0.500000\t1\n"
    assert rows[0].derived == 1 and rows[0].called == 2


def test_divergence_match_flips_direction_and_excludes_from_ws():
    div = [DivergenceSite(1, 150, "A", "G")]
    rows, text = run_genes(vcf((1, 150, "A", "G", "0/0", "1/1")), divergence=div, gc=1)
    assert rows == []
    assert "G1" not in text

    rows, _ = run_genes(vcf((1, 150, "A", "G", "0/0", "1/1")), divergence=div, gc=2)
    # homozygous reference is the derived state once reversed
    assert (rows[0].derived, rows[0].called, rows[0].sites) == (1, 2, 1)


def test_reference_mismatch_warns_and_drops(capsys):
    div = [DivergenceSite(1, 150, "C", "G")]
    rows, _ = run_genes(vcf((1, 150, "A", "G", "0/0", "1/1"), (1, 160, "A", "G", "1/1", "1/1")), divergence=div)
    err = capsys.readouterr().err
    assert "ref alleles differ at chr 1 pos 150" in err
    assert [(r.gene, r.sites, r.derived) for r in rows] == [("G1", 1, 2)]


def test_alternate_mismatch_drops_silently(capsys):
    div = [DivergenceSite(1, 150, "A", "T")]
    rows, _ = run_genes(vcf((1, 150, "A", "G", "0/0", "1/1")), divergence=div)
    assert rows == []
    assert "WARN" not in capsys.readouterr().err


def test_rows_outside_genes_or_alignment_are_ignored():
    genes = [Region(1, 120, 180, "G1"), Region(1, 190, 260, "G2"), Region(2, 1, 50, "G3")]
    lines = vcf(
        (1, 110, "A", "G", "1/1", "1/1"),    # aligned, no gene
        (1, 130, "A", "G", "1/1", "0/0"),
        (1, 170, "C", "T", "./.", "1/1"),
        (1, 195, "A", "G", "0/0", "0/0"),
        (1, 230, "A", "G", "1/1", "1/1"),    # gene, not aligned
        (2, 10, "A", "G", "1/1", "1/1"),     # no alignment block on chromosome 2
    )
    rows, text = run_genes(lines, genes=genes)
    assert text.splitlines() == ["gene\tDAF\tnSites", "G1\t0.666667\t2", "G2\t0.000000\t1"]
    for r in rows:
        assert 0 <= r.derived <= r.called <= 2 * r.sites
        assert 0.0 <= r.daf <= 1.0


def test_gene_output_is_repeatable():
    lines = vcf((1, 130, "A", "G", "1/1", "0/0"), (1, 170, "C", "T", "./.", "1/1"))
    assert run_genes(list(lines))[1] == run_genes(list(lines))[1]


def test_sfs_counts_total_and_divergent_sites():
    sites = [CandidateSite(1, 150), CandidateSite(1, 160), CandidateSite(1, 170)]
    div = [DivergenceSite(1, 160, "G", "A")]
    lines = vcf(
        (1, 140, "A", "G", "1/1", "1/1"),    # not a candidate site
        (1, 150, "A", "G", "0/0", "1/1"),
        (1, 160, "G", "A", "1/1", "1/1"),
    )
    agg = site_frequency_spectrum(lines, sites, div, 0)
    assert agg.total_sites == 2
    assert agg.divergent_sites == 1
    assert int(np.sum(agg.sfs)) == agg.total_sites
    # 1/1 at a reversed site: no individual carries the derived (reference) allele
    assert agg.sfs.tolist() == [1, 1, 0]


def test_sfs_invariant_sites_and_class_filter():
    sites = [CandidateSite(1, 150), CandidateSite(1, 151), CandidateSite(1, 152)]
    lines = vcf(
        (1, 150, "A", ".", "0/0", "0/0"),
        (1, 151, ".", ".", "0/0", "0/0"),
        (1, 152, "G", "A", "1/1", "./."),
    )
    ws = site_frequency_spectrum(lines, sites, [], 1)
    assert (ws.total_sites, ws.sfs.tolist()) == (1, [1, 0, 0])
    sw = site_frequency_spectrum(lines, sites, [], 2)
    assert (sw.total_sites, sw.sfs.tolist()) == (1, [0, 0, 1])
    everything = site_frequency_spectrum(lines, sites, [], 0)
    assert everything.total_sites == 3


def test_sfs_requires_header():
    rows = ["1\t150\t.\tA\tG\t50\tPASS\t.\tGT\t0/0\t1/1\n"]
    with pytest.raises(SystemExit, match="#CHROM"):
        site_frequency_spectrum(rows, [CandidateSite(1, 150)], [], 0)
    with pytest.raises(SystemExit, match="#CHROM"):
        site_frequency_spectrum(["##fileformat=VCFv4.2\n"], [], [], 0)


def test_sfs_empty_vcf_body():
    agg = site_frequency_spectrum([HEADER], [], [], 0)
    assert agg.sfs.tolist() == [0, 0, 0]
    assert agg.total_sites == 0


def test_sfs_narrow_row_fills_absent_individuals_by_majority():
    header = "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\ts1\ts2\ts3\n"
    row = "1\t150\t.\tA\tG\t50\tPASS\t.\tGT\t1/1\t1/1\n"
    agg = site_frequency_spectrum([header, row], [CandidateSite(1, 150)], [], 0)
    assert agg.sfs.tolist() == [0, 0, 0, 1]
    assert agg.total_sites == 1
