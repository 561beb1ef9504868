#!/usr/bin/env python3
"""
Estimate derived allele frequencies per gene.

example:
  estDAF -coord thaliana-lyrata.filt.coord -div thaliana-lyrata.filt.snps \
         -vcf thaliana.poly.vcf -genes thaliana.genes.txt -gc 1 > out.WS.txt

All inputs must be sorted by chromosome and position, with numeric
chromosome names (1, not chr1).
"""
import sys
import time

from annotation_tables import load_alignment_mask, load_divergence, load_genes, open_text
from cli_inputs import base_parser, preflight
from mutation_class import MutationClass
from run_report import echo_parameters, log, report_elapsed
from vcf_merge_join import gene_daf


def get_args(argv=None):
    ap = base_parser("Per-gene derived allele frequencies from alignable, optionally GC-class filtered sites.")
    ap.add_argument("-genes", required=True,
                    help="Tab-delimited name, chromosome, start and end for each gene")
    return ap.parse_args(argv)


def main(argv=None) -> int:
    started = time.time()
    args = get_args(argv)
    echo_parameters([("coord", args.coord), ("div", args.div), ("vcf", args.vcf),
                     ("genes", args.genes), ("gc", f"{args.gc} [{MutationClass(args.gc).label}]"), ("out", args.out)])
    preflight(args.coord, args.div, args.vcf, args.genes)

    genes = load_genes(args.genes)
    log(f"[OK] {len(genes)} genes")
    mask = load_alignment_mask(args.coord)
    log(f"[OK] {len(mask)} alignment blocks")
    divergence = load_divergence(args.div)
    log(f"[OK] {len(divergence)} divergence sites")

    out = open(args.out, "w") if args.out else sys.stdout
    try:
        with open_text(args.vcf) as fh:
            rows = gene_daf(fh, genes, mask, divergence, args.gc, out)
    finally:
        if args.out:
            out.close()

    log(f"[OK] {len(rows)} genes written")
    report_elapsed(started)
    return 0


if __name__ == "__main__":
    sys.exit(main())
