#!/usr/bin/env python3
"""
Produce the SFS and divergence counts required by DFE-alpha.

example:
  makeDFE-alpha -coord thaliana-lyrata.filt.coord -div thaliana-lyrata.filt.snps \
                -sites 4fold.sites -vcf thaliana.full.vcf -gc 1 > out.4fold.WS.txt

The VCF should hold both variant and invariant sites and no heterozygous
calls. All inputs must be sorted by chromosome and position, with numeric
chromosome names.
"""
import sys
import time

from annotation_tables import (load_alignment_mask, load_candidate_sites, load_divergence,
                               load_targets, open_text)
from cli_inputs import base_parser, preflight
from mutation_class import MutationClass
from run_report import echo_parameters, log, report_elapsed
from vcf_merge_join import site_frequency_spectrum


def get_args(argv=None):
    ap = base_parser("Unfolded SFS and divergence counts over alignable candidate sites.")
    ap.add_argument("-sites", required=True,
                    help="Tab-delimited chromosome and position of sites to use (e.g. 0-fold or 4-fold)")
    ap.add_argument("-region", default=None,
                    help="Tab-delimited chromosome, start and end of regions to use (optional)")
    return ap.parse_args(argv)


def main(argv=None) -> int:
    started = time.time()
    args = get_args(argv)
    echo_parameters([("coord", args.coord), ("div", args.div), ("sites", args.sites),
                     ("vcf", args.vcf), ("region", args.region), ("gc", f"{args.gc} [{MutationClass(args.gc).label}]"), ("out", args.out)])
    preflight(args.coord, args.div, args.sites, args.vcf, args.region)

    mask = load_alignment_mask(args.coord)
    log(f"[OK] {len(mask)} alignment blocks")
    targets = None
    if args.region:
        targets = load_targets(args.region)
        log(f"[OK] {len(targets)} target regions")
    sites = load_candidate_sites(args.sites, mask, targets)
    log(f"[OK] {len(sites)} candidate sites")
    divergence = load_divergence(args.div, sites=sites)
    log(f"[OK] {len(divergence)} divergence sites at candidate sites")

    with open_text(args.vcf) as fh:
        agg = site_frequency_spectrum(fh, sites, divergence, args.gc)

    out = open(args.out, "w") if args.out else sys.stdout
    try:
        agg.write(out)
    finally:
        if args.out:
            out.close()

    log(f"[OK] {agg.total_sites} sites, {agg.divergent_sites} divergent, {agg.n_individuals} individuals")
    report_elapsed(started)
    return 0


if __name__ == "__main__":
    sys.exit(main())
