#!/usr/bin/env python3
"""Argument handling shared by est_daf and make_dfe_alpha."""
import argparse
import os
import sys

from mutation_class import MutationClass

GC_HELP = "DAF class: 0 [all] 1 [WS] 2 [SW] 3 [SS] 4 [WW] 5 [SS+WW]"


def base_parser(description: str) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(description=description, allow_abbrev=False)
    ap.add_argument("-coord", required=True,
                    help="Coordinates file from MUMmer show-coords (-H -T)")
    ap.add_argument("-div", required=True,
                    help="Substitution file from MUMmer show-snps (-C -I -H -T)")
    ap.add_argument("-vcf", required=True, help="VCF with variant sites (.vcf or .vcf.gz)")
    ap.add_argument("-gc", type=int, default=0, choices=[int(c) for c in MutationClass],
                    metavar="{0..5}", help=GC_HELP)
    ap.add_argument("-out", default=None, help="Output path (default: stdout)")
    return ap


def preflight(*paths):
    for p in paths:
        if p is None:
            continue
        if not (os.path.isfile(p) and os.access(p, os.R_OK)):
            sys.exit(f"\nERROR: Cannot open file {p}\n")
