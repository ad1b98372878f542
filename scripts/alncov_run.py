#!/usr/bin/env python -Es
"""Align reads to a reference and summarise per-contig depth and coverage.

Runs minimap2 (map-ont preset) followed by samtools conversion, sorting,
indexing, flagstat, depth and coverage, all inside a scratch work
directory. Reports a read summary and a per-contig table, and optionally
writes the sorted BAM and a YAML summary for visualisation.

Usage:
  alncov_run.py -r <reference.fa> -q <reads.fq> [<reads2.fq> ...]
     -w work directory for intermediate files
     -o output path for the sorted BAM
     -s output path for the YAML run summary
     -c optional alncov_system.yaml configuration
"""
import argparse
import os
import sys

from alncov.pipeline.main import run_main, Status
from alncov.pipeline import version

def parse_cl_args(in_args):
    """Parse input commandline arguments into keyword arguments for run_main.
    """
    description = "Align reads with minimap2 and summarise per-contig coverage."
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("-r", "--ref", dest="reference_files", action="append", default=[],
                        help="Reference genome FASTA. Only the first is aligned against.")
    parser.add_argument("-q", "--query", dest="query_files", nargs="+", default=[],
                        help="Query read files (FASTQ/FASTA), pooled into one alignment")
    parser.add_argument("-w", "--workdir", default=os.path.join(os.getcwd(), "alncov-work"),
                        help="Directory for intermediate files")
    parser.add_argument("-o", "--out-bam", help="Write the sorted BAM to this path")
    parser.add_argument("-s", "--summary", help="Write a YAML run summary to this path")
    parser.add_argument("-c", "--config", help="System YAML configuration (optional)")
    parser.add_argument("--verbose", action="store_true", default=False,
                        help="Show debug output, including tool messages")
    parser.add_argument("-v", "--version", help="Print current version", action="store_true")
    args = parser.parse_args(in_args)
    if args.version:
        print(version.__version__)
        sys.exit()
    return {"reference_files": [os.path.abspath(x) for x in args.reference_files],
            "query_files": [os.path.abspath(x) for x in args.query_files],
            "workdir": args.workdir,
            "config_file": args.config,
            "out_bam": args.out_bam,
            "summary_file": args.summary,
            "verbose": args.verbose}

def main(**kwargs):
    outcome = run_main(**kwargs)
    return 0 if outcome.status in (Status.SUCCESS, Status.NO_DATA) else 1

if __name__ == "__main__":
    sys.exit(main(**parse_cl_args(sys.argv[1:])))
