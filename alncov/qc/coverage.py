"""Fold samtools depth and coverage reports into per-contig summaries.
"""
import collections

from alncov import utils
from alncov.qc import samtools
from alncov.qc.series import subsample, MAX_POINTS

ContigSummary = collections.namedtuple("ContigSummary",
                                       ["contig", "length_bases", "mean_depth",
                                        "coverage_percent", "mean_mapq", "num_reads",
                                        "reference_length", "depth_series"])
AggregateResult = collections.namedtuple("AggregateResult", ["contigs", "max_contig_length"])


class ContigDepthRecord(object):
    """Running per-base depths for a single contig, in report order.
    """
    def __init__(self, contig):
        self.contig = contig
        self.depths = []
        self.sum = 0
        self.count = 0

    def add(self, depth):
        self.depths.append(depth)
        self.sum += depth
        self.count += 1

    def mean_depth(self):
        if self.count == 0:
            return 0
        return utils.round_half_up(float(self.sum) / self.count)

    def __repr__(self):
        return "ContigDepthRecord(%r, count=%s, sum=%s)" % (self.contig, self.count, self.sum)


def missing_coverage(contig):
    """Coverage record used for contigs the coverage report does not mention.
    """
    return samtools.ContigCoverageRecord(contig, 0, 0, samtools.NO_COVERAGE, samtools.NO_MAPQ)

def fold_depth(depth_samples):
    """Group depth samples by contig, preserving first-seen contig order.
    """
    records = collections.OrderedDict()
    for sample in depth_samples:
        contig = samtools.clean_contig_name(sample.contig)
        if contig not in records:
            records[contig] = ContigDepthRecord(contig)
        records[contig].add(sample.depth)
    return records

def fold_coverage(coverage_records):
    """Index coverage records by contig; later duplicates replace earlier ones.
    """
    out = collections.OrderedDict()
    for rec in coverage_records:
        out[samtools.clean_contig_name(rec.contig)] = rec
    return out

def aggregate(depth_samples, coverage_records, budget=MAX_POINTS):
    """Left join depth-derived contigs against coverage statistics.

    Every contig seen in the depth report produces a ContigSummary, in the
    order it first appeared. Coverage-only contigs are not reported.
    """
    depths = fold_depth(depth_samples)
    coverage = fold_coverage(coverage_records)
    max_length = max([1] + [r.count for r in depths.values()])
    contigs = collections.OrderedDict()
    for contig, rec in depths.items():
        cov = coverage.get(contig) or missing_coverage(contig)
        contigs[contig] = ContigSummary(contig, rec.count, rec.mean_depth(),
                                        cov.coverage_percent, cov.mean_mapq, cov.num_reads,
                                        cov.length, subsample(rec.depths, budget))
    return AggregateResult(contigs, max_length)

def display_width(length, max_contig_length, min_pct=20):
    """Proportional display width, as a percentage, relative to the longest contig.
    """
    return max(min_pct, float(length) / max(1, max_contig_length) * 100)
