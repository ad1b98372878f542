"""Parse samtools text reports: flagstat, depth and coverage.

All parsers are tolerant of noisy tool output. Lines that do not have the
expected shape are dropped and unparseable numbers fall back to defaults,
with only a log trace.
"""
import collections
import math
import re

from alncov import utils
from alncov.log import logger

RunSummary = collections.namedtuple("RunSummary", ["total_primary_reads", "primary_mapped",
                                                   "primary_mapped_percent",
                                                   "reported_mapped_percent"])
DepthSample = collections.namedtuple("DepthSample", ["contig", "position", "depth"])
ContigCoverageRecord = collections.namedtuple("ContigCoverageRecord",
                                              ["contig", "length", "num_reads",
                                               "coverage_percent", "mean_mapq"])

NO_COVERAGE = "0.0"
NO_MAPQ = "0"

_FLAGSTAT_RES = {"total": re.compile(r"^(\d+)\s*\+\s*\d+\s*in total", re.M),
                 "secondary": re.compile(r"^(\d+)\s*\+\s*\d+\s*secondary", re.M),
                 "supplementary": re.compile(r"^(\d+)\s*\+\s*\d+\s*supplementary", re.M),
                 "mapped": re.compile(r"^(\d+)\s*\+\s*\d+\s*mapped\s+\((\d+\.\d+)%", re.M)}

def clean_contig_name(name):
    return name.strip()

def _report_lines(text):
    return [l for l in (text or "").strip().split("\n") if len(l) > 0]

# ## samtools flagstat

def parse_flagstat(text):
    """Derive primary read counts from samtools flagstat output.

    Each line shape is optional and a missing count is treated as zero.
    Primary reads are total minus secondary and supplementary alignments;
    primary mapped reads scale that by the overall mapped fraction. When
    there are no primary reads the derived values are unavailable (None).
    """
    text = text or ""
    counts = {}
    reported_pct = None
    for name, pattern in _FLAGSTAT_RES.items():
        match = pattern.search(text)
        counts[name] = int(match.group(1)) if match else 0
        if match and name == "mapped":
            reported_pct = match.group(2)
    primary = counts["total"] - counts["secondary"] - counts["supplementary"]
    if primary <= 0:
        logger.debug("No primary reads found in flagstat output")
        return RunSummary(None, None, None, reported_pct)
    ratio = float(counts["mapped"]) / counts["total"] if counts["total"] > 0 else 0
    primary_mapped = utils.round_half_up(primary * ratio)
    pct = utils.to_fixed(float(primary_mapped) / primary * 100, 2)
    return RunSummary(primary, primary_mapped, pct, reported_pct)

# ## samtools depth -aa

def parse_depth(text):
    """Iterate over per-base depth samples in report order.

    Expects exactly three tab separated fields: contig, position, depth.
    """
    for line in _report_lines(text):
        fields = line.split("\t")
        if len(fields) != 3:
            logger.debug("Skipping depth line with %s fields: %s" % (len(fields), line))
            continue
        contig, pos, depth = fields
        try:
            depth = int(depth.strip())
        except ValueError:
            logger.debug("Skipping depth line with unparseable depth: %s" % line)
            continue
        if depth < 0:
            logger.debug("Skipping depth line with negative depth: %s" % line)
            continue
        yield DepthSample(clean_contig_name(contig), pos.strip(), depth)

# ## samtools coverage -H

def _safe_int(x, default=0):
    try:
        return int(x.strip())
    except (AttributeError, ValueError):
        return default

def _safe_fixed(x, default):
    """Format a float field with no decimals, falling back to `default`.
    """
    val = utils.safe_to_float(x)
    if val is None or not math.isfinite(val):
        return default
    return utils.to_fixed(val, 0)

def parse_coverage(text):
    """Parse samtools coverage output into per-contig records.

    Columns: rname, startpos, endpos, numreads, covbases, coverage,
    meandepth, meanbaseq, meanmapq. Only length (endpos), read count,
    coverage percent and mean mapping quality are retained.
    """
    out = []
    for line in _report_lines(text):
        if line.startswith("#"):
            continue
        fields = line.split("\t")
        if len(fields) < 8:
            logger.warning("Skipping coverage line due to missing fields (expected 9, got %s): %s"
                           % (len(fields), line))
            continue
        mapq = fields[8] if len(fields) > 8 else None
        out.append(ContigCoverageRecord(clean_contig_name(fields[0]),
                                        _safe_int(fields[2]), _safe_int(fields[3]),
                                        _safe_fixed(fields[5], NO_COVERAGE),
                                        _safe_fixed(mapq, NO_MAPQ)))
    return out
