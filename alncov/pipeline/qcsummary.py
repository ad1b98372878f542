"""Summaries of a finished run: read banner, per-contig table and output files.
"""
import collections

import yaml

from alncov import utils
from alncov.log import logger
from alncov.pipeline.transaction import file_transaction
from alncov.qc.coverage import display_width

NA = "N/A"

def format_banner(run_summary):
    """One line summary of primary read counts, e.g. for a page header.
    """
    if run_summary is None:
        total, mapped, pct = NA, NA, NA
    else:
        total = utils.thousands(run_summary.total_primary_reads) or NA
        mapped = utils.thousands(run_summary.primary_mapped) or NA
        pct = run_summary.primary_mapped_percent or NA
    return "Total reads: %s | Mapped reads: %s (%s%%)" % (total, mapped, pct)

def contig_rows(contigs, max_contig_length):
    """Per-contig records for display, keeping depth report order.
    """
    out = []
    for contig in contigs.values():
        out.append(collections.OrderedDict([
            ("contig", contig.contig),
            ("length", contig.length_bases),
            ("reference_length", contig.reference_length),
            ("num_reads", contig.num_reads),
            ("mean_depth", contig.mean_depth),
            ("coverage_percent", contig.coverage_percent),
            ("mean_mapq", contig.mean_mapq),
            ("display_width", round(display_width(contig.length_bases, max_contig_length), 2)),
            ("depth_series", list(contig.depth_series))]))
    return out

def format_table(contigs):
    """Plain text table of contig statistics.
    """
    header = ["Contig", "Length", "Reads", "Mean depth", "Coverage", "Mean MAPQ", "Depth profile"]
    lines = ["\t".join(header)]
    for contig in contigs.values():
        profile = (" ".join(str(x) for x in contig.depth_series)
                   if contig.depth_series else "No depth data")
        lines.append("\t".join([contig.contig, utils.thousands(contig.length_bases),
                                utils.thousands(contig.num_reads), str(contig.mean_depth),
                                "%s%%" % contig.coverage_percent, contig.mean_mapq, profile]))
    return "\n".join(lines)

def summary_dict(outcome):
    run_summary = outcome.run_summary
    return {"status": outcome.status.value,
            "message": outcome.message,
            "failed_stage": outcome.failed_stage.name.lower() if outcome.failed_stage else None,
            "run_summary": dict(run_summary._asdict()) if run_summary else None,
            "max_contig_length": outcome.max_contig_length,
            "contigs": [dict(x) for x in contig_rows(outcome.contigs, outcome.max_contig_length)]}

def write_summary(outcome, out_file):
    """Write run outcome and per-contig statistics as YAML.
    """
    with file_transaction(out_file) as tx_out_file:
        with open(tx_out_file, "w") as out_handle:
            yaml.safe_dump(summary_dict(outcome), out_handle, default_flow_style=False,
                           allow_unicode=False, sort_keys=False)
    return out_file

def write_bam(bam_data, out_file):
    with file_transaction(out_file) as tx_out_file:
        with open(tx_out_file, "wb") as out_handle:
            out_handle.write(bam_data)
    return out_file

def report(outcome, out_bam=None, summary_file=None):
    """Log the outcome and write requested outputs.

    The sorted BAM is only written for successful runs.
    """
    if outcome.status.value == "no_data":
        logger.warning(outcome.message)
    elif outcome.message:
        logger.error(outcome.message)
    if outcome.run_summary is not None:
        logger.info(format_banner(outcome.run_summary))
    if outcome.contigs:
        logger.info("\n" + format_table(outcome.contigs))
    if out_bam and outcome.bam_data is not None:
        write_bam(outcome.bam_data, out_bam)
        logger.info("Sorted BAM written to %s" % out_bam)
    if summary_file:
        write_summary(outcome, summary_file)
        logger.info("Run summary written to %s" % summary_file)
    return outcome
