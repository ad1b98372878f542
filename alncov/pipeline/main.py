"""Main entry point for aligning reads and summarising per-contig coverage.

Runs the fixed sequence of external tool stages, stopping at the first
failure, then parses the samtools reports into per-contig summaries.
"""
import collections
import enum
import os

from alncov import bam, log
from alncov.log import logger
from alncov.ngsalign import minimap2
from alncov.pipeline import config_utils, qcsummary
from alncov.pipeline.tools import LocalToolService, ToolExecutionFailure
from alncov.qc import coverage, samtools


class InputMissing(Exception):
    pass


class NoDataProduced(Exception):
    pass


class Stage(enum.Enum):
    MOUNT = 1
    ALIGN = 2
    CONVERT = 3
    SORT = 4
    INDEX = 5
    FLAGSTAT = 6
    READ_BAM = 7
    DEPTH = 8
    COVERAGE = 9


class Status(enum.Enum):
    SUCCESS = "success"
    NO_DATA = "no_data"
    FAILED = "failed"
    INPUT_MISSING = "input_missing"


RunOutcome = collections.namedtuple("RunOutcome", ["status", "message", "run_summary", "contigs",
                                                   "max_contig_length", "bam_data",
                                                   "failed_stage", "completed_stages"])

INPUT_MISSING_MSG = "Please select both a reference genome and query reads file(s)."
NO_DATA_MSG = ("Analysis completed, but no depth data was generated. "
               "Check your input files.")
FAILED_MSG = "An error occurred during execution: %s"

def _outcome(status, message=None, run_summary=None, result=None, bam_data=None,
             failed_stage=None, completed_stages=None):
    return RunOutcome(status, message, run_summary,
                      result.contigs if result else collections.OrderedDict(),
                      result.max_contig_length if result else 1,
                      bam_data, failed_stage, list(completed_stages or []))

def run_pipeline(reference_files, query_files, service):
    """Align query reads to the reference and summarise coverage per contig.

    Stages run strictly in order and any tool failure stops the run with a
    FAILED outcome naming the stage. A completed run without depth output
    is NO_DATA rather than an error. Nothing is kept between calls.
    """
    reference_files = list(reference_files or [])
    query_files = list(query_files or [])
    try:
        _check_inputs(reference_files, query_files)
    except InputMissing as e:
        logger.warning(str(e))
        return _outcome(Status.INPUT_MISSING, str(e))
    completed = []

    def run_stage(stage, fn, *args):
        logger.info("Pipeline stage: %s" % stage.name.lower())
        try:
            out = fn(*args)
        except ToolExecutionFailure as e:
            if e.stage is None:
                e.stage = stage
            raise
        completed.append(stage)
        return out

    try:
        ref, query = run_stage(Stage.MOUNT, _mount, service, reference_files, query_files)
        run_stage(Stage.ALIGN, minimap2.align, service, ref[0], query, bam.SAM_FILE)
        run_stage(Stage.CONVERT, bam.sam_to_bam, service, bam.SAM_FILE, bam.BAM_FILE)
        run_stage(Stage.SORT, bam.sort, service, bam.BAM_FILE, bam.SORTED_BAM)
        run_stage(Stage.INDEX, bam.index, service, bam.SORTED_BAM)
        flagstat_out = run_stage(Stage.FLAGSTAT, bam.flagstat, service, bam.SORTED_BAM)
        bam_data = run_stage(Stage.READ_BAM, service.read_file, bam.SORTED_BAM)
        depth_out = run_stage(Stage.DEPTH, bam.depth, service, bam.SORTED_BAM)
        cov_out = run_stage(Stage.COVERAGE, bam.coverage, service, bam.SORTED_BAM)
    except ToolExecutionFailure as e:
        logger.error("Stage %s failed: %s" % (e.stage.name.lower(), e.message))
        return _outcome(Status.FAILED, FAILED_MSG % e.message, failed_stage=e.stage,
                        completed_stages=completed)
    run_summary = samtools.parse_flagstat(flagstat_out)
    try:
        result = summarize_reports(depth_out, cov_out)
    except NoDataProduced as e:
        logger.warning(str(e))
        return _outcome(Status.NO_DATA, str(e), run_summary=run_summary,
                        completed_stages=completed)
    logger.info("Summarised coverage for %s contigs" % len(result.contigs))
    return _outcome(Status.SUCCESS, run_summary=run_summary, result=result, bam_data=bam_data,
                    completed_stages=completed)

def _check_inputs(reference_files, query_files):
    if not reference_files or not query_files:
        raise InputMissing(INPUT_MISSING_MSG)

def _mount(service, reference_files, query_files):
    query = service.mount(query_files, "query")
    ref = service.mount(reference_files, "ref")
    return ref, query

def summarize_reports(depth_text, coverage_text):
    """Parse samtools depth and coverage output into an AggregateResult.
    """
    samples = list(samtools.parse_depth(depth_text))
    if not samples:
        raise NoDataProduced(NO_DATA_MSG)
    return coverage.aggregate(samples, samtools.parse_coverage(coverage_text))

def run_main(reference_files, query_files, workdir, config_file=None, out_bam=None,
             summary_file=None, verbose=False):
    """Run a full analysis from the command line, reporting the outcome.
    """
    workdir = os.path.abspath(workdir)
    config, config_file = config_utils.load_system_config(config_file)
    if config.get("log_dir") is None:
        config["log_dir"] = os.path.join(workdir, log.DEFAULT_LOG_DIR)
    if verbose:
        config["verbose"] = True
    handler = log.setup_local_logging(config)
    try:
        if config_file:
            logger.info("System YAML configuration: %s" % os.path.abspath(config_file))
        service = LocalToolService(workdir, config)
        outcome = run_pipeline(reference_files, query_files, service)
        qcsummary.report(outcome, out_bam, summary_file)
    finally:
        handler.pop_application()
        handler.close()
    return outcome
