"""Pytest fixtures and test helper functions"""
import pytest

from alncov.pipeline.tools import ToolExecutionFailure

FLAGSTAT = """100 + 0 in total (QC-passed reads + QC-failed reads)
85 + 0 primary
10 + 0 secondary
5 + 0 supplementary
0 + 0 duplicates
0 + 0 primary duplicates
80 + 0 mapped (80.00% : N/A)
68 + 0 primary mapped (80.00% : N/A)
"""

DEPTH = "chr1\t1\t5\nchr1\t2\t7\nchr2\t1\t0\n"

COVERAGE = ("chr1\t1\t2\t10\t2\t100.0\t6.0\t30.0\t55\n"
            "chr2\t1\t1\t0\t0\t0.0\t0.0\t0.0\t0\n")


class FakeToolService(object):
    """Stands in for the tool service, recording each call in order.

    Calls are keyed by what they do: `mount`, the program name for
    minimap2, the samtools subcommand, or `read_file`. Keys in `fail_on`
    raise ToolExecutionFailure.
    """
    def __init__(self, outputs=None, fail_on=None, bam_data=b"BAM\x01"):
        self.config = {"resources": {}}
        self.outputs = {"flagstat": FLAGSTAT, "depth": DEPTH, "coverage": COVERAGE}
        self.outputs.update(outputs or {})
        self.fail_on = set(fail_on or [])
        self.bam_data = bam_data
        self.calls = []

    def _call(self, key):
        self.calls.append(key)
        if key in self.fail_on:
            raise ToolExecutionFailure("[%s] tool exploded" % key)

    def mount(self, files, name="inputs"):
        self._call("mount")
        return ["inputs/%s/%s" % (name, f) for f in files]

    def exec(self, program, args, descr=None, out_file=None):
        key = program if program != "samtools" else args[0]
        self._call(key)
        return self.outputs.get(key, "")

    def read_file(self, path):
        self._call("read_file")
        return self.bam_data


@pytest.fixture
def fake_service():
    return FakeToolService()


@pytest.fixture
def make_service():
    return FakeToolService
