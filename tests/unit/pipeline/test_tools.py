import os
import subprocess

import pytest

from alncov.pipeline import config_utils
from alncov.pipeline.tools import LocalToolService, ToolExecutionFailure


@pytest.fixture
def service(tmpdir):
    return LocalToolService(str(tmpdir.join("work")))


def test_mount_links_inputs(tmpdir, service):
    ref = tmpdir.join("genome.fa")
    ref.write(">chr1\nACGT\n")
    paths = service.mount([str(ref)], "ref")
    assert paths == [os.path.join("inputs", "ref", "genome.fa")]
    with open(os.path.join(service.work_dir, paths[0])) as in_handle:
        assert in_handle.read() == ">chr1\nACGT\n"


def test_mount_missing_file_fails(tmpdir, service):
    with pytest.raises(ToolExecutionFailure):
        service.mount([str(tmpdir.join("missing.fa"))])


def test_exec_returns_stdout(mocker, service):
    mocker.patch("alncov.pipeline.tools.config_utils.get_program", return_value="/bin/samtools")
    run = mocker.patch("alncov.pipeline.tools.do.run", return_value="out text")
    assert service.exec("samtools", ["flagstat", "x.bam"]) == "out text"
    args, kwargs = run.call_args
    assert args[0] == ["/bin/samtools", "flagstat", "x.bam"]
    assert kwargs["cwd"] == service.work_dir


def test_exec_failure_carries_tool_message(mocker, service):
    mocker.patch("alncov.pipeline.tools.config_utils.get_program", return_value="samtools")
    mocker.patch("alncov.pipeline.tools.do.run",
                 side_effect=subprocess.CalledProcessError(1, "samtools sort\n[bam_sort] truncated file"))
    with pytest.raises(ToolExecutionFailure) as excinfo:
        service.exec("samtools", ["sort", "x.bam"])
    assert "truncated file" in excinfo.value.message
    assert excinfo.value.stage is None


def test_exec_missing_program(mocker, service):
    mocker.patch("alncov.pipeline.tools.config_utils.get_program",
                 side_effect=config_utils.CmdNotFound("minimap2"))
    with pytest.raises(ToolExecutionFailure):
        service.exec("minimap2", ["-a"])


def test_read_file(service):
    with open(os.path.join(service.work_dir, "output.sorted.bam"), "wb") as out_handle:
        out_handle.write(b"\x1f\x8b")
    assert service.read_file("output.sorted.bam") == b"\x1f\x8b"
    with pytest.raises(ToolExecutionFailure):
        service.read_file("missing.bam")


def test_exec_runs_program_in_work_dir(service):
    assert service.exec("echo", ["chr1", "1", "5"]) == "chr1 1 5\n"


def test_exec_requires_expected_output(service):
    with pytest.raises(ToolExecutionFailure):
        service.exec("true", [], out_file="output.sorted.bam.bai")


def test_exec_ignores_output_left_by_earlier_run(service):
    with open(os.path.join(service.work_dir, "output.sam"), "w") as out_handle:
        out_handle.write("@HD\tVN:1.6\n")
    with pytest.raises(ToolExecutionFailure):
        service.exec("true", [], out_file="output.sam")
    assert not os.path.exists(os.path.join(service.work_dir, "output.sam"))


def test_remount_replaces_earlier_inputs(tmpdir, service):
    for run_name, read_name in [("run1", "@r1"), ("run2", "@r2")]:
        reads = tmpdir.join(run_name).join("reads.fq")
        reads.write("%s\nAAAA\n+\nIIII\n" % read_name, ensure=True)
        paths = service.mount([str(reads)], "query")
    assert paths == [os.path.join("inputs", "query", "reads.fq")]
    with open(os.path.join(service.work_dir, paths[0])) as in_handle:
        assert in_handle.read().startswith("@r2")


def test_remount_drops_inputs_not_given_again(tmpdir, service):
    first = tmpdir.join("a.fq")
    first.write("@a\nA\n+\nI\n")
    second = tmpdir.join("b.fq")
    second.write("@b\nC\n+\nI\n")
    service.mount([str(first), str(second)], "query")
    service.mount([str(second)], "query")
    assert os.listdir(os.path.join(service.work_dir, "inputs", "query")) == ["b.fq"]


def test_mount_keeps_same_named_inputs_distinct(tmpdir, service):
    x = tmpdir.join("x").join("reads.fq")
    x.write("@x\nA\n+\nI\n", ensure=True)
    y = tmpdir.join("y").join("reads.fq")
    y.write("@y\nC\n+\nI\n", ensure=True)
    paths = service.mount([str(x), str(y)], "query")
    assert paths == [os.path.join("inputs", "query", "reads.fq"),
                     os.path.join("inputs", "query", "1-reads.fq")]
    contents = []
    for p in paths:
        with open(os.path.join(service.work_dir, p)) as in_handle:
            contents.append(in_handle.read())
    assert [c.split("\n")[0] for c in contents] == ["@x", "@y"]
