import os

import pytest

from alncov.pipeline import config_utils


def test_load_config_expands_paths_and_lowercases(tmpdir, monkeypatch):
    monkeypatch.setenv("TOOLS_DIR", "/opt/tools")
    config_file = tmpdir.join("alncov_system.yaml")
    config_file.write("log_dir: $TOOLS_DIR/log\n"
                      "resources:\n"
                      "  Samtools:\n"
                      "    cmd: $TOOLS_DIR/bin/samtools\n")
    config = config_utils.load_config(str(config_file))
    assert config["log_dir"] == "/opt/tools/log"
    assert config["resources"]["samtools"]["cmd"] == "/opt/tools/bin/samtools"


def test_load_system_config_without_file(tmpdir):
    with tmpdir.as_cwd():
        config, config_file = config_utils.load_system_config()
    assert config_file is None
    assert config["resources"] == {}


def test_load_system_config_missing_explicit_file(tmpdir):
    with pytest.raises(ValueError):
        config_utils.load_system_config(str(tmpdir.join("nope.yaml")))


def test_get_program_from_resources(tmpdir):
    program = tmpdir.join("alncov-test-tool")
    program.write("#!/bin/sh\n")
    os.chmod(str(program), 0o755)
    config = {"resources": {"alncov-test-tool": {"cmd": str(program)}}}
    assert config_utils.get_program("alncov-test-tool", config) == str(program)


def test_get_program_not_found(monkeypatch):
    monkeypatch.setenv("PATH", "")
    with pytest.raises(config_utils.CmdNotFound):
        config_utils.get_program("alncov-no-such-program", {"resources": {}})


@pytest.mark.parametrize("config,cores", [
    ({"resources": {}}, 1),
    ({"resources": {"minimap2": {"cores": 8}}}, 8),
    ({"resources": {"default": {"cores": 4}}}, 4),
])
def test_get_num_cores(config, cores):
    assert config_utils.get_num_cores("minimap2", config) == cores
