"""Loads configurations from .yaml files and expands environment variables.
"""
import os
import sys

import toolz as tz
import yaml


class CmdNotFound(Exception):
    pass

# ## Retrieval functions

def load_system_config(config_file=None):
    """Load an optional alncov_system.yaml configuration file.

    Without a file, or when the default file is absent, returns an empty
    configuration so all programs are looked up on the PATH.
    """
    if config_file is None:
        config_file = "alncov_system.yaml"
        if not os.path.exists(config_file):
            config_file = None
    elif not os.path.exists(config_file):
        raise ValueError("Could not find input system configuration file %s" % config_file)
    config = load_config(config_file) if config_file else {"resources": {}}
    config["alncov_system"] = config_file
    return config, config_file

def load_config(config_file):
    """Load YAML config file, replacing environmental variables.
    """
    with open(config_file) as in_handle:
        config = yaml.safe_load(in_handle) or {}
    config = _expand_paths(config)
    if "resources" not in config:
        config["resources"] = {}
    # lowercase resource names, the preferred way to specify
    newr = {}
    for k, v in config["resources"].items():
        if k.lower() != k:
            newr[k.lower()] = v
    config["resources"].update(newr)
    return config

def _expand_paths(config):
    for field, setting in config.items():
        if isinstance(config[field], dict):
            config[field] = _expand_paths(config[field])
        else:
            config[field] = expand_path(setting)
    return config

def expand_path(path):
    """ Combines os.path.expandvars with replacing ~ with $HOME.
    """
    try:
        return os.path.expandvars(path.replace("~", "$HOME"))
    except AttributeError:
        return path

def get_resources(name, config):
    """Retrieve resources for a program, pulling from multiple config sources.
    """
    return tz.get_in(["resources", name], config,
                     tz.get_in(["resources", "default"], config, {}))

def get_num_cores(name, config):
    return int(tz.get_in(["cores"], get_resources(name, config) or {}, 1))

def get_program(name, config, default=None):
    """Retrieve the full path to a program from the configuration.

    The `resources` section can point to an explicit command. Otherwise
    we look next to the running Python (conda installs) and on the PATH.
    """
    try:
        pconfig = config.get("resources", {})[name]
    except KeyError:
        pconfig = {}
    return _get_program_cmd(name, pconfig, config, default)

def _get_check_program_cmd(fn):
    def wrap(name, pconfig, config, default):
        is_ok = lambda f: os.path.isfile(f) and os.access(f, os.X_OK)
        # support bioconda installed programs
        if is_ok(os.path.join(os.path.dirname(sys.executable), name)):
            return (os.path.join(os.path.dirname(sys.executable), name))
        program = expand_path(fn(name, pconfig, config, default))
        if is_ok(program):
            return program
        # search the PATH now
        for adir in os.environ.get("PATH", "").split(":"):
            if adir and is_ok(os.path.join(adir, program)):
                return os.path.join(adir, program)
        raise CmdNotFound(" ".join(map(repr, (fn.__name__, name, pconfig, default))))
    return wrap

@_get_check_program_cmd
def _get_program_cmd(name, pconfig, config, default):
    """Retrieve commandline of a program.
    """
    if pconfig is None:
        return name
    elif isinstance(pconfig, str):
        return pconfig
    elif "cmd" in pconfig:
        return pconfig["cmd"]
    elif default is not None:
        return default
    else:
        return name
