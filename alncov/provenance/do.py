"""Centralize running of external commands, providing logging and tracking.
"""
import subprocess

from alncov import utils
from alncov.log import logger, logger_cl


def run(cmd, descr=None, checks=None, log_error=True, env=None, cwd=None):
    """Run the provided command, logging details and checking for errors.

    Returns the command's standard output as text; standard error goes to
    the debug log and into the raised error on failure.
    """
    cmd = [str(x) for x in cmd]
    if descr:
        logger.debug(descr)
    try:
        logger_cl.debug(_cmd_str(cmd))
        out = _do_run(cmd, env=env, cwd=cwd)
        if checks:
            for check in checks:
                if not check():
                    raise IOError("External command failed: %s" % (descr or _cmd_str(cmd)))
    except (subprocess.CalledProcessError, OSError):
        if log_error:
            logger.exception()
        raise
    return out

def _cmd_str(cmd):
    return " ".join(cmd)

def _do_run(cmd, env=None, cwd=None):
    """Perform running and check results, raising errors for issues.
    """
    s = subprocess.Popen(
        cmd,
        stdout=subprocess.PIPE,
        stderr=subprocess.PIPE,
        close_fds=True,
        env=env,
        cwd=cwd,
    )
    stdout, stderr = s.communicate()
    stderr = stderr.decode("utf-8", errors="replace")
    for line in stderr.splitlines():
        if line.rstrip():
            logger.debug(line.rstrip())
    if s.returncode != 0:
        error_msg = _cmd_str(cmd)
        error_msg += "\n"
        error_msg += "\n".join(stderr.splitlines()[-100:])
        raise subprocess.CalledProcessError(s.returncode, error_msg)
    return stdout.decode("utf-8", errors="replace")

# checks for validating run completed successfully

def file_nonempty(target_file):
    def check():
        ok = utils.file_exists(target_file)
        if not ok:
            logger.info("Did not find non-empty output file {0}".format(target_file))
        return ok
    return check
