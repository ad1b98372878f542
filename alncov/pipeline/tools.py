"""Run external tools inside a scratch working directory.

The pipeline only talks to tools through this service: mount inputs,
execute a program capturing its standard output, and read produced files
back. Every failure surfaces as ToolExecutionFailure carrying the tool's
own error text.
"""
import os
import subprocess

from alncov import utils
from alncov.log import logger
from alncov.pipeline import config_utils
from alncov.provenance import do


class ToolExecutionFailure(Exception):
    """An external tool, or access to its files, failed.

    `stage` is filled in by the pipeline with the step that was running.
    """
    def __init__(self, message, stage=None):
        super(ToolExecutionFailure, self).__init__(message)
        self.message = message
        self.stage = stage


class LocalToolService(object):
    """Executes programs with subprocess in a per-run work directory.
    """
    def __init__(self, work_dir, config=None):
        self.work_dir = utils.safe_makedir(os.path.abspath(work_dir))
        self.config = config if config is not None else {"resources": {}}

    def mount(self, files, name="inputs"):
        """Link input files into a fresh mount directory, returning relative paths.

        Anything mounted under `name` by an earlier run is removed first.
        Files sharing a basename get an index prefix so each stays distinct.
        """
        mount_dir = os.path.join(self.work_dir, "inputs", name)
        utils.remove_safe(mount_dir)
        utils.safe_makedir(mount_dir)
        out = []
        for i, f in enumerate(files):
            base = os.path.basename(f)
            new = os.path.join(mount_dir, base)
            prefix = i
            while os.path.lexists(new):
                new = os.path.join(mount_dir, "%s-%s" % (prefix, base))
                prefix += 1
            try:
                utils.symlink_plus(f, new)
            except (RuntimeError, OSError) as e:
                raise ToolExecutionFailure("Could not mount input %s: %s" % (f, e))
            out.append(os.path.relpath(new, self.work_dir))
        logger.debug("Mounted %s files in %s" % (len(out), mount_dir))
        return out

    def exec(self, program, args, descr=None, out_file=None):
        """Run `program` with `args` in the work directory, returning stdout text.

        When `out_file` is given any previous copy is removed first, and the
        run only succeeds if it produced that file with some content.
        """
        try:
            cmd = [config_utils.get_program(program, self.config)] + [str(x) for x in args]
        except config_utils.CmdNotFound as e:
            raise ToolExecutionFailure("Could not find program %s: %s" % (program, e))
        checks = None
        if out_file:
            utils.remove_safe(self._path(out_file))
            checks = [do.file_nonempty(self._path(out_file))]
        try:
            return do.run(cmd, descr or "%s %s" % (program, " ".join(str(x) for x in args)),
                          checks=checks, cwd=self.work_dir, log_error=False)
        except subprocess.CalledProcessError as e:
            raise ToolExecutionFailure(str(e))
        except OSError as e:
            raise ToolExecutionFailure("Could not run %s: %s" % (program, e))

    def _path(self, path):
        return path if os.path.isabs(path) else os.path.join(self.work_dir, path)

    def read_file(self, path):
        path = self._path(path)
        try:
            with open(path, "rb") as in_handle:
                return in_handle.read()
        except (IOError, OSError) as e:
            raise ToolExecutionFailure("Could not read %s: %s" % (path, e))
