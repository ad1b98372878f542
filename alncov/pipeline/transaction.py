"""Handle file based transactions so outputs are either complete or absent.

Output files are written to a temporary location during processing and
moved to the final location only when the block finishes without error.
"""
import contextlib
import os
import shutil
import tempfile

from alncov import utils


DEFAULT_TMP = "alncovtx"


@contextlib.contextmanager
def tx_tmpdir(base_dir=None):
    """Context manager to create and remove a transactional temporary directory.
    """
    base_dir = base_dir or os.getcwd()
    tmpdir_base = utils.safe_makedir(os.path.join(os.path.abspath(base_dir), DEFAULT_TMP))
    tmp_dir = tempfile.mkdtemp(dir=tmpdir_base)
    try:
        yield tmp_dir
    finally:
        utils.remove_safe(tmp_dir)
        # only clean the base if no concurrent transactions use it
        if os.path.isdir(tmpdir_base) and not os.listdir(tmpdir_base):
            utils.remove_safe(tmpdir_base)


@contextlib.contextmanager
def file_transaction(*files):
    """Wrap file generation in a transaction, moving to output if finishes.
    """
    orig_names = [f for f in files if f]
    base_dir = os.path.dirname(os.path.abspath(orig_names[0]))
    with tx_tmpdir(base_dir) as tmpdir:
        safe_names = [os.path.join(tmpdir, os.path.basename(f)) for f in orig_names]
        if len(safe_names) == 1:
            yield safe_names[0]
        else:
            yield tuple(safe_names)
        for safe, orig in zip(safe_names, orig_names):
            if os.path.exists(safe):
                _move_tmp_file(safe, orig)


def _move_tmp_file(safe, orig):
    utils.safe_makedir(os.path.dirname(os.path.abspath(orig)))
    want_size = os.path.getsize(safe)
    shutil.move(safe, orig)
    transfer_size = os.path.getsize(orig)
    assert want_size == transfer_size, (
        "file_transaction: File copy error: temporary file {} size {} bytes "
        "does not equal size after transfer to {} size {} bytes".format(
            safe, want_size, orig, transfer_size))
