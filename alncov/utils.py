"""Helpful utilities for building analysis pipelines.
"""
import contextlib
import decimal
import os
import shutil
import time


def safe_makedir(dname):
    """Make a directory if it doesn't exist, handling concurrent race conditions.
    """
    if not dname:
        return dname
    num_tries = 0
    max_tries = 5
    while not os.path.exists(dname):
        # we could get an error here if multiple processes are creating
        # the directory at the same time. Grr, concurrency.
        try:
            os.makedirs(dname)
        except OSError:
            if num_tries > max_tries:
                raise
            num_tries += 1
            time.sleep(2)
    return dname

@contextlib.contextmanager
def chdir(new_dir):
    """Context manager to temporarily change to a new directory.
    """
    cur_dir = os.getcwd()
    safe_makedir(new_dir)
    os.chdir(new_dir)
    try:
        yield
    finally:
        os.chdir(cur_dir)

def file_exists(fname):
    """Check if a file exists and is non-empty.
    """
    try:
        return fname and os.path.exists(fname) and os.path.getsize(fname) > 0
    except OSError:
        return False

def remove_safe(f):
    try:
        if os.path.isdir(f):
            shutil.rmtree(f)
        else:
            os.remove(f)
    except OSError:
        pass

def symlink_plus(orig, new):
    """Create relative symlinks, including reference index files.

    Falls back to copying on filesystems without symlink support.
    """
    orig = os.path.abspath(orig)
    if not os.path.exists(orig):
        raise RuntimeError("File not found: %s" % orig)
    for ext in ["", ".fai", ".mmi"]:
        if os.path.exists(orig + ext) and (not os.path.lexists(new + ext) or not os.path.exists(new + ext)):
            with chdir(os.path.dirname(os.path.abspath(new))):
                remove_safe(new + ext)
                try:
                    os.symlink(os.path.relpath(orig + ext), os.path.basename(new + ext))
                except OSError:
                    if not os.path.exists(new + ext) or not os.path.lexists(new + ext):
                        remove_safe(new + ext)
                        shutil.copyfile(orig + ext, new + ext)
    return new

def thousands(x):
    """Format an integer with comma thousands separators, passing through None.
    """
    if x is None:
        return None
    return "{:,}".format(x)

def to_fixed(x, digits=0):
    """Format a number with a fixed number of decimals, rounding halves up.

    Works from the exact binary value of floats so 2.5 -> "3" and
    1.005 -> "1.00" (stored just below 1.005).
    """
    quantum = decimal.Decimal(1).scaleb(-digits)
    return str(decimal.Decimal(x).quantize(quantum, rounding=decimal.ROUND_HALF_UP))

def round_half_up(x):
    """Round to the nearest integer with halves going up, returning an int.
    """
    return int(decimal.Decimal(x).quantize(decimal.Decimal(1), rounding=decimal.ROUND_HALF_UP))

def safe_to_float(x):
    """Convert to float, handling None and non-float inputs.
    """
    if x is None:
        return None
    else:
        try:
            return float(x)
        except ValueError:
            return None
