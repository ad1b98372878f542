"""Alignment with minimap2: https://github.com/lh3/minimap2
"""
from alncov.pipeline import config_utils

# Oxford Nanopore long noisy reads
PRESET = "map-ont"
# Index and mini-batch sizes large enough to avoid splitting big references
INDEX_BATCH = "1G"
MINIBATCH = "100M"

def align(service, ref_file, query_files, out_file):
    """Align all query reads against the reference, writing SAM to `out_file`.
    """
    num_cores = config_utils.get_num_cores("minimap2", service.config)
    args = ["-a", "-I", INDEX_BATCH, "-K", MINIBATCH, "-o", out_file, "-x", PRESET]
    if num_cores > 1:
        args += ["-t", num_cores]
    args += [ref_file] + list(query_files)
    return service.exec("minimap2", args, "minimap2 alignment: %s reads files" % len(query_files),
                        out_file=out_file)
