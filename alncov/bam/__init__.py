"""samtools commands to build and summarise sorted, indexed BAM files.

Each call goes through the tool service, which runs inside the work
directory, so file names here are relative to it.
"""
import os

SAM_FILE = "output.sam"
BAM_FILE = "output.bam"
SORTED_BAM = "output.sorted.bam"

def sam_to_bam(service, in_sam, out_bam):
    return service.exec("samtools", ["view", "-S", "-b", in_sam, "-o", out_bam],
                        "Convert SAM to BAM: %s" % os.path.basename(in_sam), out_file=out_bam)

def sort(service, in_bam, out_bam):
    """Coordinate sort a BAM file.
    """
    return service.exec("samtools", ["sort", "-o", out_bam, in_bam],
                        "Sort BAM file: %s" % os.path.basename(in_bam), out_file=out_bam)

def index(service, in_bam):
    """Index a coordinate sorted BAM file, producing `in_bam`.bai.
    """
    index_file = "%s.bai" % in_bam
    service.exec("samtools", ["index", in_bam], "Index BAM file: %s" % os.path.basename(in_bam),
                 out_file=index_file)
    return index_file

def flagstat(service, in_bam):
    return service.exec("samtools", ["flagstat", in_bam], "samtools flagstat")

def depth(service, in_bam):
    """Per-base depth including zero coverage positions on every contig.

    `-aa` keeps all positions, so the number of lines per contig is its length.
    """
    return service.exec("samtools", ["depth", "-aa", in_bam], "samtools depth")

def coverage(service, in_bam):
    """Per-contig coverage table. The parser skips a `#rname` header if present.
    """
    return service.exec("samtools", ["coverage", "-H", in_bam], "samtools coverage")
