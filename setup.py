#!/usr/bin/env python

"""Setup file and install script for alignment coverage summaries"""

import os
import subprocess

import setuptools

VERSION = '0.1.0'

# add alncov version number and git commit hash of the current revision to version.py
try:
    git_run = subprocess.run(['git', 'rev-parse', '--short', 'HEAD'], stdout=subprocess.PIPE,
                             stderr=subprocess.DEVNULL)
    git_run.check_returncode()
except (subprocess.SubprocessError, OSError):
    commit_hash = ''
else:
    commit_hash = git_run.stdout.strip().decode()

here = os.path.dirname(os.path.abspath(__file__))
with open(os.path.join(here, 'alncov', 'pipeline', 'version.py'), 'w') as version_file:
    version_file.writelines([f'__version__ = "{VERSION}"\n',
                             f'__git_revision__ = "{commit_hash}"\n'])

# minimap2 and samtools are external tools, installed via Conda:
# conda install -c bioconda minimap2 samtools
setuptools.setup(
    name='alncov',
    version=VERSION,
    description='Align reads with minimap2 and summarise per-contig depth and coverage',
    packages=setuptools.find_packages(exclude=['tests', 'tests.*']),
    scripts=['scripts/alncov_run.py'],
    python_requires='>=3.7',
    install_requires=['logbook', 'PyYAML', 'toolz'],
    extras_require={'test': ['pytest', 'pytest-mock', 'mock']},
)
