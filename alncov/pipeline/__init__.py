"""High level code for driving the alignment and coverage pipeline.

  - main.py: Run the ordered tool stages and build per-contig summaries.
    - tools.py: Execute external programs inside a scratch work directory.
    - config_utils.py: Optional YAML system configuration and program lookup.
    - qcsummary.py: Banner, per-contig table, summary YAML and BAM outputs.
"""
