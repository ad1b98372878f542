"""Bound per-base series to a fixed number of points for visualisation.
"""
MAX_POINTS = 300

def subsample(series, budget=MAX_POINTS):
    """Fixed stride decimation of a series down to at most `budget` points.

    Keeps every `ceil(len / budget)`-th value starting at the first, so
    skipped points are discarded rather than summarised. Series already
    within budget come back unchanged.
    """
    if budget < 1:
        raise ValueError("Subsample budget must be at least 1, got %s" % budget)
    series = list(series)
    if len(series) <= budget:
        return series
    stride = -(-len(series) // budget)
    out = series[::stride]
    if not out and series:
        out = [series[0]]
    return out
