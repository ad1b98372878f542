import pytest

from alncov.qc.series import subsample, MAX_POINTS


def test_short_series_returned_unchanged():
    series = list(range(MAX_POINTS))
    assert subsample(series) == series


def test_empty_series():
    assert subsample([]) == []


def test_exact_multiple_of_stride_fills_budget():
    series = list(range(MAX_POINTS * 4))
    result = subsample(series)
    assert len(result) == MAX_POINTS
    assert result[:3] == [0, 4, 8]


def test_stride_is_ceiling_and_starts_at_first_value():
    series = list(range(301))
    result = subsample(series)
    # stride of 2 gives indexes 0, 2, ..., 300
    assert result == list(range(0, 301, 2))
    assert len(result) == 151


@pytest.mark.parametrize("length", [1, 2, 299, 300, 301, 599, 600, 601, 12345, 100001])
def test_length_bounded_and_non_empty(length):
    result = subsample([7] * length)
    assert 1 <= len(result) <= MAX_POINTS


def test_custom_budget_and_order_preserved():
    series = [5, 1, 4, 2, 3, 9, 8]
    assert subsample(series, budget=3) == [5, 2, 8]


def test_invalid_budget():
    with pytest.raises(ValueError):
        subsample([1, 2, 3], budget=0)
