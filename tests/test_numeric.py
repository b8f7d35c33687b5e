import pytest

from taurtp.numeric import align, div_ceil, near


@pytest.mark.parametrize(
    ("value", "expected"),
    [(0, 0), (1, 4), (4, 4), (5, 8)],
)
def test_align(value, expected):
    assert align(value, 4) == expected


def test_align_size_t():
    assert align(1500, 8) == 1504


def test_near():
    assert near(1.0, 1.0)
    assert not near(1.0, 2.0)


@pytest.mark.parametrize("a", [1, 7, 8, 9, 100])
@pytest.mark.parametrize("b", [1, 3, 8])
def test_div_ceil_is_smallest_cover(a, b):
    result = div_ceil(a, b)
    assert result * b >= a
    assert (result - 1) * b < a


def test_div_ceil_exact():
    assert div_ceil(8, 4) == 2