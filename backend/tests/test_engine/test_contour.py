"""Tests for contour validation and file loading."""

from __future__ import annotations

import numpy as np
import pytest

from leafsight.engine.contour import as_contour, load_contour
from leafsight.engine.errors import MalformedContourError


def test_as_contour_returns_read_only_array():
    arr = as_contour([(0, 0), (1, 0), (0, 1)])
    assert arr.shape == (3, 2)
    assert arr.dtype == np.float64
    with pytest.raises(ValueError):
        arr[0, 0] = 5.0


@pytest.mark.parametrize(
    "points",
    [
        [],
        [1.0, 2.0, 3.0],
        [(0, 0, 0), (1, 1, 1), (2, 2, 2)],
        [(0, 0), (1, 1)],
        [(0, 0), (1, 0), (0, 0), (1, 0)],
        [(0, 0), (1, 0), (0, float("nan"))],
        [("a", "b"), (1, 0), (0, 1)],
    ],
)
def test_as_contour_rejects(points):
    with pytest.raises(MalformedContourError) as exc_info:
        as_contour(points)
    assert exc_info.value.stage == "contour"


def test_load_csv_with_header(tmp_path):
    path = tmp_path / "leaf.csv"
    path.write_text("x,y\n0,0\n2,0\n2,1\n\n0,1\n")
    np.testing.assert_array_equal(load_contour(path), [[0, 0], [2, 0], [2, 1], [0, 1]])


def test_load_whitespace_separated(tmp_path):
    path = tmp_path / "leaf.txt"
    path.write_text("0 0\n2.5 0\n2.5 1\n")
    assert load_contour(path).shape == (3, 2)


def test_load_bad_file(tmp_path):
    path = tmp_path / "leaf.csv"
    path.write_text("x,y\n0,0\n1,oops\n")
    with pytest.raises(MalformedContourError):
        load_contour(path)
