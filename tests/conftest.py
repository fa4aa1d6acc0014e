"""Pytest configuration and fixtures."""

from pathlib import Path

import pytest

GEOMETRY_SOURCE = """\
package geo

import "math"

type Point struct {
	X, Y int
}

func (p *Point) Dist() float64 {
	return math.Sqrt(float64(p.X*p.X + p.Y*p.Y))
}
"""

ADD_SOURCE = """\
package calc

// Add returns the sum of a and b.
func Add(a, b int) int {
	return a + b
}
"""

LIMITS_SOURCE = """\
package limits

const MaxSize = 1024
"""

BROKEN_SOURCE = """\
package broken

func Oops(a int {
	return
"""


@pytest.fixture
def go_file(tmp_path: Path):
    """Factory writing Go source into tmp_path and returning its path as str."""

    def _write(name: str, source: str) -> str:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source)
        return str(path)

    return _write


@pytest.fixture
def go_parser():
    """GoParser instance; skips when the Go grammar is not installed."""
    pytest.importorskip("tree_sitter")
    pytest.importorskip("tree_sitter_go")
    from gotags.parser import GoParser

    return GoParser()
