"""Tests for the command-line layer."""

import io
import sys
from pathlib import Path

import pytest

from gotags.cli import build_parser, main, normalize_bool_flags
from gotags.config import VERSION

from .conftest import ADD_SOURCE, BROKEN_SOURCE, GEOMETRY_SOURCE, LIMITS_SOURCE


def tag_names(output: str) -> list[str]:
    return [
        line.split("\t", 1)[0]
        for line in output.splitlines()
        if line and not line.startswith("!_TAG_")
    ]


class TestFlags:
    def test_bool_flag_does_not_consume_file(self):
        assert normalize_bool_flags(["-sort", "main.go"]) == ["-sort", "main.go"]

    @pytest.mark.parametrize("arg,expected", [
        ("-sort=false", "-no-sort"),
        ("-sort=0", "-no-sort"),
        ("-sort=true", "-sort"),
        ("--silent=T", "-silent"),
        ("-silent", "-silent"),
    ])
    def test_explicit_values(self, arg, expected):
        assert normalize_bool_flags([arg]) == [expected]

    def test_invalid_value(self):
        with pytest.raises(ValueError):
            normalize_bool_flags(["-sort=maybe"])

    def test_non_flags_untouched(self):
        argv = ["-L", "files.txt", "-f", "tags", "--", "-sort=false"]
        assert normalize_bool_flags(argv) == argv

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.sort is True
        assert args.silent is False
        assert args.output == "-"

    def test_no_sort(self):
        args = build_parser().parse_args(normalize_bool_flags(["-sort=false", "a.go"]))
        assert args.sort is False
        assert args.files == ["a.go"]


class TestMain:
    def test_version(self, capsys):
        assert main(["-v"]) == 0
        assert capsys.readouterr().out.strip() == f"gotags version {VERSION}"

    def test_no_files(self, capsys):
        assert main([]) == 1
        assert "no file specified" in capsys.readouterr().err

    def test_missing_file_list(self, capsys, tmp_path: Path):
        assert main(["-L", str(tmp_path / "absent.txt")]) == 1
        assert "cannot get specified files" in capsys.readouterr().err


class TestTagging:
    @pytest.fixture(autouse=True)
    def _grammar(self, go_parser):
        pass

    def test_files_sorted(self, capsys, go_file):
        geo = go_file("geo.go", GEOMETRY_SOURCE)
        add = go_file("add.go", ADD_SOURCE)
        assert main([geo, add]) == 0
        out = capsys.readouterr().out
        lines = out.splitlines()
        assert lines[0] == "!_TAG_FILE_FORMAT\t2\t"
        assert lines[1] == "!_TAG_FILE_SORTED\t1\t/0=unsorted, 1=sorted/"
        assert tag_names(out) == ["Add", "Dist", "Point", "X", "Y"]

    def test_unsorted(self, capsys, go_file):
        geo = go_file("geo.go", GEOMETRY_SOURCE)
        add = go_file("add.go", ADD_SOURCE)
        assert main(["-sort=false", geo, add]) == 0
        out = capsys.readouterr().out
        assert "!_TAG_FILE_SORTED\t0\t" in out
        assert tag_names(out) == ["Point", "X", "Y", "Dist", "Add"]

    def test_parse_error_reported(self, capsys, go_file):
        broken = go_file("broken.go", BROKEN_SOURCE)
        good = go_file("limits.go", LIMITS_SOURCE)
        assert main([broken, good]) == 0
        captured = capsys.readouterr()
        assert tag_names(captured.out) == ["MaxSize"]

    def test_file_list(self, capsys, go_file, tmp_path: Path):
        add = go_file("add.go", ADD_SOURCE)
        limits = go_file("limits.go", LIMITS_SOURCE)
        listing = tmp_path / "files.txt"
        listing.write_text(f"{add}\n{limits}\n")
        assert main(["-L", str(listing)]) == 0
        assert tag_names(capsys.readouterr().out) == ["Add", "MaxSize"]

    def test_output_file(self, go_file, tmp_path: Path):
        add = go_file("add.go", ADD_SOURCE)
        out = tmp_path / "tags"
        assert main(["-f", str(out), add]) == 0
        assert tag_names(out.read_text()) == ["Add"]

    def test_recursive(self, capsys, go_file, tmp_path: Path):
        go_file("src/geo/geo.go", GEOMETRY_SOURCE)
        go_file("src/vendor/dep/add.go", ADD_SOURCE)
        assert main(["-R", str(tmp_path / "src")]) == 0
        assert tag_names(capsys.readouterr().out) == ["Dist", "Point", "X", "Y"]

    def test_package_flag(self, capsys, go_file):
        limits = go_file("limits.go", LIMITS_SOURCE)
        assert main(["-package", limits]) == 0
        assert tag_names(capsys.readouterr().out) == ["MaxSize", "limits"]

    def test_tree(self, capsys, go_file):
        geo = go_file("geo.go", GEOMETRY_SOURCE)
        assert main(["-tree", geo]) == 0
        out = capsys.readouterr().out
        assert "type Point StructType (line 5)" in out

    def test_stdin(self, capsys, monkeypatch):
        monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(ADD_SOURCE.encode())))
        assert main(["-stdin"]) == 0
        out = capsys.readouterr().out
        [line] = [line for line in out.splitlines() if line.startswith("Add\t")]
        assert line.split("\t")[1] == "-"
