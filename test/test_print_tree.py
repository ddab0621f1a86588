#!/usr/bin/env python3
# test_print_tree.py - Test the tree printer and the command line entry point

import io
import os
import sys
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))  # Add parent directory to path
from markup_parser import format_tree, main, parse_markup, print_tree

SAMPLE = '<root id="1">top<leaf>x</leaf></root>'
SAMPLE_TREE = (
    "<Tag=root Attrs={'id': '1'} Text='top'>\n"
    "  <Tag=leaf Attrs={} Text='x'>"
)


def test_format_tree():
    root = parse_markup(SAMPLE)[0]
    assert format_tree(root) == SAMPLE_TREE


def test_format_tree_indent():
    leaf = parse_markup("<leaf></leaf>")[0]
    assert format_tree(leaf, indent=4) == "    <Tag=leaf Attrs={} Text=''>"


def test_print_tree(capsys):
    print_tree(parse_markup(SAMPLE)[0])
    assert capsys.readouterr().out == SAMPLE_TREE + "\n"


def test_print_tree_to_file():
    out = io.StringIO()
    print_tree(parse_markup(SAMPLE)[0], file=out)
    assert out.getvalue() == SAMPLE_TREE + "\n"


def test_main_reads_file(tmp_path, capsys):
    path = tmp_path / "page.html"
    path.write_text(SAMPLE + "\n<other></other>\n", encoding="utf-8")
    assert main([str(path)]) == 0
    out = capsys.readouterr().out
    assert out == SAMPLE_TREE + "\n<Tag=other Attrs={} Text=''>\n"


def test_main_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO(SAMPLE))
    assert main([]) == 0
    assert capsys.readouterr().out == SAMPLE_TREE + "\n"


def test_main_reports_malformed_markup(tmp_path, capsys):
    path = tmp_path / "broken.html"
    path.write_text("<tag>", encoding="utf-8")
    assert main([str(path)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "error: no closing tag for <tag>" in captured.err


def test_main_max_depth(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("<a><b></b></a>"))
    assert main(["-", "--max-depth", "0"]) == 1
    assert "nested deeper than 0 levels" in capsys.readouterr().err


def test_main_reports_deep_nesting(tmp_path, capsys):
    depth = 1000
    path = tmp_path / "deep.html"
    path.write_text("".join(f"<t{i}>" for i in range(depth))
                    + "".join(f"</t{i}>" for i in reversed(range(depth))),
                    encoding="utf-8")
    assert main([str(path)]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "error: markup nested too deeply to parse" in captured.err
