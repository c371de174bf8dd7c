"""
Tests for Source Rendering Helpers.
"""

import libcst as cst

from unborrow.utils.node_diff import capture_node_source, unified_source_diff


def test_capture_detached_call():
  node = cst.Call(func=cst.Name("my_func"), args=[cst.Arg(cst.Integer("1"))])
  assert capture_node_source(node) == "my_func(1)"


def test_capture_parsed_expression_keeps_formatting():
  node = cst.parse_expression("v.insert( len(v) - 1 ,  0 )")
  assert capture_node_source(node) == "v.insert( len(v) - 1 ,  0 )"


def test_unified_diff_headers_and_lines():
  diff = unified_source_diff("a = 1\n", "a = 2\n", "mod.py")
  assert diff.startswith("--- a/mod.py\n+++ b/mod.py\n")
  assert "-a = 1\n" in diff
  assert "+a = 2\n" in diff


def test_unified_diff_identical_sources():
  assert unified_source_diff("x\n", "x\n") == ""
