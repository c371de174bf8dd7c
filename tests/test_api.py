"""
Tests for the top-level package API.
"""

import pytest

import unborrow as ub
from unborrow import unborrow


def test_marker_is_identity_at_runtime():
  v = [1, 2, 3]
  assert unborrow(v.pop()) == 3
  assert v == [1, 2]


def test_convert_default_style():
  out = ub.convert("unborrow(v.reserve(v.capacity()))\n")
  assert out == "(_unborrow_arg_0 := v.capacity(), v.reserve(_unborrow_arg_0))[-1]\n"


def test_convert_statements_style():
  out = ub.convert("unborrow(v.reserve(v.capacity()))\n", style="statements")
  assert out == "_unborrow_arg_0 = v.capacity()\nv.reserve(_unborrow_arg_0)\n"


def test_convert_custom_marker():
  out = ub.convert("pre(v.m(x))\nunborrow(v.m(y))\n", marker="pre")
  assert out.startswith("(_unborrow_arg_0 := x, v.m(_unborrow_arg_0))[-1]\n")
  assert out.endswith("unborrow(v.m(y))\n")


def test_convert_raises_on_unsupported_syntax():
  with pytest.raises(ValueError, match="f\\(\\).m"):
    ub.convert("unborrow(f().m(x))\n")


def test_unsupported_syntax_exported():
  err = ub.UnsupportedSyntax("boom")
  assert str(err) == "unsupported syntax: boom"
  assert err.located(3) is err
  assert str(err) == "line 3: unsupported syntax: boom"
