"""
Tests for the Call Rewriter.

Verifies:
1. Parsing of receiver paths and argument lists (positional and keyword).
2. Rejection of unsupported call shapes.
3. Binding order and temporary naming.
4. Expression and statement rendering, including the zero-argument form.
"""

import libcst as cst
import pytest

from unborrow.core.errors import UnsupportedSyntax
from unborrow.core.names import FreshNameAllocator
from unborrow.core.rewriter import CallRewriter
from unborrow.utils.node_diff import capture_node_source


@pytest.fixture
def rewriter():
  return CallRewriter(FreshNameAllocator("t"))


def parse_call(rewriter, code):
  return rewriter.parse_call(cst.parse_expression(code))


def render(node):
  return capture_node_source(node)


def test_parse_single_segment_receiver(rewriter):
  call = parse_call(rewriter, "f(x)")
  assert call.receiver_path == ("f",)
  assert len(call.args) == 1


def test_parse_multi_segment_receiver(rewriter):
  call = parse_call(rewriter, "self.inner.items.append(1)")
  assert call.receiver_path == ("self", "inner", "items", "append")


def test_parse_keywords_in_source_order(rewriter):
  call = parse_call(rewriter, "obj.m(a, key=b, other=c)")
  assert [arg.keyword for arg in call.args] == [None, "key", "other"]
  assert render(call.args[1].value) == "b"


@pytest.mark.parametrize(
  "code",
  [
    "f().m(x)",
    "a[0].m(x)",
    "(a or b).m(x)",
    "a.b().c(x)",
  ],
)
def test_rejects_non_identifier_receiver_path(rewriter, code):
  with pytest.raises(UnsupportedSyntax) as exc:
    parse_call(rewriter, code)
  assert "receiver.method(args...)" in str(exc.value)


def test_rejection_names_the_fragment(rewriter):
  with pytest.raises(UnsupportedSyntax) as exc:
    parse_call(rewriter, "f().m(x)")
  assert exc.value.fragment == "f().m"


@pytest.mark.parametrize("code", ["v.m(*xs)", "v.m(a, **kw)"])
def test_rejects_unpacked_arguments(rewriter, code):
  with pytest.raises(UnsupportedSyntax) as exc:
    parse_call(rewriter, code)
  assert "unpacked" in exc.value.reason


def test_rejects_non_call(rewriter):
  with pytest.raises(UnsupportedSyntax):
    parse_call(rewriter, "v.items")


def test_bindings_follow_argument_order(rewriter):
  block = rewriter.rewrite(parse_call(rewriter, "v.insert(len(v) - 1, v[0] + 41)"))

  assert [b.name for b in block.bindings] == ["t0", "t1"]
  assert [b.position for b in block.bindings] == [0, 1]
  assert render(block.bindings[0].value) == "len(v) - 1"
  assert render(block.bindings[1].value) == "v[0] + 41"
  assert render(block.call) == "v.insert(t0, t1)"


def test_receiver_path_is_reproduced_verbatim(rewriter):
  block = rewriter.rewrite(parse_call(rewriter, "a.b.c.method(a.b.size())"))
  assert render(block.call) == "a.b.c.method(t0)"


def test_keywords_survive_rewrite(rewriter):
  block = rewriter.rewrite(parse_call(rewriter, "sorted(xs, key=len)"))
  assert block.bindings[1].keyword == "key"
  assert render(block.call) == "sorted(t0, key=t1)"


def test_expression_rendering(rewriter):
  block = rewriter.rewrite(parse_call(rewriter, "v.insert(len(v) - 1, v[0] + 41)"))
  expr = rewriter.to_expression(block)
  assert render(expr) == "(t0 := len(v) - 1, t1 := v[0] + 41, v.insert(t0, t1))[-1]"


def test_zero_arguments_emit_no_bindings(rewriter):
  block = rewriter.rewrite(parse_call(rewriter, "v.clear()"))
  assert block.bindings == ()
  assert render(rewriter.to_expression(block)) == "(v.clear())"
  assert rewriter.to_statements(block) == []


def test_nested_walrus_argument_is_parenthesized(rewriter):
  block = rewriter.rewrite(parse_call(rewriter, "v.append(y := 3)"))
  assert render(rewriter.to_expression(block)) == "(t0 := (y := 3), v.append(t0))[-1]"


def test_generator_argument_stays_valid(rewriter):
  block = rewriter.rewrite(parse_call(rewriter, "v.extend(i for i in range(3))"))
  code = render(rewriter.to_expression(block))
  # Must parse as a standalone expression.
  cst.parse_expression(code)
  assert code.endswith("v.extend(t0))[-1]")


def test_statement_rendering(rewriter):
  block = rewriter.rewrite(parse_call(rewriter, "v.insert(len(v) - 1, v[0] + 41)"))
  lines = rewriter.to_statements(block)
  module = cst.Module(body=[*lines, cst.SimpleStatementLine(body=[cst.Expr(block.call)])])
  assert module.code == "t0 = len(v) - 1\nt1 = v[0] + 41\nv.insert(t0, t1)\n"


def test_multiline_argument_is_parenthesized_as_statement(rewriter):
  block = rewriter.rewrite(parse_call(rewriter, "v.append(a +\n  b)"))
  line = rewriter.to_statements(block)[0]
  code = cst.Module(body=[line]).code
  assert code == "t0 = (a +\n  b)\n"


def test_allocator_shared_between_calls(rewriter):
  first = rewriter.rewrite(parse_call(rewriter, "v.m(a)"))
  second = rewriter.rewrite(parse_call(rewriter, "v.m(b)"))
  assert first.bindings[0].name != second.bindings[0].name
