"""
Call Rewriter.

Turns a call ``receiver.method(e0, ..., en)`` into an equivalent block that
binds every argument to a fresh temporary, in source order, before dispatching
the call with the temporaries as its arguments.

The block is rendered in one of two shapes:

- **Expression**: a left-to-right tuple of assignment expressions whose last
  element is the call, indexed with ``[-1]``. Usable anywhere the original
  call was usable::

      (_unborrow_arg_0 := len(v) - 1, _unborrow_arg_1 := v[0] + 41, v.insert(_unborrow_arg_0, _unborrow_arg_1))[-1]

- **Statements**: one ``name = expr`` line per binding, followed by the call.
  Only valid when the caller can hoist statements ahead of the call site.

The receiver path is an opaque prefix: it is validated (identifiers and
attribute access only) and then reproduced verbatim. Only the argument list
is rewritten.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

import libcst as cst

from unborrow.core.errors import EXPECTED_FORM, UnsupportedSyntax
from unborrow.core.names import FreshNameAllocator
from unborrow.core.scanners import get_full_name
from unborrow.utils.node_diff import capture_node_source


@dataclass(frozen=True)
class Argument:
  """A single argument of a parsed call, in source position."""

  node: cst.Arg
  keyword: Optional[str] = None

  @property
  def value(self) -> cst.BaseExpression:
    return self.node.value


@dataclass(frozen=True)
class CallExpression:
  """
  A validated call site.

  Attributes:
      node: The original call node, reused verbatim for the final dispatch.
      receiver_path: Dotted segments of the callee, e.g. ``("self", "inner", "push")``.
      args: Arguments in evaluation order.
  """

  node: cst.Call
  receiver_path: Tuple[str, ...]
  args: Tuple[Argument, ...]


@dataclass(frozen=True)
class TemporaryBinding:
  """A generated name bound to exactly one argument expression."""

  name: str
  value: cst.BaseExpression
  position: int
  keyword: Optional[str] = None


@dataclass(frozen=True)
class RewrittenBlock:
  """
  Ordered bindings followed by the call that consumes them.

  Attributes:
      bindings: One binding per argument, in argument order.
      call: The original call with each argument replaced by its temporary.
  """

  bindings: Tuple[TemporaryBinding, ...]
  call: cst.Call


def _parenthesize(expr: cst.BaseExpression) -> cst.BaseExpression:
  return expr.with_changes(lpar=[cst.LeftParen(), *expr.lpar], rpar=[*expr.rpar, cst.RightParen()])


def _needs_parens_as_rhs(expr: cst.BaseExpression) -> bool:
  # Valid bare inside call parentheses, but not on the right of `=` or `:=`.
  if expr.lpar:
    return False
  return isinstance(expr, (cst.GeneratorExp, cst.NamedExpr))


class CallRewriter:
  """
  Parses and rewrites call sites using a shared fresh-name allocator.

  One rewriter (and one allocator) is used per module so that every
  temporary it produces is distinct from user names and from each other.

  Attributes:
      allocator (FreshNameAllocator): Source of hygienic temporary names.
  """

  def __init__(self, allocator: FreshNameAllocator) -> None:
    self.allocator = allocator

  def parse_call(self, node: cst.BaseExpression) -> CallExpression:
    """
    Validates a node against the ``path(args...)`` grammar.

    Args:
        node: The expression wrapped by the marker.

    Returns:
        CallExpression: The parsed call.

    Raises:
        UnsupportedSyntax: If the node is not a call, the callee is not a
            dotted identifier path, or an argument is starred.
    """
    if not isinstance(node, cst.Call):
      raise UnsupportedSyntax(EXPECTED_FORM, node)

    path = get_full_name(node.func) if isinstance(node.func, (cst.Name, cst.Attribute)) else ""
    if not path:
      raise UnsupportedSyntax(f"{EXPECTED_FORM}; the receiver path may only contain identifiers", node.func)

    args: List[Argument] = []
    for arg in node.args:
      if arg.star:
        raise UnsupportedSyntax(f"{EXPECTED_FORM}; unpacked arguments are not supported", arg)
      keyword = arg.keyword.value if arg.keyword else None
      args.append(Argument(node=arg, keyword=keyword))

    return CallExpression(node=node, receiver_path=tuple(path.split(".")), args=tuple(args))

  def rewrite(self, call: CallExpression) -> RewrittenBlock:
    """
    Binds each argument to a fresh temporary, in order.

    Args:
        call: A parsed call site.

    Returns:
        RewrittenBlock: Bindings plus the call using the temporaries.
    """
    bindings: List[TemporaryBinding] = []
    new_args: List[cst.Arg] = []

    for position, arg in enumerate(call.args):
      name = self.allocator.fresh()
      bindings.append(TemporaryBinding(name=name, value=arg.value, position=position, keyword=arg.keyword))
      # Keeps keyword, `=` spacing, commas and comments of the original argument.
      new_args.append(arg.node.with_changes(value=cst.Name(name)))

    return RewrittenBlock(bindings=tuple(bindings), call=call.node.with_changes(args=new_args))

  def to_expression(self, block: RewrittenBlock) -> cst.BaseExpression:
    """
    Renders a block as a single expression.

    With no bindings the call is only parenthesized.

    Args:
        block: The rewritten block.

    Returns:
        cst.BaseExpression: A tuple-and-index expression, or ``(call)``.
    """
    if not block.bindings:
      return _parenthesize(block.call)

    elements = []
    for binding in block.bindings:
      value = _parenthesize(binding.value) if _needs_parens_as_rhs(binding.value) else binding.value
      named = cst.NamedExpr(target=cst.Name(binding.name), value=value)
      elements.append(cst.Element(value=named, comma=cst.Comma(whitespace_after=cst.SimpleWhitespace(" "))))
    elements.append(cst.Element(value=block.call))

    sequence = cst.Tuple(elements=elements, lpar=[cst.LeftParen()], rpar=[cst.RightParen()])
    last = cst.UnaryOperation(operator=cst.Minus(), expression=cst.Integer("1"))
    return cst.Subscript(value=sequence, slice=[cst.SubscriptElement(slice=cst.Index(value=last))])

  def to_statements(self, block: RewrittenBlock) -> List[cst.SimpleStatementLine]:
    """
    Renders the bindings of a block as standalone assignment lines.

    The caller places these before the statement that holds `block.call`.
    Values spanning several lines are parenthesized, since they lose the
    enclosing call parentheses that made the line break legal.

    Args:
        block: The rewritten block.

    Returns:
        List[cst.SimpleStatementLine]: One ``name = value`` line per binding.
    """
    lines = []
    for binding in block.bindings:
      value = binding.value
      if _needs_parens_as_rhs(value) or (not value.lpar and "\n" in capture_node_source(value)):
        value = _parenthesize(value)
      assign = cst.Assign(targets=[cst.AssignTarget(target=cst.Name(binding.name))], value=value)
      lines.append(cst.SimpleStatementLine(body=[assign]))
    return lines
