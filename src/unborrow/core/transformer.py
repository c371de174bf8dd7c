"""
Marker Transformer.

Walks a module, finds every call wrapped in the marker (``unborrow(...)``) and
replaces the wrapper with the rewritten block produced by `CallRewriter`.

Traversal is post-order, so a marker nested inside another marker's arguments
is rewritten first and then bound, as an ordinary argument expression, by the
outer rewrite.

Expression-style output relies on assignment expressions, which Python forbids
in two places; markers found there raise `UnsupportedSyntax`:

1.  Any comprehension iterable (``[x for x in <here>]``).
2.  Anywhere inside a comprehension whose nearest enclosing scope is a class body.

Temporaries bind in the enclosing scope. Directly in a class body they would
become class attributes (extra members of an ``Enum``), so markers that need
temporaries there raise `UnsupportedSyntax` too. Method and lambda bodies are
unaffected.
"""

from dataclasses import dataclass
from typing import List, Optional, Set, Union

import libcst as cst
from libcst.metadata import PositionProvider

from unborrow.config import RuntimeConfig
from unborrow.core.errors import UnsupportedSyntax
from unborrow.core.rewriter import CallRewriter, RewrittenBlock
from unborrow.core.scanners import get_full_name
from unborrow.enums import OutputStyle
from unborrow.utils.node_diff import capture_node_source

_HOISTABLE = (cst.Expr, cst.Assign, cst.AnnAssign, cst.Return)


@dataclass
class _Frame:
  """Scope bookkeeping for one module, class body or function body."""

  kind: str
  comprehension_depth: int = 0
  iterable_depth: int = 0


@dataclass(frozen=True)
class RewriteSite:
  """A marker call that was rewritten."""

  line: int
  original: str


class MarkerTransformer(cst.CSTTransformer):
  """
  LibCST Transformer replacing marker calls with rewritten blocks.

  Attributes:
      config (RuntimeConfig): Active configuration (style, marker).
      rewriter (CallRewriter): Rewriter sharing one allocator for the module.
      spellings (Set[str]): Dotted names that invoke the marker.
      sites (List[RewriteSite]): Rewritten call sites, in completion order.
  """

  METADATA_DEPENDENCIES = (PositionProvider,)

  def __init__(self, config: RuntimeConfig, rewriter: CallRewriter, spellings: Set[str]) -> None:
    super().__init__()
    self.config = config
    self.rewriter = rewriter
    self.spellings = spellings
    self.sites: List[RewriteSite] = []

    self._frames: List[_Frame] = [_Frame("module")]
    self._hoist_candidate: Optional[cst.Call] = None
    self._pending_block: Optional[RewrittenBlock] = None

  # --- Marker detection ---

  def _is_marker(self, node: cst.BaseExpression) -> bool:
    if not isinstance(node, cst.Call):
      return False
    if not isinstance(node.func, (cst.Name, cst.Attribute)):
      return False
    return get_full_name(node.func) in self.spellings

  def _line_of(self, node: cst.CSTNode) -> int:
    return self.get_metadata(PositionProvider, node).start.line

  # --- Scope tracking ---

  def _push(self, kind: str) -> None:
    self._frames.append(_Frame(kind))

  def _pop(self) -> None:
    self._frames.pop()

  def visit_ClassDef_body(self, node: cst.ClassDef) -> None:
    self._push("class")

  def leave_ClassDef_body(self, node: cst.ClassDef) -> None:
    self._pop()

  def visit_FunctionDef_body(self, node: cst.FunctionDef) -> None:
    self._push("function")

  def leave_FunctionDef_body(self, node: cst.FunctionDef) -> None:
    self._pop()

  def visit_Lambda_body(self, node: cst.Lambda) -> None:
    self._push("function")

  def leave_Lambda_body(self, node: cst.Lambda) -> None:
    self._pop()

  def _enter_comprehension(self, node: cst.CSTNode) -> None:
    self._frames[-1].comprehension_depth += 1

  def _leave_comprehension(self, original_node: cst.CSTNode, updated_node: cst.CSTNode) -> cst.CSTNode:
    self._frames[-1].comprehension_depth -= 1
    return updated_node

  visit_ListComp = _enter_comprehension
  visit_SetComp = _enter_comprehension
  visit_DictComp = _enter_comprehension
  visit_GeneratorExp = _enter_comprehension
  leave_ListComp = _leave_comprehension
  leave_SetComp = _leave_comprehension
  leave_DictComp = _leave_comprehension
  leave_GeneratorExp = _leave_comprehension

  def visit_CompFor_iter(self, node: cst.CompFor) -> None:
    self._frames[-1].iterable_depth += 1

  def leave_CompFor_iter(self, node: cst.CompFor) -> None:
    self._frames[-1].iterable_depth -= 1

  def _check_placement(self, node: cst.Call) -> None:
    frame = self._frames[-1]
    if frame.iterable_depth:
      raise UnsupportedSyntax(
        "assignment expressions cannot be used in a comprehension iterable", node
      ).located(self._line_of(node))
    if frame.comprehension_depth and frame.kind == "class":
      raise UnsupportedSyntax(
        "assignment expressions cannot be used in a comprehension inside a class body", node
      ).located(self._line_of(node))

  # --- Statement hoisting ---

  def visit_SimpleStatementLine(self, node: cst.SimpleStatementLine) -> Optional[bool]:
    self._hoist_candidate = None
    self._pending_block = None

    if self.config.style != OutputStyle.STATEMENTS or len(node.body) != 1:
      return True

    stmt = node.body[0]
    if isinstance(stmt, _HOISTABLE) and stmt.value is not None and self._is_marker(stmt.value):
      self._hoist_candidate = stmt.value
    return True

  def leave_SimpleStatementLine(
    self,
    original_node: cst.SimpleStatementLine,
    updated_node: cst.SimpleStatementLine,
  ) -> Union[cst.SimpleStatementLine, cst.FlattenSentinel]:
    block = self._pending_block
    self._hoist_candidate = None
    self._pending_block = None

    if block is None or not block.bindings:
      return updated_node

    lines = self.rewriter.to_statements(block)
    # Comments and blank lines above the statement move above its bindings.
    lines[0] = lines[0].with_changes(leading_lines=updated_node.leading_lines)
    return cst.FlattenSentinel([*lines, updated_node.with_changes(leading_lines=[])])

  # --- Rewriting ---

  def leave_Call(self, original_node: cst.Call, updated_node: cst.Call) -> cst.BaseExpression:
    if not self._is_marker(original_node):
      return updated_node

    line = self._line_of(original_node)
    if len(original_node.args) != 1 or original_node.args[0].keyword or original_node.args[0].star:
      raise UnsupportedSyntax(
        f"`{self.config.marker}` takes exactly one call expression", original_node
      ).located(line)

    self._check_placement(original_node)

    try:
      # Diagnostics quote the user's source, not partially rewritten inner markers.
      self.rewriter.parse_call(original_node.args[0].value)
    except UnsupportedSyntax as e:
      raise e.located(line)

    call = self.rewriter.parse_call(updated_node.args[0].value)
    if call.args and self._frames[-1].kind == "class":
      raise UnsupportedSyntax("temporaries would become class attributes", original_node).located(line)

    block = self.rewriter.rewrite(call)
    self.sites.append(RewriteSite(line=line, original=capture_node_source(original_node)))

    if original_node is self._hoist_candidate:
      self._pending_block = block
      expression = block.call
    else:
      expression = self.rewriter.to_expression(block)

    return expression.with_changes(
      lpar=[*updated_node.lpar, *expression.lpar], rpar=[*expression.rpar, *updated_node.rpar]
    )
