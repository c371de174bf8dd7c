"""
Transform-time Errors.

The rewriter has exactly one failure mode: a marked call site does not match the
supported call grammar. It is raised as ``UnsupportedSyntax`` and is never
recovered from inside the transform; no partial output is produced.
"""

from typing import Optional

import libcst as cst

from unborrow.utils.node_diff import capture_node_source

EXPECTED_FORM = "expected a call of the form `receiver.method(args...)`"


class UnsupportedSyntax(Exception):
  """
  Raised when a marked call site cannot be rewritten.

  Attributes:
      reason (str): Human-readable description of the unsupported construct.
      fragment (str): Source text of the offending node (may be empty).
      line (Optional[int]): 1-based line of the marker call, once known.
  """

  def __init__(self, reason: str, node: Optional[cst.CSTNode] = None, line: Optional[int] = None) -> None:
    self.reason = reason
    self.fragment = capture_node_source(node).strip() if node is not None else ""
    self.line = line
    super().__init__(reason)

  def located(self, line: int) -> "UnsupportedSyntax":
    """
    Attaches the line of the enclosing marker call if none is set yet.

    Args:
        line: 1-based source line.

    Returns:
        UnsupportedSyntax: This exception, for use in ``raise``.
    """
    if self.line is None:
      self.line = line
    return self

  def __str__(self) -> str:
    where = f"line {self.line}: " if self.line is not None else ""
    if self.fragment:
      return f"{where}unsupported syntax `{self.fragment}`: {self.reason}"
    return f"{where}unsupported syntax: {self.reason}"
