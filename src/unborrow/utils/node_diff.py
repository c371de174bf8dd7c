"""
Source Rendering Helpers.

Converts detached LibCST nodes to source text (for diagnostics) and whole
modules to unified diffs (for ``unborrow convert --diff``).
"""

import difflib

import libcst as cst

# A dummy module used as a context to render detached nodes.
_RENDER_CTX = cst.parse_module("")


def capture_node_source(node: cst.CSTNode) -> str:
  """
  Renders a LibCST node into its Python source code string representation.

  Args:
      node: The CST node to serialise.

  Returns:
      str: The Python code string.
  """
  return _RENDER_CTX.code_for_node(node)


def unified_source_diff(before: str, after: str, path: str = "<string>") -> str:
  """
  Produces a unified diff between two versions of a file.

  Args:
      before: Original source.
      after: Rewritten source.
      path: Display name used in the diff headers.

  Returns:
      str: The diff text, empty if the sources are identical.
  """
  lines = difflib.unified_diff(
    before.splitlines(keepends=True),
    after.splitlines(keepends=True),
    fromfile=f"a/{path}",
    tofile=f"b/{path}",
  )
  return "".join(lines)
