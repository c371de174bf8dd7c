"""
Runtime Marker.

`unborrow(...)` marks a call site for rewriting. Until the codemod runs, the
marker is an identity function: the wrapped call is evaluated as usual and its
result is returned, so marked source stays runnable.
"""

from typing import TypeVar

T = TypeVar("T")


def unborrow(value: T) -> T:
  """
  Returns `value` unchanged.

  Args:
      value: The result of the wrapped call.

  Returns:
      The same object.
  """
  return value
