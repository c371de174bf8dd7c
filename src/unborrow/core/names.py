"""
Hygienic Temporary Name Allocation.

A `FreshNameAllocator` lives for exactly one module rewrite. It is seeded with
every identifier already present in the module and hands out
``<prefix><n>`` names from a monotonically increasing counter, skipping anything
reserved. Each name it returns is reserved in turn, so nested and sibling
call sites never receive the same temporary.
"""

from typing import Iterable, Set

import libcst as cst

from unborrow.core.scanners import NameCollector


class FreshNameAllocator:
  """
  Counter-based gensym scoped to a single module.

  Attributes:
      prefix (str): Prefix of generated names.
      reserved (Set[str]): Names that must never be returned.
  """

  def __init__(self, prefix: str, reserved: Iterable[str] = ()) -> None:
    self.prefix = prefix
    self.reserved: Set[str] = set(reserved)
    self._counter = 0

  @classmethod
  def for_module(cls, module: cst.Module, prefix: str) -> "FreshNameAllocator":
    """
    Builds an allocator that avoids every identifier used in `module`.

    Args:
        module: The module about to be rewritten.
        prefix: Prefix of generated names.

    Returns:
        FreshNameAllocator: A seeded allocator.
    """
    collector = NameCollector()
    module.visit(collector)
    return cls(prefix, collector.names)

  def fresh(self) -> str:
    """
    Returns the next unused temporary name and reserves it.

    Returns:
        str: A name not previously seen in the module or returned by this allocator.
    """
    while True:
      candidate = f"{self.prefix}{self._counter}"
      self._counter += 1
      if candidate not in self.reserved:
        self.reserved.add(candidate)
        return candidate
