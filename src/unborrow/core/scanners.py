"""
AST Scanners for Marker and Identifier Detection.

These LibCST visitors run before the rewrite:

1.  `MarkerScanner` catalogs every spelling under which the marker is reachable
    in a module (bare name, aliased ``from`` import, attribute on an imported
    package).
2.  `NameCollector` records every identifier in the module so generated
    temporaries can avoid them.
"""

from typing import Set, Union

import libcst as cst

PACKAGE_NAME = "unborrow"


def get_full_name(node: Union[cst.Name, cst.Attribute]) -> str:
  """
  Recursively resolves a CST Name or Attribute chain to a dot-separated string.

  Args:
    node: The CST node representing the identifier.

  Returns:
    str: The dotted representation (e.g., "self.items.append").
    Returns an empty string if any segment is not a Name/Attribute.

  Example:
    >>> get_full_name(cst.Attribute(value=cst.Name("v"), attr=cst.Name("insert")))
    'v.insert'
  """
  if isinstance(node, cst.Name):
    return node.value
  elif isinstance(node, cst.Attribute):
    base = get_full_name(node.value)
    if not base:
      return ""
    return f"{base}.{node.attr.value}"
  return ""


class MarkerScanner(cst.CSTVisitor):
  """
  Collects the dotted spellings that invoke the marker.

  The configured marker name is always accepted, so modules that define their
  own identity wrapper (or rely on a star import) are still recognised.

  Logic:
    - ``from unborrow import unborrow`` -> ``unborrow``
    - ``from unborrow import unborrow as ub`` -> ``ub``
    - ``import unborrow`` -> ``unborrow.unborrow``
    - ``import unborrow as u`` -> ``u.unborrow``

  Attributes:
    marker (str): The configured marker name.
    spellings (Set[str]): Dotted names that call the marker.
  """

  def __init__(self, marker: str) -> None:
    self.marker = marker
    self.spellings: Set[str] = {marker}

  def visit_Import(self, node: cst.Import) -> None:
    for alias in node.names:
      if get_full_name(alias.name) != PACKAGE_NAME:
        continue
      bound = alias.asname.name.value if alias.asname else PACKAGE_NAME
      self.spellings.add(f"{bound}.{self.marker}")

  def visit_ImportFrom(self, node: cst.ImportFrom) -> None:
    if node.relative or node.module is None:
      return
    if get_full_name(node.module) != PACKAGE_NAME:
      return
    if isinstance(node.names, cst.ImportStar):
      return
    for alias in node.names:
      if alias.name.value != self.marker:
        continue
      if alias.asname:
        self.spellings.add(alias.asname.name.value)


class NameCollector(cst.CSTVisitor):
  """
  Records every identifier appearing anywhere in a module.

  Attribute names and keyword argument names are included. They cannot
  collide with locals, but reserving them keeps generated names visibly
  distinct from anything the user wrote.

  Attributes:
    names (Set[str]): All identifiers seen.
  """

  def __init__(self) -> None:
    self.names: Set[str] = set()

  def visit_Name(self, node: cst.Name) -> None:
    self.names.add(node.value)


class MarkerUsageScanner(cst.CSTVisitor):
  """
  Detects whether a bound name is still referenced outside import statements.

  Used by the `ImportFixer` to decide if a marker import can be pruned.
  Attribute access on the name counts as a usage; the attribute part of
  ``x.name`` does not.

  Attributes:
    target_name (str): The bound identifier to look for.
    found (bool): Set once a usage is found.
  """

  def __init__(self, target_name: str) -> None:
    self.target_name = target_name
    self.found = False

  def visit_Import(self, node: cst.Import) -> bool:
    return False

  def visit_ImportFrom(self, node: cst.ImportFrom) -> bool:
    return False

  def visit_Attribute(self, node: cst.Attribute) -> bool:
    # Only the value side of `a.b` can reference a binding.
    node.value.visit(self)
    return False

  def visit_Name(self, node: cst.Name) -> None:
    if node.value == self.target_name:
      self.found = True
