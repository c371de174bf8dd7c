"""
Import Pruning Transformer.

After the marker calls are rewritten, the import that brought the marker into
scope is usually dead. `ImportFixer` removes such aliases:

- ``from unborrow import unborrow [as x]`` loses the alias when ``x`` is unused.
- ``import unborrow [as x]`` loses the alias when ``x`` is unused.

A statement whose aliases are all removed is deleted. Anything still
referenced, and every unrelated import, is left untouched.

Usage:
    fixer = ImportFixer(marker="unborrow", module=rewritten_module)
    new_tree = rewritten_module.visit(fixer)
"""

from typing import Dict, List, Union

import libcst as cst

from unborrow.core.scanners import PACKAGE_NAME, MarkerUsageScanner, get_full_name


class ImportFixer(cst.CSTTransformer):
  """
  Removes marker imports that no longer have any usage in the module.
  """

  def __init__(self, marker: str, module: cst.Module) -> None:
    """
    Initializes the fixer.

    Args:
        marker: Name of the marker function inside the package.
        module: The already rewritten module, scanned for remaining usages.
    """
    self.marker = marker
    self._module = module
    self._usage_cache: Dict[str, bool] = {}
    self.removed: List[str] = []

  def _is_used(self, bound_name: str) -> bool:
    if bound_name not in self._usage_cache:
      scanner = MarkerUsageScanner(bound_name)
      self._module.visit(scanner)
      self._usage_cache[bound_name] = scanner.found
    return self._usage_cache[bound_name]

  def leave_Import(self, original_node: cst.Import, updated_node: cst.Import) -> Union[cst.Import, cst.RemovalSentinel]:
    kept = []
    for alias in updated_node.names:
      if get_full_name(alias.name) == PACKAGE_NAME:
        bound = alias.asname.name.value if alias.asname else PACKAGE_NAME
        if not self._is_used(bound):
          self.removed.append(f"import {PACKAGE_NAME}")
          continue
      kept.append(alias)

    return self._rebuild(updated_node, kept)

  def leave_ImportFrom(
    self, original_node: cst.ImportFrom, updated_node: cst.ImportFrom
  ) -> Union[cst.ImportFrom, cst.RemovalSentinel]:
    if updated_node.relative or updated_node.module is None:
      return updated_node
    if get_full_name(updated_node.module) != PACKAGE_NAME:
      return updated_node
    if isinstance(updated_node.names, cst.ImportStar):
      return updated_node

    kept = []
    for alias in updated_node.names:
      if alias.name.value == self.marker:
        bound = alias.asname.name.value if alias.asname else self.marker
        if not self._is_used(bound):
          self.removed.append(f"from {PACKAGE_NAME} import {self.marker}")
          continue
      kept.append(alias)

    return self._rebuild(updated_node, kept)

  @staticmethod
  def _rebuild(
    node: Union[cst.Import, cst.ImportFrom], kept: List[cst.ImportAlias]
  ) -> Union[cst.Import, cst.ImportFrom, cst.RemovalSentinel]:
    if len(kept) == len(node.names):
      return node
    if not kept:
      return cst.RemoveFromParent()

    # The last alias must not carry a trailing comma unless parenthesized.
    if not (isinstance(node, cst.ImportFrom) and node.lpar):
      kept[-1] = kept[-1].with_changes(comma=cst.MaybeSentinel.DEFAULT)
    return node.with_changes(names=kept)
