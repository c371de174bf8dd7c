"""
Orchestration Engine for the Rewrite.

`RewriteEngine` drives a single module through the pipeline:

1.  **Parsing**: source text into a LibCST module (wrapped for position metadata).
2.  **Scanning**: how the marker is spelled in this module, and which
    identifiers already exist (seeding the fresh-name allocator).
3.  **Rewriting**: `MarkerTransformer` replaces every marker call.
4.  **Import pruning**: `ImportFixer` drops marker imports left unused.

Failures never produce partial output: an unparseable module or an
unsupported marker site returns the input unchanged with ``success=False``.
"""

import logging
from typing import List, Optional, Tuple

import libcst as cst
from libcst.metadata import MetadataWrapper

from unborrow.config import RuntimeConfig
from unborrow.core.conversion_result import ConversionResult, SiteReport
from unborrow.core.errors import UnsupportedSyntax
from unborrow.core.import_fixer import ImportFixer
from unborrow.core.names import FreshNameAllocator
from unborrow.core.rewriter import CallRewriter
from unborrow.core.scanners import MarkerScanner
from unborrow.core.transformer import MarkerTransformer, RewriteSite

logger = logging.getLogger(__name__)


class RewriteEngine:
  """
  The main rewrite unit.

  Holds the configuration and applies the full pipeline to one module at a time.
  """

  def __init__(self, config: Optional[RuntimeConfig] = None) -> None:
    """
    Initializes the Engine.

    Args:
        config (RuntimeConfig, optional): The runtime configuration. Defaults are used if None.
    """
    self.config = config or RuntimeConfig()

  def rewrite_module(self, module: cst.Module) -> Tuple[cst.Module, List[RewriteSite], List[str]]:
    """
    Applies the rewrite and import pruning to a parsed module.

    Args:
        module: The module to transform.

    Returns:
        Tuple: The new module, the rewritten sites and the pruned imports.

    Raises:
        UnsupportedSyntax: If any marker site cannot be rewritten.
    """
    wrapper = MetadataWrapper(module)
    tree = wrapper.module

    scanner = MarkerScanner(self.config.marker)
    tree.visit(scanner)
    logger.debug("Marker spellings: %s", sorted(scanner.spellings))

    allocator = FreshNameAllocator.for_module(tree, self.config.temp_prefix)
    transformer = MarkerTransformer(self.config, CallRewriter(allocator), scanner.spellings)
    new_tree = wrapper.visit(transformer)

    removed: List[str] = []
    if self.config.prune_imports and transformer.sites:
      fixer = ImportFixer(self.config.marker, new_tree)
      new_tree = new_tree.visit(fixer)
      removed = fixer.removed

    return new_tree, transformer.sites, removed

  def run(self, code: str) -> ConversionResult:
    """
    Executes the pipeline on a source string.

    Args:
        code (str): Input source code.

    Returns:
        ConversionResult: The rewritten code, or the original code plus errors on failure.
    """
    try:
      tree = cst.parse_module(code)
    except cst.ParserSyntaxError as e:
      return ConversionResult(code=code, success=False, errors=[f"Parse error: {e}"])

    try:
      new_tree, sites, removed = self.rewrite_module(tree)
    except UnsupportedSyntax as e:
      logger.debug("Rewrite aborted: %s", e)
      return ConversionResult(code=code, success=False, errors=[str(e)])

    logger.debug("Rewrote %d call site(s)", len(sites))
    return ConversionResult(
      code=new_tree.code,
      sites=[SiteReport(line=s.line, original=s.original) for s in sites],
      removed_imports=removed,
    )
