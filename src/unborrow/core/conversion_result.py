"""
Data structures representing the output of the rewrite pipeline.

This module defines the `ConversionResult` Pydantic model, which encapsulates
the generated code, any errors encountered, and the call sites that were
rewritten.
"""

from typing import List

from pydantic import BaseModel, Field


class SiteReport(BaseModel):
  """A rewritten marker call."""

  line: int = Field(description="1-based line of the marker call in the input.")
  original: str = Field(description="Source text of the marker call before rewriting.")


class ConversionResult(BaseModel):
  """
  Container for the results of a rewrite job.
  """

  code: str = Field(default="", description="The generated source code.")
  errors: List[str] = Field(default_factory=list, description="List of error messages encountered.")
  success: bool = Field(
    default=True,
    description="False if the input could not be parsed or a marker site was unsupported.",
  )
  sites: List[SiteReport] = Field(default_factory=list, description="Rewritten marker calls.")
  removed_imports: List[str] = Field(default_factory=list, description="Marker imports pruned after rewriting.")

  @property
  def rewrites(self) -> int:
    """Number of marker calls rewritten."""
    return len(self.sites)
