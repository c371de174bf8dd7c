"""
Enumerations for unborrow.

This module defines the enumerations shared between the configuration layer,
the rewriter and the CLI.
"""

from enum import Enum


class OutputStyle(str, Enum):
  """
  Rendering strategy for a rewritten call site.

  EXPRESSION emits a single expression that can replace the call anywhere.
  STATEMENTS hoists the bindings into separate statements before the enclosing
  statement when the call is that statement's whole value, and falls back to
  EXPRESSION elsewhere.
  """

  EXPRESSION = "expression"
  STATEMENTS = "statements"
