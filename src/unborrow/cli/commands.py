"""
CLI Command Handlers Facade.

Re-exports handlers from `unborrow.cli.handlers` so the dispatcher has a single
import location.
"""

from unborrow.cli.handlers.check import handle_check
from unborrow.cli.handlers.convert import handle_convert

__all__ = [
  "handle_check",
  "handle_convert",
]
