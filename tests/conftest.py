"""
Pytest Configuration and Fixtures.

Includes:
- Syspath patching for local imports.
- Console isolation so log output never mixes with stdout assertions.
- Helpers to execute rewritten source.
"""

import io
import sys
from pathlib import Path
from typing import Any, Dict

import pytest
from rich.console import Console

# Add src to path so we can import 'unborrow' without installing it
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from unborrow.utils.console import reset_console, set_console  # noqa: E402


class ConsoleCapture:
  """Buffer-backed Rich console exposed to tests."""

  def __init__(self) -> None:
    self.buffer = io.StringIO()
    self.console = Console(file=self.buffer, width=400, force_terminal=False, color_system=None)

  @property
  def text(self) -> str:
    return self.buffer.getvalue()


@pytest.fixture(autouse=True)
def captured_console():
  """
  Routes the global console and the `unborrow` logger into a buffer
  for the duration of a test.
  """
  capture = ConsoleCapture()
  set_console(capture.console)
  yield capture
  reset_console()


@pytest.fixture
def run_code():
  """Executes source in a fresh namespace and returns that namespace."""

  def _run(code: str) -> Dict[str, Any]:
    namespace: Dict[str, Any] = {}
    exec(compile(code, "<rewritten>", "exec"), namespace)
    return namespace

  return _run
