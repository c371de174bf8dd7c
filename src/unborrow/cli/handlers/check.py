"""
Check Command Handler.

Implements `unborrow check`: runs the rewrite in memory over a file or
directory and reports which marker sites would be rewritten and which are
unsupported. Nothing is written to disk.
"""

from pathlib import Path
from typing import List, Optional

from rich.markup import escape
from rich.table import Table

from unborrow.config import RuntimeConfig
from unborrow.core.engine import RewriteEngine
from unborrow.utils.console import console, log_error, log_success, log_warning


def handle_check(input_path: Path, marker: Optional[str]) -> int:
  """
  Handles the 'check' command execution.

  Args:
      input_path: File or directory to scan.
      marker: Override for the marker name.

  Returns:
      int: 0 if every marker site is supported, 1 otherwise.
  """
  if not input_path.exists():
    log_error(f"Input not found: [path]{escape(str(input_path))}[/path]")
    return 1

  try:
    config = RuntimeConfig.load(
      marker=marker,
      search_path=input_path if input_path.is_dir() else input_path.parent,
    )
  except ValueError as e:
    log_error(f"Invalid configuration: {escape(str(e))}")
    return 1

  files: List[Path] = [input_path] if input_path.is_file() else sorted(input_path.rglob("*.py"))
  if not files:
    log_warning(f"No .py files found in {escape(str(input_path))}")
    return 0

  engine = RewriteEngine(config)
  table = Table(title="Marker Sites")
  table.add_column("Location", style="cyan")
  table.add_column("Status", justify="center")
  table.add_column("Detail")

  total_sites = 0
  failures = 0
  for path in files:
    try:
      code = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
      table.add_row(escape(str(path)), "❌", escape(str(e)))
      failures += 1
      continue

    result = engine.run(code)
    if not result.success:
      failures += 1
      for err in result.errors:
        table.add_row(escape(str(path)), "❌", escape(err))
      continue

    for site in result.sites:
      total_sites += 1
      table.add_row(escape(f"{path}:{site.line}"), "✅", escape(site.original))

  if total_sites or failures:
    console.print(table)

  if failures:
    log_error(f"{failures} file(s) contain unsupported marker sites.")
    return 1

  log_success(f"{total_sites} marker site(s) can be rewritten across {len(files)} file(s).")
  return 0
