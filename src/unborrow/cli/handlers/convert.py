"""
Convert Command Handler.

This module implements the logic for the `unborrow convert` command.
It orchestrates:
1. Configuration loading (pyproject.toml plus CLI overrides).
2. Rewriting of a single file or every ``.py`` file under a directory.
3. Output: stdout, a destination file/tree, in-place, or a unified diff.
4. A summary report of failures.
"""

from pathlib import Path
from typing import Dict, List, Optional

from rich.markup import escape
from rich.table import Table

from unborrow.config import RuntimeConfig
from unborrow.core.conversion_result import ConversionResult
from unborrow.core.engine import RewriteEngine
from unborrow.utils.console import (
  console,
  log_error,
  log_info,
  log_success,
  log_warning,
)
from unborrow.utils.node_diff import unified_source_diff


def handle_convert(
  input_path: Path,
  output_path: Optional[Path],
  in_place: bool,
  style: Optional[str],
  marker: Optional[str],
  prefix: Optional[str],
  keep_imports: bool,
  show_diff: bool,
) -> int:
  """
  Handles the 'convert' command execution.

  Args:
      input_path: Path to the source file or directory to rewrite.
      output_path: Where rewritten code should be saved (file or directory).
      in_place: Overwrite the input file(s).
      style: Override for the output style ("expression" / "statements").
      marker: Override for the marker name.
      prefix: Override for the temporary name prefix.
      keep_imports: If True, marker imports are never pruned.
      show_diff: Print a unified diff instead of (or in addition to writing) the code.

  Returns:
      int: Exit code (0 for success, 1 for failure).
  """
  if not input_path.exists():
    log_error(f"Input not found: [path]{escape(str(input_path))}[/path]")
    return 1

  try:
    config = RuntimeConfig.load(
      marker=marker,
      temp_prefix=prefix,
      style=style,
      prune_imports=False if keep_imports else None,
      search_path=input_path if input_path.is_dir() else input_path.parent,
    )
  except ValueError as e:
    log_error(f"Invalid configuration: {escape(str(e))}")
    return 1

  engine = RewriteEngine(config)

  if input_path.is_file():
    dest = input_path if in_place else output_path
    result = _convert_single_file(input_path, dest, engine, show_diff)
    return 0 if result.success else 1

  if not (output_path or in_place or show_diff):
    log_error("Directory conversion requires --out, --in-place or --diff.")
    return 1

  py_files = sorted(input_path.rglob("*.py"))
  if not py_files:
    log_warning(f"No .py files found in {escape(str(input_path))}")
    return 0

  batch_results: Dict[str, ConversionResult] = {}
  log_info(f"Processing {len(py_files)} files from [path]{escape(str(input_path))}[/path]...")

  for src_file in py_files:
    rel_path = src_file.relative_to(input_path)
    if in_place:
      dest_file: Optional[Path] = src_file
    elif output_path:
      dest_file = output_path / rel_path
    else:
      dest_file = None

    batch_results[str(rel_path)] = _convert_single_file(src_file, dest_file, engine, show_diff, quiet=True)

  _print_batch_summary(batch_results)
  return 0 if all(r.success for r in batch_results.values()) else 1


def _convert_single_file(
  input_path: Path,
  output_path: Optional[Path],
  engine: RewriteEngine,
  show_diff: bool,
  quiet: bool = False,
) -> ConversionResult:
  """
  Rewrites one file.

  With neither an output path nor ``show_diff`` the code is printed to stdout.

  Args:
      input_path: Source file path.
      output_path: Destination file path (may equal `input_path`).
      engine: Configured engine.
      show_diff: Print a unified diff.
      quiet: Suppress the stdout fallback (batch mode).

  Returns:
      ConversionResult: Result object containing status and code.
  """
  try:
    code = input_path.read_text(encoding="utf-8")
  except (OSError, UnicodeDecodeError) as e:
    log_error(f"Failed to read {escape(str(input_path))}: {escape(str(e))}")
    return ConversionResult(success=False, errors=[str(e)])

  result = engine.run(code)
  if not result.success:
    for err in result.errors:
      log_error(f"[path]{escape(str(input_path))}[/path]: {escape(err)}")
    return result

  if show_diff:
    diff = unified_source_diff(code, result.code, str(input_path))
    if diff:
      print(diff, end="")

  if output_path:
    if output_path == input_path and result.code == code:
      return result
    try:
      output_path.parent.mkdir(parents=True, exist_ok=True)
      output_path.write_text(result.code, encoding="utf-8")
    except OSError as e:
      log_error(f"Failed to write {escape(str(output_path))}: {escape(str(e))}")
      return ConversionResult(code=result.code, success=False, errors=[str(e)], sites=result.sites)
    log_success(
      f"Rewrote {result.rewrites} call site(s): [path]{escape(str(input_path))}[/path] -> "
      f"[path]{escape(str(output_path))}[/path]"
    )
  elif not show_diff and not quiet:
    print(result.code, end="")

  return result


def _print_batch_summary(results: Dict[str, ConversionResult]) -> None:
  """
  Renders a summary table of rewrite results to the console.

  Args:
      results: Dictionary mapping filenames to conversion results.
  """
  total = len(results)
  rewritten = sum(r.rewrites for r in results.values())
  failures: List[str] = [name for name, r in results.items() if not r.success]

  if not failures:
    log_success(f"Batch Complete: {total} files processed, {rewritten} call sites rewritten.")
    return

  table = Table(title="Rewrite Report")
  table.add_column("File", style="cyan")
  table.add_column("Status", justify="center")
  table.add_column("Issues", style="red")

  for filename in failures:
    res = results[filename]
    issues = "; ".join(res.errors) if res.errors else "Unknown Error"
    table.add_row(escape(filename), "❌ Failed", escape(issues))

  console.print(table)
  console.print(f"\n[bold]Summary:[/bold] {total - len(failures)} Passed, {len(failures)} Failed.")
