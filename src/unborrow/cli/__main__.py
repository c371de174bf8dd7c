"""
Main Entry Point for the unborrow CLI.

This module handles argument parsing and dispatches to specific command
handlers defined in `unborrow.cli.commands`.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from unborrow.cli import commands
from unborrow.enums import OutputStyle
from unborrow import __version__


def main(argv: Optional[List[str]] = None) -> int:
  """
  Main CLI entry point.

  Parses arguments via argparse and calls the appropriate handler function.

  Args:
      argv: Optional list of command line arguments (defaults to sys.argv).

  Returns:
      int: Exit code (0 for success, non-zero for failure).
  """
  parser = argparse.ArgumentParser(description="unborrow: evaluate call arguments into temporaries before the call")
  parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

  subparsers = parser.add_subparsers(dest="command", required=True)

  # --- Command: CONVERT ---
  cmd_conv = subparsers.add_parser("convert", help="Rewrite marked calls in a Python file or directory")
  cmd_conv.add_argument("path", type=Path, help="Input source file or directory")
  dest = cmd_conv.add_mutually_exclusive_group()
  dest.add_argument("--out", type=Path, help="Output destination (file or dir)")
  dest.add_argument("--in-place", action="store_true", help="Overwrite the input file(s)")
  cmd_conv.add_argument(
    "--style",
    choices=[s.value for s in OutputStyle],
    default=None,
    help="Rendering of rewritten calls (default: from toml, else expression)",
  )
  cmd_conv.add_argument("--marker", default=None, help="Name of the marker call (default: unborrow)")
  cmd_conv.add_argument("--prefix", default=None, help="Prefix for generated temporaries")
  cmd_conv.add_argument(
    "--keep-imports",
    action="store_true",
    help="Do not remove marker imports after rewriting",
  )
  cmd_conv.add_argument("--diff", action="store_true", help="Print a unified diff of the changes")

  # --- Command: CHECK ---
  cmd_check = subparsers.add_parser("check", help="Report marked calls without writing anything")
  cmd_check.add_argument("path", type=Path, help="Input source file or directory")
  cmd_check.add_argument("--marker", default=None, help="Name of the marker call (default: unborrow)")

  args = parser.parse_args(argv)

  if args.command == "convert":
    return commands.handle_convert(
      args.path,
      args.out,
      args.in_place,
      args.style,
      args.marker,
      args.prefix,
      args.keep_imports,
      args.diff,
    )

  elif args.command == "check":
    return commands.handle_check(args.path, args.marker)

  return 1


if __name__ == "__main__":
  sys.exit(main())
