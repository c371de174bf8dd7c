"""
Runtime Configuration Store.

Settings are resolved in two layers: the ``[tool.unborrow]`` table of the nearest
``pyproject.toml`` and explicit overrides (CLI flags or keyword arguments).
"""

import keyword
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from unborrow.enums import OutputStyle

if sys.version_info >= (3, 11):
  import tomllib
else:
  import tomli as tomllib

DEFAULT_MARKER = "unborrow"
DEFAULT_TEMP_PREFIX = "_unborrow_arg_"


class RuntimeConfig(BaseModel):
  """
  Configuration container for the rewrite engine.
  """

  marker: str = Field(DEFAULT_MARKER, description="Name of the wrapper call that opts a call site into the rewrite.")
  temp_prefix: str = Field(DEFAULT_TEMP_PREFIX, description="Prefix for generated temporary names.")
  style: OutputStyle = Field(OutputStyle.EXPRESSION, description="How rewritten call sites are rendered.")
  prune_imports: bool = Field(True, description="Remove marker imports that are unused after rewriting.")

  @field_validator("marker")
  @classmethod
  def validate_marker(cls, v: str) -> str:
    """
    Ensures the marker is a plain identifier.

    Args:
        v (str): The marker name.

    Returns:
        str: The stripped marker name.

    Raises:
        ValueError: If the marker cannot be spelled as a Python name.
    """
    v_clean = v.strip()
    if not v_clean.isidentifier() or keyword.iskeyword(v_clean):
      raise ValueError(f"Marker must be a valid identifier, got '{v}'")
    return v_clean

  @field_validator("temp_prefix")
  @classmethod
  def validate_temp_prefix(cls, v: str) -> str:
    """
    Ensures generated names are valid identifiers outside name mangling.

    Names beginning with two underscores are mangled inside class bodies,
    which would make the binding and its use refer to different names
    when read back through ``globals()`` or ``vars()``.

    Args:
        v (str): The prefix.

    Returns:
        str: The validated prefix.

    Raises:
        ValueError: If ``<prefix>0`` is not an identifier or the prefix is dunder-like.
    """
    if not f"{v}0".isidentifier():
      raise ValueError(f"Temporary prefix must form valid identifiers, got '{v}'")
    if v.startswith("__"):
      raise ValueError(f"Temporary prefix must not start with '__' (class name mangling), got '{v}'")
    return v

  @classmethod
  def load(
    cls,
    marker: Optional[str] = None,
    temp_prefix: Optional[str] = None,
    style: Optional[str] = None,
    prune_imports: Optional[bool] = None,
    search_path: Optional[Path] = None,
  ) -> "RuntimeConfig":
    """
    Loads configuration from pyproject.toml and overrides with CLI arguments.

    Args:
        marker (Optional[str]): Override for the marker name.
        temp_prefix (Optional[str]): Override for the temporary prefix.
        style (Optional[str]): Override for the output style.
        prune_imports (Optional[bool]): Override for import pruning.
        search_path (Optional[Path]): Directory to start searching for TOML config.

    Returns:
        RuntimeConfig: The fully resolved configuration object.
    """
    start_dir = search_path or Path.cwd()
    toml_config, _ = _load_toml_settings(start_dir)

    final_marker = marker or toml_config.get("marker", DEFAULT_MARKER)
    final_prefix = temp_prefix or toml_config.get("temp_prefix", DEFAULT_TEMP_PREFIX)
    final_style = style or toml_config.get("style", OutputStyle.EXPRESSION.value)

    if prune_imports is not None:
      final_prune = prune_imports
    else:
      final_prune = toml_config.get("prune_imports", True)

    return cls(
      marker=final_marker,
      temp_prefix=final_prefix,
      style=final_style,
      prune_imports=final_prune,
    )


def _load_toml_settings(start_path: Path) -> Tuple[Dict[str, Any], Optional[Path]]:
  """
  Searches the directory and its parents for 'pyproject.toml' and extracts config.

  The nearest file wins, even when it has no ``[tool.unborrow]`` table.

  Args:
      start_path (Path): Directory to start search from.

  Returns:
      Tuple[Dict, Optional[Path]]: The config dict and the directory it was found in.

  Raises:
      ValueError: If the nearest pyproject.toml is not valid TOML.
  """
  current = start_path.resolve()

  for parent in [current, *current.parents]:
    toml_path = parent / "pyproject.toml"
    if toml_path.exists() and toml_path.is_file():
      try:
        with open(toml_path, "rb") as f:
          data = tomllib.load(f)
      except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {toml_path}: {e}") from e

      tool_section = data.get("tool", {})
      return tool_section.get("unborrow", {}), parent

  return {}, None
