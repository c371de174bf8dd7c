"""
Tests for Runtime Configuration loading and validation.
"""

import pytest
from pydantic import ValidationError

from unborrow.config import RuntimeConfig
from unborrow.enums import OutputStyle


def test_defaults():
  config = RuntimeConfig()
  assert config.marker == "unborrow"
  assert config.temp_prefix == "_unborrow_arg_"
  assert config.style == OutputStyle.EXPRESSION
  assert config.prune_imports is True


@pytest.mark.parametrize("marker", ["not valid", "1st", "class", ""])
def test_invalid_marker(marker):
  with pytest.raises(ValidationError):
    RuntimeConfig(marker=marker)


@pytest.mark.parametrize("prefix", ["__tmp", "1x", "a-b"])
def test_invalid_prefix(prefix):
  with pytest.raises(ValidationError):
    RuntimeConfig(temp_prefix=prefix)


def test_style_from_string():
  assert RuntimeConfig(style="statements").style == OutputStyle.STATEMENTS


def test_load_from_pyproject(tmp_path):
  (tmp_path / "pyproject.toml").write_text(
    '[tool.unborrow]\nmarker = "pre"\nstyle = "statements"\nprune_imports = false\n',
    encoding="utf-8",
  )
  nested = tmp_path / "pkg" / "sub"
  nested.mkdir(parents=True)

  config = RuntimeConfig.load(search_path=nested)

  assert config.marker == "pre"
  assert config.style == OutputStyle.STATEMENTS
  assert config.prune_imports is False


def test_cli_overrides_pyproject(tmp_path):
  (tmp_path / "pyproject.toml").write_text(
    '[tool.unborrow]\nmarker = "pre"\nstyle = "statements"\nprune_imports = false\n',
    encoding="utf-8",
  )
  config = RuntimeConfig.load(marker="other", style="expression", prune_imports=True, search_path=tmp_path)
  assert config.marker == "other"
  assert config.style == OutputStyle.EXPRESSION
  assert config.prune_imports is True


def test_pyproject_without_section(tmp_path):
  (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")
  assert RuntimeConfig.load(search_path=tmp_path) == RuntimeConfig()


def test_invalid_toml(tmp_path):
  (tmp_path / "pyproject.toml").write_text("[tool.unborrow\n", encoding="utf-8")
  with pytest.raises(ValueError, match="Invalid TOML"):
    RuntimeConfig.load(search_path=tmp_path)


def test_invalid_value_in_pyproject(tmp_path):
  (tmp_path / "pyproject.toml").write_text('[tool.unborrow]\nstyle = "fancy"\n', encoding="utf-8")
  with pytest.raises(ValidationError):
    RuntimeConfig.load(search_path=tmp_path)
