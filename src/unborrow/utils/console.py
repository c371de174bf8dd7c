"""
Central Logging and Console Utilities.

All user-facing output goes through the standard `logging` library, rendered by
`rich`. The Rich console sits behind a proxy so tests (and embedding callers) can
redirect output into a buffer via `set_console` without re-importing anything.

Attributes:
    console (_ConsoleProxy): A global, stable reference to the active Rich Console.
"""

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

# Between INFO (20) and WARNING (30).
SUCCESS_LEVEL_NUM = 25
logging.addLevelName(SUCCESS_LEVEL_NUM, "SUCCESS")

logger = logging.getLogger("unborrow")

_THEME = Theme(
  {
    "logging.level.success": "green",
    "info": "dim cyan",
    "warning": "yellow",
    "error": "bold red",
    "success": "green",
    "path": "bold blue",
    "code": "bold magenta",
  }
)


class _ConsoleProxy:
  """
  Forwards printing to a swappable `rich.console.Console` backend.

  Swapping the backend also moves the `unborrow` logger's RichHandler onto the
  new console, so log records follow the redirect.

  Attributes:
      _backend (Console): The active Rich Console instance.
  """

  def __init__(self) -> None:
    self._backend: Console = Console(theme=_THEME)
    self._configure_logging()

  def set_backend(self, new_console: Console) -> None:
    """
    Injects a new Console backend and updates logging handlers.

    Args:
        new_console (Console): The new Rich Console instance to use.
    """
    self._backend = new_console
    self._configure_logging()

  def reset(self) -> None:
    """Resets the proxy to a fresh standard output console."""
    self._backend = Console(theme=_THEME)
    self._configure_logging()

  @property
  def backend(self) -> Console:
    """The currently active Rich console."""
    return self._backend

  def _configure_logging(self) -> None:
    for handler in list(logger.handlers):
      if isinstance(handler, RichHandler):
        logger.removeHandler(handler)

    rich_handler = RichHandler(
      console=self._backend,
      show_time=False,
      omit_repeated_times=False,
      show_path=False,
      markup=True,
      rich_tracebacks=True,
    )

    logger.setLevel(logging.INFO)
    logger.addHandler(rich_handler)
    logger.propagate = False

  def print(self, *args: Any, **kwargs: Any) -> None:
    """
    Forwards `print` calls to the active backend.

    Args:
        *args: Positional arguments for Rich print.
        **kwargs: Keyword arguments for Rich print.
    """
    self._backend.print(*args, **kwargs)

  def __getattr__(self, name: str) -> Any:
    return getattr(self._backend, name)


console = _ConsoleProxy()


def set_console(new_console: Console) -> None:
  """
  Redirects console output and log records to `new_console`.

  Args:
      new_console (Console): The configured Rich console to use globally.
  """
  console.set_backend(new_console)


def reset_console() -> None:
  """Resets logging and console to standard output."""
  console.reset()


def get_console() -> Console:
  """
  Retrieves the currently active console backend.

  Returns:
      Console: The active Rich Console.
  """
  return console.backend


def log_info(msg: str) -> None:
  """
  Logs an informational message.

  Args:
      msg (str): The message content. Can include rich markup like [bold].
  """
  logger.info(f"ℹ️  {msg}", extra={"markup": True})


def log_success(msg: str) -> None:
  """
  Logs a success message at the custom SUCCESS level.

  Args:
      msg (str): The message content.
  """
  logger.log(SUCCESS_LEVEL_NUM, f"✅ {msg}", extra={"markup": True})


def log_warning(msg: str) -> None:
  """
  Logs a warning message.

  Args:
      msg (str): The message content.
  """
  logger.warning(f"⚠️  {msg}", extra={"markup": True})


def log_error(msg: str) -> None:
  """
  Logs an error message.

  Args:
      msg (str): The message content.
  """
  logger.error(f"❌ {msg}", extra={"markup": True})
