"""
unborrow Package.

A source-to-source rewrite that evaluates every argument of a marked call into
a fresh temporary, in order, before the call itself is dispatched.

Usage
-----

Marking a call site
^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from unborrow import unborrow

    v = [1, 2, 3]
    unborrow(v.insert(len(v) - 1, v[0] + 41))

Until rewritten, ``unborrow`` is an identity function.

Rewriting
^^^^^^^^^

.. code-block:: python

    import unborrow as ub
    print(ub.convert("unborrow(v.insert(len(v) - 1, v[0] + 41))"))
    # (_unborrow_arg_0 := len(v) - 1, _unborrow_arg_1 := v[0] + 41, v.insert(_unborrow_arg_0, _unborrow_arg_1))[-1]

Advanced Usage (Engine)
^^^^^^^^^^^^^^^^^^^^^^^

.. code-block:: python

    from unborrow import RewriteEngine, RuntimeConfig, OutputStyle

    engine = RewriteEngine(RuntimeConfig(style=OutputStyle.STATEMENTS))
    res = engine.run(source)
    if res.success:
        print(res.code)
    else:
        print(f"Errors: {res.errors}")
"""

from typing import Optional, Union

from unborrow.config import DEFAULT_MARKER, RuntimeConfig
from unborrow.core.conversion_result import ConversionResult
from unborrow.core.engine import RewriteEngine
from unborrow.core.errors import UnsupportedSyntax
from unborrow.enums import OutputStyle
from unborrow.marker import unborrow

__version__ = "0.1.0"


def convert(
  code: str,
  style: Union[str, OutputStyle] = OutputStyle.EXPRESSION,
  marker: Optional[str] = None,
  prune_imports: bool = True,
) -> str:
  """
  Rewrites every marked call in a string of Python code.

  Args:
      code (str): The source code to rewrite.
      style (str | OutputStyle): "expression" (default) or "statements".
      marker (str, optional): Name of the marker call. Defaults to "unborrow".
      prune_imports (bool): Remove marker imports left unused.

  Returns:
      str: The rewritten source code.

  Raises:
      ValueError: If the code cannot be parsed or a marked call is unsupported.
  """
  config = RuntimeConfig(marker=marker or DEFAULT_MARKER, style=style, prune_imports=prune_imports)
  result = RewriteEngine(config).run(code)

  if not result.success:
    error_msg = "\n".join(result.errors)
    raise ValueError(f"Rewrite failed:\n{error_msg}")

  return result.code


__all__ = [
  "ConversionResult",
  "OutputStyle",
  "RewriteEngine",
  "RuntimeConfig",
  "UnsupportedSyntax",
  "convert",
  "unborrow",
  "__version__",
]
