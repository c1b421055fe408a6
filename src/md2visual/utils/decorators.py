#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2visual/utils/decorators.py
"""Utility decorators for md2visual components.

Heavy third-party packages (mistune, Pygments, Pillow) are imported lazily
inside the functions that need them. The decorators here check that those
packages are present before the function body runs, and time operations when
DEBUG logging is enabled.

"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Generator, List, Tuple

from md2visual.exceptions import DependencyError
from md2visual.utils import packages


def requires_dependencies(component_name: str, requirements: List[Tuple[str, str, str]]) -> Callable:
    """Check required dependencies and versions before calling the wrapped function.

    Parameters
    ----------
    component_name : str
        Name used in the error message (e.g. "markdown parser", "highlighter")
    requirements : list of tuple
        (install_name, import_name, version_spec) triples, for example
        ``[("Pygments", "pygments", ">=2.15.0")]``

    Returns
    -------
    Callable
        Decorated function

    Raises
    ------
    DependencyError
        If any required package is missing or has an incompatible version

    Examples
    --------
        >>> @requires_dependencies("highlighter", [("Pygments", "pygments", "")])
        ... def lex(source):
        ...     import pygments
        ...     ...

    """

    def decorator(method: Callable) -> Callable:
        @wraps(method)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            missing, mismatches, original_error = packages.find_unmet_requirements(requirements)
            if missing or mismatches:
                raise DependencyError(
                    component_name=component_name,
                    missing_packages=missing,
                    version_mismatches=mismatches,
                    original_import_error=original_error,
                ) from original_error
            return method(*args, **kwargs)

        return wrapper

    return decorator


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Generator[None, None, None]:
    """Log how long the enclosed block took, only when DEBUG is enabled.

    Parameters
    ----------
    logger : logging.Logger
        Logger to report through
    operation : str
        Description of the timed operation (e.g. "Compiling visual tree")

    Examples
    --------
        >>> with debug_timer(logger, "Compiling visual tree"):
        ...     result = compiler.compile(doc)

    """
    if logger.isEnabledFor(logging.DEBUG):
        start_time = time.perf_counter()
        yield
        elapsed = time.perf_counter() - start_time
        logger.debug(f"{operation} completed in {elapsed:.4f}s")
    else:
        yield
