#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/md2visual/options/base.py
"""Base class for md2visual option objects.

All option classes are frozen dataclasses. A changed configuration is a new
object, built with :meth:`CloneFrozenMixin.create_updated`.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, fields, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin giving frozen option dataclasses a copy-with-changes method."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with the given fields replaced. ``__post_init__``
            validation runs again on the copy.

        Raises
        ------
        TypeError
            If a keyword does not name a field

        """
        return replace(self, **kwargs)

    @classmethod
    def field_help(cls) -> dict[str, str]:
        """Return the ``help`` text of every field that declares one.

        Returns
        -------
        dict[str, str]
            Mapping of field name to help text, in declaration order

        """
        return {f.name: f.metadata["help"] for f in fields(cls) if "help" in f.metadata}
