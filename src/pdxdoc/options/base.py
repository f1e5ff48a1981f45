#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/options/base.py
"""Base classes for parser, layout and renderer options.

Options are frozen dataclasses. Each field carries ``help`` and
``importance`` metadata, and ``__post_init__`` validates ranges.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from pdxdoc.constants import DEFAULT_CREATOR


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Mixin providing frozen dataclass cloning."""

    def create_updated(self, **kwargs: Any) -> Self:
        """Create a new instance with updated field values.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            New instance with specified fields updated

        """
        return replace(self, **kwargs)


@dataclass(frozen=True)
class BaseParserOptions(CloneFrozenMixin):
    """Base class for parser options."""


@dataclass(frozen=True)
class BaseRendererOptions(CloneFrozenMixin):
    """Base class for all export backend options.

    Parameters
    ----------
    fail_on_resource_errors : bool, default=False
        Raise when an image cannot be loaded or embedded. When False, a
        placeholder box is drawn and a warning logged.
    creator : str or None, default "pdxdoc"
        Creator application name written into output metadata

    """

    fail_on_resource_errors: bool = field(
        default=False,
        metadata={
            "help": "Raise on unresolved or unsupported images instead of drawing placeholders",
            "importance": "advanced",
        },
    )
    creator: str | None = field(
        default=DEFAULT_CREATOR,
        metadata={
            "help": "Creator application name for document metadata. Set to None to disable.",
            "importance": "core",
        },
    )
