#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/pdxdoc/styles.py
"""Style rules keyed by node kind.

A :class:`StyleSheet` maps keys such as ``"heading1"`` or ``"paragraph"`` to
frozen :class:`StyleRule` values. Lookups that miss fall back to the built-in
rule set, then to the ``paragraph`` rule. The layout engine takes one
:meth:`StyleSheet.snapshot` per pass so rules cannot change mid-layout.

"""

from __future__ import annotations

import re
from dataclasses import asdict, dataclass, field, fields
from types import MappingProxyType
from typing import Any, Mapping

from pdxdoc.constants import DEFAULT_THEME, Alignment, FontWeight

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")
_ALIGNMENTS = ("start", "end", "center", "justify")
_WEIGHTS = ("normal", "bold")


@dataclass(frozen=True)
class StyleRule:
    """Presentation settings for one node kind.

    Parameters
    ----------
    font_size : float
        Font size in layout units before zoom
    color : str, default "#000000"
        Text color as ``#rrggbb``
    alignment : {"start", "end", "center", "justify"}, default "start"
        Horizontal alignment relative to the block's base direction
    space_before, space_after : float
        Vertical spacing around the block
    line_height : float, default 1.4
        Line height as a multiple of the font size
    font_weight : {"normal", "bold"}, default "normal"
    monospace : bool, default False
        Use the monospaced face (code blocks)

    """

    font_size: float = 16.0
    color: str = "#000000"
    alignment: Alignment = "start"
    space_before: float = 0.0
    space_after: float = 10.0
    line_height: float = 1.4
    font_weight: FontWeight = "normal"
    monospace: bool = False

    def __post_init__(self) -> None:
        if self.font_size <= 0:
            raise ValueError(f"font_size must be positive, got {self.font_size}")
        if self.line_height <= 0:
            raise ValueError(f"line_height must be positive, got {self.line_height}")
        if self.space_before < 0 or self.space_after < 0:
            raise ValueError("spacing must be non-negative")
        if not _HEX_COLOR.match(self.color):
            raise ValueError(f"color must be '#rrggbb', got {self.color!r}")
        if self.alignment not in _ALIGNMENTS:
            raise ValueError(f"alignment must be one of {_ALIGNMENTS}, got {self.alignment!r}")
        if self.font_weight not in _WEIGHTS:
            raise ValueError(f"font_weight must be one of {_WEIGHTS}, got {self.font_weight!r}")

    @property
    def bold(self) -> bool:
        return self.font_weight == "bold"

    def scaled(self, zoom: float) -> "StyleRule":
        """Return a copy with sizes and spacing multiplied by ``zoom``."""
        return StyleRule(
            font_size=self.font_size * zoom,
            color=self.color,
            alignment=self.alignment,
            space_before=self.space_before * zoom,
            space_after=self.space_after * zoom,
            line_height=self.line_height,
            font_weight=self.font_weight,
            monospace=self.monospace,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StyleRule":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


DEFAULT_RULES: Mapping[str, StyleRule] = MappingProxyType(
    {
        "heading1": StyleRule(font_size=28, font_weight="bold", space_before=12, space_after=16, line_height=1.3),
        "heading2": StyleRule(
            font_size=22, font_weight="bold", color="#282828", space_before=10, space_after=12, line_height=1.3
        ),
        "heading3": StyleRule(font_size=18, font_weight="bold", space_before=8, space_after=10, line_height=1.3),
        "heading4": StyleRule(font_size=16, font_weight="bold", space_before=8, space_after=8, line_height=1.3),
        "heading5": StyleRule(font_size=14, font_weight="bold", space_before=6, space_after=6, line_height=1.3),
        "heading6": StyleRule(
            font_size=13, font_weight="bold", color="#444444", space_before=6, space_after=6, line_height=1.3
        ),
        "paragraph": StyleRule(font_size=16, space_after=10, line_height=1.8),
        "arabic": StyleRule(font_size=18, space_after=10, line_height=2.0),
        "list": StyleRule(font_size=16, space_after=4, line_height=1.6),
        "code": StyleRule(
            font_size=13, color="#1f1f1f", space_before=4, space_after=12, line_height=1.4, monospace=True
        ),
        "image": StyleRule(font_size=12, color="#666666", space_before=6, space_after=12),
        "divider": StyleRule(font_size=16, color="#dddddd", space_before=10, space_after=10),
        "page_break": StyleRule(font_size=12, color="#999999", space_before=20, space_after=20),
    }
)


@dataclass
class StyleSheet:
    """Named style rules plus the active theme name.

    Parameters
    ----------
    rules : dict of str to StyleRule, default = empty dict
        User overrides; missing keys fall back to :data:`DEFAULT_RULES`
    active_theme : str, default "default"
        Theme name carried through the document container untouched

    """

    rules: dict[str, StyleRule] = field(default_factory=dict)
    active_theme: str = DEFAULT_THEME

    @classmethod
    def default(cls) -> "StyleSheet":
        return cls(rules=dict(DEFAULT_RULES))

    def resolve(self, key: str) -> StyleRule:
        """Return the rule for ``key`` with fallback to built-in defaults."""
        if key in self.rules:
            return self.rules[key]
        if key in DEFAULT_RULES:
            return DEFAULT_RULES[key]
        return self.rules.get("paragraph", DEFAULT_RULES["paragraph"])

    def set_rule(self, key: str, rule: StyleRule) -> None:
        """Replace a rule between layout passes."""
        self.rules[key] = rule

    def snapshot(self) -> "ResolvedStyles":
        """Freeze the current rules for one layout pass."""
        merged = dict(DEFAULT_RULES)
        merged.update(self.rules)
        return ResolvedStyles(MappingProxyType(merged), self.rules.get("paragraph", DEFAULT_RULES["paragraph"]))

    def to_dict(self) -> dict[str, Any]:
        return {
            "styles": {key: rule.to_dict() for key, rule in sorted(self.rules.items())},
            "active_theme": self.active_theme,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StyleSheet":
        styles = data.get("styles", {}) or {}
        if not isinstance(styles, Mapping):
            raise ValueError("'styles' must be a mapping")
        return cls(
            rules={str(key): StyleRule.from_dict(value) for key, value in styles.items()},
            active_theme=str(data.get("active_theme", DEFAULT_THEME)),
        )


@dataclass(frozen=True)
class ResolvedStyles:
    """Read-only rule table used during a single layout pass."""

    rules: Mapping[str, StyleRule]
    fallback: StyleRule

    def get(self, key: str) -> StyleRule:
        return self.rules.get(key, self.fallback)


__all__ = ["StyleRule", "StyleSheet", "ResolvedStyles", "DEFAULT_RULES"]
