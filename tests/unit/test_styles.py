#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/unit/test_styles.py
"""Unit tests for style rules and style sheets."""

import pytest

from pdxdoc.styles import DEFAULT_RULES, StyleRule, StyleSheet


@pytest.mark.unit
class TestStyleRule:
    """Tests for StyleRule validation and scaling."""

    def test_defaults(self):
        rule = StyleRule()
        assert rule.font_size == 16.0
        assert not rule.bold

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"font_size": 0},
            {"line_height": -1},
            {"space_before": -2},
            {"color": "red"},
            {"alignment": "left"},
            {"font_weight": "heavy"},
        ],
    )
    def test_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            StyleRule(**kwargs)

    def test_scaled(self):
        rule = StyleRule(font_size=10, space_before=2, space_after=4, line_height=1.5)
        scaled = rule.scaled(2.0)
        assert scaled.font_size == 20
        assert scaled.space_before == 4
        assert scaled.space_after == 8
        assert scaled.line_height == 1.5

    def test_dict_round_trip_ignores_unknown_keys(self):
        rule = StyleRule(font_size=12, color="#112233", font_weight="bold")
        data = rule.to_dict()
        data["unknown"] = True
        assert StyleRule.from_dict(data) == rule


@pytest.mark.unit
class TestStyleSheet:
    """Tests for lookup fallback and snapshots."""

    def test_default_contains_builtin_rules(self):
        sheet = StyleSheet.default()
        assert sheet.resolve("heading1") == DEFAULT_RULES["heading1"]
        assert sheet.resolve("arabic").font_size == 18

    def test_unknown_key_falls_back_to_paragraph(self):
        sheet = StyleSheet(rules={"paragraph": StyleRule(font_size=11)})
        assert sheet.resolve("sidebar").font_size == 11

    def test_missing_key_falls_back_to_builtin(self):
        sheet = StyleSheet(rules={})
        assert sheet.resolve("code").monospace

    def test_snapshot_is_isolated_from_later_changes(self):
        sheet = StyleSheet.default()
        snapshot = sheet.snapshot()
        sheet.set_rule("paragraph", StyleRule(font_size=30))
        assert snapshot.get("paragraph").font_size == 16
        assert sheet.snapshot().get("paragraph").font_size == 30

    def test_snapshot_is_read_only(self):
        snapshot = StyleSheet.default().snapshot()
        with pytest.raises(TypeError):
            snapshot.rules["paragraph"] = StyleRule()

    def test_dict_round_trip(self):
        sheet = StyleSheet(rules={"paragraph": StyleRule(font_size=12)}, active_theme="comfort")
        assert StyleSheet.from_dict(sheet.to_dict()) == sheet

    def test_from_dict_rejects_bad_styles(self):
        with pytest.raises(ValueError):
            StyleSheet.from_dict({"styles": ["not", "a", "mapping"]})
