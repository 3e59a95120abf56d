"""
Tests for config_groups module.
"""

from dataclasses import fields

import pytest
from spatial_hash2d.params import Sim2DParams
from spatial_hash2d.utils.config_groups import (
    GRID_KEYS,
    PARAM_HINTS,
    RADIUS_KEYS,
    RESET_KEYS,
    changed_keys,
    classify_changes,
    get_param_hint,
    is_grid_related,
    is_reset_required,
)


class TestConfigGroups:
    """Tests for configuration group constants and functions."""

    def test_reset_keys_contains_point_count(self):
        """Verify point_count requires reset."""
        assert "point_count" in RESET_KEYS

    def test_grid_keys_has_cell_size(self):
        assert "cell_size" in GRID_KEYS

    def test_groups_are_disjoint(self):
        assert not (RESET_KEYS & GRID_KEYS)
        assert not (RESET_KEYS & RADIUS_KEYS)
        assert not (GRID_KEYS & RADIUS_KEYS)

    def test_every_param_has_a_hint(self):
        """Verify PARAM_HINTS covers every field."""
        assert set(PARAM_HINTS) == {f.name for f in fields(Sim2DParams)}

    def test_unknown_hint(self):
        assert get_param_hint("nonexistent") == ""

    def test_predicates(self):
        assert is_reset_required("seed")
        assert not is_reset_required("cell_size")
        assert is_grid_related("key_mode")
        assert not is_grid_related("point_size")


class TestClassifyChanges:
    def test_changed_keys(self):
        old = Sim2DParams()
        new = Sim2DParams(cell_size=25.0, grid_visible=False)
        assert changed_keys(old, new) == {"cell_size", "grid_visible"}

    def test_no_change(self):
        assert classify_changes(changed_keys(Sim2DParams(), Sim2DParams())) is None

    @pytest.mark.parametrize(
        "keys,expected",
        [
            ({"point_count", "cell_size"}, "reset"),
            ({"cell_size", "initial_radius"}, "grid"),
            ({"min_radius"}, "radius"),
            ({"grid_visible", "font_size"}, "view"),
        ],
    )
    def test_strongest_action_wins(self, keys, expected):
        assert classify_changes(keys) == expected
