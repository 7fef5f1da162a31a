"""
Unit tests for recent_edits.

Version: 1.0.0
"""
from datetime import datetime, timedelta, timezone

import pytest

from catalog_hub.utils.recent_edits import join_columns, merge_recent_fields, split_columns


pytestmark = pytest.mark.unit

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class TestMergeRecentFields:

    def test_first_edit_opens_window(self):
        assert merge_recent_fields([], None, "cost_price", T0) == (["cost_price"], T0)

    def test_same_field_not_repeated(self):
        fields, anchor = merge_recent_fields(["notes"], T0, "notes", T0 + timedelta(seconds=5))
        assert fields == ["notes"]
        assert anchor == T0

    def test_boundary_is_inclusive(self):
        fields, _ = merge_recent_fields(["notes"], T0, "supplier", T0 + timedelta(seconds=60))
        assert fields == ["notes", "supplier"]

    def test_custom_window(self):
        fields, anchor = merge_recent_fields(["notes"], T0, "supplier", T0 + timedelta(seconds=11), window_seconds=10)
        assert fields == ["supplier"]
        assert anchor == T0 + timedelta(seconds=11)


class TestColumns:

    def test_split_ignores_blanks(self):
        assert split_columns(" item, ,amount_rmb ") == ["item", "amount_rmb"]

    def test_split_none(self):
        assert split_columns(None) == []

    def test_join(self):
        assert join_columns(["item", "person"]) == "item,person"
