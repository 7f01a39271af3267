"""
Tests for the two-tier snapshot differ.
"""

import pytest

from nightswatch.services.snapshot_differ import has_changed


class TestHasChanged:
    def test_empty_to_empty_is_unchanged(self):
        assert has_changed(set(), set()) is False

    @pytest.mark.parametrize(
        "entries",
        [
            {"/a/x.txt"},
            {"/a/x.txt", "/a/y"},
            {"C:\\", "D:\\", "E:\\"},
        ],
    )
    def test_identical_sets_are_unchanged(self, entries):
        assert has_changed(set(entries), set(entries)) is False

    @pytest.mark.parametrize(
        "previous, current",
        [
            (set(), {"/a/x.txt"}),
            ({"/a/x.txt"}, set()),
            ({"/a/x.txt", "/a/y"}, {"/a/y"}),
            ({"C:\\", "D:\\"}, {"C:\\", "D:\\", "E:\\"}),
        ],
    )
    def test_different_cardinality_is_changed(self, previous, current):
        assert has_changed(previous, current) is True

    def test_same_count_replacement_is_changed(self):
        # Rename by replacement: one path deleted, another added
        previous = {"/a/report.txt", "/a/y"}
        current = {"/a/report-final.txt", "/a/y"}

        assert has_changed(previous, current) is True

    def test_order_does_not_matter(self):
        assert has_changed(["/a/1", "/a/2", "/a/3"], ["/a/3", "/a/1", "/a/2"]) is False

    def test_accepts_lists(self):
        assert has_changed(["/a/1", "/a/2"], ["/a/1", "/a/9"]) is True
