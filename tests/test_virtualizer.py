"""
Tests for the row virtualizer.
"""

import pytest

from quakeview.virtualizer import EMPTY_WINDOW, RowVirtualizer


class TestWindow:
    def test_total_size_is_count_times_height(self):
        v = RowVirtualizer(row_count=10_000, viewport_extent=1000, row_height=50)
        assert v.total_size == 500_000
        assert v.max_offset == 499_000

    def test_initial_window_with_overscan(self):
        v = RowVirtualizer(row_count=10_000, viewport_extent=1000, row_height=50, overscan=5)
        window = v.window()
        assert window.start_index == 0
        assert window.end_index == 26
        assert [r.index for r in window.rows] == list(range(26))
        assert window.rows[3].start == 150
        assert window.rows[3].size == 50

    def test_window_without_overscan_covers_touching_rows(self):
        v = RowVirtualizer(row_count=100, viewport_extent=200, row_height=50, overscan=0)
        v.scroll_to_offset(100)
        window = v.window()
        assert (window.start_index, window.end_index) == (1, 7)

    def test_coverage_for_every_valid_offset(self):
        v = RowVirtualizer(row_count=500, viewport_extent=430, row_height=37, overscan=0)
        offsets = list(range(0, int(v.max_offset) + 1, 23)) + [v.max_offset]
        for offset in offsets:
            v.scroll_to_offset(offset)
            window = v.window()
            top, bottom = v.scroll_offset, v.scroll_offset + v.viewport_extent
            for i in range(v.row_count):
                start, end = i * 37, (i + 1) * 37
                if start < bottom and end > top:
                    assert i in window, (offset, i)

    def test_window_is_contiguous_and_ordered(self):
        v = RowVirtualizer(row_count=1000, viewport_extent=600, row_height=50)
        v.scroll_to_offset(12_345)
        window = v.window()
        indexes = [r.index for r in window.rows]
        assert indexes == list(range(window.start_index, window.end_index))
        assert window.start_index <= window.end_index

    def test_empty_row_set(self):
        v = RowVirtualizer(row_count=0)
        assert v.window() == EMPTY_WINDOW
        assert v.total_size == 0


class TestScrollToIndex:
    def test_center_alignment_brings_row_into_window(self):
        v = RowVirtualizer(row_count=10_000, viewport_extent=1000, row_height=50)

        assert v.scroll_to_index(500, align="center", behavior="smooth") is True

        assert v.scroll_offset == 24_525
        assert 500 in v.window()
        request = v.last_scroll_request
        assert (request.index, request.align, request.behavior) == (500, "center", "smooth")

    def test_start_and_end_alignment(self):
        v = RowVirtualizer(row_count=10_000, viewport_extent=1000, row_height=50)
        v.scroll_to_index(500, align="start")
        assert v.scroll_offset == 25_000
        v.scroll_to_index(500, align="end")
        assert v.scroll_offset == 24_050

    def test_auto_alignment_leaves_visible_row_alone(self):
        v = RowVirtualizer(row_count=10_000, viewport_extent=1000, row_height=50)
        v.scroll_to_offset(1000)
        v.scroll_to_index(25)
        assert v.scroll_offset == 1000

    def test_offset_clamped_at_end(self):
        v = RowVirtualizer(row_count=10_000, viewport_extent=1000, row_height=50)
        v.scroll_to_index(9_999, align="start")
        assert v.scroll_offset == v.max_offset
        assert 9_999 in v.window()

    @pytest.mark.parametrize("index", [-1, 10, 1_000])
    def test_out_of_range_is_silent_noop(self, index):
        v = RowVirtualizer(row_count=10, viewport_extent=100, row_height=50)
        v.scroll_to_offset(200)
        assert v.scroll_to_index(index, align="center") is False
        assert v.scroll_offset == 200
        assert v.last_scroll_request is None

    def test_invalid_alignment_raises(self):
        v = RowVirtualizer(row_count=10)
        with pytest.raises(ValueError):
            v.scroll_to_index(1, align="middle")
        with pytest.raises(ValueError):
            v.scroll_to_index(1, behavior="instant")


class TestRowCountChanges:
    def test_offset_kept_when_still_valid(self):
        v = RowVirtualizer(row_count=10_000, viewport_extent=1000, row_height=50)
        v.scroll_to_offset(20_000)
        v.set_row_count(5_000)
        assert v.scroll_offset == 20_000
        assert v.window().total_size == 250_000

    def test_offset_clamped_when_set_shrinks(self):
        v = RowVirtualizer(row_count=10_000, viewport_extent=1000, row_height=50)
        v.scroll_to_offset(20_000)
        v.set_row_count(100)
        assert v.scroll_offset == 4_000
        assert v.window().end_index == 100

    def test_shrinking_to_zero(self):
        v = RowVirtualizer(row_count=50, viewport_extent=200, row_height=50)
        v.scroll_to_offset(500)
        v.set_row_count(0)
        assert v.scroll_offset == 0
        assert v.window() == EMPTY_WINDOW


class TestFrameCoalescing:
    def test_many_scroll_events_one_recompute(self):
        v = RowVirtualizer(row_count=10_000, viewport_extent=1000, row_height=50)
        notifications = []
        v.subscribe(lambda new, old: notifications.append(new))

        for offset in range(0, 5_000, 250):
            v.on_scroll(offset)

        assert notifications == []
        assert v.has_pending_scroll
        assert v.scroll_offset == 0

        window = v.flush_frame()

        assert len(notifications) == 1
        assert v.scroll_offset == 4_750
        assert window == notifications[0]
        assert not v.has_pending_scroll

    def test_flush_without_pending_does_nothing(self):
        v = RowVirtualizer(row_count=100)
        before = v.window()
        assert v.flush_frame() is before

    def test_programmatic_scroll_supersedes_pending(self):
        v = RowVirtualizer(row_count=10_000, viewport_extent=1000, row_height=50)
        v.on_scroll(3_000)
        v.scroll_to_index(500, align="start")
        v.flush_frame()
        assert v.scroll_offset == 25_000


class TestValidation:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"row_height": 0},
            {"row_height": -5},
            {"overscan": -1},
            {"viewport_extent": -1},
            {"row_count": -1},
        ],
    )
    def test_invalid_arguments(self, kwargs):
        with pytest.raises(ValueError):
            RowVirtualizer(**kwargs)
