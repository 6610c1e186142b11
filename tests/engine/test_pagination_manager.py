"""Tests for PaginationManager."""

import pytest
from unittest.mock import Mock

from coverpack.config import OverflowPolicy, RenderOptions
from coverpack.engine.pagination_manager import PaginationManager, PaginationState
from coverpack.engine.render_context import Cursor, RenderContext
from coverpack.engine.text_metrics import TextMetrics
from coverpack.exceptions import LayoutError


@pytest.fixture
def context(layout_config):
    return RenderContext(layout_config, {}, TextMetrics())


class TestPaginationManager:
    """Test suite for page breaking."""

    def test_start_page_runs_page_callback(self, context):
        on_page_start = Mock(side_effect=lambda cursor: cursor.down(40))
        manager = PaginationManager(context, on_page_start)

        cursor = manager.start_page()

        on_page_start.assert_called_once_with(Cursor(0, 760))
        assert cursor == Cursor(0, 720)
        assert context.page_count == 1

    def test_row_ending_on_min_y_fits(self, context):
        manager = PaginationManager(context)
        manager.start_page()
        cursor = Cursor(0, 160)

        assert context.min_y == 60
        assert manager.ensure_space(cursor, 100) == cursor
        assert manager.breaks == 0
        assert context.page_count == 1

    def test_one_point_more_breaks(self, context):
        manager = PaginationManager(context)
        manager.start_page()

        cursor = manager.ensure_space(Cursor(0, 160), 101)

        assert manager.breaks == 1
        assert context.page_count == 2
        assert cursor == Cursor(1, 760)

    def test_break_order(self, context):
        calls = []

        def header(cursor):
            calls.append(("header", cursor.page_index))
            return cursor.down(40)

        def continuation(cursor):
            calls.append(("continuation", cursor.page_index))
            return cursor.down(50)

        manager = PaginationManager(context, header)
        manager.start_page()
        calls.clear()

        cursor = manager.ensure_space(Cursor(0, 100), 80, continuation)

        assert calls == [("header", 1), ("continuation", 1)]
        assert cursor == Cursor(1, 670)
        assert manager.state == PaginationState.FLOWING

    def test_each_page_gets_a_fresh_stroker(self, context):
        manager = PaginationManager(context)
        first = manager.start_page()
        context.stroker(first)(0, 0, 10, 0)

        second = manager.ensure_space(Cursor(0, 70), 20)

        assert context.stroker(second) is not context.stroker(first)
        assert context.stroker(second)(0, 0, 10, 0) is True

    def test_oversized_unit_is_drawn_with_default_policy(self, context):
        manager = PaginationManager(context)
        first = manager.start_page()
        context.stroker(first)(50, 600, 550, 600)

        cursor = manager.ensure_space(Cursor(0, 500), 5000)

        assert cursor == Cursor(1, 760)
        assert manager.breaks == 1
        assert manager.oversized == 1
        assert context.page_count == 2

    def test_oversized_unit_never_breaks_twice(self, context):
        manager = PaginationManager(context)
        first = manager.start_page()
        context.stroker(first)(50, 600, 550, 600)
        cursor = manager.ensure_space(Cursor(0, 500), 5000)

        again = manager.ensure_space(cursor, 5000)

        assert again == cursor
        assert context.page_count == 2
        assert manager.oversized == 2

    def test_oversized_unit_raises_with_error_policy(self, layout_config):
        options = RenderOptions(overflow_policy=OverflowPolicy.ERROR)
        context = RenderContext(layout_config, {}, TextMetrics(), options)
        manager = PaginationManager(context)
        manager.start_page()

        with pytest.raises(LayoutError, match="does not fit"):
            manager.ensure_space(Cursor(0, 500), 5000, unit="row 1 of table t")

    def test_oversized_unit_stays_on_untouched_first_page(self, context):
        manager = PaginationManager(context, on_page_start=lambda cursor: cursor.down(40))
        top = manager.start_page()

        cursor = manager.ensure_space(top.down(10), 5000)

        assert cursor == Cursor(0, 710)
        assert manager.breaks == 0
        assert manager.oversized == 1
        assert context.page_count == 1

    def test_unit_that_fits_a_new_page_still_breaks(self, context):
        manager = PaginationManager(context)
        manager.start_page()

        cursor = manager.ensure_space(Cursor(0, 100), 200)

        assert cursor == Cursor(1, 760)
        assert manager.oversized == 0

    def test_drawing_ends_freshness(self, context):
        manager = PaginationManager(context)
        top = manager.start_page()
        assert manager.is_fresh(top, 5000)

        context.stroker(top)(50, 700, 550, 700)

        assert not manager.is_fresh(top, 5000)
