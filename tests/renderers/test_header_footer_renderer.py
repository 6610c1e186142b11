"""Tests for the cover header, body header and footers."""

import pytest

from coverpack.engine.render_context import Cursor, FooterStamp, RenderContext
from coverpack.engine.text_metrics import TextMetrics
from coverpack.models.layout import LayoutConfig
from coverpack.renderers.cell_renderer import CellRenderer
from coverpack.renderers.header_footer_renderer import HeaderFooterRenderer


class TestHeader:
    """Test suite for header rendering."""

    def test_header_returns_cursor_below_rows(self, render_env, payload):
        env = render_env(payload)
        cursor = env.context.new_page()
        assert env.header_footer.render_header(cursor) == Cursor(0, 720)
        assert env.context.layout.pages[0].texts() == ["CP-001", "Quality Manual"]

    def test_header_row_grows_for_long_title(self, render_env, payload):
        payload["document"]["title"] = "Procedure for the control of documented information " * 6
        env = render_env(payload)
        row = env.context.config.header.rows[0]
        assert env.header_footer.row_height(row, payload) > 40

    def test_container_and_columns(self, layout_dict, payload):
        layout_dict["header"]["rows"] = [{
            "height": "auto",
            "columns": [
                {"type": "container", "width": 300, "rows": [
                    {"source": "{{document.title}}", "height": 20},
                    {"type": "columns", "height": 20, "columns": [
                        {"text": "Code", "width": 100},
                        {"source": "{{document.code}}", "width": 200},
                    ]},
                ]},
                {"type": "qr", "width": 200, "height": 40, "source": "https://example.com/doc"},
            ],
        }]
        config = LayoutConfig.from_dict(layout_dict)
        assert config.header.rows[0].base_height == 40

        context = RenderContext(config, payload, TextMetrics())
        renderer = HeaderFooterRenderer(context, CellRenderer(context))
        cursor = renderer.render_header(context.new_page())

        page = context.layout.pages[0]
        assert cursor.y == 760 - 40
        assert {"Quality Manual", "Code", "CP-001"} <= set(page.texts())
        qr = page.blocks_of("qr")
        assert len(qr) == 1
        assert qr[0].content == "https://example.com/doc"

    def test_body_header_is_truncated(self, render_env, payload):
        payload["document"]["title"] = "x" * 200
        env = render_env(payload)
        cursor = env.context.new_page()

        env.header_footer.render_body_header(cursor)

        block = env.context.layout.pages[0].blocks_of("text")[0]
        assert block.content == ("CP-001 - " + "x" * 200)[:50] + "..."
        assert block.frame.y == 760 - 30
        assert block.style["size"] == 9

    def test_body_header_short_title_centered(self, render_env, payload):
        env = render_env(payload)
        env.header_footer.render_body_header(env.context.new_page())

        block = env.context.layout.pages[0].blocks_of("text")[0]
        assert block.content == "CP-001 - Quality Manual"
        assert block.frame.x == pytest.approx((600 - block.frame.width) / 2)


class TestFooter:
    """Test suite for footers."""

    def test_page_numbers(self, render_env, payload):
        env = render_env(payload)
        assert env.header_footer.footer_text(2, 5) == "Page 2 of 5 | "

    def test_stamp_values(self, render_env, payload):
        env = render_env(payload, stamp=FooterStamp("a" * 56 + "12345678", "2024-01-01", "7"))
        assert env.header_footer.footer_text(1, 1) == "Page 1 of 1 | 12345678"

    def test_hash_source_defaults_to_short_tail(self, layout_dict, payload):
        layout_dict["footer"]["content"]["elements"] = [{"source": "{{document.hashSha256}}"}]
        payload["document"]["hashSha256"] = "f" * 56 + "deadbeef"
        config = LayoutConfig.from_dict(layout_dict)

        context = RenderContext(config, payload, TextMetrics())
        renderer = HeaderFooterRenderer(context, CellRenderer(context))
        assert renderer.footer_text(1, 1) == "deadbeef"

    def test_stamp_reaches_document_security(self, layout_dict, payload):
        layout_dict["footer"]["content"]["elements"] = [
            {"text": "Hash: "},
            {"source": "{{document.security.hashSha256}}"},
            {"text": " at "},
            {"source": "{{document.security.tsaTime}}"},
        ]
        payload["document"]["security"] = {"classification": "internal"}
        config = LayoutConfig.from_dict(layout_dict)
        stamp = FooterStamp("a" * 56 + "deadbeef", "2024-01-01T00:00:00Z", "42")

        context = RenderContext(config, payload, TextMetrics(), stamp=stamp)
        renderer = HeaderFooterRenderer(context, CellRenderer(context))

        assert renderer.footer_text(1, 1) == "Hash: deadbeef at 2024-01-01T00:00:00Z"
        security = context.footer_data()["document"]["security"]
        assert security["classification"] == "internal"
        assert security["tsaSerial"] == "42"
        assert "hashSha256" not in payload["document"]["security"]

    def test_right_aligned_footer_ends_at_right_margin(self, layout_dict, payload):
        layout_dict["footer"]["content"]["align"] = "right"
        config = LayoutConfig.from_dict(layout_dict)
        context = RenderContext(config, payload, TextMetrics())
        renderer = HeaderFooterRenderer(context, CellRenderer(context))
        context.new_page()

        renderer.render_footers()

        line = next(block for block in context.layout.pages[0].blocks_of("text") if block.content.startswith("Page"))
        assert line.frame.x + line.frame.width == pytest.approx(550)

    def test_footers_on_every_page(self, render_env, payload):
        env = render_env(payload)
        for _ in range(3):
            env.context.new_page()

        total = env.header_footer.render_footers()

        assert total == 3
        for index, page in enumerate(env.context.layout.pages, start=1):
            texts = page.texts()
            assert texts == [f"Page {index} of 3 |"] or texts == [f"Page {index} of 3 | "]
            footer = page.blocks_of("text")[0]
            assert footer.style["color"] == (0.3, 0.3, 0.3)
            assert footer.frame.y == 20
            assert len(page.blocks_of("line")) == 1
