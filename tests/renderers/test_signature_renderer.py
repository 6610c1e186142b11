"""Tests for signature block rendering."""

from coverpack.config import BLOCK_SPACING
from coverpack.engine.render_context import Cursor
from coverpack.models.table import TableSet


def _group(blocks, margin_top=10):
    return TableSet.from_list([
        {"id": "signatures", "type": "signature_blocks", "margin_top": margin_top, "blocks": blocks}
    ]).get("signatures")


def _block(x, y, title, source="{{participants.author.name}}"):
    return {
        "x": x,
        "y": y,
        "width": 240,
        "rows": [
            {"text": title, "height": 20},
            {"source": source, "height": 30},
        ],
    }


class TestSignatureRenderer:
    """Test suite for SignatureRenderer."""

    def test_blocks_with_same_y_share_a_band(self, render_env, payload):
        group = _group([_block(0, 0, "Prepared by"), _block(260, 0, "Approved by"), _block(0, 80, "Released by")])
        env = render_env(payload)

        bands = env.signatures.bands(group, payload)

        assert [len(band.blocks) for band in bands] == [2, 1]
        assert [band.height for band in bands] == [50, 50]

    def test_bands_stack_with_spacing(self, render_env, payload):
        group = _group([_block(0, 0, "Prepared by"), _block(260, 0, "Approved by"), _block(0, 80, "Released by")])
        env = render_env(payload)
        cursor = env.pagination.start_page()

        end = env.signatures.render(group, payload, cursor)

        assert end == Cursor(0, 720 - 10 - 50 - BLOCK_SPACING - 50)
        texts = env.context.layout.pages[0].texts()
        assert texts.count("Ada Author") == 3

    def test_blocks_are_placed_at_their_x_offset(self, render_env, payload):
        group = _group([_block(0, 0, "Prepared by"), _block(260, 0, "Approved by")])
        env = render_env(payload)
        env.signatures.render(group, payload, env.pagination.start_page())

        stroker = env.context.stroker(Cursor(0, 0))
        assert stroker.has(50, 710, 290, 710)
        assert stroker.has(310, 710, 550, 710)

    def test_row_grows_for_long_name(self, render_env, payload):
        payload["participants"]["author"]["name"] = "Dr. Adalberta Maximiliana Constantinopla Author-Smythe " * 3
        group = _group([_block(0, 0, "Prepared by")])
        env = render_env(payload)

        band = env.signatures.bands(group, payload)[0]

        assert band.blocks[0].row_heights[0] == 20
        assert band.blocks[0].row_heights[1] > 30

    def test_band_moves_to_next_page_whole(self, render_env, payload):
        group = _group([_block(0, 0, "Prepared by"), _block(0, 80, "Released by")])
        env = render_env(payload)
        env.pagination.start_page()

        end = env.signatures.render(group, payload, Cursor(0, 100))

        assert env.context.page_count == 2
        assert "Prepared by" not in env.context.layout.pages[0].texts()
        # New page: header down to 720, continuation margin, two bands.
        assert end == Cursor(1, 720 - 10 - 50 - BLOCK_SPACING - 50)

    def test_columns_row(self, render_env, payload):
        group = _group([{
            "x": 0,
            "y": 0,
            "width": 240,
            "rows": [
                {"type": "columns", "height": 20, "columns": [
                    {"text": "Date", "width": 80},
                    {"source": "{{participants.author.date}}", "width": 160},
                ]},
            ],
        }])
        env = render_env(payload)
        env.signatures.render(group, payload, env.pagination.start_page())

        texts = env.context.layout.pages[0].texts()
        assert "Date" in texts
        assert "2024-01-10" in texts
        stroker = env.context.stroker(Cursor(0, 0))
        assert stroker.has(130, 690, 130, 710)
        assert stroker.has(290, 690, 290, 710)

    def test_empty_group(self, render_env, payload):
        env = render_env(payload)
        cursor = env.pagination.start_page()
        assert env.signatures.render(_group([]), payload, cursor) == cursor

    def test_oversized_band_stays_on_first_page(self, render_env, payload):
        payload["participants"]["author"]["name"] = "word " * 3000
        group = _group([_block(0, 0, "Prepared by")])
        env = render_env(payload)

        end = env.signatures.render(group, payload, env.pagination.start_page())

        assert env.context.page_count == 1
        assert end.page_index == 0
        assert "Prepared by" in env.context.layout.pages[0].texts()
        assert env.pagination.oversized == 1
