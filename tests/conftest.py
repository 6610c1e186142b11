"""
Pytest configuration for coverpack
"""

import json
import logging
import sys
import tempfile
from pathlib import Path
from types import SimpleNamespace

import pytest

from coverpack.config import RenderOptions
from coverpack.engine.pagination_manager import PaginationManager
from coverpack.engine.render_context import RenderContext
from coverpack.engine.text_metrics import TextMetrics
from coverpack.models.layout import LayoutConfig
from coverpack.models.table import TableSet
from coverpack.renderers.cell_renderer import CellRenderer
from coverpack.renderers.header_footer_renderer import HeaderFooterRenderer
from coverpack.renderers.signature_renderer import SignatureRenderer
from coverpack.renderers.table_renderer import DynamicTableRenderer, FixedTableRenderer


@pytest.fixture(autouse=True)
def configure_logging():
    """Configure logging for tests to avoid file handler issues."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter('%(name)s - %(levelname)s - %(message)s'))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def layout_dict():
    """600x800 page, header top at 760, footer reservation up to 40 (min_y 60)."""
    return {
        "page": {"width": 600, "height": 800, "margins": {"top": 30, "bottom": 30, "left": 50, "right": 50}},
        "fonts": {"regular": "Helvetica", "bold": "Helvetica-Bold"},
        "header": {
            "y_position": 680,
            "height": 80,
            "rows": [
                {
                    "height": 40,
                    "columns": [
                        {"type": "text", "source": "{{document.code}}", "width": 250, "bold": True},
                        {"type": "text", "source": "{{document.title}}", "width": 250},
                    ],
                }
            ],
        },
        "footer": {
            "y_position": 20,
            "separator_line": {"enabled": True, "y_position": 40, "thickness": 0.5},
            "content": {
                "text_size": 7,
                "elements": [
                    {"text": "Page {v} of {h}"},
                    {"text": " | "},
                    {"source": "{{stamp.hash}}", "tail": 8},
                ],
            },
        },
    }


@pytest.fixture
def layout_config(layout_dict):
    return LayoutConfig.from_dict(layout_dict)


@pytest.fixture
def tables_list():
    return [
        {
            "id": "participants",
            "type": "fixed_table",
            "margin_top": 10,
            "title": {"text": "Participants", "height": 20},
            "header": {
                "height": 20,
                "columns": [
                    {"text": "Role", "width": 150},
                    {"text": "Name", "width": 200},
                    {"text": "Date", "width": 150},
                ],
            },
            "rows_config": {"height": 17, "text_size": 9},
            "rows": [
                {
                    "cells": [
                        {"text": "Author"},
                        {"source": "{{participants.author.name}}"},
                        {"source": "{{participants.author.date}}"},
                    ]
                },
                {
                    "cells": [
                        {"text": "Reviewer"},
                        {"source": "{{participants.reviewers[0].name}}"},
                        {"source": "{{participants.reviewers[0].date}}"},
                    ]
                },
            ],
        },
        {
            "id": "revisions",
            "type": "dynamic_table",
            "margin_top": 10,
            "title": {"text": "Revision history", "height": 20},
            "header": {
                "height": 20,
                "columns": [
                    {"text": "Version", "width": 100},
                    {"text": "Comment", "width": 400},
                ],
            },
            "data_source": "{{revisions}}",
            "row_template": {
                "height": 17,
                "cells": [
                    {"source": "{{version}}"},
                    {"source": "{{comment}}"},
                ],
            },
        },
        {
            "id": "signatures",
            "type": "signature_blocks",
            "margin_top": 10,
            "blocks": [
                {
                    "x": 0,
                    "y": 0,
                    "width": 240,
                    "rows": [
                        {"text": "Prepared by", "height": 20},
                        {"source": "{{participants.author.name}}", "height": 30},
                    ],
                },
                {
                    "x": 260,
                    "y": 0,
                    "width": 240,
                    "rows": [
                        {"text": "Approved by", "height": 20},
                        {"source": "{{participants.approver[0].name}}", "height": 30},
                    ],
                },
            ],
        },
    ]


@pytest.fixture
def table_set(tables_list):
    return TableSet.from_list(tables_list)


@pytest.fixture
def payload():
    return {
        "document": {
            "code": "CP-001",
            "title": "Quality Manual",
            "semanticVersion": "1.0.0",
        },
        "participants": {
            "author": {"name": "Ada Author", "date": "2024-01-10"},
            "reviewers": [
                {"name": "Rui Reviewer", "date": "2024-01-11"},
                {"name": "Rita Reviewer", "date": "2024-01-12"},
                {"name": "Rob Reviewer"},
            ],
            "approver": {"name": "Alma Approver", "date": "2024-01-13"},
        },
        "revisions": [
            {"version": "1.0", "comment": "Initial release"},
            {"version": "1.1", "comment": "Updated scope"},
        ],
    }


@pytest.fixture
def template_dir(temp_dir, layout_dict, tables_list):
    """Template pack written to disk."""
    (temp_dir / "HeaderFooter.json").write_text(json.dumps(layout_dict), encoding="utf-8")
    (temp_dir / "Manifest.json").write_text(json.dumps({"content": {"tables": tables_list}}), encoding="utf-8")
    return temp_dir


@pytest.fixture
def render_env(layout_config):
    """Factory for a render context with its renderers wired the way the assembler wires them."""

    def build(payload, options=None, stamp=None):
        context = RenderContext(layout_config, payload, TextMetrics(), options or RenderOptions(), stamp)
        cells = CellRenderer(context)
        header_footer = HeaderFooterRenderer(context, cells)
        pagination = PaginationManager(context, on_page_start=header_footer.render_header)
        return SimpleNamespace(
            context=context,
            cells=cells,
            header_footer=header_footer,
            pagination=pagination,
            fixed=FixedTableRenderer(context, pagination, cells),
            dynamic=DynamicTableRenderer(context, pagination, cells),
            signatures=SignatureRenderer(context, pagination, cells),
        )

    return build
