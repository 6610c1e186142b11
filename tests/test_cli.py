"""Tests for the command-line interface."""

import json

import pytest
from reportlab.pdfgen import canvas

from coverpack.cli import create_parser, main


@pytest.fixture
def payload_file(temp_dir, payload):
    path = temp_dir / "document.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("COVERPACK_TEMPLATE_PATH", "COVERPACK_LOG_LEVEL", "COVERPACK_LOG_FILE"):
        monkeypatch.delenv(name, raising=False)


class TestParser:
    """Test suite for argument parsing."""

    def test_render_arguments(self):
        args = create_parser().parse_args([
            "render", "-t", "pack", "-p", "doc.json", "-o", "out.pdf",
            "--hash", "abc", "--table-order", "a,b", "--overflow", "error",
        ])
        assert args.command == "render"
        assert args.template == "pack"
        assert args.hash_sha256 == "abc"
        assert args.table_order == "a,b"
        assert args.overflow == "error"

    def test_overflow_choices(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["render", "-p", "doc.json", "--overflow", "shrink"])

    def test_payload_is_required(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["render", "-t", "pack"])


class TestCommands:
    """Test suite for CLI commands."""

    def test_version(self, capsys):
        assert main(["version"]) == 0
        assert "coverpack v0.1.0" in capsys.readouterr().out

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "usage: coverpack" in capsys.readouterr().out

    def test_invalid_env_log_level(self, monkeypatch, capsys):
        monkeypatch.setenv("COVERPACK_LOG_LEVEL", "chatty")

        assert main(["version"]) == 1
        assert "Invalid log level: CHATTY" in capsys.readouterr().err

    def test_render(self, template_dir, payload_file, temp_dir, capsys):
        output = temp_dir / "cover.pdf"
        code = main(["render", "-t", str(template_dir), "-p", str(payload_file), "-o", str(output)])

        assert code == 0
        assert output.read_bytes().startswith(b"%PDF")
        assert "Saved" in capsys.readouterr().out

    def test_render_default_output_and_env_template(self, template_dir, payload_file, monkeypatch):
        monkeypatch.setenv("COVERPACK_TEMPLATE_PATH", str(template_dir))
        assert main(["--no-color", "--log-level", "WARNING", "render", "-p", str(payload_file)]) == 0
        assert payload_file.with_suffix(".pdf").exists()

    def test_render_missing_payload(self, template_dir, temp_dir, capsys):
        code = main(["render", "-t", str(template_dir), "-p", str(temp_dir / "nope.json")])
        assert code == 1
        assert "File not found" in capsys.readouterr().err

    def test_render_without_template(self, payload_file, capsys):
        assert main(["render", "-p", str(payload_file)]) == 1
        assert "No template pack given" in capsys.readouterr().err

    def test_render_invalid_json(self, template_dir, temp_dir, capsys):
        bad = temp_dir / "bad.json"
        bad.write_text("{", encoding="utf-8")
        assert main(["render", "-t", str(template_dir), "-p", str(bad)]) == 1
        assert "not valid JSON" in capsys.readouterr().err

    def test_publish(self, template_dir, payload_file, temp_dir, capsys):
        body = temp_dir / "body.pdf"
        pdf = canvas.Canvas(str(body), pagesize=(600, 800))
        pdf.drawString(100, 400, "Body")
        pdf.showPage()
        pdf.save()
        output = temp_dir / "final.pdf"

        code = main(["publish", "-t", str(template_dir), "-p", str(payload_file), "--body", str(body),
                     "-o", str(output), "--timestamp", "2024-01-01T00:00:00Z", "--serial", "5"])

        assert code == 0
        out = capsys.readouterr().out
        assert "1 cover + 1 body" in out
        assert "SHA-256:" in out
        assert output.read_bytes().startswith(b"%PDF")

    def test_info_json(self, template_dir, capsys):
        assert main(["info", "-t", str(template_dir), "--json"]) == 0
        info = json.loads(capsys.readouterr().out)
        assert info["min_y"] == "60 pt"
        assert info["table participants"] == "FixedTable (3 columns)"
        assert info["table signatures"] == "SignatureBlockGroup"

    def test_info_table(self, template_dir, capsys):
        assert main(["info", "-t", str(template_dir)]) == 0
        assert "Template pack" in capsys.readouterr().err
