"""
Command-line interface for coverpack.

Usage:
    coverpack render --template pack/ --payload doc.json --output cover.pdf
    coverpack publish --template pack/ --payload doc.json --body body.pdf --output final.pdf
    coverpack info --template pack/
"""

import argparse
import json
import sys
from pathlib import Path

from rich.console import Console

from .config import OverflowPolicy, RenderOptions, Settings
from .engine.render_context import FooterStamp
from .exceptions import CoverpackError
from .utils.logger import configure_logging
from .utils.rich_logger import print_table, setup_logging


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="coverpack",
        description="coverpack - template driven cover sheets for compliance documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  coverpack render -t templates/default -p document.json -o cover.pdf
  coverpack render -t templates/default -p document.json --hash <sha256> --timestamp 2024-01-01T00:00:00Z
  coverpack publish -t templates/default -p document.json --body body.pdf -o final.pdf
  coverpack info -t templates/default
  coverpack version

Environment:
  COVERPACK_TEMPLATE_PATH  default template pack directory
  COVERPACK_LOG_LEVEL      default log level
  COVERPACK_LOG_FILE       also log to this file
        """,
    )
    parser.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Log level")
    parser.add_argument("--no-color", action="store_true", help="Plain log lines instead of rich console output")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    render_parser = subparsers.add_parser("render", help="Render the cover PDF")
    _add_template_arguments(render_parser)
    render_parser.add_argument("-o", "--output", help="Output PDF (default: payload name with .pdf)")
    render_parser.add_argument("--hash", dest="hash_sha256", default="", help="SHA-256 printed in the footer")
    render_parser.add_argument("--timestamp", default="", help="Timestamp printed in the footer")
    render_parser.add_argument("--serial", default="", help="Timestamp serial printed in the footer")
    render_parser.add_argument("--total-pages", type=int, help="Total pages of the final document")

    publish_parser = subparsers.add_parser("publish", help="Render the cover, stamp and merge the body")
    _add_template_arguments(publish_parser)
    publish_parser.add_argument("--body", help="Body PDF appended after the cover")
    publish_parser.add_argument("-o", "--output", help="Output PDF (default: payload name with .pdf)")
    publish_parser.add_argument("--timestamp", default="", help="Timestamp to print after hashing")
    publish_parser.add_argument("--serial", default="", help="Timestamp serial to print after hashing")

    info_parser = subparsers.add_parser("info", help="Show template pack information")
    info_parser.add_argument("-t", "--template", help="Template pack directory")
    info_parser.add_argument("--json", action="store_true", help="Output as JSON")

    subparsers.add_parser("version", help="Show version information")
    return parser


def _add_template_arguments(sub: argparse.ArgumentParser) -> None:
    sub.add_argument("-t", "--template", help="Template pack directory (default: $COVERPACK_TEMPLATE_PATH)")
    sub.add_argument("-p", "--payload", required=True, help="Payload JSON file")
    sub.add_argument("--table-order", help="Comma separated table ids (default: manifest order)")
    sub.add_argument(
        "--overflow",
        choices=[policy.value for policy in OverflowPolicy],
        default=OverflowPolicy.DRAW.value,
        help="Unit taller than a page: draw past the margin or fail (default: draw)",
    )


def _template_root(args, settings: Settings) -> Path:
    root = Path(args.template) if args.template else settings.template_path
    if root is None:
        raise CoverpackError("No template pack given", "use --template or COVERPACK_TEMPLATE_PATH")
    return root


def _load_payload(path: str):
    payload_path = Path(path)
    if not payload_path.exists():
        raise CoverpackError("File not found", str(payload_path))
    try:
        return json.loads(payload_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise CoverpackError("Payload is not valid JSON", str(exc)) from exc


def _options(args) -> RenderOptions:
    order = tuple(part.strip() for part in args.table_order.split(",") if part.strip()) if args.table_order else None
    return RenderOptions(table_order=order, overflow_policy=OverflowPolicy(args.overflow))


def _output_path(args) -> Path:
    return Path(args.output) if args.output else Path(args.payload).with_suffix(".pdf")


def cmd_render(args, settings: Settings) -> int:
    """Handle render command."""
    from .template_loader import load_template

    pack = load_template(_template_root(args, settings))
    payload = _load_payload(args.payload)
    options = _options(args)
    options.total_pages = args.total_pages

    stamp = None
    if args.hash_sha256 or args.timestamp or args.serial:
        stamp = FooterStamp(args.hash_sha256, args.timestamp, args.serial)

    output_path = _output_path(args)
    data = pack.assembler(options).render(payload, stamp=stamp, output_path=output_path)
    print(f"✅ Saved: {output_path} ({len(data):,} bytes)")
    return 0


def cmd_publish(args, settings: Settings) -> int:
    """Handle publish command."""
    from .merger import DocumentPublisher
    from .template_loader import load_template

    pack = load_template(_template_root(args, settings))
    payload = _load_payload(args.payload)
    body = None
    if args.body:
        body_path = Path(args.body)
        if not body_path.exists():
            raise CoverpackError("File not found", str(body_path))
        body = body_path.read_bytes()

    timestamper = None
    if args.timestamp or args.serial:
        def timestamper(digest: str) -> FooterStamp:
            return FooterStamp(digest, args.timestamp, args.serial)

    result = DocumentPublisher(pack.assembler(_options(args))).publish(payload, body, timestamper)
    output_path = _output_path(args)
    output_path.write_bytes(result.pdf)

    print(f"✅ Saved: {output_path}")
    print(f"   Pages: {result.cover_pages} cover + {result.body_pages} body")
    print(f"   SHA-256: {result.sha256}")
    return 0


def cmd_info(args, settings: Settings, console=None) -> int:
    """Handle info command."""
    from .models.table import DynamicTable, FixedTable
    from .template_loader import TemplateLoader

    loader = TemplateLoader(_template_root(args, settings))
    layout = loader.load_layout()
    tables = loader.load_tables()

    info = {
        "template": str(loader.root),
        "page": f"{layout.page.width:g} x {layout.page.height:g} pt",
        "usable_width": f"{layout.usable_width:g} pt",
        "header_top": f"{layout.header_top:g} pt",
        "min_y": f"{layout.min_y:g} pt",
        "fonts": f"{layout.fonts.regular} / {layout.fonts.bold or layout.fonts.regular}",
    }
    for table in tables:
        kind = type(table).__name__
        if isinstance(table, (FixedTable, DynamicTable)):
            kind += f" ({len(table.header.columns)} columns)"
        info[f"table {table.id}"] = kind

    if args.json:
        print(json.dumps(info, indent=2, ensure_ascii=False))
    else:
        print_table(console, "Template pack", info)
    return 0


def cmd_version(args=None) -> int:
    """Handle version command."""
    from .version import __version__
    print(f"coverpack v{__version__}")
    print("Template driven cover sheets for compliance documents")
    return 0


def main(argv=None) -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args(argv)
    try:
        settings = Settings.from_env()
        level = args.log_level or settings.log_level
        if args.no_color:
            configure_logging(level, log_file=settings.log_file)
            console = Console(no_color=True, highlight=False)
        else:
            console = setup_logging(level, settings.log_file)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    commands = {"render": cmd_render, "publish": cmd_publish}
    try:
        if args.command in commands:
            return commands[args.command](args, settings)
        if args.command == "info":
            return cmd_info(args, settings, console)
        if args.command == "version":
            return cmd_version(args)
    except CoverpackError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
