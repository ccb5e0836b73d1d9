"""
Circle Game CLI - Command-line interface for the worksheet tools.

Usage:
    circle-game serve                       Run the API server
    circle-game analyze <image>             Extract words from a worksheet photo
    circle-game grid <words.json> -o OUT    Render a printable grid page
"""

import argparse
import json
import mimetypes
import sys


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Circle Game - Printable word grids from worksheets",
        prog="circle-game",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the API server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")
    serve_parser.add_argument("--reload", action="store_true", help="Reload on code changes")

    # Analyze command
    analyze_parser = subparsers.add_parser("analyze", help="Extract words from a worksheet photo")
    analyze_parser.add_argument("image", help="Path to a jpeg, png or webp photo")

    # Grid command
    grid_parser = subparsers.add_parser("grid", help="Render a printable grid page")
    grid_parser.add_argument("words_file", help="Path to a JSON word list")
    grid_parser.add_argument("--output", "-o", help="Output HTML file (default: stdout)")

    args = parser.parse_args()

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "analyze":
        cmd_analyze(args)
    elif args.command == "grid":
        cmd_grid(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_serve(args):
    """Run the API server with uvicorn."""
    import uvicorn

    if args.reload:
        uvicorn.run(
            "circle_game.api.app:create_app",
            host=args.host,
            port=args.port,
            reload=True,
            factory=True,
        )
        return

    from .api import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)


def cmd_analyze(args):
    """Send one photo through the extraction gateway and print the result."""
    from .config import Settings, configure_logging
    from .extraction import ExtractionError, ExtractionGateway, to_data_uri

    settings = Settings.from_env()
    configure_logging(settings.log_level)

    try:
        with open(args.image, "rb") as f:
            image_data = f.read()
    except FileNotFoundError:
        print(f"Error: File not found: {args.image}")
        sys.exit(1)

    content_type, _ = mimetypes.guess_type(args.image)
    data_uri = to_data_uri(image_data, content_type or "application/octet-stream")

    try:
        result = ExtractionGateway(settings).extract(data_uri)
    except ExtractionError as e:
        print(f"Error [{e.kind.code}]: {e.message}")
        sys.exit(1)

    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))


def cmd_grid(args):
    """Render a JSON word list as a printable grid page."""
    from .render import render_grid_html
    from .workflow import JsonImportError, parse_word_list

    try:
        with open(args.words_file, "rb") as f:
            draft = parse_word_list(f.read())
    except FileNotFoundError:
        print(f"Error: File not found: {args.words_file}")
        sys.exit(1)
    except JsonImportError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if not draft.words:
        print("Error: Please add at least one word")
        sys.exit(1)

    page = render_grid_html(draft.title, draft.words)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(page)
        print(f"Wrote {len(draft.words)} words to {args.output}")
    else:
        print(page)


if __name__ == "__main__":
    main()
