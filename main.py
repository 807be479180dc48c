"""
Main Entry Point for the whereami service.

Commands:
1. serve  - run the web app with uvicorn
2. locate - resolve the location once and print it
"""

import argparse
import asyncio
import json
import sys
from dataclasses import asdict
from typing import Optional

from whereami.config import load_settings


def format_model(model) -> str:
    """Human-readable multi-line summary of a render model (or None)."""
    if model is None:
        return "Could not get location"

    geo = model.geo
    lines = [
        f"City:         {geo.city}",
        f"Region:       {geo.region_name or '-'}",
        f"Country:      {geo.country} ({geo.country_code})",
        f"Search:       {geo.search_string()}",
    ]
    if model.image.is_found:
        lines.append(f"Image:        {model.image.url}")
    else:
        lines.append(f"Image:        none ({model.image.reason.value})")
    return "\n".join(lines)


def model_to_json(model) -> str:
    if model is None:
        return json.dumps({"status": "unknown"}, indent=2)

    image = asdict(model.image)
    image["status"] = model.image.status.value
    image["reason"] = model.image.reason.value if model.image.reason else None
    return json.dumps({
        "status": "resolved",
        "geo": asdict(model.geo),
        "search_string": model.geo.search_string(),
        "image": image,
    }, indent=2, ensure_ascii=False)


def locate(as_json: bool = False) -> int:
    """Resolve once and print. Exit code 1 when the location is unknown."""
    from whereami.api import build_assembler, configure_logging

    settings = load_settings()
    configure_logging(settings)
    model = asyncio.run(build_assembler(settings).assemble())

    print(model_to_json(model) if as_json else format_model(model))
    return 0 if model is not None else 1


def serve(host: str, port: Optional[int]) -> int:
    import uvicorn

    settings = load_settings()
    uvicorn.run("whereami.api:app", host=host, port=port or settings.port)
    return 0


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description='whereami - where is this app running, and where is its visitor?',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py serve --port 8080
  python main.py locate --json
        """
    )
    subparsers = parser.add_subparsers(dest='command', required=True)

    serve_parser = subparsers.add_parser('serve', help='Run the web app')
    serve_parser.add_argument(
        '--host',
        type=str,
        default='0.0.0.0',
        help='Interface to bind (default: 0.0.0.0)'
    )
    serve_parser.add_argument(
        '--port',
        type=int,
        default=None,
        help='Port to listen on (default: $PORT or 8080)'
    )

    locate_parser = subparsers.add_parser('locate', help='Resolve the location once and print it')
    locate_parser.add_argument(
        '--json',
        action='store_true',
        help='Print the result as JSON'
    )

    args = parser.parse_args(argv)

    try:
        if args.command == 'serve':
            return serve(args.host, args.port)
        return locate(as_json=args.json)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
