"""
Run the JSON page server.

Usage:
    jsonpage
    jsonpage --ai-design --port 8080
    python -m jsonpage --ai-design
"""

import argparse
import dataclasses
from typing import List, Optional

import uvicorn

from jsonpage.main import create_app
from jsonpage.settings import Settings, load_settings_from_env


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jsonpage",
        description="Serve HTML pages rendered from ordered JSON documents.",
    )
    parser.add_argument(
        "--ai-design",
        action="store_true",
        default=None,
        help="Enable AI design mode (designprompt flag generates cached themes)",
    )
    parser.add_argument("--host", default=None, help="Bind address")
    parser.add_argument("--port", type=int, default=None, help="Listen port")
    parser.add_argument("--content-dir", default=None, help="Directory holding index*.json")
    parser.add_argument("--components-dir", default=None, help="Directory holding component templates")
    return parser


def settings_from_args(args: argparse.Namespace, base: Optional[Settings] = None) -> Settings:
    """Apply command-line overrides on top of environment settings."""
    base = base or load_settings_from_env()
    overrides = {}
    if args.ai_design:
        overrides["ai_design"] = True
    if args.host is not None:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if args.content_dir is not None:
        overrides["content_dir"] = args.content_dir
    if args.components_dir is not None:
        overrides["components_dir"] = args.components_dir
        overrides["cache_dir"] = f"{args.components_dir}/cached"
    return dataclasses.replace(base, **overrides)


def main(argv: Optional[List[str]] = None) -> None:
    """Parse flags and run the server."""
    args = build_parser().parse_args(argv)
    settings = settings_from_args(args)

    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
