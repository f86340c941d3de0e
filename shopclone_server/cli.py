"""CLI entry point for ShopClone MCP server."""

import argparse
import asyncio
import os
import sys


def main() -> None:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description="ShopClone MCP Server - browse the catalog, fill a cart and place orders"
    )
    parser.add_argument(
        "--mode",
        choices=["stdio", "http"],
        default="stdio",
        help="Server mode: stdio (for MCP protocol) or http (for REST API)",
    )
    parser.add_argument(
        "--backend-url",
        default=None,
        help="Storefront backend URL (default: $SHOPCLONE_BACKEND_URL or http://localhost:8000)",
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind to (HTTP mode only, default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8080,
        help="Port to bind to (HTTP mode only, default: 8080)",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable hot reloading (HTTP mode only, watches for file changes)",
    )

    args = parser.parse_args()

    if args.backend_url:
        # The HTTP app builds its settings from the environment at startup
        os.environ["SHOPCLONE_BACKEND_URL"] = args.backend_url

    if args.mode == "http":
        from .http_server import run_http_server

        print(f"Starting ShopClone HTTP Server on {args.host}:{args.port}", file=sys.stderr)
        run_http_server(host=args.host, port=args.port, reload=args.reload)
    else:
        from .config import Settings
        from .server import main as server_main

        try:
            asyncio.run(server_main(Settings.from_env()))
        except KeyboardInterrupt:
            print("\nShutting down...", file=sys.stderr)
            sys.exit(0)


if __name__ == "__main__":
    main()
