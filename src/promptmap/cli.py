"""Command-line interface for promptmap."""

import argparse
import asyncio
import json
import sys
from pathlib import Path

import uvicorn


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="promptmap - prompt placeholder mapping and selection validation"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Server command
    server_parser = subparsers.add_parser("serve", help="Start the web server")
    server_parser.add_argument(
        "--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)"
    )
    server_parser.add_argument(
        "--port", type=int, default=8000, help="Port to bind to (default: 8000)"
    )
    server_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    # Detect command
    detect_parser = subparsers.add_parser(
        "detect", help="List the placeholders found in a pair of prompts"
    )
    detect_parser.add_argument("--system", default="", help="System prompt text")
    detect_parser.add_argument("--user", default="", help="User prompt text")
    detect_parser.add_argument("--system-file", type=Path, help="Read the system prompt from a file")
    detect_parser.add_argument("--user-file", type=Path, help="Read the user prompt from a file")

    # Sweep command
    sweep_parser = subparsers.add_parser(
        "sweep", help="Delete saved editing sessions past the retention window"
    )
    sweep_parser.add_argument("--database", type=Path, help="Session database path")

    args = parser.parse_args()

    if args.command == "serve":
        run_server(args.host, args.port, args.reload)
    elif args.command == "detect":
        run_detect(args)
    elif args.command == "sweep":
        asyncio.run(run_sweep(args.database))
    else:
        parser.print_help()
        sys.exit(1)


def run_server(host: str, port: int, reload: bool):
    """Run the web server."""
    uvicorn.run(
        "promptmap.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


def run_detect(args: argparse.Namespace):
    """Print detected placeholders as JSON."""
    from .placeholders import detect_placeholders

    system_prompt = args.system_file.read_text() if args.system_file else args.system
    user_prompt = args.user_file.read_text() if args.user_file else args.user

    placeholders = detect_placeholders(system_prompt, user_prompt)
    print(json.dumps([p.model_dump(mode="json") for p in placeholders], indent=2))


async def run_sweep(database: Path = None):
    """Purge expired editing sessions."""
    from .mapping import SessionPersistence, SQLiteKeyValueStore

    store = SQLiteKeyValueStore(database)
    await store.initialize()
    try:
        deleted = await SessionPersistence(store).sweep()
        print(f"Deleted {deleted} expired sessions")
    finally:
        await store.close()


if __name__ == "__main__":
    main()
