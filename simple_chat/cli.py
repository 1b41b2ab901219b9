"""Command line entry point: ``simple-chat server`` or ``simple-chat client``."""
import argparse
from typing import List, Optional

from .client import config as client_config
from .server import config as server_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="simple-chat", description="Simple CLI Chat Application")
    subparsers = parser.add_subparsers(dest="command", required=True)

    server = subparsers.add_parser("server", help="Run the chat server")
    server.add_argument("--host", default=server_config.HOST)
    server.add_argument("--port", type=int, default=server_config.PORT)
    server.add_argument("--database-url", default=server_config.DATABASE_URL)

    client = subparsers.add_parser("client", help="Run the interactive client")
    client.add_argument("--host", default=client_config.SERVER_HOST)
    client.add_argument("--port", type=int, default=client_config.SERVER_PORT)
    client.add_argument("--username", default=None)
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    if args.command == "server":
        from .server.main import run_server

        run_server(host=args.host, port=args.port, database_url=args.database_url)
    else:
        from .client.main import main as run_client

        run_client(host=args.host, port=args.port, username=args.username)


if __name__ == "__main__":
    main()
