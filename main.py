"""Command-line interface for the storefront identity service."""

from __future__ import annotations
import argparse
import logging
import sys
from typing import Sequence

import anyio

from storefront.api import seed_directory
from storefront.config import Settings, load_settings
from storefront.directory import UserDirectory
from storefront.passwords import PasswordHasher

logger = logging.getLogger("storefront.main")


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Storefront identity service utilities")
    subparsers = parser.add_subparsers(dest="command")

    parser.set_defaults(command="serve")

    serve_parser = subparsers.add_parser("serve", help="Start the HTTP service")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address for the API")
    serve_parser.add_argument(
        "--port",
        type=int,
        default=8000,
        help="Port for the HTTP API (default: 8000)",
    )

    subparsers.add_parser(
        "list-users", help="Load the seed file into a fresh directory and print its users"
    )

    args_list = list(argv) if argv is not None else sys.argv[1:]
    known_commands = {"serve", "list-users"}

    if not args_list:
        args_list = ["serve"]
    else:
        first = args_list[0]
        if first in ("-h", "--help"):
            return parser.parse_args(args_list)
        if first not in known_commands:
            if any(flag in args_list for flag in ("-h", "--help")):
                return parser.parse_args(args_list)
            args_list = ["serve", *args_list]

    return parser.parse_args(args_list)


def _build_directory(settings: Settings) -> UserDirectory:
    return UserDirectory(hasher=PasswordHasher(settings.bcrypt_rounds))


def _serve(*, settings: Settings, host: str, port: int) -> None:
    from storefront.api import create_app
    import uvicorn

    logger.info("Starting storefront identity API on http://%s:%s", host, port)
    app = create_app(directory=_build_directory(settings), settings=settings)
    uvicorn.run(app, host=host, port=port, log_level=settings.log_level.lower())


def _list_users(settings: Settings) -> None:
    directory = _build_directory(settings)

    async def _load():
        await seed_directory(directory, settings)
        return await directory.list_all()

    users = anyio.run(_load)
    if not users:
        print("No users are currently registered.")
        return

    print(f"{'ID':<6}{'Name':<30}Email")
    for user in users:
        print(f"{user.id:<6}{user.name:<30}{user.email}")


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for CLI usage."""

    args = _parse_args(argv)
    try:
        settings = load_settings()
    except ValueError as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc

    logging.basicConfig(level=settings.log_level, format="%(asctime)s [%(levelname)s] %(message)s")

    if args.command == "serve":
        _serve(settings=settings, host=args.host, port=args.port)
    elif args.command == "list-users":
        try:
            _list_users(settings)
        except (OSError, ValueError) as exc:
            raise SystemExit(f"Failed to load seed users: {exc}") from exc


if __name__ == "__main__":
    main()
