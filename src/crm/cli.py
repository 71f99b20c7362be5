"""Management commands.

    equestrian-crm serve [--host HOST] [--port PORT] [--reload]
    equestrian-crm migrate [--revision REV]
    equestrian-crm create-admin --email EMAIL --password PASSWORD [--first-name F] [--last-name L]
"""

import argparse
import asyncio
import sys
from collections.abc import Sequence

import uvicorn
from pydantic import ValidationError

from src.crm.core.config import get_settings
from src.crm.core.db import Database, run_migrations_sync
from src.crm.core.logging import get_logger, setup_logging
from src.crm.models import UserRole
from src.crm.repositories import UserRepository
from src.crm.schemas.user import UserCreate
from src.crm.services import UserService

logger = get_logger(__name__)


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="equestrian-crm", description="Equestrian CRM management")
    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="Run the API server")
    serve.add_argument("--host", default=None, help="Bind address (default: HOST setting)")
    serve.add_argument("--port", type=int, default=None, help="Port (default: PORT setting)")
    serve.add_argument("--reload", action="store_true", help="Reload on code changes")

    migrate = commands.add_parser("migrate", help="Apply database migrations")
    migrate.add_argument("--revision", default="head", help="Target revision (default: head)")

    admin = commands.add_parser("create-admin", help="Create an admin account")
    admin.add_argument("--email", required=True)
    admin.add_argument("--password", required=True)
    admin.add_argument("--first-name", default="Admin")
    admin.add_argument("--last-name", default="User")

    return parser.parse_args(argv)


async def create_admin(email: str, password: str, first_name: str, last_name: str) -> None:
    """Create an admin user directly in the database.

    Raises:
        ValueError: If the email is already registered.
    """
    data = UserCreate(
        email=email,
        password=password,
        first_name=first_name,
        last_name=last_name,
        role=UserRole.ADMIN,
    )
    database = Database()
    database.initialize()
    try:
        async with database.session() as session:
            user = await UserService(UserRepository(session), session).create_user(data)
            logger.info("Admin account created", user_id=str(user.id))
    finally:
        await database.dispose()


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    settings = get_settings()
    setup_logging(settings.debug)

    if args.command == "serve":
        uvicorn.run(
            "src.crm.main:app",
            host=args.host or settings.host,
            port=args.port or settings.port,
            reload=args.reload,
        )
    elif args.command == "migrate":
        logger.info("Running migrations", revision=args.revision)
        run_migrations_sync(args.revision)
    elif args.command == "create-admin":
        try:
            asyncio.run(
                create_admin(args.email, args.password, args.first_name, args.last_name)
            )
        except (ValidationError, ValueError) as e:
            print(f"error: {e}", file=sys.stderr)
            return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
