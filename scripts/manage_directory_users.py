#!/usr/bin/env python3
"""Manage Botnorrea directory users from the command line.

This script:
- Loads config from env/api.env (BOTNORREA_DB_*, BOTNORREA_DIRECTORY_*)
- Creates users with an explicit role (privileged create)
- Shows a user by uuid or by Telegram user id
- Revokes a user's API key so a new one can be requested
- Removes users

Usage:
    ./scripts/manage_directory_users.py create <telegram-id> --username alice --role admin
    ./scripts/manage_directory_users.py show --telegram-id 123456
    ./scripts/manage_directory_users.py show --uuid 4f1c...
    ./scripts/manage_directory_users.py revoke-key <uuid>
    ./scripts/manage_directory_users.py remove <uuid>
"""

import argparse
import asyncio
import sys
from datetime import datetime, timezone
from pathlib import Path

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

root_path = Path(__file__).parent.parent
sys.path.insert(0, str(root_path / "src" / "api"))

# Load environment from env/api.env
load_dotenv(root_path / "env" / "api.env")

from directory.application.services import UserDirectoryService  # noqa: E402
from directory.domain.aggregates import (  # noqa: E402
    DirectoryUser,
    NewDirectoryUser,
    UserPatch,
)
from directory.domain.value_objects import Role, UserUuid  # noqa: E402
from directory.infrastructure.postgres_record_store import (  # noqa: E402
    PostgresRecordStore,
)
from directory.ports.exceptions import DirectoryError  # noqa: E402
from infrastructure.database.dependencies import (  # noqa: E402
    close_database_connections,
    session_scope,
)
from infrastructure.logging import configure_logging  # noqa: E402
from infrastructure.settings import get_directory_settings  # noqa: E402

console = Console()


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Manage Botnorrea directory users",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    create = subparsers.add_parser("create", help="Create a directory user")
    create.add_argument("telegram_id", help="Telegram user id of the new user")
    create.add_argument("--username", default="", help="Display name")
    create.add_argument(
        "--role",
        choices=[role.value for role in Role],
        default=Role.USER.value,
        help="Role of the new user (default: user)",
    )

    show = subparsers.add_parser("show", help="Show a directory user")
    lookup = show.add_mutually_exclusive_group(required=True)
    lookup.add_argument("--uuid", help="Directory uuid")
    lookup.add_argument("--telegram-id", help="Telegram user id")

    revoke = subparsers.add_parser("revoke-key", help="Clear a user's API key")
    revoke.add_argument("uuid", help="Directory uuid")

    remove = subparsers.add_parser("remove", help="Remove a directory user")
    remove.add_argument("uuid", help="Directory uuid")

    return parser.parse_args()


def parse_external_id(value: str) -> int | str:
    """Telegram ids are numeric; anything else is kept as given."""
    try:
        return int(value)
    except ValueError:
        return value


def format_millis(value: int) -> str:
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc).isoformat()


def print_user(user: DirectoryUser) -> None:
    """Render a user as a table. The API key itself is never printed."""
    table = Table(title=f"Directory user {user.uuid.value}", show_header=False)
    table.add_column("Attribute", style="bold cyan")
    table.add_column("Value")
    table.add_row("uuid", user.uuid.value)
    table.add_row("telegram id", str(user.external_id))
    table.add_row("username", user.username or "[dim]-[/dim]")
    table.add_row(
        "role",
        f"[bold magenta]{user.role.value}[/bold magenta]" if user.is_admin else user.role.value,
    )
    table.add_row("api key", "[green]issued[/green]" if user.has_api_key else "[dim]none[/dim]")
    table.add_row("created", format_millis(user.created_at))
    table.add_row("updated", format_millis(user.updated_at))
    console.print(table)


async def run(args) -> int:
    """Execute the selected command against the configured directory table."""
    settings = get_directory_settings()

    async with session_scope() as session:
        service = UserDirectoryService(
            store=PostgresRecordStore(session=session, table_name=settings.table_name)
        )

        if args.command == "create":
            external_id = parse_external_id(args.telegram_id)
            existing = await service.get_by_external_id(external_id)
            if existing is not None:
                console.print(
                    f"[bold red]Error:[/bold red] Telegram id {external_id} is already "
                    f"registered as {existing.uuid.value}"
                )
                return 1
            user = await service.create_as_admin(
                NewDirectoryUser(
                    external_id=external_id,
                    username=args.username,
                    role=Role(args.role),
                )
            )
            console.print("[green]✓[/green] User created")
            print_user(user)
            return 0

        if args.command == "show":
            if args.uuid:
                user = await service.get(UserUuid.from_string(args.uuid))
            else:
                user = await service.get_by_external_id(
                    parse_external_id(args.telegram_id)
                )
            if user is None:
                console.print("[yellow]No matching directory user[/yellow]")
                return 1
            print_user(user)
            return 0

        if args.command == "revoke-key":
            uuid = UserUuid.from_string(args.uuid)
            current = await service.get(uuid)
            if current is None:
                console.print("[yellow]No matching directory user[/yellow]")
                return 1
            # Privileged update without api_key clears it
            user = await service.update_as_admin(
                UserPatch(uuid=uuid, username=current.username)
            )
            console.print("[green]✓[/green] API key revoked")
            print_user(user)
            return 0

        await service.remove(UserUuid.from_string(args.uuid))
        console.print(f"[green]✓[/green] Removed {args.uuid}")
        return 0


async def main_async(args) -> int:
    try:
        return await run(args)
    finally:
        await close_database_connections()


def main():
    args = parse_args()
    configure_logging()

    try:
        exit_code = asyncio.run(main_async(args))
    except (DirectoryError, ValueError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
