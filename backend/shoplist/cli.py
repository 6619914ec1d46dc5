"""Command Line — first-run setup and server launch.

Invariants:
    - `setup` refuses to run twice (SystemAlreadySetupError → non-zero exit)
    - The admin email is validated with the same schema as the HTTP layer
"""

import asyncio

import click
import uvicorn
from pydantic import ValidationError

from shoplist.config import get_settings
from shoplist.core.entities import User
from shoplist.core.errors import ShoppingListError
from shoplist.infrastructure.database import DatabaseSessionManager
from shoplist.infrastructure.observability import setup_logging
from shoplist.infrastructure.repositories_auth import (
    SqlSettingsRepository, SqlUserRepository,
)
from shoplist.schemas.auth import SetupRequest
from shoplist.services.system_setup import SetupService


async def run_setup(database_url: str, email: str) -> User:
    manager = DatabaseSessionManager(database_url)
    try:
        await manager.create_schema()
        async with manager.session() as db:
            setup = SetupService(SqlSettingsRepository(db), SqlUserRepository(db))
            return await setup.setup_system(email)
    finally:
        await manager.dispose()


@click.group()
def cli():
    """Shopping List server management."""


@cli.command()
@click.option("--email", prompt="Admin email address", help="Email of the first admin user.")
def setup(email: str):
    """Create the admin user and its default list."""
    try:
        request = SetupRequest(email=email)
    except ValidationError:
        raise click.BadParameter("invalid email address", param_hint="--email")

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    try:
        admin = asyncio.run(run_setup(settings.database_url, request.email))
    except ShoppingListError as e:
        raise click.ClickException(e.message)

    click.secho(f"System set up. Admin user: {admin.email}", fg="green", bold=True)
    click.echo("The admin can now log in with a magic link sent to this address.")


@cli.command()
@click.option("--host", default=None, help="Bind address (default: HOST setting).")
@click.option("--port", default=None, type=int, help="Bind port (default: PORT setting).")
def serve(host: str | None, port: int | None):
    """Run the API server."""
    settings = get_settings()
    uvicorn.run(
        "shoplist.main:app",
        host=host or settings.host,
        port=port or settings.port,
    )


if __name__ == "__main__":
    cli()
