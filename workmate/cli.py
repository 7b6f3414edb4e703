"""CLI tools for Work Mate administration."""

import asyncio
from uuid import UUID

import click

from workmate.core.config import get_settings
from workmate.core.database import database_from_settings
from workmate.services import like_service


@click.group()
def cli():
    """Work Mate CLI tools."""
    pass


@cli.command()
@click.option("--host", default=None, help="Bind address (defaults to settings)")
@click.option("--port", default=None, type=int, help="Port (defaults to settings)")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host: str | None, port: int | None, reload: bool):
    """Run the API with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "workmate.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


@cli.command("init-db")
def init_db():
    """
    Create all tables directly from the models.

    For local development only; deployed databases are managed with
    `alembic upgrade head`.
    """

    async def run() -> None:
        database = database_from_settings(get_settings())
        try:
            await database.create_all()
        finally:
            await database.close()

    asyncio.run(run())
    click.echo("✓ Tables created")


@cli.command("recount-likes")
@click.option("--user-id", default=None, help="Only recount this user")
def recount_likes(user_id: str | None):
    """
    Recompute likedCount / likedByCount from the likes table.

    Example:
        workmate recount-likes --user-id 5f0c...
    """
    target = None
    if user_id is not None:
        try:
            target = UUID(user_id)
        except ValueError:
            raise click.BadParameter("must be a UUID", param_hint="--user-id")

    async def run() -> int:
        database = database_from_settings(get_settings())
        await database.connect()
        try:
            async with database.session() as session:
                updated = await like_service.recount_counters(session, target)
                await session.commit()
                return updated
        finally:
            await database.close()

    updated = asyncio.run(run())
    click.echo(f"✓ Recounted like counters for {updated} user(s)")


if __name__ == "__main__":
    cli()
