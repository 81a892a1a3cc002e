from __future__ import annotations

import asyncio
from typing import Optional

import typer

from school_cms.app.core.logging import setup_logging
from school_cms.app.settings import AppSettings
from school_cms.auth.service import create_admin as _create_admin
from school_cms.content import models
from school_cms.db import DBEngine, DBSettings, UnitOfWork
from school_cms.exceptions import SchoolCmsError
from school_cms.seed import seed as _seed

app = typer.Typer(no_args_is_help=True, add_completion=False, help="School CMS management commands.")

DatabaseUrlOption = typer.Option(None, "--database-url", help="Override DB_DATABASE_URL / DATABASE_URL")


def _engine(database_url: Optional[str]) -> DBEngine:
    settings = DBSettings(database_url=database_url) if database_url else DBSettings()
    return DBEngine(settings)


async def _run_init_db(engine: DBEngine, drop: bool) -> None:
    try:
        if drop:
            await engine.drop_all()
        await engine.create_all()
    finally:
        await engine.dispose()


async def _run_seed(engine: DBEngine) -> dict[str, bool]:
    try:
        await engine.create_all()
        async with UnitOfWork(engine) as uow:
            return await _seed(uow)
    finally:
        await engine.dispose()


async def _run_create_admin(engine: DBEngine, username: str, password: str) -> int:
    try:
        await engine.create_all()
        async with UnitOfWork(engine) as uow:
            admin = await _create_admin(uow.repo(models.Admin), username, password)
            return admin.id
    finally:
        await engine.dispose()


@app.callback()
def main(log_level: Optional[str] = typer.Option(None, help="Override APP_LOG_LEVEL")):
    setup_logging(AppSettings(log_level=log_level) if log_level else AppSettings())


@app.command("init-db")
def init_db(
    database_url: Optional[str] = DatabaseUrlOption,
    drop: bool = typer.Option(False, "--drop", help="Drop all tables first (destroys data)"),
):
    """Create all content tables."""
    asyncio.run(_run_init_db(_engine(database_url), drop))
    typer.echo("Tables created.")


@app.command("seed")
def seed(database_url: Optional[str] = DatabaseUrlOption):
    """Insert default content into empty tables."""
    result = asyncio.run(_run_seed(_engine(database_url)))
    for table, inserted in result.items():
        typer.echo(f"{table}: {'seeded' if inserted else 'skipped'}")


@app.command("create-admin")
def create_admin(
    username: str = typer.Option(..., "--username", "-u"),
    password: str = typer.Option(..., "--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True),
    database_url: Optional[str] = DatabaseUrlOption,
):
    """Create an admin account for /admin/login."""
    try:
        admin_id = asyncio.run(_run_create_admin(_engine(database_url), username, password))
    except SchoolCmsError as exc:
        typer.echo(f"Error: {exc.message}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Admin {username!r} created (id={admin_id}).")


@app.command("serve")
def serve(
    host: str = typer.Option("0.0.0.0", envvar="HOST"),
    port: int = typer.Option(5000, envvar="PORT"),
    reload: bool = typer.Option(False, "--reload"),
):
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("school_cms.api.fastapi:create_app", factory=True, host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
