"""CLI interface for reviewpool.

This module provides a command-line interface for initializing
configuration, running the API server and inspecting assignment state.
"""
import asyncio
import sys
from pathlib import Path

import click
import uvicorn

from .core.config.settings import ReviewPoolConfig, init_config
from .core.log import configure_logging


@click.group()
@click.version_option(version="0.1.0")
def cli():
    """reviewpool - reviewer assignment for pull requests.

    Assigns reviewers from the author's team, swaps reviewers on request and
    keeps open reviews consistent when team members are deactivated.
    """
    pass


@cli.command()
@click.option(
    "--config-path",
    "-c",
    type=click.Path(dir_okay=False),
    default="reviewpool.yaml",
    help="Path to configuration file",
)
@click.option("--force", "-f", is_flag=True, help="Force overwrite existing config")
def init(config_path: str, force: bool):
    """Initialize reviewpool configuration.

    Creates a default configuration file with recommended settings.
    """
    config_file = Path(config_path)

    if config_file.exists() and not force:
        click.echo(f"Configuration file already exists: {config_path}")
        click.echo("Use --force to overwrite")
        return

    try:
        config = ReviewPoolConfig.create_default_config(config_file)

        click.echo(f"✓ Created configuration file: {config_path}")
        click.echo("\nDefault configuration:")
        click.echo(f"  API Server: {config.api_host}:{config.api_port}")
        click.echo(f"  Database: {config.get_database_url()}")
        click.echo(f"  Reviewers per PR: {config.max_reviewers}")
        click.echo(f"\nEdit {config_path} to customize settings.")

    except (OSError, ValueError) as e:
        click.echo(f"Error creating configuration: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to configuration file",
)
@click.option("--host", help="Override API host")
@click.option("--port", type=int, help="Override API port")
def start(config: str, host: str, port: int):
    """Start the reviewpool API server."""
    try:
        app_config = init_config(config) if config else init_config()

        # Override with CLI options
        if host:
            app_config.api_host = host
        if port:
            app_config.api_port = port

        configure_logging(app_config)

        click.echo("🚀 Starting reviewpool...")
        click.echo(f"   API: http://{app_config.api_host}:{app_config.api_port}")
        click.echo("\nPress Ctrl+C to stop\n")

        uvicorn.run(
            "reviewpool.api:app",
            host=app_config.api_host,
            port=app_config.api_port,
            log_level=app_config.log_level.lower(),
        )

    except KeyboardInterrupt:
        click.echo("\n\nStopping reviewpool...")
    except Exception as e:
        click.echo(f"Error starting server: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to configuration file",
)
def status(config: str):
    """Check reviewpool system status.

    Displays configuration and database information.
    """
    try:
        app_config = init_config(config) if config else init_config()

        click.echo("reviewpool Status")
        click.echo("=" * 50)
        click.echo(f"Configuration: {config or 'default'}")
        click.echo(f"Database URL: {app_config.get_database_url()}")
        click.echo(f"API Server: {app_config.api_host}:{app_config.api_port}")
        click.echo(f"Reviewers per PR: {app_config.max_reviewers}")
        click.echo(f"Log Level: {app_config.log_level}")

        from .core.storage.database import init_db

        db = init_db(app_config.get_database_url())

        async def get_counts():
            await db.create_tables()
            async with db.session() as session:
                from sqlalchemy import func, select

                from .core.models import Team, User

                teams = (await session.execute(select(func.count(Team.team_name)))).scalar_one()
                users = (await session.execute(select(func.count(User.user_id)))).scalar_one()
                active = (
                    await session.execute(
                        select(func.count(User.user_id)).where(User.is_active.is_(True))
                    )
                ).scalar_one()
            await db.close()
            return teams, users, active

        teams, users, active = asyncio.run(get_counts())
        click.echo("\n✓ Database connection successful")
        click.echo(f"\nTeams: {teams}, users: {users} ({active} active)")

    except Exception as e:
        click.echo(f"Error checking status: {e}", err=True)
        sys.exit(1)


@cli.command()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False),
    help="Path to configuration file",
)
def stats(config: str):
    """Show review assignment statistics."""
    try:
        app_config = init_config(config) if config else init_config()

        from .core.assignment.service import ReviewerAssignmentService
        from .core.storage.database import init_db

        db = init_db(app_config.get_database_url())

        async def get_stats():
            await db.create_tables()
            service = ReviewerAssignmentService(db.session, max_reviewers=app_config.max_reviewers)
            result = await service.get_stats()
            await db.close()
            return result

        result = asyncio.run(get_stats())

        click.echo(f"Pull requests: {result.pr_stats.open} open, {result.pr_stats.merged} merged")
        if not result.user_assignments:
            click.echo("No reviewer assignments")
            return

        click.echo("\nAssignments per reviewer:")
        click.echo("=" * 50)
        for user_id, count in sorted(result.user_assignments.items(), key=lambda item: (-item[1], item[0])):
            click.echo(f"  {user_id:<30} {count}")

    except Exception as e:
        click.echo(f"Error retrieving stats: {e}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
