"""
CLI commands for migrations.
"""

from pathlib import Path

import typer
from rich.console import Console

from sqldeploy.config import load_config
from sqldeploy.connections.manager import ConnectionManager
from sqldeploy.exceptions import SqlDeployError
from sqldeploy.migrations.deployer import Deployer
from sqldeploy.utils.display import ConsoleOutput, render_status
from sqldeploy.utils.logging import get_logger, setup_logging_from_config

logger = get_logger("sqldeploy.migrations.cli")

app = typer.Typer(name="migrate", help="Apply pending SQL migrations", invoke_without_command=True)

console = Console()


@app.callback()
def migrate(
    ctx: typer.Context,
    project_dir: Path = typer.Option(
        Path.cwd(), "--project-dir", "-d", help="Project directory"
    ),
    env: str = typer.Option(
        "dev", "--env", "-e", help="Environment name"
    ),
    list_only: bool = typer.Option(
        False, "--list", "-l", help="Show migration status without applying anything"
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Print the SQL that would be applied without running it"
    ),
    show_sql: bool = typer.Option(
        False, "--show-sql", help="Echo each migration's SQL while applying"
    ),
    strict: bool = typer.Option(
        False, "--strict", help="Fail if applied revisions have no migration file"
    ),
):
    """
    Apply pending SQL migrations.

    Examples:
        # Apply all pending migrations
        sqldeploy migrate --env prod

        # Show applied / pending migrations
        sqldeploy migrate --list --env prod

        # Dry run (print the SQL that would run)
        sqldeploy migrate --env prod --dry-run
    """
    if ctx.invoked_subcommand is not None:
        return

    try:
        config = load_config(project_dir, env=env)
        config.validate()
        setup_logging_from_config(config.data, project_dir=project_dir)
        settings = config.migrations

        with ConnectionManager(config.data) as manager:
            connection = manager.get(settings["connection"])
            deployer = Deployer(
                connection,
                config.migrations_dir(project_dir),
                pattern=settings["pattern"],
                table=settings["table"],
                verify_change_numbers=bool(settings["verify_change_numbers"]),
            )
            status = deployer.current_status()

            if strict:
                status.raise_for_orphans()

            if list_only:
                render_status(status, console)
                return

            if status.is_up_to_date:
                typer.echo("No migrations to run")
                return

            pending = status.pending_migrations
            if dry_run:
                typer.echo(f"[DRY RUN] Would apply {len(pending)} migration(s):")
                output = ConsoleOutput(console)
                for migration in pending.values():
                    typer.echo(f"  ⏳ {migration.description}")
                    output.emit(migration.sql)
                return

            applied = deployer.apply(status, show_sql=show_sql, output=ConsoleOutput(console))

        typer.echo(f"\nApplied {len(applied)} migration(s)")
        for revision in applied:
            typer.echo(f"  ✓ {pending[revision].description}")

    except SqlDeployError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    except Exception as e:
        logger.debug("Migration run failed", exc_info=True)
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
