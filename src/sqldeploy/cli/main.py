"""
Main CLI entry point.
"""

import typer

from sqldeploy import __version__
from sqldeploy.migrations import cli as migrate_cli


def version_callback(value: bool):
    """Callback to display version and exit."""
    if value:
        typer.echo(f"sqldeploy version {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="sqldeploy",
    help="sqldeploy - Versioned SQL migrations tracked in a changelog table",
    add_completion=True,
)

app.add_typer(migrate_cli.app, name="migrate")


@app.callback(invoke_without_command=True)
def entrypoint(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=version_callback,
        help="Show version and exit.",
    ),
):
    """
    Apply numbered SQL scripts to a database, each exactly once.

    Scripts live in the migrations directory as "<revision> - <description>.sql".
    Every run compares them with the changelog table and applies the pending
    ones in ascending revision order inside a single transaction.

    Typical workflow: "sqldeploy migrate --list" to inspect, "sqldeploy migrate
    --dry-run" to preview the SQL, then "sqldeploy migrate" to apply.
    """
    if ctx.invoked_subcommand is None:
        if not version:
            typer.echo(ctx.get_help())
            raise typer.Exit()


def main():
    """Main CLI entry point."""
    app()


if __name__ == "__main__":
    main()
