"""CLI commands for the Ephemeral Chain API."""

import click

from ephemeral_api.settings import get_settings


@click.group()
def cli():
    """Ephemeral Chain CLI."""
    pass


@cli.command("init-db")
def init_db_command():
    """Create ledger tables."""
    from ephemeral_api.db.session import init_db

    click.echo("Creating ledger tables...")
    init_db()
    click.echo("✓ Tables ready.")


@cli.command("verify-chain")
def verify_chain_command():
    """Verify the persisted state commitment chain."""
    from ephemeral_api.db.session import SessionLocal
    from ephemeral_api.ledger.repository import LedgerRepository

    is_valid, error = LedgerRepository(SessionLocal).verify_chain()
    if is_valid:
        click.echo("✓ State commitment chain is consistent.")
    else:
        click.echo(f"✗ Chain verification failed: {error}", err=True)
        raise SystemExit(1)


@cli.command()
@click.option("--host", default=None, help="Bind address (defaults to API_HOST).")
@click.option("--port", default=None, type=int, help="Bind port (defaults to API_PORT).")
def serve(host, port):
    """Run the API server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "ephemeral_api.main:app",
        host=host or settings.api_host,
        port=port or settings.api_port,
    )


if __name__ == "__main__":
    cli()
