import os
import click
from flask import current_app
from flask.cli import with_appcontext
from flask_migrate import upgrade as alembic_upgrade, stamp as alembic_stamp, migrate as alembic_migrate

from coffeehub.auth.permissions import ROLES
from coffeehub.services.product_import import import_products, load_sample_database
from coffeehub.stores import get_stores
from coffeehub.utils.jwt import create_access_token


def _assert_safe_for_upgrade():
    # Production upgrades need ALLOW_DB_MIGRATIONS=true
    env = (current_app.config.get("ENV") or "").lower()
    app_env = (os.getenv("APP_ENV") or "").lower()
    if app_env == "production" or env == "production":
        if (os.getenv("ALLOW_DB_MIGRATIONS") or "").lower() not in ("1", "true", "yes"):
            raise click.ClickException("Refusing to run DB migration in production without ALLOW_DB_MIGRATIONS=true")


@click.command("db-migrate-safe")
@click.option("-m", "--message", default="auto migration", help="Migration message")
@with_appcontext
def db_migrate_safe(message):
    """Generate a new migration script from current models."""
    alembic_migrate(message=message)
    click.echo("Migration script generated.")


@click.command("db-upgrade-safe")
@with_appcontext
def db_upgrade_safe():
    """Apply migrations to the configured database."""
    _assert_safe_for_upgrade()
    alembic_upgrade()
    click.echo("Database upgraded.")


@click.command("db-stamp-safe")
@click.option("--revision", default="head", help="Revision to stamp, default 'head'")
@with_appcontext
def db_stamp_safe(revision):
    """Mark the database at a given revision without running migrations."""
    _assert_safe_for_upgrade()
    alembic_stamp(revision)
    click.echo(f"Database stamped at {revision}.")


@click.command("import-products")
@click.argument("path", type=click.Path(exists=True, dir_okay=False))
@click.option("--replace", is_flag=True, help="Delete every existing product first")
@click.option("--rate", type=float, default=None, help="Price multiplier, default SAMPLE_PRICE_RATE")
@with_appcontext
def import_products_command(path, replace, rate):
    """Seed the catalog from a sample database.json export."""
    catalog = get_stores().catalog
    rows = load_sample_database(path, rate or current_app.config["SAMPLE_PRICE_RATE"])
    if replace:
        removed = catalog.delete_all()
        click.echo(f"Removed {removed} existing products.")
    elif catalog.count():
        raise click.ClickException("Catalog is not empty; pass --replace to overwrite it")
    imported, failed = import_products(catalog, rows)
    click.echo(f"Imported {imported} products ({failed} skipped).")


@click.command("issue-token")
@click.option("--user-id", required=True)
@click.option("--role", type=click.Choice(sorted(ROLES)), default="customer", show_default=True)
@click.option("--name", default="")
@click.option("--email", default="")
@click.option("--minutes", type=int, default=None, help="Lifetime, default ACCESS_TOKEN_LIFETIME_MIN")
@with_appcontext
def issue_token(user_id, role, name, email, minutes):
    """Mint a bearer token for a customer or admin."""
    click.echo(create_access_token(user_id, role, name=name, email=email, minutes=minutes))


def register_cli(app):
    app.cli.add_command(db_migrate_safe)
    app.cli.add_command(db_upgrade_safe)
    app.cli.add_command(db_stamp_safe)
    app.cli.add_command(import_products_command)
    app.cli.add_command(issue_token)
