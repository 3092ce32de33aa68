# Overview: Flask CLI command groups for bootstrap and inspection.

# backend/storefront/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap:
# - python -m flask system init-db
#   Create all tables that do not exist yet.
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
#
# Users:
# - python -m flask users list
# - python -m flask users create --email s@x.com --password pw --role seller
#
# Products:
# - python -m flask products list
#   List every product, including out-of-stock ones.

import click
from flask.cli import with_appcontext

from .extensions import db
from .errors import ServiceError
from .models import User, VALID_ROLES
from .services import auth_service, catalog_service


@click.group('system')
def system_group():
    """System bootstrap commands."""


@system_group.command('init-db')
@with_appcontext
def init_db():
    """Create all tables that do not exist yet."""
    db.create_all()
    click.echo("PASS Tables created.")


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Skip confirmation')
@with_appcontext
def reset_db(yes):
    """
    DANGER: Drop all tables and recreate schema.

    This will DELETE ALL DATA!
    """
    if not yes:
        click.confirm("WARN This will DELETE ALL DATA. Are you sure?", abort=True)

    click.echo("DELETE  Dropping all tables...")
    db.drop_all()

    click.echo("BUILD  Creating all tables...")
    db.create_all()

    click.echo("PASS Database reset complete.")


@click.group('users')
def users_group():
    """User inspection and creation."""


@users_group.command('create')
@click.option('--email', prompt=True, help='Email address')
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True, help='Password')
@click.option('--role', type=click.Choice(list(VALID_ROLES)), prompt=True, help='Role')
@with_appcontext
def create_user_cli(email, password, role):
    """Create a buyer or seller account."""
    try:
        user = auth_service.register(db.session, email=email, password=password, role=role)
    except ServiceError as e:
        raise click.ClickException(f"FAIL Failed to create user: {e.message}")

    click.echo(f"PASS Created user: {user['email']} (ID: {user['id']}) with role '{user['role']}'")


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users."""
    users = db.session.query(User).order_by(User.id.asc()).all()

    if not users:
        click.echo("No users found.")
        return

    click.echo("\n" + "="*60)
    click.echo(f"{'ID':<5} {'Email':<40} {'Role'}")
    click.echo("="*60)
    for user in users:
        click.echo(f"{user.id:<5} {user.email:<40} {user.role}")


@click.group('products')
def products_group():
    """Product inspection."""


@products_group.command('list')
@with_appcontext
def list_products():
    """List every product, including out-of-stock ones."""
    products = catalog_service.list_all(db.session)

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<5} {'Name':<30} {'Price':>10} {'Stock':>7}  {'Seller'}")
    for p in products:
        click.echo(f"{p['id']:<5} {p['name'][:30]:<30} {p['price']:>10} {p['stock']:>7}  {p['seller_email']}")


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(products_group)
