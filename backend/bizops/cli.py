# Overview: Flask CLI command groups for bootstrap and inspection.

# backend/bizops/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to "bizops:create_app".
# - Use: python -m flask <group> <command> [options]
#
# System bootstrap/repair:
# - python -m flask system init-db
#   Create all tables (use `flask db upgrade` when running with migrations).
# - python -m flask system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data).
# - python -m flask system seed
#   Idempotent: walk-in POS customer plus "Cash Drawer" and "Main Bank Account" wallets.
#
# Inspection:
# - python -m flask wallets list
# - python -m flask products list [--low-stock 5]

from decimal import Decimal

import click
from flask import current_app
from flask.cli import with_appcontext

from .extensions import db
from .models import Counterparty, CounterpartyRole, Wallet
from .money import to_money_str
from .services import payment_service, products_service


DEFAULT_WALLETS = [
    # (config key or literal name, opening balance)
    ("POS_WALLET_NAME", Decimal("100.00")),
    ("Main Bank Account", Decimal("5000.00")),
]


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


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

    click.echo("PASS Database reset complete. Run 'python -m flask system seed' to add defaults.")


@system_group.command('seed')
@with_appcontext
def seed():
    """Create the POS walk-in customer and default wallets (safe to re-run)."""
    customer_name = current_app.config["POS_CUSTOMER_NAME"]
    customer = db.session.query(Counterparty).filter_by(name=customer_name).first()
    if not customer:
        customer = Counterparty(
            name=customer_name,
            email="pos@example.com",
            roles={CounterpartyRole.CLIENT},
        )
        db.session.add(customer)
        db.session.commit()
        click.echo(f"PASS Created '{customer_name}' (ID: {customer.id})")
    else:
        click.echo(f"WARN '{customer_name}' already exists, skipping...")

    for name, opening_balance in DEFAULT_WALLETS:
        name = current_app.config.get(name, name)
        wallet = db.session.query(Wallet).filter_by(name=name).first()
        if wallet:
            click.echo(f"WARN Wallet '{name}' already exists, skipping...")
            continue
        wallet = Wallet(name=name, balance=opening_balance)
        db.session.add(wallet)
        db.session.commit()
        click.echo(f"PASS Created wallet '{name}' with balance {to_money_str(opening_balance)} (ID: {wallet.id})")


@click.group('wallets')
def wallets_group():
    """Wallet inspection commands."""


@wallets_group.command('list')
@with_appcontext
def list_wallets():
    """List wallets and balances."""
    wallets = payment_service.list_wallets()
    if not wallets:
        click.echo("No wallets found. Run: python -m flask system seed")
        return
    for wallet in wallets:
        click.echo(f"{wallet.id:>4}  {wallet.name:<30} {to_money_str(wallet.balance):>14}")


@click.group('products')
def products_group():
    """Product inspection commands."""


@products_group.command('list')
@click.option('--low-stock', type=int, default=None, help='Only show products at or below this stock level')
@with_appcontext
def list_products(low_stock):
    """List products with stock and price."""
    products = products_service.list_products(low_stock=low_stock)
    if not products:
        click.echo("No products found.")
        return
    for product in products:
        click.echo(
            f"{product.id:>4}  {product.sku:<12} {product.name:<30} "
            f"stock={product.stock:<6} price={to_money_str(product.price)}"
        )


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(wallets_group)
    app.cli.add_command(products_group)
