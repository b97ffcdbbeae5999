# Overview: Flask CLI command groups for inspecting the demo store and running analyses.

# backend/salesboard/cli.py
# Commands Legend (run from the repository root):
# Prereqs:
# - Activate your virtualenv and `pip install -e .`.
# - Set FLASK_APP (PowerShell: $env:FLASK_APP="salesboard.wsgi"; bash: export FLASK_APP=salesboard.wsgi).
# - Use: python -m flask <group> <command> [options]
#
# The store is in memory, so every command sees the freshly seeded demo data.
#
# Records:
# - python -m flask records list [--date-from 2023-10-27] [--time-to 12:00]
#   Print records in a date/time range.
# - python -m flask records columns
#   Print the configurable columns discovered from the records.
# - python -m flask records next-ids --customer "Stark Industries" --product "Arc Reactor"
#   Show the customer id and product id a new record would get.
#
# Users:
# - python -m flask users list
#   List users with roles and plain-text passwords.
#
# Analysis:
# - python -m flask analysis run [--date-from ...] [--date-to ...]
#   Summarize the records in range with Gemini and print the result.

import click
from flask import current_app
from flask.cli import with_appcontext

from .services import analysis_service, identifier_service, record_service, user_service, view_service


def _range_options(f):
    for name in ("--time-to", "--time-from", "--date-to", "--date-from"):
        f = click.option(name, default=None, help=f"Inclusive {name[2:].replace('-', ' ')} bound.")(f)
    return f


@click.group('records')
def records_group():
    """Sale record inspection commands."""


@records_group.command('list')
@_range_options
@with_appcontext
def list_records_cmd(date_from, date_to, time_from, time_to):
    """Print records in range."""
    records = view_service.filter_by_range(
        record_service.list_records(), date_from, date_to, time_from, time_to
    )
    if not records:
        click.echo("No records found.")
        return
    for r in records:
        click.echo(
            f"{r['date']} {r['time']}  {r['customer_id']:<12} {r['product_id']:<10} "
            f"{r['product_name']:<24} qty={r['quantity']:<5} total={r['total_amount']:.2f}"
        )


@records_group.command('columns')
@with_appcontext
def columns_cmd():
    """Print configurable columns."""
    for column in view_service.derive_columns(record_service.list_records()):
        click.echo(f"{column:<16} {view_service.format_header(column)}")


@records_group.command('next-ids')
@click.option('--customer', required=True, help="Customer name.")
@click.option('--product', default="", help="Product name.")
@with_appcontext
def next_ids_cmd(customer, product):
    """Show derived ids for a new record."""
    snapshot = record_service.list_records()
    click.echo(f"customer_id: {identifier_service.next_customer_id(snapshot, customer) or '-'}")
    click.echo(f"product_id:  {identifier_service.next_product_id(snapshot, customer, product) or '-'}")


@click.group('users')
def users_group():
    """User inspection commands."""


@users_group.command('list')
@with_appcontext
def list_users_cmd():
    """List users."""
    for user in user_service.list_users():
        click.echo(f"{user.id:<4} {user.username:<24} {user.role:<9} {user.password or 'N/A'}")


@click.group('analysis')
def analysis_group():
    """AI analysis commands."""


@analysis_group.command('run')
@_range_options
@with_appcontext
def run_analysis_cmd(date_from, date_to, time_from, time_to):
    """Summarize records in range (synchronously)."""
    records = view_service.filter_by_range(
        record_service.list_records(), date_from, date_to, time_from, time_to
    )
    click.echo(f"Analyzing {len(records)} records...")
    click.echo(analysis_service.summarize(
        records,
        api_key=current_app.config.get("GEMINI_API_KEY"),
        model=current_app.config.get("GEMINI_MODEL"),
        logger=current_app.logger,
    ))


def register_commands(app):
    app.cli.add_command(records_group)
    app.cli.add_command(users_group)
    app.cli.add_command(analysis_group)
