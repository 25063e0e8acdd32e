# Overview: Flask CLI command groups for seeding, inspection, and operator checks.

# backend/insights/cli.py
# Commands Legend (run from the backend directory):
# Prereqs:
# - Activate your virtualenv.
# - Set FLASK_APP to wsgi.py (PowerShell: $env:FLASK_APP="wsgi.py").
# - Use: python -m flask <group> <command> [options]
#
# System:
# - python -m flask system check
#   Fail (exit 1) if any role is missing its permission template.
#
# Role templates:
# - python -m flask roles init
#   Idempotently seed role templates with their default permissions.
# - python -m flask roles grant manager order_update
#   Grant a permission to a role template.
# - python -m flask roles revoke manager order_update
#   Revoke a permission from a role template.
#
# Principals:
# - python -m flask users permissions alice
#   Show a principal's effective permissions.
# - python -m flask users descendants alice
#   List every principal below alice in the management tree.
#
# Sessions:
# - python -m flask sessions issue alice --hours 8
#   Issue a bearer token (printed once) for API testing.
#
# Stats:
# - python -m flask stats overview alice --year 2025
#   Print a principal's dashboard overview as JSON.

import json

import click
from datetime import timedelta
from flask.cli import with_appcontext

from .errors import InsightsError, NotFoundError
from .extensions import db
from .models import User
from .permissions import get_permission_definition
from .services import dashboard_service, hierarchy_service, permission_service, session_service


def _find_user(username: str) -> User | None:
    user = db.session.query(User).filter_by(username=username).first()
    if not user:
        click.echo(f"FAIL User '{username}' not found")
    return user


@click.group('system')
def system_group():
    """System checks."""


@system_group.command('check')
@with_appcontext
def check_system():
    """Verify every role has a permission template."""
    try:
        roles = permission_service.check_role_templates()
    except InsightsError as e:
        click.echo(f"FAIL {e}")
        raise click.exceptions.Exit(1)
    click.echo(f"PASS Role templates present: {', '.join(roles)}")


@click.group('roles')
def roles_group():
    """Role template management."""


@roles_group.command('init')
@with_appcontext
def init_roles():
    """Create role templates and their default permissions."""
    created = permission_service.initialize_role_templates()
    click.echo(f"PASS Role templates initialized ({created} rows created)")


@roles_group.command('grant')
@click.argument('role_name')
@click.argument('permission_code')
@with_appcontext
def grant_permission_cli(role_name, permission_code):
    """Grant a permission to a role."""
    try:
        permission_service.grant_permission_to_role(role_name, permission_code)
        click.echo(f"PASS Granted '{permission_code}' to role '{role_name}'")
    except (ValueError, NotFoundError) as e:
        click.echo(f"FAIL Error: {str(e)}")


@roles_group.command('revoke')
@click.argument('role_name')
@click.argument('permission_code')
@with_appcontext
def revoke_permission_cli(role_name, permission_code):
    """Revoke a permission from a role."""
    try:
        revoked = permission_service.revoke_permission_from_role(role_name, permission_code)
        if revoked:
            click.echo(f"PASS Revoked '{permission_code}' from role '{role_name}'")
        else:
            click.echo(f"WARN  Permission '{permission_code}' was not granted to '{role_name}'")
    except NotFoundError as e:
        click.echo(f"FAIL Error: {str(e)}")


@click.group('users')
def users_group():
    """Principal inspection."""


@users_group.command('permissions')
@click.argument('username')
@with_appcontext
def user_permissions_cli(username):
    """Show a user's effective permissions."""
    user = _find_user(username)
    if not user:
        return

    perms = permission_service.effective_permissions(user)
    if perms is permission_service.ALL_PERMISSIONS:
        click.echo(f"User '{username}' ({user.role}) has ALL permissions")
        return

    click.echo(f"User '{username}' ({user.role}): {len(perms)} permissions")
    for code in sorted(perms):
        definition = get_permission_definition(code)
        label = f"{definition['category']}: {definition['name']}" if definition else "unregistered"
        click.echo(f"  {code:<20} {label}")


@users_group.command('descendants')
@click.argument('username')
@with_appcontext
def user_descendants_cli(username):
    """List principals managed directly or indirectly by a user."""
    user = _find_user(username)
    if not user:
        return

    try:
        ids = hierarchy_service.descendants_of(user.id)
    except InsightsError as e:
        click.echo(f"FAIL {e}")
        raise click.exceptions.Exit(1)

    if not ids:
        click.echo(f"User '{username}' manages nobody.")
        return

    rows = db.session.query(User).filter(User.id.in_(sorted(ids))).order_by(User.id).all()
    click.echo(f"{'ID':<5} {'Username':<20} {'Role':<12} {'Managed by'}")
    for row in rows:
        click.echo(f"{row.id:<5} {row.username:<20} {row.role:<12} {row.managed_by_user_id}")


@click.group('sessions')
def sessions_group():
    """Bearer token issuing for operators."""


@sessions_group.command('issue')
@click.argument('username')
@click.option('--hours', default=24, show_default=True, type=int, help='Token lifetime')
@with_appcontext
def issue_session_cli(username, hours):
    """Issue a bearer token for a user. The token is shown only once."""
    user = _find_user(username)
    if not user:
        return

    try:
        _, token = session_service.create_session(user.id, lifetime=timedelta(hours=hours))
    except NotFoundError as e:
        click.echo(f"FAIL {e}")
        return
    click.echo(token)


@click.group('stats')
def stats_group():
    """Dashboard statistics from the command line."""


@stats_group.command('overview')
@click.argument('username')
@click.option('--year', type=int, default=None, help='Year to chart (defaults to the current year)')
@with_appcontext
def stats_overview_cli(username, year):
    """Print a user's dashboard overview as JSON."""
    user = _find_user(username)
    if not user:
        return

    try:
        stats = dashboard_service.overview_stats(user, year=year)
    except InsightsError as e:
        click.echo(f"FAIL {e}")
        raise click.exceptions.Exit(1)
    click.echo(json.dumps(stats, indent=2))


def register_commands(app):
    """Register all CLI commands with Flask app."""
    app.cli.add_command(system_group)
    app.cli.add_command(roles_group)
    app.cli.add_command(users_group)
    app.cli.add_command(sessions_group)
    app.cli.add_command(stats_group)
