# storefront/cli.py
import click
from flask import current_app
from .repositories import users
from .services.account_service import ensure_admin

@click.command("create-admin")
@click.option("--mobile", "mobile_number", default=None, help="defaults to ADMIN_MOBILE_NUMBER")
@click.option("--password", default=None, help="defaults to ADMIN_PASSWORD")
@click.option("--name", default=None, help="defaults to ADMIN_NAME")
@click.option("--email", default=None, help="defaults to ADMIN_EMAIL")
def create_admin(mobile_number, password, name, email):
    cfg = current_app.config
    admin, created = ensure_admin(
        users,
        name=name or cfg["ADMIN_NAME"],
        mobile_number=(mobile_number or cfg["ADMIN_MOBILE_NUMBER"]).strip(),
        password=password or cfg["ADMIN_PASSWORD"],
        email=email or cfg.get("ADMIN_EMAIL"),
        address=cfg.get("ADMIN_ADDRESS", "Admin Office"),
    )
    if not created:
        click.echo(f"Admin already exists: {admin.id} {admin.mobile_number}"); return
    click.echo(f"Admin created: {admin.id} {admin.mobile_number}")

def register_cli(app):
    app.cli.add_command(create_admin)
