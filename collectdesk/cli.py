import click

from collectdesk import db
from collectdesk.errors import ServiceError
from collectdesk.models import User, UserRole
from collectdesk.services import CollectorAuthService
from collectdesk.utils import is_valid_email


def register_commands(app) -> None:
    """Attach the management commands to ``flask``."""

    @app.cli.command("create-admin")
    @click.argument("email")
    @click.password_option()
    def create_admin(email, password):
        """Create an administrator account."""
        email = email.strip()
        if not is_valid_email(email):
            raise click.ClickException(f"{email} is not a valid email address")
        if User.query.filter_by(email=email).first():
            raise click.ClickException(f"User {email} already exists")

        user = User(email=email, role=UserRole.ADMIN)
        user.set_password(password)
        db.session.add(user)
        db.session.commit()
        click.echo(f"Administrator {email} created")

    @app.cli.command("create-collector")
    @click.argument("name")
    @click.password_option()
    def create_collector(name, password):
        """Create a collector account with a password."""
        try:
            collector = CollectorAuthService.register(name, password)
        except ServiceError as exc:
            raise click.ClickException(exc.message)
        click.echo(f"Collector {collector.name} created (id {collector.id})")
