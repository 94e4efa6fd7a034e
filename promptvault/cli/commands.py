import click

from ..errors import EmailAlreadyRegistered
from ..extensions import db


def init_commands(app):
    """Register database and account commands on the Flask CLI."""

    @app.cli.command('create-db')
    def create_db_command():
        """Creates the database tables."""
        with app.app_context():
            db.create_all()
        click.echo('Database tables created.')

    @app.cli.command('create-user')
    @click.argument('email')
    @click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
    def create_user_command(email, password):
        """Create an account that can sign in to the vault."""
        from ..services import auth_service

        with app.app_context():
            try:
                user = auth_service.register_user(email, password)
            except EmailAlreadyRegistered:
                raise click.ClickException(f'{email} is already registered')
            except ValueError as e:
                raise click.ClickException(str(e))
            click.echo(f'Created user {user.email} ({user.id})')
