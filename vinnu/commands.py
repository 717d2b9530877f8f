# Flask CLI commands

import click
from flask.cli import with_appcontext
from werkzeug.security import generate_password_hash
from vinnu.extensions import db
from vinnu.models import User
from vinnu.functions.validation import validate_username, validate_email, validate_password


@click.command('create-superadmin')
@click.option('--username', prompt=True)
@click.option('--email', prompt=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.option('--first-name', default='Vinnu')
@click.option('--last-name', default='Admin')
@with_appcontext
def create_superadmin(username, email, password, first_name, last_name):
    # Create the superadmin account, or raise an existing account to superadmin
    username = username.strip().lower()
    email = email.strip().lower()
    for is_valid, msg in (validate_username(username), validate_email(email), validate_password(password)):
        if not is_valid:
            raise click.BadParameter(msg)

    user = User.query.filter_by(username=username).first()
    if user:
        user.role = 'superadmin'
        db.session.commit()
        click.echo(f"{username} is now a superadmin")
        return

    if User.query.filter_by(email=email).first():
        raise click.BadParameter('email already registered')

    db.session.add(User(
        username=username,
        email=email,
        password=generate_password_hash(password, method='scrypt'),
        first_name=first_name,
        last_name=last_name,
        role='superadmin',
        social_profiles={}
    ))
    db.session.commit()
    click.echo(f"superadmin {username} created")


def register_commands(flask_app):
    flask_app.cli.add_command(create_superadmin)
