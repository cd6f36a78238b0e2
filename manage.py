"""Management script for database migrations and automation tasks"""

import os
from dotenv import load_dotenv
from flask.cli import FlaskGroup
from flask_migrate import upgrade

load_dotenv()

from leadflow import create_app
from leadflow.extensions import db

app = create_app(os.getenv("APP_ENV"))
cli = FlaskGroup(create_app=lambda: app)


@cli.command("drop-db")
def drop_db():
    """Drop all database tables"""
    confirmation = input("Are you sure you want to drop all tables? (yes/no): ").lower()

    if confirmation == "yes":
        with app.app_context():
            db.drop_all()
            print("Database dropped successfully!")
    else:
        print("Operation cancelled.")


@cli.command("migrate-db")
def migrate_db():
    """Apply any pending database migrations"""
    print("Applying database migrations...")

    with app.app_context():
        upgrade()
        print("Database migrations applied successfully!")


if __name__ == "__main__":
    cli()
