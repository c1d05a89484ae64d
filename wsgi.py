"""
WSGI / Flask CLI entry point.

Usage:
    flask --app wsgi run                     # development server
    gunicorn wsgi:app                        # production (APP_ENV=production)
    flask --app wsgi db migrate -m "..."     # Flask-Migrate / Alembic
"""

from app import create_app

app = create_app()
