"""
Production WSGI entry point for Gunicorn.

Usage:
    gunicorn -w 2 -k gthread -b 0.0.0.0:$PORT wsgi:app
"""

from plant_agenda import create_app

# Gunicorn looks for a top-level 'app' variable here.
app = create_app()
