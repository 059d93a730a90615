#!/usr/bin/env python3
"""
Main entry point for running the FilmClub Flask application.
"""

from filmclub.app import create_app

# Module-level app for `flask --app run` and gunicorn (run:app)
app = create_app()

if __name__ == "__main__":
    app.run(debug=True)
