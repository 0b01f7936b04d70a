"""WSGI entrypoint for serving the NorskTax API behind Passenger or gunicorn."""

from norsktax.backend.app import create_app

application = create_app()
