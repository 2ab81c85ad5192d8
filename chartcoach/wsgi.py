"""
WSGI entry point.

Exposes the FastAPI app as ``application`` for WSGI-only hosts such as
Gunicorn's sync workers or Waitress. Serve over ASGI (``chartcoach serve``)
when the host allows it.
"""

from a2wsgi import ASGIMiddleware

from chartcoach.main import app

application = ASGIMiddleware(app)
