"""FastAPI transport layer for pylbfgs.

Models, service adapters, and routes. No numerical logic.

The ``create_app()`` factory is lazily imported so that
``import pylbfgs.api`` never forces a FastAPI dependency.
"""


def create_app():
    """Deferred import of the FastAPI application factory."""
    from pylbfgs.api.app import create_app as _create_app

    return _create_app()
