from flask import current_app


def get_service():
    """The QuinielaService wired into the running app by create_app()."""
    return current_app.extensions["quiniela"]
