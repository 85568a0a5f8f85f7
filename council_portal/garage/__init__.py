from flask import Blueprint

bp = Blueprint("garage", __name__, url_prefix="/garage-permits")

from . import routes  # noqa: E402,F401
