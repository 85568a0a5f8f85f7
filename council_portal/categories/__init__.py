from flask import Blueprint

bp = Blueprint("categories", __name__, url_prefix="/categories")

from . import routes  # noqa: E402,F401
