from flask import Blueprint

bp = Blueprint("requisitions", __name__, url_prefix="/requisitions")

from . import routes  # noqa: E402,F401
