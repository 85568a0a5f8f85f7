from flask import jsonify
from flask_wtf.csrf import generate_csrf
from sqlalchemy import func

from . import bp
from council_portal.extensions import db
from council_portal.models import Asset, GaragePermit, RequisitionForm
from council_portal.settings.routes import get_office_code


def _counts_by(column):
    return {
        key: cnt
        for key, cnt in db.session.query(column, func.count()).group_by(column).order_by(column).all()
    }


@bp.route("/")
def index():
    total_value = db.session.query(func.coalesce(func.sum(Asset.value), 0)).scalar()

    return jsonify(
        office_code=get_office_code(),
        assets={
            "total": Asset.query.count(),
            "total_value": float(total_value or 0),
            "by_status": _counts_by(Asset.status),
            "by_category": _counts_by(Asset.category),
        },
        garage_permits={
            "total": GaragePermit.query.count(),
            "by_status": _counts_by(GaragePermit.status),
        },
        requisitions={
            "total": RequisitionForm.query.count(),
            "by_status": _counts_by(RequisitionForm.status),
        },
    )


@bp.route("/csrf-token")
def csrf_token():
    """Token for clients to send back in the X-CSRFToken header."""
    return jsonify(csrf_token=generate_csrf())
