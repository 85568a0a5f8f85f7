from flask import current_app, jsonify, request

from . import bp
from .forms import GaragePermitDetailsForm, GaragePermitForm, PermitNumberPreviewForm
from council_portal.extensions import db
from council_portal.models import GaragePermit
from council_portal.sequences import (
    NumberingConflict,
    create_numbered,
    garage_permit_numbering,
    preview_number,
    reserve_number,
)
from council_portal.utils import (
    acting_user,
    body_formdata,
    error_response,
    events_for,
    form_errors,
    log_record_event,
    query_formdata,
)


RECORD_TYPE = "garage_permit"

DETAIL_FIELDS = [
    "gems_entry_number",
    "vehicle_chassis_number",
    "vehicle_registry_number",
    "vehicle_owner_name",
    "vehicle_owner_address",
    "vehicle_owner_id",
    "vehicle_owner_contact",
    "garage_address",
    "garage_size_sqft",
    "house_registry_number",
    "garage_owner_name",
    "garage_owner_address",
    "garage_owner_id",
    "garage_owner_contact",
    "authorized_by",
    "notes",
]


def _apply_details(permit: GaragePermit, form: GaragePermitDetailsForm):
    for field_name in DETAIL_FIELDS:
        value = getattr(form, field_name).data
        if isinstance(value, str):
            value = value.strip() or None
        setattr(permit, field_name, value)


@bp.route("/")
def list_permits():
    q = request.args.get("q", "").strip()
    status = request.args.get("status", "").strip()

    query = GaragePermit.query

    if status:
        query = query.filter(GaragePermit.status == status)

    if q:
        like_pattern = f"%{q}%"
        query = query.filter(
            db.or_(
                GaragePermit.permit_number.ilike(like_pattern),
                GaragePermit.vehicle_registry_number.ilike(like_pattern),
                GaragePermit.vehicle_owner_name.ilike(like_pattern),
                GaragePermit.garage_owner_name.ilike(like_pattern),
            )
        )

    permits = query.order_by(GaragePermit.issue_date.desc(), GaragePermit.id.desc()).all()
    return jsonify([p.to_dict() for p in permits])


@bp.route("/preview-number")
def preview_permit_number():
    form = PermitNumberPreviewForm(formdata=query_formdata())
    if not form.validate():
        return form_errors(form)

    number = preview_number(garage_permit_numbering(), None, form.issue_date.data)
    return jsonify(permit_number=number, provisional=True)


@bp.route("/new", methods=["POST"])
def create_permit():
    form = GaragePermitForm(formdata=body_formdata())

    if not form.validate_on_submit():
        return form_errors(form)

    def build():
        permit = GaragePermit(
            permit_number=reserve_number(garage_permit_numbering(), None, form.issue_date.data),
            issue_date=form.issue_date.data,
            status=form.status.data,
            checked_by=acting_user(),
        )
        _apply_details(permit, form)
        db.session.add(permit)
        db.session.flush()

        log_record_event(RECORD_TYPE, permit, permit.permit_number, "Created", "Permit created")
        return permit

    try:
        permit = create_numbered(build)
    except NumberingConflict as exc:
        return error_response(str(exc), 409)

    current_app.logger.info("Issued garage permit %s", permit.permit_number)
    return jsonify(permit.to_dict()), 201


@bp.route("/<int:permit_id>")
def permit_detail(permit_id):
    permit = GaragePermit.query.get_or_404(permit_id)
    data = permit.to_dict()
    data["events"] = events_for(RECORD_TYPE, permit.id)
    return jsonify(data)


@bp.route("/<int:permit_id>/edit", methods=["POST"])
def edit_permit(permit_id):
    permit = GaragePermit.query.get_or_404(permit_id)

    if permit.status == "Void":
        return error_response("Void permits cannot be edited.", 409)

    # permit_number and issue_date are IMMUTABLE once issued
    form = GaragePermitDetailsForm(formdata=body_formdata(), obj=permit)

    if not form.validate_on_submit():
        return form_errors(form)

    _apply_details(permit, form)
    log_record_event(RECORD_TYPE, permit, permit.permit_number, "Updated", "Permit details updated")

    db.session.commit()
    return jsonify(permit.to_dict())


@bp.route("/<int:permit_id>/void", methods=["POST"])
def void_permit(permit_id):
    permit = GaragePermit.query.get_or_404(permit_id)

    if permit.status == "Void":
        return error_response("Permit is already void.", 409)

    old_status = permit.status
    permit.status = "Void"

    log_record_event(
        RECORD_TYPE, permit, permit.permit_number, "Void", f"Permit voided (was {old_status})"
    )

    db.session.commit()
    return jsonify(permit.to_dict())


@bp.route("/<int:permit_id>/delete", methods=["POST"])
def delete_permit(permit_id):
    permit = GaragePermit.query.get_or_404(permit_id)
    permit_label = permit.permit_number

    log_record_event(RECORD_TYPE, permit, permit_label, "Deleted", "Permit deleted")
    db.session.delete(permit)
    db.session.commit()
    return jsonify(deleted=permit_label)
