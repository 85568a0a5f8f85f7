from decimal import Decimal

from flask import current_app, jsonify, request

from . import bp
from .forms import RequisitionEntryForm, RequisitionItemForm, RequisitionNumberPreviewForm
from council_portal.extensions import db
from council_portal.models import RequisitionForm, RequisitionItem
from council_portal.sequences import (
    NumberingConflict,
    create_numbered,
    preview_number,
    requisition_numbering,
    reserve_number,
)
from council_portal.utils import (
    body_formdata,
    error_response,
    events_for,
    form_errors,
    formdata_from,
    log_record_event,
    query_formdata,
)


RECORD_TYPE = "requisition"

CENTS = Decimal("0.01")


def _validated_items():
    """
    Validate the ``items`` array of the JSON body row by row.
    Returns (items, errors); errors maps row index -> field errors.
    """
    payload = request.get_json(silent=True)
    rows = payload.get("items") if isinstance(payload, dict) else None
    if not isinstance(rows, list) or not rows:
        return [], {"items": ["At least one item is required."]}

    items = []
    errors = {}
    for index, row in enumerate(rows):
        if not isinstance(row, dict):
            errors[str(index)] = ["Each item must be an object."]
            continue
        item_form = RequisitionItemForm(formdata=formdata_from(row))
        if not item_form.validate():
            errors[str(index)] = item_form.errors
            continue
        items.append({
            "description": item_form.description.data.strip(),
            "quantity": item_form.quantity.data,
            "rate": (item_form.rate.data or Decimal("0")).quantize(CENTS),
        })
    return items, errors


@bp.route("/")
def list_requisitions():
    status = request.args.get("status", "").strip()

    query = RequisitionForm.query
    if status:
        query = query.filter(RequisitionForm.status == status)

    forms = query.order_by(RequisitionForm.form_date.desc(), RequisitionForm.id.desc()).all()
    return jsonify([f.to_dict() for f in forms])


@bp.route("/preview-number")
def preview_requisition_number():
    form = RequisitionNumberPreviewForm(formdata=query_formdata())
    if not form.validate():
        return form_errors(form)

    number = preview_number(requisition_numbering(), None, form.form_date.data)
    return jsonify(form_number=number, provisional=True)


@bp.route("/new", methods=["POST"])
def create_requisition():
    form = RequisitionEntryForm(formdata=body_formdata())

    if not form.validate_on_submit():
        return form_errors(form)

    items, item_errors = _validated_items()
    if item_errors:
        return jsonify(error="Please correct the requisition items.", errors=item_errors), 400

    def build():
        requisition = RequisitionForm(
            form_number=reserve_number(requisition_numbering(), None, form.form_date.data),
            form_date=form.form_date.data,
            department=form.department.data.strip(),
            requested_by=form.requested_by.data.strip(),
            purpose=(form.purpose.data or "").strip() or None,
            status="Pending",
        )
        # fresh item rows per attempt; a rolled-back attempt expunges the old ones
        requisition.items = [RequisitionItem(**item) for item in items]
        requisition.recalculate_total()
        db.session.add(requisition)
        db.session.flush()

        log_record_event(
            RECORD_TYPE, requisition, requisition.form_number, "Created",
            f"{len(items)} item(s), total {requisition.total_amount}",
        )
        return requisition

    try:
        requisition = create_numbered(build)
    except NumberingConflict as exc:
        return error_response(str(exc), 409)

    current_app.logger.info("Issued requisition %s", requisition.form_number)
    return jsonify(requisition.to_dict()), 201


@bp.route("/<int:form_id>")
def requisition_detail(form_id):
    requisition = RequisitionForm.query.get_or_404(form_id)
    data = requisition.to_dict()
    data["events"] = events_for(RECORD_TYPE, requisition.id)
    return jsonify(data)


def _decide(form_id, new_status):
    requisition = RequisitionForm.query.get_or_404(form_id)

    if requisition.status != "Pending":
        return error_response(f"Requisition is already {requisition.status.lower()}.", 409)

    requisition.status = new_status
    note = body_formdata().get("note")
    log_record_event(RECORD_TYPE, requisition, requisition.form_number, new_status, note)

    db.session.commit()
    return jsonify(requisition.to_dict())


@bp.route("/<int:form_id>/approve", methods=["POST"])
def approve_requisition(form_id):
    return _decide(form_id, "Approved")


@bp.route("/<int:form_id>/reject", methods=["POST"])
def reject_requisition(form_id):
    return _decide(form_id, "Rejected")
