from typing import Optional

from flask import jsonify, request
from werkzeug.datastructures import CombinedMultiDict, MultiDict

from council_portal.extensions import db
from council_portal.models import RecordEvent


def acting_user() -> str:
    """Display name of whoever is making the request. Not authenticated."""
    return (request.headers.get("X-Portal-User") or "").strip() or "system"


def log_record_event(
    record_type: str,
    record,
    number: Optional[str],
    event_type: str,
    note: Optional[str] = None,
):
    """
    Add a RecordEvent row. Caller commits.
    """
    ev = RecordEvent(
        record_type=record_type,
        record_id=record.id,
        record_number=number,
        event_type=event_type,
        note=note,
        performed_by=acting_user(),
    )
    db.session.add(ev)
    return ev


def events_for(record_type: str, record_id: int):
    events = (
        RecordEvent.query
        .filter_by(record_type=record_type, record_id=record_id)
        .order_by(RecordEvent.created_at.desc(), RecordEvent.id.desc())
        .all()
    )
    return [ev.to_dict() for ev in events]


def form_errors(form, message="Please correct the errors in the form."):
    return jsonify(error=message, errors=form.errors), 400


def error_response(message, status):
    return jsonify(error=message), status


def query_formdata():
    """Query string as form data, for validating GET parameters with a form."""
    return MultiDict(request.args)


def formdata_from(mapping):
    """
    Turn a decoded JSON object into form data WTForms can process.

    Scalars become strings, ``null`` counts as absent and nested
    objects are skipped. Lists become repeated values.
    """
    formdata = MultiDict()
    for key, value in mapping.items():
        for item in value if isinstance(value, list) else [value]:
            if item is None or isinstance(item, (dict, list)):
                continue
            formdata.add(key, item if isinstance(item, str) else str(item))
    return formdata


def body_formdata():
    """Form data for the current request body, JSON or form-encoded."""
    if request.is_json:
        payload = request.get_json(silent=True)
        return formdata_from(payload if isinstance(payload, dict) else {})
    if request.files:
        return CombinedMultiDict((request.files, request.form))
    return request.form
