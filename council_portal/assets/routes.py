from __future__ import annotations

from datetime import datetime
import io
import csv
from decimal import Decimal, InvalidOperation

from flask import Response, current_app, jsonify, request

from . import bp
from .forms import AssetDetailsForm, AssetForm, AssetNumberPreviewForm
from council_portal.extensions import db
from council_portal.models import ASSET_STATUSES, Asset
from council_portal.numbering import KIND_ASSET
from council_portal.sequences import (
    NumberingConflict,
    asset_numbering,
    create_numbered,
    number_in_use,
    preview_number,
    reserve_number,
)
from council_portal.utils import (
    body_formdata,
    error_response,
    events_for,
    form_errors,
    log_record_event,
    query_formdata,
)


RECORD_TYPE = "asset"

EXPORT_HEADERS = [
    "asset_number",
    "name",
    "category",
    "status",
    "location",
    "entry_date",
    "purchase_date",
    "value",
    "model_number",
    "serial_number",
    "registration_number",
    "notes",
]


# ----------------------------
# Helpers
# ----------------------------

def _apply_details(asset: Asset, form: AssetDetailsForm):
    asset.name = form.name.data
    asset.status = form.status.data
    asset.location = form.location.data or None
    asset.purchase_date = form.purchase_date.data
    asset.value = form.value.data if form.value.data is not None else Decimal("0")
    asset.model_number = form.model_number.data or None
    asset.serial_number = form.serial_number.data or None
    asset.registration_number = form.registration_number.data or None
    asset.last_maintenance = form.last_maintenance.data
    asset.notes = form.notes.data or None
    asset.asset_size = form.asset_size.data or None
    asset.constructed_date = form.constructed_date.data


# ----------------------------
# Routes
# ----------------------------

@bp.route("/")
def list_assets():
    q = request.args.get("q", "").strip()
    category = request.args.get("category", "").strip()
    status = request.args.get("status", "").strip()
    sort = request.args.get("sort", "asset_number").strip()
    direction = request.args.get("dir", "asc").strip().lower()
    export = request.args.get("export", "").strip()

    query = Asset.query

    if category:
        query = query.filter(Asset.category == category)

    if status:
        query = query.filter(Asset.status == status)

    if q:
        like_pattern = f"%{q}%"
        query = query.filter(
            db.or_(
                Asset.name.ilike(like_pattern),
                Asset.asset_number.ilike(like_pattern),
                Asset.serial_number.ilike(like_pattern),
                Asset.location.ilike(like_pattern),
            )
        )

    sort_map = {
        "id": Asset.id,
        "asset_number": Asset.asset_number,
        "name": Asset.name,
        "category": Asset.category,
        "status": Asset.status,
        "entry_date": Asset.entry_date,
        "value": Asset.value,
        "created_at": Asset.created_at,
    }

    sort_col = sort_map.get(sort, Asset.asset_number)
    sort_func = sort_col.desc if direction == "desc" else sort_col.asc
    assets = query.order_by(sort_func()).all()

    if export == "csv":
        return export_assets_csv(assets)

    return jsonify([a.to_dict() for a in assets])


@bp.route("/preview-number")
def preview_asset_number():
    form = AssetNumberPreviewForm(formdata=query_formdata())
    if not form.validate():
        return form_errors(form)

    number = preview_number(asset_numbering(), form.category.data, form.entry_date.data)
    return jsonify(asset_number=number, provisional=True)


@bp.route("/new", methods=["POST"])
def create_asset():
    form = AssetForm(formdata=body_formdata())

    if not form.validate_on_submit():
        return form_errors(form)

    def build():
        # Always re-derived here; a previewed number is never trusted
        asset_number = reserve_number(asset_numbering(), form.category.data, form.entry_date.data)
        asset = Asset(
            asset_number=asset_number,
            category=form.category.data,
            entry_date=form.entry_date.data,
        )
        _apply_details(asset, form)
        db.session.add(asset)
        db.session.flush()  # ensure asset.id exists

        log_record_event(RECORD_TYPE, asset, asset.asset_number, "Created", "Initial registration")
        return asset

    try:
        asset = create_numbered(build)
    except NumberingConflict as exc:
        return error_response(str(exc), 409)

    current_app.logger.info("Issued asset number %s", asset.asset_number)
    return jsonify(asset.to_dict()), 201


@bp.route("/<int:asset_id>")
def asset_detail(asset_id):
    asset = Asset.query.get_or_404(asset_id)
    data = asset.to_dict()
    data["events"] = events_for(RECORD_TYPE, asset.id)
    return jsonify(data)


@bp.route("/<int:asset_id>/edit", methods=["POST"])
def edit_asset(asset_id):
    asset = Asset.query.get_or_404(asset_id)

    # asset_number, category and entry_date are intentionally IMMUTABLE
    form = AssetDetailsForm(formdata=body_formdata(), obj=asset)

    if not form.validate_on_submit():
        return form_errors(form)

    old_status = asset.status
    _apply_details(asset, form)

    note = "Asset details updated."
    if old_status != asset.status:
        note = f"Asset details updated. Status: {old_status} -> {asset.status}"
    log_record_event(RECORD_TYPE, asset, asset.asset_number, "Updated", note)

    db.session.commit()
    return jsonify(asset.to_dict())


@bp.route("/<int:asset_id>/delete", methods=["POST"])
def delete_asset(asset_id):
    asset = Asset.query.get_or_404(asset_id)
    asset_label = asset.asset_number

    log_record_event(RECORD_TYPE, asset, asset_label, "Deleted", f"Asset {asset.name} deleted")
    db.session.delete(asset)
    db.session.commit()
    return jsonify(deleted=asset_label)


# ----------------------------
# CSV Export / Import
# ----------------------------

def export_assets_csv(assets):
    """Return a CSV response for the given assets list."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(EXPORT_HEADERS)

    for a in assets:
        writer.writerow([
            a.asset_number,
            a.name or "",
            a.category or "",
            a.status or "",
            a.location or "",
            a.entry_date or "",
            a.purchase_date or "",
            a.value if a.value is not None else "",
            a.model_number or "",
            a.serial_number or "",
            a.registration_number or "",
            (a.notes or "").replace("\n", " ").strip(),
        ])

    csv_data = output.getvalue()
    output.close()

    return Response(
        csv_data,
        mimetype="text/csv",
        headers={
            "Content-Disposition": "attachment; filename=assets_export.csv"
        }
    )


def _parse_date(val):
    if not val:
        return None
    return datetime.strptime(val, "%Y-%m-%d").date()


@bp.route("/import", methods=["POST"])
def import_assets():
    """
    Bulk-create assets from a CSV upload. Rows without an asset_number are
    numbered in file order. Any row error aborts the whole import.
    """
    file = request.files.get("file")
    if not file or file.filename == "":
        return error_response("Please upload a CSV file.", 400)

    try:
        content = file.read().decode("utf-8-sig")
    except UnicodeDecodeError:
        return error_response("Could not read the uploaded file. Ensure it is valid UTF-8.", 400)

    reader = csv.DictReader(io.StringIO(content))
    missing_headers = [h for h in ["name", "category", "entry_date"] if h not in (reader.fieldnames or [])]
    if missing_headers:
        return error_response(f"Missing required headers: {', '.join(missing_headers)}", 400)

    scheme = asset_numbering()
    created = []
    errors = []
    row_num = 1  # header

    for row in reader:
        row_num += 1
        name = (row.get("name") or "").strip()
        category = (row.get("category") or "").strip()
        status = (row.get("status") or "").strip() or "Operational"
        asset_number = (row.get("asset_number") or "").strip()
        value_raw = (row.get("value") or "").strip()

        if not name:
            errors.append(f"Row {row_num}: name is required.")
            continue

        if not category:
            errors.append(f"Row {row_num}: category is required.")
            continue

        if status not in ASSET_STATUSES:
            errors.append(f"Row {row_num}: invalid status '{status}'.")
            continue

        try:
            entry_date = _parse_date((row.get("entry_date") or "").strip())
            purchase_date = _parse_date((row.get("purchase_date") or "").strip())
        except ValueError:
            errors.append(f"Row {row_num}: dates must be YYYY-MM-DD.")
            continue

        if not entry_date:
            errors.append(f"Row {row_num}: entry_date is required.")
            continue

        value = Decimal("0")
        if value_raw:
            try:
                value = Decimal(value_raw)
            except InvalidOperation:
                errors.append(f"Row {row_num}: value must be a number.")
                continue

        if asset_number:
            if number_in_use(KIND_ASSET, asset_number):
                errors.append(f"Row {row_num}: asset_number '{asset_number}' already exists.")
                continue
        else:
            asset_number = reserve_number(scheme, category, entry_date)

        asset = Asset(
            asset_number=asset_number,
            name=name,
            category=category,
            status=status,
            location=(row.get("location") or "").strip() or None,
            entry_date=entry_date,
            purchase_date=purchase_date,
            value=value,
            model_number=(row.get("model_number") or "").strip() or None,
            serial_number=(row.get("serial_number") or "").strip() or None,
            registration_number=(row.get("registration_number") or "").strip() or None,
            notes=(row.get("notes") or "").strip() or None,
        )
        db.session.add(asset)
        db.session.flush()

        log_record_event(RECORD_TYPE, asset, asset.asset_number, "Created", "Asset imported via CSV")
        created.append(asset.asset_number)

    if errors:
        db.session.rollback()
        return jsonify(error="Import aborted; nothing was saved.", errors=errors), 400

    db.session.commit()
    current_app.logger.info("Imported %s assets", len(created))
    return jsonify(imported=len(created), asset_numbers=created), 201
