"""
Issue document numbers from the ``document_sequences`` counter table.

Two phases:

* ``preview_number`` reads the counter and never writes. Used to show the
  number a form *would* get while it is being filled in.
* ``reserve_number`` locks the counter row, bumps it and returns the number
  inside the caller's transaction. Only this value may be persisted.
"""
from __future__ import annotations

from flask import current_app
from sqlalchemy.exc import IntegrityError

from council_portal.extensions import db
from council_portal.models import Asset, AssetCategory, DocumentSequence, GaragePermit, RequisitionForm
from council_portal.numbering import (
    KIND_ASSET,
    KIND_GARAGE_PERMIT,
    KIND_REQUISITION,
    NumberingScheme,
    asset_scheme,
    garage_permit_scheme,
    requisition_scheme,
    sequence_of,
)
from council_portal.settings.routes import get_office_code


class NumberingConflict(Exception):
    """A number could not be issued without colliding with a concurrent writer."""


def _number_column(kind: str):
    return {
        KIND_ASSET: Asset.asset_number,
        KIND_GARAGE_PERMIT: GaragePermit.permit_number,
        KIND_REQUISITION: RequisitionForm.form_number,
    }[kind]


def asset_numbering() -> NumberingScheme:
    class_codes = dict(AssetCategory.query.with_entities(AssetCategory.name, AssetCategory.code).all())
    return asset_scheme(get_office_code(), class_codes)


def garage_permit_numbering() -> NumberingScheme:
    return garage_permit_scheme(get_office_code())


def requisition_numbering() -> NumberingScheme:
    return requisition_scheme(get_office_code())


def _max_existing_seq(kind: str, group_key: str) -> int:
    """
    Scan existing record numbers to find the max sequence for a group.
    This is used to initialize the counter the first time a group is used,
    e.g. for records imported with their numbers already assigned.
    """
    column = _number_column(kind)
    numbers = (
        db.session.query(column)
        .filter(column.startswith(group_key, autoescape=True))
        .all()
    )
    max_seq = 0
    for (number,) in numbers:
        seq_val = sequence_of(number, group_key)
        if seq_val is not None and seq_val > max_seq:
            max_seq = seq_val
    return max_seq


def _get_or_create_sequence(kind: str, group_key: str) -> DocumentSequence:
    """
    Fetch or create the counter for a group.
    Uses with_for_update so concurrent reservations serialize on DBs that support it.
    """
    seq = (
        DocumentSequence.query
        .filter_by(kind=kind, group_key=group_key)
        .with_for_update()
        .first()
    )

    if not seq:
        seq = DocumentSequence(kind=kind, group_key=group_key, last_seq=_max_existing_seq(kind, group_key))
        db.session.add(seq)
        db.session.flush()
    return seq


def preview_number(scheme: NumberingScheme, classification, effective_date) -> str:
    """
    Number the next record in this group would receive right now.
    Not a reservation: two previews taken before either record is saved agree.
    """
    group_key = scheme.group_key(classification, effective_date)
    seq = DocumentSequence.query.filter_by(kind=scheme.kind, group_key=group_key).first()
    next_seq = (seq.last_seq if seq else _max_existing_seq(scheme.kind, group_key)) + 1
    while number_in_use(scheme.kind, scheme.format_id(group_key, next_seq)):
        next_seq += 1
    return scheme.format_id(group_key, next_seq)


def reserve_number(scheme: NumberingScheme, classification, effective_date) -> str:
    """
    Issue the next number for the group. Caller commits.

    Numbers are never reused, even if the record holding one is deleted.
    """
    group_key = scheme.group_key(classification, effective_date)
    seq = _get_or_create_sequence(scheme.kind, group_key)
    seq.last_seq += 1
    # skip numbers taken outside the counter (explicit numbers on CSV import)
    while number_in_use(scheme.kind, scheme.format_id(group_key, seq.last_seq)):
        seq.last_seq += 1
    db.session.flush()
    return scheme.format_id(group_key, seq.last_seq)


def number_in_use(kind: str, number: str) -> bool:
    column = _number_column(kind)
    return db.session.query(column).filter(column == number).first() is not None


def create_numbered(build, attempts=None):
    """
    Run ``build()`` (which reserves a number and adds the record to the
    session) and commit. On a unique-constraint collision the transaction is
    rolled back and ``build`` runs again against fresh state.
    """
    attempts = attempts or current_app.config.get("NUMBERING_ATTEMPTS", 3)
    for attempt in range(1, attempts + 1):
        try:
            record = build()
            db.session.commit()
            return record
        except IntegrityError as exc:
            db.session.rollback()
            current_app.logger.warning(
                "Number allocation collided (attempt %s/%s): %s", attempt, attempts, exc.orig
            )
    raise NumberingConflict(f"Could not issue a unique number after {attempts} attempts.")
