from .extensions import db
from datetime import datetime
from decimal import Decimal


ASSET_STATUSES = ["Operational", "Maintenance", "Repair Needed", "Retired", "Sold"]
PERMIT_STATUSES = ["Issued", "Void", "Pending Upload"]
REQUISITION_STATUSES = ["Pending", "Approved", "Rejected"]


def _iso(value):
    return value.isoformat() if value else None


def _money(value):
    return float(value) if value is not None else None


class TimestampMixin:
    created_at = db.Column(
        db.DateTime,
        server_default=db.func.now(),
        nullable=False
    )
    updated_at = db.Column(
        db.DateTime,
        server_default=db.func.now(),
        onupdate=db.func.now(),
        nullable=False
    )


class Setting(TimestampMixin, db.Model):
    __tablename__ = "settings"

    key = db.Column(db.String(100), primary_key=True)
    value = db.Column(db.Text, nullable=True)

    def __repr__(self):
        return f"<Setting {self.key}={self.value!r}>"


class DocumentSequence(db.Model):
    """
    Last sequence issued for one (kind, group key) pair, e.g.
    ("asset", "258-2026-04") -> 7. Rows are never deleted or rewound.
    """
    __tablename__ = "document_sequences"

    id = db.Column(db.Integer, primary_key=True)
    kind = db.Column(db.String(30), nullable=False)
    group_key = db.Column(db.String(100), nullable=False)
    last_seq = db.Column(db.Integer, nullable=False, default=0)

    __table_args__ = (
        db.UniqueConstraint("kind", "group_key", name="uq_document_sequence_kind_group"),
    )

    def __repr__(self):
        return f"<DocumentSequence {self.kind} {self.group_key} @{self.last_seq}>"


class AssetCategory(TimestampMixin, db.Model):
    __tablename__ = "asset_categories"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(150), nullable=False, unique=True)
    name_dh = db.Column(db.String(200), nullable=True)  # Dhivehi name
    code = db.Column(db.String(2), nullable=False, unique=True)
    description = db.Column(db.Text, nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "name_dh": self.name_dh,
            "code": self.code,
            "description": self.description,
        }

    def __repr__(self):
        return f"<AssetCategory {self.code} {self.name}>"


class Asset(TimestampMixin, db.Model):
    __tablename__ = "assets"

    id = db.Column(db.Integer, primary_key=True)

    # issued once at creation, never edited
    asset_number = db.Column(db.String(100), nullable=False, unique=True)
    name = db.Column(db.String(150), nullable=False)
    category = db.Column(db.String(150), nullable=False)
    status = db.Column(db.String(50), nullable=False, default="Operational")
    location = db.Column(db.String(200), nullable=True)

    purchase_date = db.Column(db.Date, nullable=True)
    entry_date = db.Column(db.Date, nullable=False)
    value = db.Column(db.Numeric(12, 2), nullable=False, default=Decimal("0"))

    model_number = db.Column(db.String(150), nullable=True)
    serial_number = db.Column(db.String(150), nullable=True)
    registration_number = db.Column(db.String(150), nullable=True)
    last_maintenance = db.Column(db.Date, nullable=True)
    notes = db.Column(db.Text, nullable=True)

    # land & buildings
    asset_size = db.Column(db.String(100), nullable=True)
    constructed_date = db.Column(db.Date, nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "asset_number": self.asset_number,
            "name": self.name,
            "category": self.category,
            "status": self.status,
            "location": self.location,
            "purchase_date": _iso(self.purchase_date),
            "entry_date": _iso(self.entry_date),
            "value": _money(self.value),
            "model_number": self.model_number,
            "serial_number": self.serial_number,
            "registration_number": self.registration_number,
            "last_maintenance": _iso(self.last_maintenance),
            "notes": self.notes,
            "asset_size": self.asset_size,
            "constructed_date": _iso(self.constructed_date),
        }

    def __repr__(self):
        return f"<Asset {self.asset_number} {self.name} ({self.status})>"


class GaragePermit(TimestampMixin, db.Model):
    __tablename__ = "garage_permits"

    id = db.Column(db.Integer, primary_key=True)

    permit_number = db.Column(db.String(100), nullable=False, unique=True)
    gems_entry_number = db.Column(db.String(100), nullable=True)
    issue_date = db.Column(db.Date, nullable=False)
    status = db.Column(db.String(30), nullable=False, default="Issued")

    vehicle_chassis_number = db.Column(db.String(100), nullable=False)
    vehicle_registry_number = db.Column(db.String(100), nullable=False)

    vehicle_owner_name = db.Column(db.String(150), nullable=False)
    vehicle_owner_address = db.Column(db.String(250), nullable=True)
    vehicle_owner_id = db.Column(db.String(50), nullable=True)
    vehicle_owner_contact = db.Column(db.String(50), nullable=True)

    garage_address = db.Column(db.String(250), nullable=False)
    garage_size_sqft = db.Column(db.Integer, nullable=True)
    house_registry_number = db.Column(db.String(100), nullable=True)

    garage_owner_name = db.Column(db.String(150), nullable=False)
    garage_owner_address = db.Column(db.String(250), nullable=True)
    garage_owner_id = db.Column(db.String(50), nullable=True)
    garage_owner_contact = db.Column(db.String(50), nullable=True)

    checked_by = db.Column(db.String(150), nullable=True)
    authorized_by = db.Column(db.String(150), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "permit_number": self.permit_number,
            "gems_entry_number": self.gems_entry_number,
            "issue_date": _iso(self.issue_date),
            "status": self.status,
            "vehicle_chassis_number": self.vehicle_chassis_number,
            "vehicle_registry_number": self.vehicle_registry_number,
            "vehicle_owner_name": self.vehicle_owner_name,
            "vehicle_owner_address": self.vehicle_owner_address,
            "vehicle_owner_id": self.vehicle_owner_id,
            "vehicle_owner_contact": self.vehicle_owner_contact,
            "garage_address": self.garage_address,
            "garage_size_sqft": self.garage_size_sqft,
            "house_registry_number": self.house_registry_number,
            "garage_owner_name": self.garage_owner_name,
            "garage_owner_address": self.garage_owner_address,
            "garage_owner_id": self.garage_owner_id,
            "garage_owner_contact": self.garage_owner_contact,
            "checked_by": self.checked_by,
            "authorized_by": self.authorized_by,
            "notes": self.notes,
        }

    def __repr__(self):
        return f"<GaragePermit {self.permit_number} ({self.status})>"


class RequisitionForm(TimestampMixin, db.Model):
    __tablename__ = "requisition_forms"

    id = db.Column(db.Integer, primary_key=True)

    form_number = db.Column(db.String(100), nullable=False, unique=True)
    form_date = db.Column(db.Date, nullable=False)
    department = db.Column(db.String(150), nullable=False)
    requested_by = db.Column(db.String(150), nullable=False)
    purpose = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(30), nullable=False, default="Pending")
    total_amount = db.Column(db.Numeric(14, 2), nullable=False, default=Decimal("0"))

    items = db.relationship(
        "RequisitionItem",
        back_populates="form",
        order_by="RequisitionItem.id",
        cascade="all, delete-orphan",
    )

    def recalculate_total(self):
        self.total_amount = sum(
            (Decimal(item.quantity) * Decimal(item.rate) for item in self.items),
            Decimal("0"),
        )
        return self.total_amount

    def to_dict(self):
        return {
            "id": self.id,
            "form_number": self.form_number,
            "form_date": _iso(self.form_date),
            "department": self.department,
            "requested_by": self.requested_by,
            "purpose": self.purpose,
            "status": self.status,
            "total_amount": _money(self.total_amount),
            "items": [item.to_dict() for item in self.items],
        }

    def __repr__(self):
        return f"<RequisitionForm {self.form_number} ({self.status})>"


class RequisitionItem(db.Model):
    __tablename__ = "requisition_items"

    id = db.Column(db.Integer, primary_key=True)
    form_id = db.Column(db.Integer, db.ForeignKey("requisition_forms.id"), nullable=False)

    description = db.Column(db.String(250), nullable=False)
    quantity = db.Column(db.Integer, nullable=False, default=1)
    rate = db.Column(db.Numeric(12, 2), nullable=False, default=Decimal("0"))

    form = db.relationship("RequisitionForm", back_populates="items")

    def to_dict(self):
        return {
            "id": self.id,
            "description": self.description,
            "quantity": self.quantity,
            "rate": _money(self.rate),
            "amount": _money(Decimal(self.quantity) * Decimal(self.rate)),
        }


class RecordEvent(db.Model):
    __tablename__ = "record_events"

    id = db.Column(db.Integer, primary_key=True)

    record_type = db.Column(db.String(30), nullable=False)  # asset, garage_permit, requisition
    record_id = db.Column(db.Integer, nullable=False)
    record_number = db.Column(db.String(100), nullable=True)

    event_type = db.Column(db.String(50), nullable=False)
    note = db.Column(db.Text, nullable=True)
    performed_by = db.Column(db.String(150), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)

    def to_dict(self):
        return {
            "event_type": self.event_type,
            "note": self.note,
            "performed_by": self.performed_by,
            "record_number": self.record_number,
            "created_at": _iso(self.created_at),
        }

    def __repr__(self):
        return f"<RecordEvent {self.event_type} for {self.record_type} {self.record_id} at {self.created_at}>"
