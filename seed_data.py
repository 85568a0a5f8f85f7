from datetime import date
from decimal import Decimal

from council_portal import create_app
from council_portal.extensions import db
from council_portal.models import Asset, GaragePermit, RequisitionForm, RequisitionItem
from council_portal.sequences import (
    asset_numbering,
    garage_permit_numbering,
    requisition_numbering,
    reserve_number,
)


def get_or_create(model, defaults=None, **kwargs):
    """Simple helper to avoid duplicate seed rows."""
    instance = model.query.filter_by(**kwargs).first()
    if instance:
        return instance, False
    params = dict(kwargs)
    if defaults:
        params.update(defaults)
    instance = model(**params)
    db.session.add(instance)
    return instance, True


def seed_asset(scheme, name, category, entry_date, **fields):
    if Asset.query.filter_by(name=name).first():
        return
    asset = Asset(
        asset_number=reserve_number(scheme, category, entry_date),
        name=name,
        category=category,
        entry_date=entry_date,
        **fields,
    )
    db.session.add(asset)


def seed():
    app = create_app()
    with app.app_context():
        print("Seeding demo data...")

        # Categories come from create_app; numbers go through the allocator
        assets = asset_numbering()
        seed_asset(assets, "Toyota Hilux", "Vehicles", date(2026, 1, 12),
                   status="Operational", location="Council Yard",
                   value=Decimal("385000"), registration_number="P-4412")
        seed_asset(assets, "Council Van", "Vehicles", date(2026, 2, 3),
                   status="Maintenance", location="Council Yard", value=Decimal("240000"))
        seed_asset(assets, "Office Desk Set", "Furniture, Fixtures & Fittings", date(2026, 2, 14),
                   location="Secretariat", value=Decimal("8500"))
        seed_asset(assets, "Brush Cutter", "Tools & Equipment", date(2026, 3, 1),
                   location="Store", value=Decimal("4200"))
        seed_asset(assets, "Council Office Building", "Land, Buildings & Other Tangible Assets",
                   date(2026, 1, 5), location="Main Road", value=Decimal("2500000"),
                   asset_size="4500 sqft", constructed_date=date(2004, 6, 1))

        if GaragePermit.query.count() == 0:
            permits = garage_permit_numbering()
            issued = date(2026, 2, 20)
            db.session.add(GaragePermit(
                permit_number=reserve_number(permits, None, issued),
                issue_date=issued,
                status="Issued",
                vehicle_chassis_number="MHFXW42G3K0123456",
                vehicle_registry_number="P-4412",
                vehicle_owner_name="Ibrahim Nasir",
                vehicle_owner_id="A123456",
                garage_address="Hibiscus Villa, Dhidhdhoo",
                garage_size_sqft=220,
                house_registry_number="HR-0081",
                garage_owner_name="Ibrahim Nasir",
                garage_owner_id="A123456",
                checked_by="seed",
            ))

        if RequisitionForm.query.count() == 0:
            requisitions = requisition_numbering()
            form_date = date(2026, 3, 2)
            requisition, _ = get_or_create(
                RequisitionForm,
                form_number=reserve_number(requisitions, None, form_date),
                defaults={
                    "form_date": form_date,
                    "department": "Secretariat",
                    "requested_by": "Aishath Nahula",
                    "purpose": "Office supplies for Q2",
                    "status": "Pending",
                },
            )
            requisition.items = [
                RequisitionItem(description="A4 paper (ream)", quantity=20, rate=Decimal("65.00")),
                RequisitionItem(description="Toner cartridge", quantity=2, rate=Decimal("950.00")),
            ]
            requisition.recalculate_total()

        db.session.commit()
        print("Seeding completed.")


if __name__ == "__main__":
    seed()
