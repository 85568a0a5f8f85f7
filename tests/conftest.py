"""
Pytest configuration and fixtures for the council portal
"""
import pytest

from council_portal import create_app
from council_portal.extensions import db as _db


@pytest.fixture(scope='function')
def app():
    """Create Flask application for testing on a fresh in-memory database"""
    app = create_app("config.TestingConfig")

    with app.app_context():
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create Flask test client"""
    return app.test_client()


@pytest.fixture
def db(app):
    return _db


def create_asset(client, category="Vehicles", entry_date="2026-02-14", headers=None, **fields):
    """Helper to create an asset through the API"""
    payload = {"name": "Test asset", "category": category, "entry_date": entry_date}
    payload.update(fields)
    return client.post('/assets/new', json=payload, headers=headers)


def create_permit(client, issue_date="2026-02-20", headers=None, **fields):
    payload = {
        "issue_date": issue_date,
        "vehicle_chassis_number": "CH-001",
        "vehicle_registry_number": "P-1001",
        "vehicle_owner_name": "Ali Rasheed",
        "garage_address": "Blue Lagoon, Hithadhoo",
        "garage_owner_name": "Ali Rasheed",
    }
    payload.update(fields)
    return client.post('/garage-permits/new', json=payload, headers=headers)


def create_requisition(client, form_date="2026-03-02", items=None, **fields):
    payload = {
        "form_date": form_date,
        "department": "Secretariat",
        "requested_by": "Aishath Nahula",
        "purpose": "Stationery",
        "items": items if items is not None else [
            {"description": "A4 paper", "quantity": 10, "rate": 65},
        ],
    }
    payload.update(fields)
    return client.post('/requisitions/new', json=payload)
