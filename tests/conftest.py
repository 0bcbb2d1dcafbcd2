"""Pytest configuration and fixtures."""

from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from database import create_db_engine, create_session_factory, get_session, init_db
from dependencies import verify_token
from models import Property
from repos import PropertyRepo
from services import ContractService, ReservationService

SIGNED_AT = datetime(2026, 1, 15, 10, 0, 0)


@pytest.fixture
def engine(tmp_path):
    """Fresh SQLite file database per test, schema created from the models."""
    db_engine = create_db_engine(f"sqlite:///{tmp_path / 'engine.sqlite3'}")
    init_db(db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def make_property(db):
    def _make(price="2000000.00", title="Lot 12, Block 4"):
        prop = PropertyRepo(db).save(Property(property_title=title, property_price=Decimal(price)))
        db.commit()
        return prop

    return _make


@pytest.fixture
def make_reservation(db, make_property):
    def _make(price="2000000.00", fee="50000.00", approve=True):
        prop = make_property(price=price)
        reservation = ReservationService.create_reservation(
            db,
            property_id=prop.id,
            reservation_fee=Decimal(fee),
            client_name="Maria Santos",
            client_email="maria@example.com",
        )
        if approve:
            reservation = ReservationService.approve(db, reservation.id, approved_by="staff")
        return reservation

    return _make


@pytest.fixture
def approved_reservation(make_reservation):
    """Price 2,000,000 with a 50,000 fee: 150,000 left on the downpayment."""
    return make_reservation()


@pytest.fixture
def contract_12(db, approved_reservation):
    """12-month plan of 12,500.00, signed 2026-01-15."""
    return ContractService.create_contract(
        db, approved_reservation.id, 12, signed_at=SIGNED_AT
    )


@pytest.fixture
def staff_token() -> dict:
    return {"id": 7, "email": "staff@example.com", "role": "admin"}


@pytest.fixture
def client(session_factory, staff_token):
    """TestClient bound to the per-test database with auth bypassed."""
    from main import app

    def _session_override():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_session] = _session_override
    app.dependency_overrides[verify_token] = lambda: staff_token
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
