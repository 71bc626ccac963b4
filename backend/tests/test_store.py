# tests/test_store.py
import asyncio
import importlib.util
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient
from sqlalchemy.exc import IntegrityError

from healthcare.config.settings import Settings
from healthcare.core.errors import (
    Conflict,
    InvalidPayload,
    InvalidReference,
    translate_integrity_error,
)
from healthcare.db.base import Base, get_engine, get_session_factory
from healthcare.db.crud.doctor import create_doctor
from healthcare.db.crud.mapping import create_mapping
from healthcare.db.crud.patient import create_patient
from healthcare.db.crud.user import create_user
from healthcare.main import create_app
from tests import _helpers

BACKEND_DIR = Path(__file__).resolve().parent.parent

PATIENT_ROW = {
    "first_name": "Jane",
    "last_name": "Doe",
    "email": "jane@x.com",
    "phone": "1234567890",
    "age": 30,
    "gender": "Female",
    "status": "Active",
}

DOCTOR_ROW = {
    "title": "Dr.",
    "name": "Smith",
    "email": "smith@x.com",
    "phone": "0987654321",
    "specialty": "Cardiology",
    "qualification": "MBBS, MD",
    "status": "Active",
}


def run_in_store(database_url: str, work):
    """Run ``work(db)`` against a fresh session on ``database_url``."""
    async def _run():
        engine = await get_engine(database_url)
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        factory = await get_session_factory(engine)
        try:
            async with factory() as db:
                return await work(db)
        finally:
            await engine.dispose()

    return asyncio.run(_run())


# -------------------------------------------------------------------------------------
# constraint violations raised by the store
# -------------------------------------------------------------------------------------
def test_duplicate_pair_is_a_conflict_even_without_the_lookup(app_settings, count_rows):
    async def work(db):
        user = await create_user(db, "Alice", "alice@x.com", "not-a-real-hash")
        patient = await create_patient(db, user.id, PATIENT_ROW)
        doctor = await create_doctor(db, user.id, DOCTOR_ROW)
        pair = {"patient_id": patient.id, "doctor_id": doctor.id, "status": "Active"}
        await create_mapping(db, pair)
        with pytest.raises(Conflict) as exc_info:
            await create_mapping(db, dict(pair, status="Pending"))
        return exc_info.value

    error = run_in_store(app_settings.database_url, work)
    assert error.status_code == 409
    assert error.message == "Doctor is already assigned to this patient"
    assert count_rows("patient_doctor_mappings") == 1


def test_duplicate_email_is_a_conflict_at_the_store(app_settings, count_rows):
    async def work(db):
        await create_user(db, "Alice", "alice@x.com", "hash-1")
        with pytest.raises(Conflict) as exc_info:
            await create_user(db, "Other", "alice@x.com", "hash-2")
        return exc_info.value

    error = run_in_store(app_settings.database_url, work)
    assert error.message == "Email already exists"
    assert count_rows("users") == 1


def test_mapping_to_missing_rows_is_an_invalid_reference(app_settings, count_rows):
    async def work(db):
        user = await create_user(db, "Alice", "alice@x.com", "not-a-real-hash")
        doctor = await create_doctor(db, user.id, DOCTOR_ROW)
        with pytest.raises(InvalidReference) as exc_info:
            await create_mapping(db, {"patient_id": 4242, "doctor_id": doctor.id, "status": "Active"})
        return exc_info.value

    error = run_in_store(app_settings.database_url, work)
    assert error.status_code == 400
    assert error.code == "invalid_reference"
    assert count_rows("patient_doctor_mappings") == 0


@pytest.mark.parametrize(
    "driver_message, expected",
    [
        ("UNIQUE constraint failed: users.email", Conflict),
        ('duplicate key value violates unique constraint "ix_users_email"', Conflict),
        ("FOREIGN KEY constraint failed", InvalidReference),
        ('insert or update on table "patients" violates foreign key constraint', InvalidReference),
        ("NOT NULL constraint failed: patients.first_name", InvalidPayload),
        ('null value in column "first_name" violates not-null constraint', InvalidPayload),
    ],
)
def test_integrity_errors_map_onto_the_taxonomy(driver_message, expected):
    exc = IntegrityError("INSERT ...", {}, Exception(driver_message))
    error = translate_integrity_error(exc, "Already exists")
    assert isinstance(error, expected)
    if expected is Conflict:
        assert error.message == "Already exists"


# -------------------------------------------------------------------------------------
# store unreachable
# -------------------------------------------------------------------------------------
def test_unreachable_store_answers_503(tmp_path):
    # the parent directory does not exist, so every connection attempt fails
    unreachable = Settings(database_url=f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'store.db'}")

    with TestClient(create_app(unreachable)) as client:
        r = client.post(
            "/api/auth/register",
            json={"name": "Alice", "email": "alice@x.com", "password": "secret1"},
        )
        assert r.status_code == 503
        assert r.json() == {"code": "unavailable", "message": "Database unavailable"}

        r = client.get("/health")
        assert r.status_code == 200
        assert r.json() == {"status": "ok", "database": "unavailable"}


# -------------------------------------------------------------------------------------
# migrations and scripts
# -------------------------------------------------------------------------------------
def test_migrations_build_a_working_schema(tmp_path):
    database_url = f"sqlite+aiosqlite:///{tmp_path / 'migrated.db'}"
    config = Config(str(BACKEND_DIR / "alembic.ini"))
    config.set_main_option("script_location", str(BACKEND_DIR / "alembic"))
    config.attributes["database_url"] = database_url

    command.upgrade(config, "head")

    with TestClient(create_app(Settings(database_url=database_url))) as client:
        alice = _helpers.register(client, "alice@x.com")
        patient = _helpers.create_patient(client, alice["token"])
        doctor = _helpers.create_doctor(client, alice["token"])
        mapping = _helpers.create_mapping(client, alice["token"], patient["id"], doctor["id"])

        assert alice["createdAt"]
        assert mapping["createdAt"]
        r = client.post(
            "/api/mappings",
            json={"patientId": patient["id"], "doctorId": doctor["id"], "status": "Active"},
            headers=_helpers.bearer(alice["token"]),
        )
        assert r.status_code == 409

    command.downgrade(config, "base")


def _load_seed_script():
    spec = importlib.util.spec_from_file_location(
        "seed_database", BACKEND_DIR / "scripts" / "seed_database.py"
    )
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_seed_clear_only_touches_demo_data(client, app_settings, count_rows):
    bob = _helpers.register(client, "bob@x.com")
    patient = _helpers.create_patient(client, bob["token"])
    doctor = _helpers.create_doctor(client, bob["token"])
    _helpers.create_mapping(client, bob["token"], patient["id"], doctor["id"])

    seed = _load_seed_script()

    async def reseed(db):
        await seed.seed_all_data(db)
        await seed.clear_data(db)

    run_in_store(app_settings.database_url, reseed)

    assert count_rows("users") == 1
    assert count_rows("users", "email = ?", (seed.DEMO_EMAIL,)) == 0
    assert count_rows("patients") == 1
    assert count_rows("doctors") == 1
    assert count_rows("patient_doctor_mappings") == 1
    assert client.get("/api/patients", headers=_helpers.bearer(bob["token"])).json()[0]["id"] == patient["id"]


# -------------------------------------------------------------------------------------
# documented error bodies
# -------------------------------------------------------------------------------------
def test_error_envelope_is_documented(client):
    schema = client.get("/openapi.json").json()

    assert "ErrorResponse" in schema["components"]["schemas"]
    responses = schema["paths"]["/api/patients/{patient_id}"]["get"]["responses"]
    for code in ("400", "401", "403", "404"):
        assert responses[code]["content"]["application/json"]["schema"]["$ref"].endswith("/ErrorResponse")
