# backend/scripts/seed_database.py
import asyncio
import logging
import random
from datetime import datetime, timedelta, timezone as TZ
from typing import List

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

# Add project root to sys.path to allow importing from healthcare
import sys
from pathlib import Path

backend_dir = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(backend_dir))

from healthcare.config.constants import DoctorStatus, MappingStatus, PatientStatus
from healthcare.config.settings import settings as app_settings
from healthcare.core.auth import get_password_hash
from healthcare.db.base import Base, get_engine, get_session_factory
from healthcare.db.crud.doctor import create_doctor
from healthcare.db.crud.mapping import create_mapping
from healthcare.db.crud.patient import create_patient
from healthcare.db.crud.user import create_user, get_user_by_email
from healthcare.db.models import (
    DoctorModel,
    PatientDoctorMappingModel,
    PatientModel,
    UserModel,
)

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("seed_database")

# --- Configuration for Seed Data ---
DEMO_NAME = "Demo Admin"
DEMO_EMAIL = "demo@example.com"
DEMO_PASSWORD = "secret123"
NUM_DOCTORS = 8
NUM_PATIENTS = 20
MAX_DOCTORS_PER_PATIENT = 3

FIRST_NAMES = [
    "Jane", "John", "Amira", "Karim", "Lina", "Omar", "Maya", "Rami",
    "Sara", "Tarek", "Nour", "Elie", "Rita", "Ziad", "Hana", "Fadi",
]
LAST_NAMES = [
    "Doe", "Smith", "Haddad", "Khoury", "Saleh", "Nassar", "Aoun", "Fares",
]
SPECIALTIES = [
    "Cardiology", "Dermatology", "Neurology", "Pediatrics",
    "Orthopedics", "Oncology", "General Medicine", "Psychiatry",
]
QUALIFICATIONS = ["MBBS, MD", "MD, PhD", "MBBS, MS", "DO"]


def random_phone() -> str:
    return f"555{random.randint(1000000, 9999999)}"


async def clear_data(db: AsyncSession):
    """Remove the demo user and everything it recorded; other users are left alone."""
    user = await get_user_by_email(db, DEMO_EMAIL)
    if not user:
        logger.info(f"No demo user {DEMO_EMAIL}; nothing to clear.")
        return

    logger.warning(f"Clearing data recorded by demo user {user.id}...")
    own_patients = select(PatientModel.id).where(PatientModel.user_id == user.id)
    own_doctors = select(DoctorModel.id).where(DoctorModel.user_id == user.id)
    # children first, same order the API uses for cascades
    await db.execute(
        delete(PatientDoctorMappingModel).where(
            or_(
                PatientDoctorMappingModel.patient_id.in_(own_patients),
                PatientDoctorMappingModel.doctor_id.in_(own_doctors),
            )
        )
    )
    await db.execute(delete(PatientModel).where(PatientModel.user_id == user.id))
    await db.execute(delete(DoctorModel).where(DoctorModel.user_id == user.id))
    await db.execute(delete(UserModel).where(UserModel.id == user.id))
    await db.commit()
    db.expunge_all()
    logger.info("Demo data cleared.")


async def seed_all_data(db: AsyncSession):
    user = await get_user_by_email(db, DEMO_EMAIL)
    if user:
        logger.info(f"Demo user {DEMO_EMAIL} already exists with ID {user.id}, using existing.")
    else:
        user = await create_user(db, DEMO_NAME, DEMO_EMAIL, get_password_hash(DEMO_PASSWORD))
        logger.info(f"Created demo user {DEMO_EMAIL} / {DEMO_PASSWORD}")

    # 1. Seed Doctors
    logger.info(f"Seeding {NUM_DOCTORS} doctors...")
    doctor_ids: List[int] = []
    for i in range(NUM_DOCTORS):
        name = f"{random.choice(FIRST_NAMES)} {random.choice(LAST_NAMES)}"
        doctor = await create_doctor(db, user.id, {
            "title": random.choice(["Dr.", "Prof."]),
            "name": name,
            "email": f"doctor{i + 1}@example.com",
            "phone": random_phone(),
            "specialty": SPECIALTIES[i % len(SPECIALTIES)],
            "qualification": random.choice(QUALIFICATIONS),
            "status": random.choice(list(DoctorStatus)).value,
            "years_of_experience": random.randint(1, 35),
        })
        doctor_ids.append(doctor.id)

    # 2. Seed Patients, each assigned to a few doctors
    logger.info(f"Seeding {NUM_PATIENTS} patients...")
    now = datetime.now(TZ.utc)
    mapping_count = 0
    for i in range(NUM_PATIENTS):
        first_name, last_name = random.choice(FIRST_NAMES), random.choice(LAST_NAMES)
        patient = await create_patient(db, user.id, {
            "first_name": first_name,
            "last_name": last_name,
            "email": f"{first_name.lower()}.{last_name.lower()}{i + 1}@example.com",
            "phone": random_phone(),
            "age": random.randint(1, 95),
            "gender": random.choice(["Male", "Female"]),
            "status": random.choice(list(PatientStatus)).value,
            "last_visit": now - timedelta(days=random.randint(0, 180)),
        })

        for doctor_id in random.sample(doctor_ids, random.randint(1, MAX_DOCTORS_PER_PATIENT)):
            await create_mapping(db, {
                "patient_id": patient.id,
                "doctor_id": doctor_id,
                "status": random.choice(list(MappingStatus)).value,
            })
            mapping_count += 1

    logger.info(
        f"Seeded {NUM_DOCTORS} doctors, {NUM_PATIENTS} patients and {mapping_count} mappings "
        f"for user {user.id}"
    )


async def main(should_clear: bool, create_tables: bool):
    logger.info(f"Connecting to database at: {app_settings.database_url}")
    engine = await get_engine(app_settings.database_url)
    if create_tables:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    AsyncSessionLocal = await get_session_factory(engine)

    async with AsyncSessionLocal() as db:
        if should_clear:
            await clear_data(db)
        await seed_all_data(db)

    await engine.dispose()
    logger.info("Database connection closed.")


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(
        description="Seed the database with a demo user, doctors, patients and mappings."
    )
    parser.add_argument(
        "--clear", action="store_true", help="Clear existing data before seeding."
    )
    parser.add_argument(
        "--create-tables", action="store_true", help="Run create_all() first (no alembic)."
    )
    args = parser.parse_args()
    asyncio.run(main(should_clear=args.clear, create_tables=args.create_tables))
