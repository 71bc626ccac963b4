import asyncio
import sys
from pathlib import Path

# Add the parent directory to sys.path to allow importing from healthcare
backend_dir = Path(__file__).parent.parent
sys.path.append(str(backend_dir))

from sqlalchemy.future import select
from healthcare.db.base import get_engine, get_session_factory
from healthcare.db.models.user import UserModel
from healthcare.db.models.doctor import DoctorModel
from healthcare.config.settings import settings

async def main() -> None:
    print("Connecting to database at:", settings.database_url)
    engine = await get_engine(settings.database_url)
    async_session = await get_session_factory(engine)

    async with async_session() as db:
        # Query doctors together with the user who recorded them
        result = await db.execute(
            select(UserModel, DoctorModel)
            .join(DoctorModel, UserModel.id == DoctorModel.user_id)
            .order_by(UserModel.id, DoctorModel.id)
        )

        doctors = result.all()

        if not doctors:
            print("No doctors found in the database.")
        else:
            print(f"Found {len(doctors)} doctors in the database:")
            print("-" * 90)
            print(f"{'ID':<5} {'Name':<28} {'Email':<30} {'Specialty':<18} {'Owner':<8}")
            print("-" * 90)

            for user, doctor in doctors:
                full_name = f"{doctor.title} {doctor.name}"
                print(f"{doctor.id:<5} {full_name:<28} {doctor.email:<30} {doctor.specialty:<18} {user.id:<8}")

    await engine.dispose()

if __name__ == "__main__":
    asyncio.run(main())
