# healthcare/db/crud/user.py
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from healthcare.core.errors import translate_integrity_error
from healthcare.db.models.user import UserModel

logger = logging.getLogger(__name__)


async def get_user(db: AsyncSession, user_id: int) -> Optional[UserModel]:
    """
    Get a user by ID.

    Args:
        db: Database session
        user_id: User ID

    Returns:
        UserModel or None if not found
    """
    return await db.get(UserModel, user_id)


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[UserModel]:
    """
    Get a user by email.

    Args:
        db: Database session
        email: User's email address

    Returns:
        UserModel or None if not found
    """
    result = await db.execute(select(UserModel).where(UserModel.email == email))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, name: str, email: str, password_hash: str) -> UserModel:
    """
    Insert a user row.

    Args:
        db: Database session
        name: Display name
        email: Unique login email
        password_hash: Output of the credential verifier, never the plain password

    Returns:
        The persisted UserModel

    Raises:
        Conflict: the email is already registered
    """
    user = UserModel(name=name, email=email, password=password_hash)
    db.add(user)
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        logger.info(f"CRUD: duplicate registration for '{email}'")
        raise translate_integrity_error(e, "Email already exists") from e

    await db.refresh(user)
    logger.info(f"CRUD: created user {user.id}")
    return user
