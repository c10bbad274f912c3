from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.future import select
from typing import List

from academy.api.models.registration import Registration
from academy.api.schemas.registration import (
    RegistrationCreate,
    Registration as RegistrationSchema
)
from academy.core.errors import PersistenceError


class RegistrationService:

    @staticmethod
    async def get_all_registrations(db: AsyncSession) -> List[RegistrationSchema]:
        """
        Retrieves every registration, newest first.
        Rows inserted in the same instant keep insertion order reversed via id.
        """
        try:
            result = await db.execute(
                select(Registration).order_by(Registration.created_at.desc(), Registration.id.desc())
            )
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to fetch registrations: {e}") from e
        return [RegistrationSchema.model_validate(reg) for reg in result.scalars().all()]

    @staticmethod
    async def create_registration(registration_in: RegistrationCreate, db: AsyncSession) -> RegistrationSchema:
        """
        Inserts one registration. Blank strings were already turned into None
        by RegistrationCreate, so the row stores NULL for them.
        """
        registration = Registration(**registration_in.model_dump())
        try:
            db.add(registration)
            await db.commit()
            await db.refresh(registration)
        except SQLAlchemyError as e:
            await db.rollback()
            raise PersistenceError(f"Failed to save registration: {e}") from e

        if registration.id is None:
            raise PersistenceError("Insert returned no row")
        return RegistrationSchema.model_validate(registration)
