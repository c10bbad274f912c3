from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse
from loguru import logger
from typing import List
from sqlalchemy.ext.asyncio import AsyncSession

from academy.core.db.session import get_db
from academy.api.schemas.registration import Registration, RegistrationCreate
from academy.api.services.registration import RegistrationService
from academy.api.dependencies.auth import require_admin

router = APIRouter(prefix="", tags=["Registrations"])


@router.post("/register", response_model=Registration, response_model_exclude_none=True)
async def create_registration(
    registration_in: RegistrationCreate,
    db: AsyncSession = Depends(get_db),
):
    try:
        return await RegistrationService.create_registration(registration_in, db)
    except Exception as e:
        logger.opt(exception=e).error(
            "Registration error: {} | body: {}",
            e,
            registration_in.model_dump(mode="json", by_alias=True),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to save registration", "details": str(e)},
        )


@router.get("/registrations", response_model=List[Registration], response_model_exclude_none=True)
async def read_registrations(
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    try:
        return await RegistrationService.get_all_registrations(db)
    except Exception as e:
        logger.opt(exception=e).error("Fetch error: {}", e)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to fetch registrations"},
        )
