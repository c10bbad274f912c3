from fastapi import APIRouter, HTTPException, status
from loguru import logger

from academy.api.schemas.auth import AdminLoginRequest, TokenResponse
from academy.api.services.auth import AdminAuthService

router = APIRouter(prefix="", tags=["auth"])


@router.post("/login", response_model=TokenResponse)
async def login(form_data: AdminLoginRequest):
    auth_service = AdminAuthService()
    if not auth_service.verify_credentials(form_data.phone, form_data.password):
        logger.info("Rejected admin login for {}", form_data.phone)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect phone number or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth_service.create_token_response(form_data.phone)
