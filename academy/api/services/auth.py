import hmac
from datetime import timedelta
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from loguru import logger

from academy.api.schemas.auth import TokenResponse
from academy.api.security.jwt import ADMIN_SCOPE, create_access_token
from academy.core import config as settings

pwd_context = PasswordHasher()


class AdminAuthService:
    """
    Checks the single admin credential pair configured for the academy and
    issues short-lived bearer tokens for the registrations dashboard.
    """

    def __init__(
        self,
        phone: Optional[str] = None,
        password: Optional[str] = None,
        password_hash: Optional[str] = None,
    ):
        self.phone = settings.ADMIN_PHONE if phone is None else phone
        self.password = str(settings.ADMIN_PASSWORD) if password is None else password
        self.password_hash = settings.ADMIN_PASSWORD_HASH if password_hash is None else password_hash

    def _verify_password(self, plain_password: str) -> bool:
        if self.password_hash:
            try:
                return pwd_context.verify(self.password_hash, plain_password)
            except (VerificationError, InvalidHashError):
                return False
        if not self.password:
            return False
        return hmac.compare_digest(self.password.encode(), plain_password.encode())

    def verify_credentials(self, phone: str, password: str) -> bool:
        if not self.phone:
            logger.warning("Admin login attempted but no admin phone is configured")
            return False
        # Evaluate both so a wrong phone costs the same as a wrong password
        phone_ok = hmac.compare_digest(self.phone.encode(), phone.encode())
        password_ok = self._verify_password(password)
        return phone_ok and password_ok

    def create_token_response(self, phone: str) -> TokenResponse:
        expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        token = create_access_token(
            data={"sub": phone, "scope": ADMIN_SCOPE},
            expires_delta=expires,
        )
        return TokenResponse(access_token=token, expires_in=int(expires.total_seconds()))
