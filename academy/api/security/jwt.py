from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, ExpiredSignatureError, jwt
from fastapi import HTTPException, status

from academy.core.config import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, JWT_ISSUER, SECRET_KEY

ADMIN_SCOPE = "admin"


def decode_jwt(token: str) -> dict:
    """
    Decodes a JWT token.
    Raises HTTPException with specific details for expired or invalid tokens.
    """
    try:
        payload = jwt.decode(token, str(SECRET_KEY), algorithms=[ALGORITHM], issuer=JWT_ISSUER)
        return payload
    except ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except JWTError:
        # Invalid signature, wrong issuer, malformed token
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token", headers={"WWW-Authenticate": "Bearer"})


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Creates a JWT access token with optional custom expiry.
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": int(expire.timestamp()), "iss": JWT_ISSUER})
    return jwt.encode(to_encode, str(SECRET_KEY), algorithm=ALGORITHM)
