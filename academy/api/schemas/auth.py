from pydantic import BaseModel, constr


class AdminLoginRequest(BaseModel):
    phone: constr(strip_whitespace=True, min_length=1)
    password: constr(min_length=1)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int
