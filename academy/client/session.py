from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, MutableMapping, Optional

from loguru import logger

from academy.api.schemas.registration import RegistrationType
from academy.client.api import AcademyClient, AcademyClientError

TOKEN_KEY = "adminToken"


class AdminSession:
    """
    Holds the admin bearer token for the registrations dashboard.

    `storage` plays the part of browser local storage: pass any persistent
    mapping (a shelve, a keyring-backed dict) to keep the login across
    restarts. The server decides whether the token is still valid; a 401
    from the registrations endpoint logs the session out.
    """

    def __init__(self, storage: Optional[MutableMapping[str, str]] = None):
        self.storage = {} if storage is None else storage

    @property
    def token(self) -> Optional[str]:
        return self.storage.get(TOKEN_KEY)

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    async def login(self, client: AcademyClient, phone: str, password: str) -> bool:
        try:
            response = await client.login(phone, password)
        except AcademyClientError as e:
            if e.status_code == 401:
                return False
            raise
        self.storage[TOKEN_KEY] = response["access_token"]
        return True

    def logout(self) -> None:
        self.storage.pop(TOKEN_KEY, None)

    async def fetch_registrations(self, client: AcademyClient) -> List[Dict[str, Any]]:
        if not self.is_authenticated:
            raise AcademyClientError("Not logged in", status_code=401)
        try:
            return await client.list_registrations(self.token)
        except AcademyClientError as e:
            if e.status_code == 401:
                logger.info("Admin token rejected, logging out")
                self.logout()
            raise


@dataclass(frozen=True)
class RegistrationSummary:
    total: int
    students: int
    members: int


def summarize_registrations(records: Iterable[Dict[str, Any]]) -> RegistrationSummary:
    total = students = members = 0
    for record in records:
        total += 1
        if record.get("type") == RegistrationType.STUDENT.value:
            students += 1
        elif record.get("type") == RegistrationType.MEMBER.value:
            members += 1
    return RegistrationSummary(total=total, students=students, members=members)
