from typing import Any, Dict, List, Optional

import httpx


class AcademyClientError(Exception):
    """A call to the enrollment API failed; the message is safe to show to the user."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AcademyClient:
    """
    Async HTTP client for the enrollment API.
    Pass `transport` to talk to an in-process app or a mock.
    """

    def __init__(
        self,
        base_url: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 30.0,
        api_prefix: str = "/api",
    ):
        self.api_prefix = api_prefix
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "AcademyClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return f"Request failed with status {response.status_code}"
        if isinstance(body, dict) and body.get("error"):
            message = str(body["error"])
            details = body.get("details")
            if isinstance(details, str):
                message = f"{message}: {details}"
            elif isinstance(details, list):
                # Schema errors: [{"loc": [..., "fieldName"], "msg": "..."}]
                problems = [
                    f"{item['loc'][-1]}: {item['msg']}"
                    for item in details
                    if isinstance(item, dict) and item.get("loc") and item.get("msg")
                ]
                if problems:
                    message = f"{message}: {'; '.join(problems)}"
            return message
        return f"Request failed with status {response.status_code}"

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        try:
            response = await self._client.request(method, f"{self.api_prefix}{path}", **kwargs)
        except httpx.HTTPError as e:
            raise AcademyClientError(f"Network error: {e}") from e
        if response.is_error:
            raise AcademyClientError(self._error_message(response), status_code=response.status_code)
        return response

    async def upload_file(self, filename: str, data: bytes, content_type: Optional[str] = None) -> Dict[str, Any]:
        headers = {"content-type": content_type or "application/octet-stream"}
        # httpx URL-encodes query params
        response = await self._request("POST", "/upload", params={"filename": filename}, content=data, headers=headers)
        return response.json()

    async def register(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._request("POST", "/register", json=payload)
        return response.json()

    async def login(self, phone: str, password: str) -> Dict[str, Any]:
        response = await self._request("POST", "/auth/login", json={"phone": phone, "password": password})
        return response.json()

    async def list_registrations(self, token: str) -> List[Dict[str, Any]]:
        response = await self._request("GET", "/registrations", headers={"Authorization": f"Bearer {token}"})
        return response.json()
