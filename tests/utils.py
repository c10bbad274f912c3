from datetime import datetime
from unittest.mock import MagicMock

import httpx


def scalars_result(rows):
    """Result object as returned by AsyncSession.execute for a select()."""
    result = MagicMock()
    scalars = MagicMock()
    scalars.all.return_value = rows
    result.scalars.return_value = scalars
    return result


class BlobRecorder:
    """httpx MockTransport handler standing in for the object storage API."""

    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self.body = body
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        pathname = request.url.params.get("pathname")
        body = self.body if self.body is not None else {
            "url": f"https://store.public.blob.example/{pathname}",
            "downloadUrl": f"https://store.public.blob.example/{pathname}?download=1",
            "pathname": pathname,
            "contentType": request.headers.get("x-content-type"),
        }
        return httpx.Response(self.status_code, json=body)


def registration_model_stub(**kwargs):
    from academy.api.models.registration import Registration as RegistrationModel

    return RegistrationModel(
        id=kwargs.get("id", 1),
        type=kwargs.get("type", "student"),
        student_name=kwargs.get("student_name", "Priya Raman"),
        father_email=kwargs.get("father_email", None),
        student_signature=kwargs.get("student_signature", "Priya Raman"),
        photo_url=kwargs.get("photo_url", None),
        created_at=kwargs.get("created_at", datetime(2026, 1, 10, 9, 30)),
    )
