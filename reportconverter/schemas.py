"""Request and response shapes and the JSON envelope used by every endpoint."""

from dataclasses import asdict, dataclass
from http import HTTPStatus
from typing import Any


@dataclass(frozen=True)
class UploadedFile:
    """An uploaded file held in memory."""

    filename: str
    content: bytes = b""


@dataclass
class TemplateRequest:
    """Form data for creating a template."""

    name: str = ""
    template_type: str = ""
    file: UploadedFile | None = None
    path: str = ""


@dataclass
class GeneratePDFRequest:
    """JSON body for rendering a template to PDF."""

    template_id: str = ""
    data: dict[str, Any] | None = None


@dataclass(frozen=True)
class TemplateResponse:
    """A template as returned to clients."""

    id: str
    name: str
    template_type: str
    path: str
    path_original: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


def _plain(data: Any) -> Any:
    if hasattr(data, "to_dict"):
        return data.to_dict()
    if isinstance(data, (list, tuple)):
        return [_plain(item) for item in data]
    if isinstance(data, dict):
        return {key: _plain(value) for key, value in data.items()}
    return data


def format_response(code, status, message, data=None) -> dict[str, Any]:
    """Build the response envelope; ``data`` is left out when it is None."""
    body: dict[str, Any] = {"meta": {"code": int(code), "status": status, "message": message}}
    if data is not None:
        body["data"] = _plain(data)
    return body


def error_response(code, status, message) -> dict[str, Any]:
    """Envelope for an error, without data."""
    return format_response(code, status, message)


def bad_request_response(message, data=None) -> dict[str, Any]:
    """Envelope for a 400 response."""
    return format_response(HTTPStatus.BAD_REQUEST, "bad request", message, data)


def success_response(code, message, data=None) -> dict[str, Any]:
    """Envelope for a successful response."""
    return format_response(code, "success", message, data)