"""Error taxonomy and the single conversion point to caller-facing messages."""

import json
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError


class NounProjectError(Exception):
    """Base class for errors raised by this package."""


class ConfigurationError(NounProjectError):
    """Required settings are missing or unusable. Fatal at startup."""


class UnknownOperationError(NounProjectError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ArgumentError(NounProjectError):
    """Arguments failed local validation against an operation's schema."""

    @classmethod
    def from_validation_error(cls, tool: str, exc: ValidationError) -> "ArgumentError":
        problems = []
        for err in exc.errors():
            field = ".".join(str(part) for part in err["loc"]) or "arguments"
            problems.append(f"{field}: {err['msg']}")
        return cls(f"Invalid arguments for {tool}: {'; '.join(problems)}")


class MalformedResponseError(NounProjectError):
    """The upstream answered 2xx with a body we cannot use."""


class NormalizedError(BaseModel):
    """The only failure shape handed back to callers."""
    model_config = ConfigDict(frozen=True)

    message: str


def _stringify_body(response: httpx.Response) -> str:
    """Return the response body as text, compacting JSON bodies."""
    try:
        data: Any = response.json()
    except ValueError:
        return response.text
    if isinstance(data, str):
        return data
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


def normalize_error(e: BaseException) -> NormalizedError:
    """Convert any failure into a NormalizedError.

    HTTP status errors keep the status code and the upstream body, transport
    errors keep the underlying message, and errors raised by this package keep
    their own message. Anything else is reported by type and message.
    """
    if isinstance(e, httpx.HTTPStatusError):
        status = e.response.status_code
        body = _stringify_body(e.response)
        if body:
            return NormalizedError(message=f"HTTP {status}: {body}")
        reason = e.response.reason_phrase
        return NormalizedError(message=f"HTTP {status}: {reason}" if reason else f"HTTP {status}")
    if isinstance(e, httpx.RequestError):
        return NormalizedError(message=str(e) or type(e).__name__)
    if isinstance(e, NounProjectError):
        return NormalizedError(message=str(e))
    detail = str(e)
    return NormalizedError(message=f"{type(e).__name__}: {detail}" if detail else type(e).__name__)
