"""Maps tool names to client methods and wraps every outcome in an Envelope."""

import json
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Dict, Iterable, Mapping, Optional, Tuple

import structlog
from pydantic import BaseModel, ConfigDict

from nounproject_mcp.errors import UnknownOperationError, normalize_error
from nounproject_mcp.registry import OperationDescriptor, list_operations

log = structlog.get_logger(__name__)

Handler = Callable[[BaseModel], Awaitable[Any]]


class Envelope(BaseModel):
    """Result of one tool call: a single text block, flagged when it is an error."""
    model_config = ConfigDict(frozen=True)

    text: str
    is_error: bool = False

    @classmethod
    def success(cls, result: Any) -> "Envelope":
        return cls(text=json.dumps(result, indent=2, ensure_ascii=False))

    @classmethod
    def failure(cls, message: str) -> "Envelope":
        return cls(text=f"Error: {message}", is_error=True)


def build_handlers(
    client: Any, operations: Optional[Iterable[OperationDescriptor]] = None
) -> Mapping[str, Tuple[OperationDescriptor, Handler]]:
    """Pair each descriptor with the client method that implements it.

    Args:
        client: Object exposing one coroutine method per descriptor handler.
        operations: Descriptors to expose. Defaults to the full registry.

    Raises:
        TypeError: If the client has no callable for a descriptor's handler.
    """
    handlers: Dict[str, Tuple[OperationDescriptor, Handler]] = {}
    for descriptor in (list_operations() if operations is None else operations):
        method = getattr(client, descriptor.handler, None)
        if not callable(method):
            raise TypeError(
                f"{type(client).__name__} has no method {descriptor.handler!r} for tool {descriptor.name!r}"
            )
        handlers[descriptor.name] = (descriptor, method)
    return MappingProxyType(handlers)


class Dispatcher:
    """Single entry point for tool calls. ``call`` never raises."""

    def __init__(self, handlers: Mapping[str, Tuple[OperationDescriptor, Handler]]) -> None:
        self._handlers = MappingProxyType(dict(handlers))

    def list_operations(self) -> Tuple[OperationDescriptor, ...]:
        return tuple(descriptor for descriptor, _ in self._handlers.values())

    async def call(self, name: str, arguments: Optional[Mapping[str, Any]] = None) -> Envelope:
        """Run one tool call and return its envelope.

        Args:
            name: Tool name as sent by the caller.
            arguments: Raw argument object; ``None`` is treated as empty.

        Returns:
            Envelope: Pretty-printed JSON on success, ``Error: ...`` on failure.
        """
        try:
            entry = self._handlers.get(name)
            if entry is None:
                raise UnknownOperationError(name)
            descriptor, handler = entry
            params = descriptor.parse_arguments(arguments)
            log.debug("tool_call", tool=name)
            result = await handler(params)
            return Envelope.success(result)
        except Exception as e:
            error = normalize_error(e)
            log.warning("tool_failed", tool=name, error=error.message)
            return Envelope.failure(error.message)
