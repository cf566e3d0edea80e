"""Tool invocation broker.

Tasks name capabilities ("console", "git", "model") instead of importing
implementations. The broker builds a tool instance from construction-time
arguments and calls one of its methods with call-time arguments:

    broker.invoke("console", "exec", [cwd], ["npm test"])
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

ToolFactory = Callable[..., Any]


@dataclass(slots=True)
class ToolInvocation:
    """One call through the broker."""

    tool_name: str
    method_name: str
    tool_args: tuple[Any, ...]
    method_args: tuple[Any, ...]
    started_at: float | None = None
    finished_at: float | None = None
    error: BaseException | None = None

    @property
    def duration_seconds(self) -> float | None:
        if self.started_at is None or self.finished_at is None:
            return None
        return self.finished_at - self.started_at


class ToolError(Exception):
    """Base class for broker dispatch failures."""


class ToolNotFound(ToolError):
    def __init__(self, tool_name: str, method_name: str | None = None) -> None:
        if method_name is None:
            message = f'Tool "{tool_name}" not found'
        else:
            message = f'Method "{method_name}" not found on tool "{tool_name}"'
        super().__init__(message)
        self.tool_name = tool_name
        self.method_name = method_name


class ToolInvocationError(ToolError):
    def __init__(self, invocation: ToolInvocation, cause: BaseException) -> None:
        super().__init__(f"{invocation.tool_name}.{invocation.method_name} failed: {cause}")
        self.invocation = invocation
        self.cause = cause


class ToolBroker:
    """Dispatch named tool calls to registered tool factories."""

    def __init__(self, factories: Mapping[str, ToolFactory] | None = None) -> None:
        self._factories: dict[str, ToolFactory] = dict(factories or {})

    def register(self, tool_name: str, factory: ToolFactory) -> None:
        self._factories[tool_name] = factory

    def names(self) -> list[str]:
        return sorted(self._factories)

    def invoke(
        self,
        tool_name: str,
        method_name: str,
        tool_args: Sequence[Any] = (),
        method_args: Sequence[Any] = (),
    ) -> Any:
        """Build `tool_name` with `tool_args` and call `method_name(*method_args)`.

        Raises:
            ToolNotFound: Unknown tool, or a method the tool does not expose.
            ToolInvocationError: The tool could not be built or the call raised.
        """
        factory = self._factories.get(tool_name)
        if factory is None:
            raise ToolNotFound(tool_name)

        invocation = ToolInvocation(
            tool_name=tool_name,
            method_name=method_name,
            tool_args=tuple(tool_args),
            method_args=tuple(method_args),
        )
        log_extra = {"tool": tool_name, "method": method_name}

        invocation.started_at = time.monotonic()
        try:
            instance = factory(*invocation.tool_args)
            method = None if method_name.startswith("_") else getattr(instance, method_name, None)
            if not callable(method):
                raise ToolNotFound(tool_name, method_name)
            logger.debug("Invoking tool", extra=log_extra)
            return method(*invocation.method_args)
        except ToolNotFound:
            raise
        except Exception as e:
            invocation.error = e
            logger.warning("Tool invocation failed", extra={**log_extra, "error": str(e)})
            raise ToolInvocationError(invocation, e) from e
        finally:
            invocation.finished_at = time.monotonic()
            logger.debug(
                "Tool invocation finished",
                extra={**log_extra, "duration_seconds": invocation.duration_seconds},
            )
