"""Host bridge: the four commands the front-end may invoke.

This module consolidates the command surface so every entry-point (the stdio
bridge, `radcontrol invoke`, tests) goes through the same argument checks
and the same error shape. Handlers take a plain `dict` of arguments, as the
web-view sends them, and return JSON-ready values.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from adapters.port_inspector import kill_port, port_status
from adapters.registry_reader import list_projects
from adapters.shell_runner import BashShellRunner
from core.domain.errors import BadRequest, RadControlError, UnknownCommand
from core.domain.models import BridgeResponse
from core.interfaces.shell import ShellRunner
from core.services.dispatcher import run_o2

logger = logging.getLogger(__name__)

Handler = Callable[[Mapping[str, Any]], Any]

RUN_O2 = "run_o2"
LIST_PROJECTS = "o2_list_projects"
PORT_STATUS = "port_status"
KILL_PORT = "kill_port"


def _arg(args: Mapping[str, Any], name: str) -> Any:
    if name not in args:
        raise BadRequest(f"Missing argument '{name}'")
    return args[name]


def _str_arg(args: Mapping[str, Any], name: str) -> str:
    value = _arg(args, name)
    if not isinstance(value, str):
        raise BadRequest(f"Argument '{name}' must be a string")
    return value


@dataclass
class HostBridge:
    """Named command table plus uniform error handling.

    Rules:
    - Command names are stable; the front-end calls them verbatim.
    - Every `RadControlError` becomes `ok=false` with its message and kind.
    - Anything else is a bug and propagates.
    """

    runner: ShellRunner = field(default_factory=BashShellRunner)
    commands: dict[str, Handler] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.commands:
            self.register(RUN_O2, lambda args: run_o2(_str_arg(args, "key"), self.runner))
            self.register(LIST_PROJECTS, lambda args: list_projects())
            self.register(
                PORT_STATUS,
                lambda args: port_status(_arg(args, "port"), self.runner).model_dump(mode="json"),
            )
            self.register(KILL_PORT, lambda args: kill_port(_arg(args, "port"), self.runner))

    def register(self, name: str, handler: Handler) -> None:
        self.commands[name] = handler

    def names(self) -> list[str]:
        return sorted(self.commands)

    def call(self, name: str, args: Mapping[str, Any] | None = None) -> Any:
        """Run a command, raising `RadControlError` on failure."""

        handler = self.commands.get(name)
        if handler is None:
            raise UnknownCommand(f"Unknown command '{name}'")
        if args is None:
            args = {}
        if not isinstance(args, Mapping):
            raise BadRequest(f"Arguments for '{name}' must be a JSON object")
        return handler(args)

    def invoke(
        self,
        name: str,
        args: Mapping[str, Any] | None = None,
        *,
        request_id: Any = None,
    ) -> BridgeResponse:
        """Run a command and fold the outcome into a `BridgeResponse`."""

        try:
            value = self.call(name, args)
        except RadControlError as exc:
            logger.debug("%s failed (%s): %s", name, exc.kind, exc.message)
            return BridgeResponse(id=request_id, ok=False, error=exc.message, kind=exc.kind)
        return BridgeResponse(id=request_id, ok=True, value=value)
