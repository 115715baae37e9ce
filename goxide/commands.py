"""Command tokens and the closed name-to-handler dispatch table."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from .errors import UnknownCommandError

CommandHandler = Callable[[tuple[str, ...]], "Exception | None"]


@dataclass(frozen=True)
class Command:
    """One parsed input line: the command name plus its argument tokens."""

    name: str
    args: tuple[str, ...] = ()

    @classmethod
    def parse(cls, line: str) -> Command | None:
        """Split ``line`` on whitespace; blank lines yield ``None``."""
        parts = line.split()
        if not parts:
            return None
        return cls(name=parts[0], args=tuple(parts[1:]))


@dataclass(frozen=True)
class CommandBinding:
    """Mapping from one or more command names to a single handler."""

    names: tuple[str, ...]
    handler: CommandHandler


class CommandRegistry:
    """Case-sensitive command dispatch table."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}

    def register_binding(self, binding: CommandBinding) -> CommandRegistry:
        """Register one binding, overwriting existing handlers for the same names."""
        for name in binding.names:
            self._handlers[name] = binding.handler
        return self

    def register_bindings(self, *bindings: CommandBinding) -> CommandRegistry:
        for binding in bindings:
            self.register_binding(binding)
        return self

    def dispatch(self, command: Command) -> Exception | None:
        """Invoke the handler bound to ``command.name``."""
        handler = self._handlers.get(command.name)
        if handler is None:
            return UnknownCommandError(command.name)
        return handler(command.args)


__all__ = ["Command", "CommandBinding", "CommandHandler", "CommandRegistry"]
