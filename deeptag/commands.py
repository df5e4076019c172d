"""
Slash command registration for deeptag.

The host invokes commands by name with a CommandContext: a bundle of the
capabilities and state a handler needs (host API, configuration, focused
node, current page, selection). Handlers never see a host-specific event.

Key features:
- Instantiable registry (not global) for better testing
- No import-time side effects
- Duplicate names replace the earlier registration
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Optional
import logging

from deeptag.config import DeeptagConfig
from deeptag.host import Host

logger = logging.getLogger(__name__)


@dataclass
class CommandContext:
    """Everything a command handler may use for one invocation."""
    host: Host
    config: DeeptagConfig
    node_id: Optional[str] = None
    page: Optional[str] = None
    selection: Optional[str] = None
    today: date = field(default_factory=date.today)

    @classmethod
    def from_host(cls, host: Host, config: DeeptagConfig, node_id: Optional[str] = None,
                  today: Optional[date] = None) -> "CommandContext":
        """Build a context from the host's current page and selection."""
        return cls(
            host=host,
            config=config,
            node_id=node_id,
            page=host.get_current_page(),
            selection=host.get_selection(),
            today=today or date.today(),
        )


Handler = Callable[[CommandContext], Any]


@dataclass
class SlashCommand:
    """A registered command."""
    name: str
    handler: Handler
    description: str = ""


class CommandError(Exception):
    """Raised for unknown or invalid commands."""
    pass


class CommandRegistry:
    """
    Registry of slash commands.
    """

    def __init__(self):
        self._commands: Dict[str, SlashCommand] = {}

    def register(self, name: str, handler: Handler, description: str = "") -> SlashCommand:
        """
        Register a command handler under ``name``.

        Raises:
            CommandError: If the name is empty or the handler not callable
        """
        if not name or not name.strip():
            raise CommandError("Command name must not be empty")
        if not callable(handler):
            raise CommandError(f"Handler for {name} is not callable")

        if name in self._commands:
            logger.warning(f"Command {name} already registered, replacing")

        command = SlashCommand(name=name, handler=handler, description=description)
        self._commands[name] = command
        logger.info(f"Registered command /{name}")
        return command

    def unregister(self, name: str) -> bool:
        """
        Unregister a command.

        Returns:
            True if the command was found and removed
        """
        if self._commands.pop(name, None) is None:
            return False
        logger.info(f"Unregistered command /{name}")
        return True

    def get(self, name: str) -> Optional[SlashCommand]:
        return self._commands.get(name)

    def list_commands(self) -> List[SlashCommand]:
        return [self._commands[name] for name in sorted(self._commands)]

    def invoke(self, name: str, context: CommandContext) -> Any:
        """
        Run the handler registered under ``name``.

        Raises:
            CommandError: If no such command is registered
        """
        command = self._commands.get(name)
        if command is None:
            raise CommandError(f"Unknown command: {name}")
        logger.debug(f"Invoking /{name} on node {context.node_id}")
        return command.handler(context)

    def clear(self) -> None:
        """Remove all commands. Useful for testing."""
        self._commands.clear()
