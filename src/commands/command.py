"""Base slash command interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.host import PluginAPI


EPHEMERAL = "ephemeral"


@dataclass
class CommandContext:
    """Context passed to slash command handlers."""
    user_id: str
    args: str  # First token after the trigger (e.g., "/silencer @bob" -> "@bob")
    raw_command: str  # Full command text as typed
    api: "PluginAPI"


@dataclass
class CommandResult:
    """Response shown to the invoking user."""
    text: str
    response_type: str = EPHEMERAL

    def to_response(self) -> dict:
        return {"response_type": self.response_type, "text": self.text}


class SlashCommand(ABC):
    """Base class for slash commands.
    
    To create a new command:
    1. Subclass SlashCommand
    2. Set `name` class attribute (the trigger, e.g. "silencer")
    3. Implement `execute()` 
    4. Register in registry.py
    """
    
    # Override in subclass - command name without the slash (e.g., "silencer" for /silencer)
    name: str = ""
    description: str = ""
    args_hint: str = ""  # e.g., "[@user|clear|help]" - shown in autocomplete
    
    @abstractmethod
    async def execute(self, ctx: CommandContext) -> CommandResult:
        """Execute the command.
        
        Args:
            ctx: Command context with the invoking user, args and host API
            
        Returns:
            CommandResult with the text to show the user
        """
        pass
