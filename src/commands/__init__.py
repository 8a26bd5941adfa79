"""Slash command system."""

from .command import SlashCommand, CommandContext, CommandResult
from .registry import activate, dispatch_command, get_all_commands, list_commands

__all__ = [
    "SlashCommand",
    "CommandContext", 
    "CommandResult",
    "activate",
    "dispatch_command",
    "get_all_commands",
    "list_commands",
]
