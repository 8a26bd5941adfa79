"""Command registry - registers and dispatches slash commands."""

from src.commands.command import SlashCommand, CommandContext, CommandResult
from src.commands.handlers import SilencerCommand
from src.config import get_configuration
from src.errors import UnknownCommand
from src.host import PluginAPI


def get_all_commands() -> list[SlashCommand]:
    """Get instances of all registered commands."""
    return [
        SilencerCommand(),
    ]


def _get_command_map() -> dict[str, SlashCommand]:
    """Build a map of command name -> handler."""
    return {cmd.name: cmd for cmd in get_all_commands()}


async def activate(api: PluginAPI):
    """Validate configuration and register every command with the host.
    
    Raises:
        ValueError: configuration is invalid
        RuntimeError: the host refused a registration
    """
    get_configuration().is_valid()
    
    for cmd in get_all_commands():
        try:
            await api.register_command(cmd.name, cmd.description, cmd.args_hint)
        except Exception as e:
            raise RuntimeError(f"failed to register {cmd.name} command: {e}") from e


async def dispatch_command(command: str, user_id: str, api: PluginAPI) -> CommandResult:
    """Parse and dispatch a slash command.
    
    Args:
        command: The full command text (e.g., "/silencer @bob")
        user_id: ID of the invoking user
        api: Host capabilities
    
    Returns:
        CommandResult. Unknown triggers get an "Unknown command" reply, never None.
    """
    fields = command.split()
    if not fields:
        return CommandResult(text=str(UnknownCommand(command)))
    
    trigger = fields[0].removeprefix("/")
    handler = _get_command_map().get(trigger)
    if not handler:
        print(f"· unknown trigger \"{trigger}\"", flush=True)
        return CommandResult(text=str(UnknownCommand(command)))
    
    # Only the first token after the trigger matters; the rest is ignored
    args = fields[1] if len(fields) > 1 else ""
    
    ctx = CommandContext(
        user_id=user_id,
        args=args,
        raw_command=command,
        api=api,
    )
    
    return await handler.execute(ctx)


def list_commands() -> list[tuple[str, str]]:
    """List all available commands with their descriptions."""
    return [(f"/{cmd.name} {cmd.args_hint}".strip(), cmd.description) for cmd in get_all_commands()]
