"""Handler for /silencer command."""

from src.commands.command import SlashCommand, CommandContext, CommandResult
from src.errors import ResolutionError, SilencerError, UnknownCommand
from src.silencer import SilencerStore


HELP_TEXT = (
    "###### User Silencer\n"
    "- `/silencer` - Show a list of currently silenced users.\n"
    "- `/silencer @user` - Toggle silencing user by name.\n"
    "- `/silencer clear` - Clear the list of silenced users.\n"
    "- `/silencer help` - Show this help text."
)

NO_SILENCED_USERS = "###### You have no silenced users\n"
SILENCED_USERS_HEADER = "###### Users you've silenced:\n"


def toggle_username(block_list: list[str], username: str) -> tuple[list[str], bool]:
    """Remove the first exact match of `username`, or append it if absent.

    Returns the new list and whether the name is now silenced.
    """
    if username in block_list:
        index = block_list.index(username)
        return block_list[:index] + block_list[index + 1:], False
    return block_list + [username], True


class SilencerCommand(SlashCommand):
    """List, clear or toggle the users whose messages you want hidden."""

    name = "silencer"
    description = "Toggles silencing of users."
    args_hint = "[@user|clear|help]"

    async def execute(self, ctx: CommandContext) -> CommandResult:
        arg = ctx.args
        store = SilencerStore(ctx.api)

        try:
            if arg == "help":
                text = HELP_TEXT
            elif arg == "clear":
                text = await self._clear(store, ctx.user_id)
            elif arg == "":
                text = await self._list(store, ctx)
            elif arg.startswith("@"):
                text = await self._toggle(store, ctx, arg[1:])
            else:
                raise UnknownCommand(arg)
        except SilencerError as e:
            print(f"  → /silencer {arg} for {ctx.user_id} failed: {e}", flush=True)
            text = str(e)

        return CommandResult(text=text)

    async def _clear(self, store: SilencerStore, user_id: str) -> str:
        await store.write(user_id, [])
        return "List cleared"

    async def _list(self, store: SilencerStore, ctx: CommandContext) -> str:
        block_list = await store.read(ctx.user_id)
        if not block_list:
            return NO_SILENCED_USERS

        try:
            users = await ctx.api.get_users_by_usernames(block_list)
        except ResolutionError as e:
            print(f"⚠️ Unable to get users in list: {e}", flush=True)
            return "Unable to fetch silencer list"

        # Renamed or deleted users no longer resolve and are left out
        by_username = {user.username: user for user in users}
        lines = [f"@{name}\n" for name in block_list if name in by_username]
        return SILENCED_USERS_HEADER + "".join(lines)

    async def _toggle(self, store: SilencerStore, ctx: CommandContext, username: str) -> str:
        try:
            user = await ctx.api.get_user(ctx.user_id)
        except ResolutionError as e:
            print(f"⚠️ Unable to get user: {e}", flush=True)
            return "Cannot get user"

        try:
            if not username:
                raise ResolutionError("No username given")
            block_user = await ctx.api.get_user_by_username(username)
        except ResolutionError as e:
            print(f"⚠️ Unable to get the other user: {e}", flush=True)
            return "Cannot get the other user"

        block_list = await store.read(ctx.user_id)
        block_list, silenced = toggle_username(block_list, block_user.username)
        await store.write(ctx.user_id, block_list)

        print(f"▶ [CMD] {user.username} {'silenced' if silenced else 'unsilenced'} {block_user.username}", flush=True)

        if silenced:
            return f"@{user.username} asked @{block_user.username} to be quiet"
        return f"@{user.username} allowed @{block_user.username} to speak"
