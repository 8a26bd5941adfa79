import asyncio

from dotenv import load_dotenv

load_dotenv(override=True)

from src.commands import activate, list_commands
from src.config import reload_configuration


def cmd_commands(args):
    """Print the slash command usage table."""
    for usage, description in list_commands():
        print(f"{usage:<32} {description}")


async def cmd_register(args):
    """Register the slash command with Mattermost and exit."""
    from src.host import MattermostPluginAPI
    from src.hub import WebSocketHub
    from src.kvstore import FileKVStore

    configuration = reload_configuration()
    if not configuration.team_id:
        print("❌ MATTERMOST_TEAM_ID must be set to register commands")
        return
    api = MattermostPluginAPI(FileKVStore(configuration.data_dir), WebSocketHub())
    await activate(api)
    print("✅ Registration complete.")


def main():
    import argparse

    parser = argparse.ArgumentParser(description="Per-user silencer lists for Mattermost")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Serve command (API mode)
    serve_parser = subparsers.add_parser("serve", help="Run API server for the /silencer slash command")
    serve_parser.add_argument("--host", default="0.0.0.0", help="Host to bind to (default: 0.0.0.0)")
    serve_parser.add_argument("--port", "-p", type=int, default=8000, help="Port to listen on (default: 8000)")

    # Register command
    subparsers.add_parser("register", help="Register /silencer with Mattermost (needs MATTERMOST_TEAM_ID and SILENCER_CALLBACK_URL)")

    # Commands listing
    subparsers.add_parser("commands", help="List available slash commands")

    args = parser.parse_args()

    if args.command == "serve":
        from src.api import run_server
        run_server(host=args.host, port=args.port)
    elif args.command == "register":
        asyncio.run(cmd_register(args))
    elif args.command == "commands":
        cmd_commands(args)


if __name__ == "__main__":
    main()
