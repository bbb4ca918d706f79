"""CLI entry point for tgbot-kit."""

from __future__ import annotations

import argparse
import asyncio
import sys

from tgbot_kit.bot import Bot
from tgbot_kit.config import AppConfig, load_config
from tgbot_kit.exceptions import BotSetupError
from tgbot_kit.log import setup_logging
from tgbot_kit.storage.database import Database
from tgbot_kit.storage.sqlite_provider import SqliteChatProvider


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="tgbot-kit",
        description="Telegram bot toolkit: configuration and connectivity checks",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    for name, help_text in (
        ("config-check", "Validate configuration"),
        ("init-db", "Create the SQLite schema"),
        ("get-me", "Connect to Telegram and print the bot identity"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("-c", "--config", default="config.yaml", help="Path to config file")
        sub.add_argument("-e", "--env", default=".env", help="Path to .env file")

    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(2)

    config = _load(args.config, args.env)
    if args.command == "config-check":
        _check_config(args.config, config)
    elif args.command == "init-db":
        asyncio.run(_init_db(config))
    elif args.command == "get-me":
        setup_logging(config.log_level, config.log_json)
        asyncio.run(_get_me(config))


def _load(config_path: str, env_path: str) -> AppConfig:
    try:
        return load_config(config_path, env_path)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        sys.exit(1)


def _check_config(config_path: str, config: AppConfig) -> None:
    """Print a summary of a configuration that already validated."""
    print(f"Configuration valid: {config_path}")
    print(f"  Log level: {config.log_level}")
    print(f"  API endpoint: {config.bot.api_endpoint or '(default)'}")
    print(f"  Poll timeout: {config.bot.poll_timeout}s")
    print(f"  Storage: {config.storage.db_path}")


async def _init_db(config: AppConfig) -> None:
    db = Database(config.storage.db_path)
    await db.initialize()
    await db.close()
    print(f"Schema ready: {config.storage.db_path}")


async def _get_me(config: AppConfig) -> None:
    db = Database(config.storage.db_path)
    await db.initialize()
    try:
        bot = await Bot.from_config(config.bot, SqliteChatProvider(db))
    except BotSetupError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    finally:
        await db.close()

    try:
        me = bot.bot_self
        print(f"  Id       : {me.id}")
        print(f"  Username : @{me.username}")
        print(f"  Name     : {me.full_name}")
    finally:
        await bot.stop()


if __name__ == "__main__":
    main()
