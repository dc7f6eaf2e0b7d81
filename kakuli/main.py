"""
Bot main entry point - BOOTSTRAP ONLY
This module should contain NO business logic, only orchestration.
"""
import asyncio
import os
import sys
from typing import NoReturn

from .config import load_config, validate_required_env
from .connection import ReconnectLoop
from .context import BotContext
from .core.cli import parse_arguments, show_version_info, validate_configuration_only
from .dispatcher import Dispatcher
from .exceptions import ConfigurationError
from .http_client import SharedHttpClient
from .shutdown import GracefulShutdown
from .transport.discord_client import DiscordTransport
from .utils.logging import get_logger, init_logging, shutdown_logging_and_exit


async def main() -> NoReturn:
    """Main bot execution function."""
    args = parse_arguments()
    if args.debug:
        os.environ["LOG_LEVEL"] = "DEBUG"
    init_logging()
    logger = get_logger(__name__)

    if args.version:
        show_version_info()
        shutdown_logging_and_exit(0)

    if args.config_check:
        shutdown_logging_and_exit(0 if validate_configuration_only() else 1)

    try:
        validate_required_env()
        config = load_config()
    except ConfigurationError as e:
        logger.critical(f"Configuration error during startup: {e}", extra={"subsys": "core"})
        shutdown_logging_and_exit(1)

    http = SharedHttpClient(timeout_s=config.http_timeout_s)
    await http.start()

    reconnect = ReconnectLoop(config.reconnect_max_attempts, config.reconnect_base_delay_s)
    client = DiscordTransport(http, connection_listener=reconnect.on_event)
    ctx = BotContext.build(config, client, http)
    ctx.workdir.ensure()
    client.on_inbound = Dispatcher(ctx).dispatch

    shutdown = GracefulShutdown(client, http, ctx.workdir, reconnect=reconnect)
    shutdown.install()

    exit_code = 0
    try:
        await reconnect.run(lambda: client.run_session(config.discord_token, reconnect.stopped))
    except Exception as e:
        logger.critical(f"Bot stopped: {type(e).__name__}: {e}", extra={"subsys": "core"})
        exit_code = 1
    finally:
        await shutdown.cleanup()

    shutdown_logging_and_exit(exit_code)


def run_bot() -> None:
    """Entry point for running the bot with proper error handling."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nBot shutdown requested by user.")
        shutdown_logging_and_exit(0)
    except Exception as e:
        print(f"FATAL ERROR: {e}", file=sys.stderr)
        import traceback

        traceback.print_exc()
        shutdown_logging_and_exit(1)


if __name__ == "__main__":
    run_bot()
