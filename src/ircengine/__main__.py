#!/usr/bin/env python3
"""
Main entry point for the IRC engine demo bot
"""

import argparse
import asyncio
import logging
import sys

from .config import load_config
from .errors import ConfigError, log_error
from .irc import IRCClient
from .logging_config import LoggerConfigurator
from .logs.logger import logger


def build_client(config) -> IRCClient:  # type: ignore[no-untyped-def]
    """Create a client with the demo subscribers attached."""
    client = IRCClient(config)

    def on_connected(server: str) -> None:
        logger.log_event("app", "connected", human=f"✅ Registered on {server}")

    def on_chanmsg(userinfo: str, channel: str, message: str) -> None:
        logger.log_event(
            "chat", "privmsg", level=logging.DEBUG, human=f"{userinfo}: {message}",
            channel=channel,
        )

    def on_ping_command(userinfo, channel, args, target, respond) -> None:  # type: ignore[no-untyped-def]
        respond("pong")

    client.on("connected", on_connected)
    client.on("chanmsg", on_chanmsg)
    client.on("chancmd:ping", on_ping_command)
    return client


async def main(config_path: str | None = None) -> int:
    """Main function"""
    try:
        config = load_config(config_path)
    except ConfigError as e:
        log_error("Configuration error", e)
        return 1
    logger.log_event("app", "config_loaded", path=config_path or "default")
    client = build_client(config)
    try:
        if not await client.connect():
            return 1
        await client.wait_closed()
    except asyncio.CancelledError:
        client.disconnect("Interrupted")
        raise
    finally:
        logger.log_event("app", "shutdown")
    return 0


def run(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="ircengine", description=__doc__)
    parser.add_argument("-c", "--config", help="path to the JSON config file")
    parser.add_argument("--debug", action="store_true", help="enable DEBUG logging")
    parser.add_argument(
        "--check-config", action="store_true", help="validate the config and exit"
    )
    args = parser.parse_args(argv)

    LoggerConfigurator({"debug": args.debug}).configure()
    logger.log_event("app", "start")

    if args.check_config:
        try:
            cfg = load_config(args.config)
        except ConfigError as e:
            logger.log_event("app", "config_invalid", level=logging.ERROR, human=f"❌ {e}")
            return 1
        logger.log_event(
            "app", "config_valid", human=f"✅ Config OK for {cfg.nick}@{cfg.server.host}"
        )
        return 0

    try:
        return asyncio.run(main(args.config))
    except KeyboardInterrupt:
        logger.log_event("app", "interrupted", level=logging.WARNING)
        return 0


if __name__ == "__main__":
    sys.exit(run())
