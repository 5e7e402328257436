#!/usr/bin/env python3
"""
Newport Trivia - entry point

Runs the trivia conversation either in the terminal or as a NATS
plugin serving chat channels.

Usage:
    python newport_trivia.py [--config config.yaml]
    python newport_trivia.py --nats [--nats-url URL]

The question service API key can be set in the config file or with
the NEWPORT_TRIVIA_API_KEY environment variable.
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

import nats

from common.config import ConfigError, get_config, setup_logging
from plugins.trivia.game import GameConfig
from plugins.trivia.plugin import TriviaPlugin
from plugins.trivia.providers.mindstudio import MindStudioProvider
from plugins.trivia.session import TriviaSession
from plugins.trivia.transcript import TurnEntry


logger = logging.getLogger(__name__)


class ConsoleTrivia:
    """
    Terminal front end for a single trivia session.

    Reads lines from stdin and prints every turn the session appends.
    Typing 'reset' clears the conversation, 'quit' closes it.
    """

    def __init__(self, config: dict):
        trivia_conf = config.get("trivia", {})
        self.provider = MindStudioProvider(trivia_conf)
        self.session = TriviaSession(
            self.provider,
            GameConfig.from_dict(trivia_conf),
            on_turn=self._print_turn,
        )

    def _print_turn(self, entry: TurnEntry) -> None:
        if entry.is_user:
            return
        prefix = "⚠️ " if entry.is_error else ""
        print(f"\n{prefix}{entry.text}\n")

    async def run(self) -> None:
        print(self.session.transcript[0].text)
        await self.session.start()

        try:
            while not self.session.is_closed:
                prompt = f"[{self.session.score_text}] {self.session.placeholder} > "
                line = await asyncio.to_thread(input, prompt)
                command = line.strip().lower()

                if command == "quit":
                    self.session.close()
                elif command == "reset":
                    print(self.session.config.greeting)
                    await self.session.restart()
                else:
                    turn = asyncio.create_task(self.session.submit(line))
                    # Let the turn reach its question request before checking
                    await asyncio.sleep(0)
                    if self.session.loading_text:
                        print(self.session.loading_text)
                    await turn
        except (EOFError, KeyboardInterrupt):
            self.session.close()
        finally:
            await self.provider.close()


class NatsTrivia:
    """Runs TriviaPlugin against a NATS server until interrupted."""

    def __init__(self, config: dict, nats_url: Optional[str] = None):
        self.config = config
        self.nats_url = nats_url or config.get("nats_url", "nats://localhost:4222")
        self.nc = None
        self.plugin: Optional[TriviaPlugin] = None

    async def start(self) -> None:
        logger.info(f"Connecting to NATS at {self.nats_url}...")
        self.nc = await nats.connect(self.nats_url, connect_timeout=10.0)

        self.plugin = TriviaPlugin(self.nc, self.config.get("trivia", {}))
        await self.plugin.initialize()
        logger.info("✅ Newport Trivia started")

    async def stop(self) -> None:
        logger.info("Shutting down Newport Trivia...")
        if self.plugin:
            await self.plugin.shutdown()
        if self.nc:
            await self.nc.close()
        logger.info("✅ Newport Trivia stopped")

    async def run(self) -> None:
        try:
            await self.start()
            await asyncio.Event().wait()
        finally:
            await self.stop()


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Newport Trivia')
    parser.add_argument(
        '--config',
        default='config.json',
        help='Path to JSON or YAML config file (default: config.json)'
    )
    parser.add_argument(
        '--nats',
        action='store_true',
        help='Serve chat channels over NATS instead of the terminal'
    )
    parser.add_argument(
        '--nats-url',
        default=None,
        help='NATS server URL (overrides config nats_url)'
    )
    return parser.parse_args(argv)


async def main(argv=None):
    """Entry point"""
    args = parse_args(argv)

    try:
        config = get_config(args.config)
    except ConfigError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)

    setup_logging(config)

    if args.nats:
        await NatsTrivia(config, args.nats_url).run()
    else:
        await ConsoleTrivia(config).run()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Received shutdown signal")
