#!/usr/bin/env python3
"""
Glide Client - Main Entry Point

This module assembles the client: it connects to the server, then runs two
contexts side by side. The operator context reads lines from stdin and prints
outcomes along with the status lines posted while a command runs; the
connection context runs the handshake and the command loop and is the only
code that touches the stream.
"""

import argparse
import asyncio
import logging
import sys
from typing import Callable, List, Optional

from glide_common.constants import LocalCommands
from glide_common.errors import ConnectionClosed
from glide_client.session.channel import CommandChannel, CommandOutcome
from glide_client.session.dispatcher import SessionDispatcher
from glide_client.session.handshake import Handshake
from glide_client.utils.config import ClientConfig
from glide_client.utils.logger import logger


def read_stdin_line(prompt: str) -> Optional[str]:
    """Blocking line read; None once stdin is exhausted."""
    try:
        return input(prompt)
    except EOFError:
        return None


class GlideClient:
    """Main client class that owns the connection for one session."""
    
    def __init__(self, config: ClientConfig,
                 read_line: Callable[[str], Optional[str]] = read_stdin_line,
                 display: Callable[[str], None] = print):
        self.config = config
        self.read_line = read_line
        self.display = display
        self.reader: Optional[asyncio.StreamReader] = None
        self.writer: Optional[asyncio.StreamWriter] = None
        self.username: Optional[str] = None
    
    async def connect(self) -> bool:
        """Establish connection to the server with retry logic and exponential backoff."""
        info = self.config.get_connection_info()
        host, port, attempts = info['host'], info['port'], info['attempts']
        
        for attempt in range(1, attempts + 1):
            try:
                self.reader, self.writer = await asyncio.open_connection(host, port)
                logger.log_connection(host, port, True)
                self.display(f"Connected to server at {host}:{port}!")
                return True
            except OSError as e:
                logger.log_connection(host, port, False)
                logger.log_error("connection", e)
                
                if attempt < attempts:
                    delay = info['delay_base'] * (2 ** (attempt - 1))
                    logger.info(f"Retrying connection in {delay}s (attempt {attempt}/{attempts})...")
                    await asyncio.sleep(delay)
        
        logger.error(f"Failed to connect after {attempts} attempts")
        self.display(f"Could not connect to {host}:{port}")
        return False
    
    async def serve(self, channel: CommandChannel) -> int:
        """Connection context: handshake, then the command loop. Returns an exit status."""
        try:
            self.username = await Handshake(self.reader, self.writer).run(channel)
            if self.username is None:
                return 0
            dispatcher = SessionDispatcher(self.reader, self.writer, self.username,
                                           self.config, display=channel.notify)
            await dispatcher.run(channel)
            return 0
        except ConnectionClosed as e:
            logger.log_error("session", e)
            await channel.reply(CommandOutcome(
                ok=False, message=f"Server disconnected unexpectedly: {e}", finished=True
            ))
            return 1
        except Exception as e:
            logger.log_error("session", e)
            await channel.reply(CommandOutcome(ok=False, message=f"Session aborted: {e}", finished=True))
            return 1
    
    async def operator_loop(self, channel: CommandChannel):
        """Operator context: read lines, hand them over, show outcomes."""
        loop = asyncio.get_running_loop()
        while True:
            line = await loop.run_in_executor(None, self.read_line, channel.prompt)
            if line is None:
                line = LocalCommands.EXIT
            
            outcome = await channel.submit(line, on_notice=self.display)
            if outcome.message:
                self.display(outcome.message)
            if outcome.finished:
                break
    
    async def interactive_mode(self) -> int:
        """Run the whole session. Returns the process exit status."""
        if not await self.connect():
            return 1
        
        channel = CommandChannel()
        operator_task = asyncio.create_task(self.operator_loop(channel))
        try:
            status = await self.serve(channel)
            await operator_task
            return status
        finally:
            if not operator_task.done():
                operator_task.cancel()
            await self.close()
    
    async def close(self):
        """Close the connection."""
        if self.writer:
            self.writer.close()
            try:
                await self.writer.wait_closed()
            except ConnectionError:
                pass
            self.writer = None
        logger.info("Disconnected from server")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='glide', description='Glide file-sharing client')
    parser.add_argument('host', help='Server IP address or host name')
    parser.add_argument('port', type=int, help='Server port')
    parser.add_argument('--download-dir', default='.',
                        help='Directory received files are written to (default: current directory)')
    parser.add_argument('--safe-filenames', action='store_true',
                        help='Strip directory parts from received file names')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log protocol activity to stderr')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    
    config = ClientConfig(
        host=args.host,
        port=args.port,
        download_dir=args.download_dir,
        safe_filenames=args.safe_filenames,
        log_level=logging.DEBUG if args.verbose else logging.WARNING
    )
    logger.set_level(config.log_level)
    
    client = GlideClient(config)
    try:
        return asyncio.run(client.interactive_mode())
    except KeyboardInterrupt:
        print("\n[INFO] Interrupted by user")
        return 1
    except Exception as e:
        logger.log_error("client", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
