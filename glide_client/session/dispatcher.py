"""
Session dispatcher.

Takes one operator line at a time, validates it locally, sends it, classifies
the server's reply and runs a transfer when the command moves a file. The
protocol is lockstep: a command's response (and its payload, if any) is fully
consumed before the next line is taken.
"""

import asyncio
from pathlib import Path
from typing import Callable

from glide_common.commands import (
    Command, Glide, Ok, No, ListUsers, Requests, encode_command, parse_command, validate_command
)
from glide_common.constants import GOODBYE_MESSAGE, HELP_TEXT, LocalCommands
from glide_common.errors import LocalIOError, MalformedFrame, ServerRejected, ValidationRejected
from glide_common.framing import encode_frame, read_frame, write_all
from glide_common.protocol_definitions import (
    ConnectedUsers, GlideRequestSent, IncomingRequests, OkSuccess, ServerResponse, UnknownCommand,
    classify_response
)
from glide_client.files.transfer_engine import TransferEngine
from glide_client.session.channel import CommandChannel, CommandOutcome
from glide_client.utils.config import ClientConfig
from glide_client.utils.logger import logger


class SessionDispatcher:
    """Runs the command loop for one authenticated session."""
    
    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter, username: str,
                 config: ClientConfig = None, display: Callable[[str], None] = print):
        self.reader = reader
        self.writer = writer
        self.username = username
        self.config = config or ClientConfig()
        self.display = display
        self.engine = TransferEngine(reader, writer, **self.config.get_transfer_settings())
    
    async def run(self, channel: CommandChannel):
        """
        Serve operator lines until ``exit``.

        ConnectionClosed is not handled here; it ends the session.
        """
        while True:
            line = (await channel.next_line()).strip()
            
            if line == LocalCommands.EXIT:
                await channel.reply(CommandOutcome(
                    ok=True, message=GOODBYE_MESSAGE, finished=True
                ))
                return
            
            await channel.reply(await self.execute_line(line))
    
    async def execute_line(self, text: str) -> CommandOutcome:
        """Execute one operator line; only ConnectionClosed escapes."""
        line = text.strip()
        if not line:
            return CommandOutcome(ok=True, message='')
        if line == LocalCommands.HELP:
            return CommandOutcome(ok=True, message=HELP_TEXT)
        
        try:
            return await self.execute(parse_command(line))
        except (ValidationRejected, LocalIOError, ServerRejected, MalformedFrame) as e:
            logger.info(f"Command '{line}' failed: {e}")
            return CommandOutcome(ok=False, message=str(e))
    
    async def execute(self, command: Command) -> CommandOutcome:
        """Validate, send and complete one parsed command."""
        if not validate_command(command):
            raise ValidationRejected(f"Invalid command '{encode_command(command)}'. Use 'help' to see more")
        
        if isinstance(command, Glide) and not Path(command.path).is_file():
            raise LocalIOError(f"Path '{command.path}' is invalid. File does not exist")
        
        response = await self._request(command)
        if isinstance(response, UnknownCommand):
            raise ServerRejected(response, f"Invalid command '{encode_command(command)}'. Use 'help' to see more")
        
        if isinstance(command, Glide):
            return await self._handle_glide(command, response)
        elif isinstance(command, Ok):
            return await self._handle_ok(command, response)
        elif isinstance(command, No):
            self._expect(response, OkSuccess, f"Declining @{command.target}")
            return CommandOutcome(ok=True, message=f"Declined glide request from @{command.target}")
        elif isinstance(command, ListUsers):
            self._expect(response, ConnectedUsers, "Listing users")
            lines = ["Connected users:"] + [f" @{user}" for user in response.users]
            return CommandOutcome(ok=True, message="\n".join(lines))
        elif isinstance(command, Requests):
            self._expect(response, IncomingRequests, "Listing requests")
            if not response.requests:
                return CommandOutcome(ok=True, message="No incoming requests")
            lines = ["Incoming requests:"] + [
                f" From: {req.sender}, File: {req.filename}" for req in response.requests
            ]
            return CommandOutcome(ok=True, message="\n".join(lines))
        raise TypeError(f"Unsupported command type: {type(command).__name__}")
    
    async def _request(self, command: Command) -> ServerResponse:
        """Send one command frame and classify the reply."""
        text = encode_command(command)
        await write_all(self.writer, encode_frame(text))
        response = classify_response(await read_frame(self.reader))
        logger.log_command(text, repr(response))
        return response
    
    def _expect(self, response: ServerResponse, expected: type, action: str):
        if not isinstance(response, expected):
            raise ServerRejected(response, f"{action} failed: {response}")
    
    async def _handle_glide(self, command: Glide, response: ServerResponse) -> CommandOutcome:
        self._expect(response, GlideRequestSent, "Glide request")
        self.display(f"Glide request sent to @{command.to}, uploading {Path(command.path).name}...")
        
        result = await self.engine.upload(command.path, progress=self._show_upload_progress)
        if not result.complete:
            return CommandOutcome(
                ok=False,
                message=f"File upload incomplete: sent {result.transferred}/{result.size} bytes "
                        f"(file changed during transfer)"
            )
        return CommandOutcome(ok=True, message="File upload completed successfully!")
    
    async def _handle_ok(self, command: Ok, response: ServerResponse) -> CommandOutcome:
        self._expect(response, OkSuccess, f"Accepting @{command.target}")
        self.display("Getting file...")
        
        result = await self.engine.download(progress=self._show_download_progress)
        return CommandOutcome(ok=True, message=f"File transfer completed: {result.path}")
    
    def _show_upload_progress(self, chunks_sent: int, total_chunks: int):
        percent = int(chunks_sent / total_chunks * 100)
        self.display(f"Sent chunk {chunks_sent}/{total_chunks} ({percent}%)")
    
    def _show_download_progress(self, received: int, size: int):
        percent = received / size * 100
        self.display(f"Progress: {received}/{size} bytes ({percent:.2f}%)")
