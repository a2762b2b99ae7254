"""
Username handshake.

Runs once before the command loop:

    PROMPTING -> SENT -> ACCEPTED
                      -> REJECTED -> PROMPTING

Invalid candidates never leave the client. The local word ``exit`` (also sent
when operator input runs out) ends the session before login. Peer closure at any point raises
ConnectionClosed, which ends the session.
"""

import asyncio
import enum
from typing import Optional

from glide_common.commands import is_valid_username
from glide_common.constants import GOODBYE_MESSAGE, USERNAME_RULES, LocalCommands
from glide_common.errors import MalformedFrame
from glide_common.framing import encode_frame, read_frame, write_all
from glide_common.protocol_definitions import UsernameOk, classify_response
from glide_client.session.channel import CommandChannel, CommandOutcome
from glide_client.utils.logger import logger


class HandshakeState(enum.Enum):
    PROMPTING = 'prompting'
    SENT = 'sent'
    ACCEPTED = 'accepted'
    REJECTED = 'rejected'


class Handshake:
    """Negotiates a username with the server."""
    
    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        self.reader = reader
        self.writer = writer
        self.state = HandshakeState.PROMPTING
    
    async def run(self, channel: CommandChannel) -> Optional[str]:
        """
        Prompt until the server accepts a username, then return it.

        Returns None when the operator asks to leave before logging in.
        """
        while True:
            self.state = HandshakeState.PROMPTING
            username = (await channel.next_line()).strip()
            
            if username == LocalCommands.EXIT:
                await channel.reply(CommandOutcome(ok=True, message=GOODBYE_MESSAGE, finished=True))
                return None
            
            if not is_valid_username(username):
                await channel.reply(CommandOutcome(ok=False, message=USERNAME_RULES))
                continue
            
            self.state = HandshakeState.SENT
            await write_all(self.writer, encode_frame(username))
            try:
                response = classify_response(await read_frame(self.reader))
            except MalformedFrame as e:
                response = e
            
            if isinstance(response, UsernameOk):
                self.state = HandshakeState.ACCEPTED
                logger.log_login(username, True)
                channel.enter_command_mode()
                await channel.reply(CommandOutcome(
                    ok=True,
                    message=f"You are now connected as @{username}\nType 'help' to see available commands."
                ))
                return username
            
            self.state = HandshakeState.REJECTED
            logger.log_login(username, False, str(response))
            await channel.reply(CommandOutcome(ok=False, message=f"Server rejected username: {response}"))
