"""
Handoff between the operator and the connection.

The operator context only produces lines and displays what comes back; the
connection context is the only code that touches the stream. The line slot
holds at most one item, and a submitted line is not answered until its final
outcome arrives, so there is never more than one command in flight. Status
lines posted while a command runs (transfer progress) travel back on the same
reply queue, ahead of the outcome they belong to.
"""

import asyncio
from dataclasses import dataclass
from typing import Callable

from glide_common.constants import COMMAND_PROMPT, USERNAME_PROMPT


@dataclass(frozen=True)
class CommandOutcome:
    """Final result of one operator line."""
    ok: bool
    message: str
    finished: bool = False


class CommandChannel:
    """Command in, status lines and outcome out."""
    
    def __init__(self):
        self._lines: asyncio.Queue = asyncio.Queue(maxsize=1)
        self._replies: asyncio.Queue = asyncio.Queue()
        self.prompt = USERNAME_PROMPT
    
    async def submit(self, line: str, on_notice: Callable[[str], None] = print) -> CommandOutcome:
        """Operator side: hand over one line, show its status lines, return its outcome."""
        await self._lines.put(line)
        while True:
            reply = await self._replies.get()
            if isinstance(reply, CommandOutcome):
                return reply
            on_notice(reply)
    
    async def next_line(self) -> str:
        """Connection side: wait for the next operator line."""
        return await self._lines.get()
    
    def notify(self, text: str):
        """Connection side: post a status line for the command in flight."""
        self._replies.put_nowait(text)
    
    async def reply(self, outcome: CommandOutcome):
        """Connection side: hand back the outcome of the current line."""
        await self._replies.put(outcome)
    
    def enter_command_mode(self):
        """Switch the operator prompt once the handshake is done."""
        self.prompt = COMMAND_PROMPT
