"""
Protocol definitions for the Glide client.

This module defines the server responses and how they are classified from, and
encoded to, the wire. A response frame is ``TAG`` or ``TAG <payload>``:

    USERNAME_OK | USERNAME_TAKEN | USERNAME_INVALID
    GLIDE_REQUEST_SENT | OK_SUCCESS | UNKNOWN_COMMAND
    CONNECTED_USERS alice,bob
    INCOMING_REQUESTS [{"sender": "alice", "filename": "notes.txt"}]
    ERROR <free-form reason>

Tags the client does not recognise classify as UnknownCommand.
"""

import json
from dataclasses import dataclass, field
from typing import ClassVar, List

from glide_common.constants import ENCODING, ResponseTags, TAG_DELIMITER, USER_LIST_DELIMITER
from glide_common.framing import encode_frame


class ServerResponse:
    """Base class for classified server responses."""
    tag: ClassVar[str] = ''
    description: ClassVar[str] = ''

    def payload(self) -> str:
        return ''

    def __str__(self):
        return self.description


@dataclass(frozen=True)
class UsernameOk(ServerResponse):
    tag: ClassVar[str] = ResponseTags.USERNAME_OK
    description: ClassVar[str] = 'Username accepted'


@dataclass(frozen=True)
class UsernameTaken(ServerResponse):
    tag: ClassVar[str] = ResponseTags.USERNAME_TAKEN
    description: ClassVar[str] = 'Username is already taken'


@dataclass(frozen=True)
class UsernameInvalid(ServerResponse):
    tag: ClassVar[str] = ResponseTags.USERNAME_INVALID
    description: ClassVar[str] = 'Username is invalid'


@dataclass(frozen=True)
class GlideRequestSent(ServerResponse):
    tag: ClassVar[str] = ResponseTags.GLIDE_REQUEST_SENT
    description: ClassVar[str] = 'Glide request sent'


@dataclass(frozen=True)
class OkSuccess(ServerResponse):
    tag: ClassVar[str] = ResponseTags.OK_SUCCESS
    description: ClassVar[str] = 'Request handled'


@dataclass(frozen=True)
class UnknownCommand(ServerResponse):
    tag: ClassVar[str] = ResponseTags.UNKNOWN_COMMAND
    description: ClassVar[str] = 'Unknown command'


@dataclass(frozen=True)
class ConnectedUsers(ServerResponse):
    tag: ClassVar[str] = ResponseTags.CONNECTED_USERS
    users: List[str] = field(default_factory=list)

    def payload(self) -> str:
        return USER_LIST_DELIMITER.join(self.users)

    def __str__(self):
        return f"Connected users: {', '.join(self.users) or 'none'}"


@dataclass(frozen=True)
class GlideRequest:
    """A pending offer of ``filename`` from ``sender``."""
    sender: str
    filename: str


@dataclass(frozen=True)
class IncomingRequests(ServerResponse):
    tag: ClassVar[str] = ResponseTags.INCOMING_REQUESTS
    requests: List[GlideRequest] = field(default_factory=list)

    def payload(self) -> str:
        return json.dumps(
            [{"sender": r.sender, "filename": r.filename} for r in self.requests],
            ensure_ascii=False
        )

    def __str__(self):
        return f"{len(self.requests)} incoming request(s)"


@dataclass(frozen=True)
class Failure(ServerResponse):
    """Generic textual failure reported by the server."""
    tag: ClassVar[str] = ResponseTags.ERROR
    reason: str = 'Unspecified server error'

    def __post_init__(self):
        # Reasons travel on a single line with the tag; empty means unspecified.
        object.__setattr__(self, 'reason', ' '.join(self.reason.split()) or Failure.reason)

    def payload(self) -> str:
        return self.reason

    def __str__(self):
        return self.reason


_SIMPLE_RESPONSES = {
    cls.tag: cls
    for cls in (UsernameOk, UsernameTaken, UsernameInvalid, GlideRequestSent, OkSuccess, UnknownCommand)
}


def _parse_user_list(payload: str) -> List[str]:
    users = []
    for line in payload.splitlines():
        users.extend(name.strip() for name in line.split(USER_LIST_DELIMITER) if name.strip())
    return users


def _parse_requests(payload: str) -> List[GlideRequest]:
    if not payload.strip():
        return []
    entries = json.loads(payload)
    if not isinstance(entries, list):
        raise ValueError("incoming requests payload is not a list")
    return [GlideRequest(sender=str(e['sender']), filename=str(e['filename'])) for e in entries]


def classify_response(data: bytes) -> ServerResponse:
    """
    Classify one received frame.

    Never raises: text that cannot be interpreted degrades to UnknownCommand,
    and a recognised list tag with a broken payload becomes a Failure.
    """
    text = data.decode(ENCODING, errors='replace').rstrip('\r\n')
    tag, _, payload = text.partition(TAG_DELIMITER)
    tag = tag.strip()

    if tag in _SIMPLE_RESPONSES:
        return _SIMPLE_RESPONSES[tag]()

    if tag == ResponseTags.CONNECTED_USERS:
        return ConnectedUsers(users=_parse_user_list(payload))

    if tag == ResponseTags.INCOMING_REQUESTS:
        try:
            return IncomingRequests(requests=_parse_requests(payload))
        except (ValueError, TypeError, KeyError) as e:
            return Failure(reason=f"Malformed incoming requests payload: {e}")

    if tag == ResponseTags.ERROR:
        return Failure(reason=payload)

    return UnknownCommand()


def encode_response(response: ServerResponse) -> bytes:
    """Encode a response the way a server puts it on the wire."""
    payload = response.payload()
    if payload or isinstance(response, IncomingRequests):
        return encode_frame(f"{response.tag}{TAG_DELIMITER}{payload}")
    return encode_frame(response.tag)
