"""
Command model for the Glide client.

Operator text is parsed into one of a closed set of immutable commands:

    list                  -> ListUsers()
    reqs                  -> Requests()
    glide <path> @<user>  -> Glide(path, to)
    ok @<user>            -> Ok(target)
    no @<user>            -> No(target)
    anything else         -> Unknown(raw_text)

Local validation is a convenience that saves a round trip; the server still
rejects malformed input on its own.
"""

from dataclasses import dataclass

from glide_common.constants import GLIDE_PATTERN, OK_PATTERN, NO_PATTERN, USERNAME_PATTERN


class Command:
    """Base class for parsed operator commands."""
    pass


@dataclass(frozen=True)
class Glide(Command):
    """Offer the local file ``path`` to user ``to``."""
    path: str
    to: str


@dataclass(frozen=True)
class Ok(Command):
    """Accept the pending glide request from ``target``."""
    target: str


@dataclass(frozen=True)
class No(Command):
    """Decline the pending glide request from ``target``."""
    target: str


@dataclass(frozen=True)
class ListUsers(Command):
    pass


@dataclass(frozen=True)
class Requests(Command):
    pass


@dataclass(frozen=True)
class Unknown(Command):
    raw_text: str


def is_valid_username(username: str) -> bool:
    """Check a candidate username against the username rules."""
    return USERNAME_PATTERN.fullmatch(username) is not None


def parse_command(text: str) -> Command:
    """Parse one line of operator input."""
    line = text.strip()

    if line == 'list':
        return ListUsers()
    if line == 'reqs':
        return Requests()

    match = GLIDE_PATTERN.match(line)
    if match:
        return Glide(path=match.group('path').strip(), to=match.group('to'))

    match = OK_PATTERN.match(line)
    if match:
        return Ok(target=match.group('target'))

    match = NO_PATTERN.match(line)
    if match:
        return No(target=match.group('target'))

    return Unknown(raw_text=text)


def encode_command(command: Command) -> str:
    """Render a command in the canonical form sent to the server."""
    if isinstance(command, Glide):
        return f"glide {command.path} @{command.to}"
    elif isinstance(command, Ok):
        return f"ok @{command.target}"
    elif isinstance(command, No):
        return f"no @{command.target}"
    elif isinstance(command, ListUsers):
        return 'list'
    elif isinstance(command, Requests):
        return 'reqs'
    elif isinstance(command, Unknown):
        return command.raw_text
    raise TypeError(f"Unsupported command type: {type(command).__name__}")


def validate_command(command: Command) -> bool:
    """
    Re-check a command against the grammar it was parsed with.

    Unknown commands and commands whose surface form would not parse back to
    the same value are rejected, as are targets that break the username rules.
    """
    if isinstance(command, Unknown):
        return False

    if parse_command(encode_command(command)) != command:
        return False

    if isinstance(command, Glide):
        return bool(command.path) and is_valid_username(command.to)
    if isinstance(command, (Ok, No)):
        return is_valid_username(command.target)
    return True
