"""
Shared constants for the Glide file-sharing client.

This module contains the protocol constants, the compiled grammar patterns and
the operator-facing help texts.
"""

import re

# Network Configuration
DEFAULT_HOST = 'localhost'
DEFAULT_PORT = 8080
CONNECT_ATTEMPTS = 3
CONNECT_DELAY_BASE = 1.0  # seconds, doubled on every retry

# Buffer Sizes
CHUNK_SIZE = 1024

# Framing
ENCODING = 'utf-8'
FRAME_TERMINATOR = b'\n'
METADATA_DELIMITER = ':'
TAG_DELIMITER = ' '
USER_LIST_DELIMITER = ','

# File Transfer
DOWNLOAD_DIR = '.'

# Username rules: 1-10 alphanumerics or periods, no leading/trailing period,
# no consecutive periods.
USERNAME_PATTERN = re.compile(r'^[a-zA-Z0-9](?:[a-zA-Z0-9.]{0,8}[a-zA-Z0-9])?$')

# Command grammar
GLIDE_PATTERN = re.compile(r'^glide\s+(?P<path>.+?)\s+@(?P<to>\S+)$')
OK_PATTERN = re.compile(r'^ok\s+@(?P<target>\S+)$')
NO_PATTERN = re.compile(r'^no\s+@(?P<target>\S+)$')

# Prompts
USERNAME_PROMPT = 'Enter your username: '
COMMAND_PROMPT = 'glide> '

USERNAME_RULES = """Invalid username!
Usernames must follow these rules:
    - Only alphanumeric characters and periods (.) are allowed.
    - Must be 1 to 10 characters long.
    - Cannot start or end with a period (.).
    - Cannot contain consecutive periods (..).

Please try again with a valid username."""

GOODBYE_MESSAGE = "Thank you for using Glide. Goodbye!"

HELP_TEXT = """Available commands:
    list                   Show connected users
    reqs                   Show incoming glide requests
    glide <path> @<user>   Offer a file to a user
    ok @<user>             Accept a glide request and download the file
    no @<user>             Decline a glide request
    help                   Show this help
    exit                   Leave Glide"""


# Response tags
class ResponseTags:
    USERNAME_OK = 'USERNAME_OK'
    USERNAME_TAKEN = 'USERNAME_TAKEN'
    USERNAME_INVALID = 'USERNAME_INVALID'
    GLIDE_REQUEST_SENT = 'GLIDE_REQUEST_SENT'
    OK_SUCCESS = 'OK_SUCCESS'
    UNKNOWN_COMMAND = 'UNKNOWN_COMMAND'
    CONNECTED_USERS = 'CONNECTED_USERS'
    INCOMING_REQUESTS = 'INCOMING_REQUESTS'
    ERROR = 'ERROR'


# Local commands handled without a round trip
class LocalCommands:
    EXIT = 'exit'
    HELP = 'help'
