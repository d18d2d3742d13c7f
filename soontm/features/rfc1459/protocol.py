## protocol.py
# RFC1459 protocol constants.
import re
from soontm.client import Error


class ServerError(Error):
    """ The server sent ERROR and is closing the connection. """
    pass


class InsecureCredentialTransmission(Error):
    """ A password is about to be sent over an unencrypted connection. """
    pass


class NicknameUnavailable(Error):
    """ Every nickname we could derive was refused during registration. """
    pass


# While this *technically* is supposed to be 143, I've yet to see a server that actually uses those.
DEFAULT_PORT = 6667


## Limits.

MESSAGE_LENGTH_LIMIT = 512
NICKNAME_LENGTH_LIMIT = 9
HOSTNAME_LENGTH_LIMIT = 63


## Defaults.

# Prefix characters peeled off NAMES entries, before the server tells us its own through ISUPPORT PREFIX.
NICKNAME_PREFIXES = '~!@%+'

# Case mappings (ISUPPORT CASEMAPPING). Under rfc1459, {}|^ are the lowercase forms of []\~.
CASE_MAPPINGS = { 'ascii', 'rfc1459', 'strict-rfc1459' }
DEFAULT_CASE_MAPPING = 'rfc1459'


## Message parsing.

LINE_SEPARATOR = '\r\n'
MINIMAL_LINE_SEPARATOR = '\n'

FORBIDDEN_CHARACTERS = { '\r', '\n', '\0' }
USER_SEPARATOR = '!'
HOST_SEPARATOR = '@'

PRIVATE_CHANNEL_SIGIL = '@'
SECRET_CHANNEL_SIGIL = '*'
PUBLIC_CHANNEL_SIGIL = '='
CHANNEL_PREFIXES = { '#', '&' }

ARGUMENT_SEPARATOR = ' '
COMMAND_PATTERN = re.compile('^([a-zA-Z]+|[0-9]{3})$', re.UNICODE)
TRAILING_PREFIX = ':'
SOURCE_PREFIX = ':'

# PART reason left by the REMOVE command: "requested by <nick> (<reason>)".
REMOVE_PATTERN = re.compile(r'^requested by (\S+) \((.*)\)$')
