from . import client, parsing, protocol

from .client import RFC1459Support
from .parsing import RFC1459Message
