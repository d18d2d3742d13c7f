## client.py
# Basic IRC client implementation.
import asyncio
import collections
import inspect
import logging

from . import connection, events, models, protocol
from .protocol import Error

__all__ = ['Error', 'InternalConsistency', 'RawStream', 'BasicClient']
DEFAULT_NICKNAME = '<unregistered>'


class InternalConsistency(Error):
    """ The server sent a reply that contradicts what we have tracked so far. """
    pass


class RawStream:
    """
    Every parsed line, keyed by command or numeric.
    Handlers may be plain callables or coroutine functions; they receive the line after the client has processed it.
    """

    def __init__(self):
        self._handlers = collections.defaultdict(list)

    def on(self, command, handler):
        """ Call handler for every line with the given command. """
        self._handlers[command].append(handler)

    def off(self, command, handler):
        """ Stop calling handler for the given command. """
        if handler in self._handlers.get(command, []):
            self._handlers[command].remove(handler)

    async def emit(self, message):
        for handler in list(self._handlers.get(message.command, [])):
            result = handler(message)
            if inspect.isawaitable(result):
                await result

    def __contains__(self, command):
        return bool(self._handlers.get(command))


class BasicClient:
    """
    Base IRC client class.
    This class on its own is not complete: in order to be able to run properly, _has_message, _parse_message and _create_message have to be overloaded.
    """
    READ_TIMEOUT = 300

    def __init__(self, nickname, username=None, realname=None, **kwargs):
        """ Create a client. """
        self._nickname = nickname
        self.username = username or nickname
        self.realname = realname or nickname
        self.raw_stream = RawStream()

        self._reset_connection_attributes()
        self._reset_attributes()

        if kwargs:
            self.logger.warning('Unused arguments: %s', ', '.join(kwargs.keys()))

    def _reset_attributes(self):
        """ Reset attributes. """
        # Session record-keeping.
        self.state = models.SessionState()

        # Low-level data stuff.
        self._receive_buffer = b''
        self._handler_top_level = False

        # Misc.
        self.logger = logging.getLogger(__name__)

        # Public connection attributes.
        self.nickname = DEFAULT_NICKNAME
        self.network = None

    def _reset_connection_attributes(self):
        """ Reset connection attributes. """
        self.connection = None
        self.encoding = protocol.DEFAULT_ENCODING
        self._autojoin_channels = []

    ## Connection.

    def run(self, *args, **kwargs):
        """ Connect and handle messages until the session ends. """
        asyncio.run(self._run(*args, **kwargs))

    async def _run(self, *args, **kwargs):
        await self.connect(*args, **kwargs)
        await self.handle_forever()

    async def connect(self, hostname=None, port=None, **kwargs):
        """ Connect to IRC server. A new session starts with fresh state. """
        if not hostname or not port:
            raise ValueError('Have to specify hostname and port.')

        # Disconnect from current connection.
        if self.connected:
            await self.disconnect(expected=True)

        # Reset attributes and connect.
        self._reset_connection_attributes()
        self._reset_attributes()
        await self._connect(hostname=hostname, port=port, **kwargs)

        # Set logger name.
        if self.server_tag:
            self.logger = logging.getLogger(self.__class__.__name__ + ':' + self.server_tag)

    async def disconnect(self, expected=True):
        """ Disconnect from server. """
        if self.connected:
            await self._disconnect(expected)

    async def _disconnect(self, expected):
        # Shutdown connection.
        await self.connection.disconnect()

        # Callback.
        await self.on_disconnect(expected)

    async def _connect(self, hostname, port, channels=[], encoding=protocol.DEFAULT_ENCODING, source_address=None):
        """ Connect to IRC host. """
        self._autojoin_channels = list(channels)
        self.connection = connection.Connection(hostname, port, source_address=source_address)
        self.encoding = encoding

        await self.connection.connect()

    ## IRC helpers.

    def is_same_nick(self, left, right):
        """ Check if given nicknames are equal. Nicknames are tracked case-sensitively. """
        return left == right

    ## IRC attributes.

    @property
    def connected(self):
        """ Whether or not we are connected. """
        return bool(self.connection and self.connection.connected)

    @property
    def registered(self):
        """ Whether or not the server accepted our registration. """
        return self.state.registered

    @property
    def secure(self):
        """ Whether or not the transport is encrypted. """
        return bool(self.connection and self.connection.tls)

    @property
    def server_tag(self):
        if self.connected and self.connection.hostname:
            if self.network:
                tag = self.network.lower()
            else:
                tag = self.connection.hostname.lower()

                # Remove hostname prefix.
                if tag.startswith('irc.'):
                    tag = tag[4:]

                # Check if host is either an FQDN or IPv4.
                if '.' in tag:
                    # Attempt to cut off TLD.
                    host, suffix = tag.rsplit('.', 1)

                    # Make sure we aren't cutting off the last octet of an IPv4.
                    try:
                        int(suffix)
                    except ValueError:
                        tag = host

            return tag
        else:
            return None

    ## IRC API.

    async def raw(self, message):
        """ Send raw command. Line breaks are removed and the line separator is appended. """
        message = message.replace('\r', '').replace('\n', '')
        await self._send(message + '\r\n')

    async def rawmsg(self, command, *args, **kwargs):
        """ Send raw message. """
        message = str(self._create_message(command, *args, **kwargs))
        await self._send(message)

    ## Overloadable callbacks.

    async def on_disconnect(self, expected):
        """ Callback called when the session ended. Sessions are never resumed. """
        if not expected:
            self.logger.error('Unexpected disconnect. Session ended.')

    async def on_event(self, event):
        """ Callback called for every structured event, before the callback dedicated to its kind. """
        pass

    async def on_registered(self, nickname, line):
        """ Callback called when the server accepted our registration. """
        pass

    async def on_nick(self, old, new, line):
        """ Callback called when a user, possibly the client, changed their nickname. """
        pass

    async def on_privmsg(self, nick, target, message, line):
        """ Callback called when a message was sent to a channel or to the client. """
        pass

    async def on_notice(self, nick, target, message, line):
        """ Callback called when a notice was sent to a channel or to the client. """
        pass

    async def on_join(self, nick, channel, account, realname, line):
        """ Callback called when a user, possibly the client, has joined a channel. """
        pass

    async def on_part(self, nick, channel, message, line):
        """ Callback called when a user, possibly the client, left a channel. """
        pass

    async def on_remove(self, nick, channel, target, message, line):
        """ Callback called when a user was forced out of a channel with REMOVE. """
        pass

    async def on_quit(self, nick, message, line):
        """ Callback called when a user left the network. """
        pass

    async def on_invite(self, nick, channel, line):
        """ Callback called when the client was invited into a channel. """
        pass

    async def on_kick(self, nick, channel, target, message, line):
        """ Callback called when a user, possibly the client, was kicked from a channel. """
        pass

    async def on_topic(self, nick, channel, topic, line):
        """ Callback called when the topic of a channel was changed. """
        pass

    async def on_rpl_topic(self, channel, topic, line):
        """ Callback called when the server told us the topic of a channel. """
        pass

    async def on_wallops(self, nick, message, line):
        pass

    async def on_rpl_mononline(self, nick, username, host, line):
        """ Callback called when a monitored user came online. """
        pass

    async def on_rpl_monoffline(self, nick, line):
        """ Callback called when a monitored user went offline. """
        pass

    async def on_rpl_endofnames(self, names, channel, line):
        """ Callback called with the complete nickname -> prefix modes mapping of a channel. """
        pass

    async def on_error(self, error, line):
        """ Callback called when a non-fatal error occurred, or the server sent ERROR. """
        pass

    ## Event dispatch.

    async def _emit(self, event):
        """ Hand a structured event to on_event and to the callback for its kind. """
        await self.on_event(event)
        await getattr(self, 'on_' + event.kind)(*event)

    async def _emit_error(self, error, message=None):
        """ Surface an error through the error event. """
        self.logger.error('%s: %s', error.__class__.__name__, error)
        await self._emit(events.ErrorEvent(error, message))

    ## Message dispatch.

    def _has_message(self):
        """ Whether or not we have messages available for processing. """
        raise NotImplementedError()

    def _create_message(self, command, *params, **kwargs):
        raise NotImplementedError()

    def _parse_message(self):
        raise NotImplementedError()

    async def _send(self, input):
        if not isinstance(input, (bytes, str)):
            input = str(input)
        if isinstance(input, str):
            input = input.encode(self.encoding)

        self.logger.debug('>> %s', input.decode(self.encoding).rstrip('\r\n'))
        await self.connection.send(input)

    async def handle_forever(self):
        """ Handle data until the session ends. Lines are processed one at a time, in order. """
        while self.connected:
            try:
                data = await self.connection.recv(timeout=self.READ_TIMEOUT)
            except asyncio.TimeoutError:
                self.logger.warning('>> Receive timeout reached, sending ping to check connection state...')

                try:
                    await self.rawmsg('PING', self.server_tag)
                    data = await self.connection.recv(timeout=self.READ_TIMEOUT)
                except (asyncio.TimeoutError, ConnectionResetError):
                    data = None
            except ConnectionError as e:
                await self.on_data_error(e)
                break

            if not data:
                if self.connected:
                    await self.disconnect(expected=False)
                break
            await self.on_data(data)

    ## Raw message handlers.

    async def on_data(self, data):
        """ Handle received data. """
        self._receive_buffer += data

        while self.connected and self._has_message():
            message = self._parse_message()
            await self.on_raw(message)

    async def on_data_error(self, exception):
        """ Handle error. """
        self.logger.error('Encountered error on socket.',
                          exc_info=(type(exception), exception, None))
        await self.disconnect(expected=False)

    def _annotate(self, message):
        """ Attach what we know about the message source to the message. """
        pass

    async def on_raw(self, message):
        """ Handle a single message. """
        self.logger.debug('<< %s', message._raw)
        if not message._valid:
            self.logger.warning('Encountered strictly invalid IRC message from server: %s', message._raw)
            await self._emit_error(
                protocol.ProtocolViolation('Invalid IRC message: {}'.format(message._raw), message=message), message)

        self._annotate(message)

        # Invoke dispatcher, if we have one.
        method = 'on_raw_' + protocol.identifierify(message.command)
        try:
            # Set _top_level so __getattr__() can decide whether to return on_unknown or _ignored for unknown handlers.
            # The reason for this is that features can always call super().on_raw_* safely and thus don't need to care for other features,
            # while unknown messages for which no handlers exist at all are still logged.
            self._handler_top_level = True
            handler = getattr(self, method)
            self._handler_top_level = False

            await handler(message)
        except Exception:
            self.logger.exception('Failed to execute %s handler.', method)

        # Every line reaches the raw stream, whether or not it produced an event.
        try:
            await self.raw_stream.emit(message)
        except Exception:
            self.logger.exception('Raw stream handler for %s failed.', message.command)

    async def on_unknown(self, message):
        """ Unknown command. """
        self.logger.debug('Unknown command: [%s] %s %s', message.source, message.command, message.params)

    async def _ignored(self, message):
        """ Ignore message. """
        pass

    def __getattr__(self, attr):
        """ Return on_unknown or _ignored for unknown handlers, depending on the invocation type. """
        # Is this a raw handler?
        if attr.startswith('on_raw_'):
            # Are we in on_raw() trying to find any message handler?
            if self._handler_top_level:
                # In that case, return the method that logs and possibly acts on unknown messages.
                return self.on_unknown
            # Are we in an existing handler calling super()?
            else:
                # Just ignore it, then.
                return self._ignored

        # This isn't a handler, just raise an error.
        raise AttributeError(attr)
