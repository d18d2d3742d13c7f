## rfc1459.py
# Basic RFC1459 stuff.
import itertools

from soontm import events, models
from soontm.client import BasicClient, InternalConsistency
from . import parsing, protocol


class RFC1459Support(BasicClient):
    """ Basic RFC1459 client. """
    DEFAULT_QUIT_MESSAGE = 'Quitting'
    NICKNAME_ATTEMPT_LIMIT = 30

    def __init__(self, *args, sloppy=False, names=True, **kwargs):
        super().__init__(*args, **kwargs)
        self.sloppy = sloppy
        self.names = names

    ## Internals.

    def _reset_attributes(self):
        super()._reset_attributes()
        # Limitations.
        self._nickname_length_limit = protocol.NICKNAME_LENGTH_LIMIT

        # Prefixes.
        self._nickname_prefixes = protocol.NICKNAME_PREFIXES

        # Casemapping.
        self._case_mapping = protocol.DEFAULT_CASE_MAPPING

        # Registration.
        self._attempted_nickname = None
        self._nicknames_exhausted = False

    def _reset_connection_attributes(self):
        super()._reset_connection_attributes()
        self.password = None

    def _server_password(self):
        """ The password to send with PASS during registration, if any. """
        return self.password

    async def _check_credential_transport(self, what):
        """ Complain about credentials that are about to be sent in cleartext. They are sent either way. """
        if self.secure:
            return

        if self.sloppy:
            self.logger.warning('Sending %s over an unencrypted connection.', what)
        else:
            error = protocol.InsecureCredentialTransmission(
                'Sending {} over an unencrypted connection. Use TLS, or pass sloppy=True to accept the risk.'.format(what))
            await self._emit_error(error)

    def _next_nickname(self):
        """ Derive the next nickname to try after a refusal, or None if we ran out. """
        counter = self.state.nick_suffix_counter
        suffix = str(counter)
        # Give up once the counter alone no longer fits.
        if counter > self.NICKNAME_ATTEMPT_LIMIT or len(suffix) > self._nickname_length_limit:
            return None

        base = self._nickname[:max(self._nickname_length_limit - 1, len(suffix))]
        return base + suffix

    def normalize(self, input):
        """ Lowercase input according to the case mapping of the server. """
        return parsing.normalize(input, case_mapping=self._case_mapping)

    def is_same_nick(self, left, right):
        """ Check if given nicknames are equal under the case mapping of the server. """
        if left is None or right is None:
            return left is right
        return self.normalize(left) == self.normalize(right)

    def _join_extras(self, message):
        """ Return the (account, realname) a JOIN carries. Plain JOINs carry neither. """
        return None, None

    ## Connection.

    async def connect(self, hostname=None, port=None, password=None, **kwargs):
        port = port or protocol.DEFAULT_PORT

        # Connect...
        await super().connect(hostname, port, **kwargs)

        # Check if a password was provided and we don't already have one
        if password is not None and not self.password:
            # if so, set the password.
            self.password = password
        # And initiate the IRC connection.
        await self._register()

    async def _register(self):
        """ Perform IRC connection registration. """
        if self.registered:
            return

        # Password first.
        password = self._server_password()
        if password:
            await self._check_credential_transport('the server password')
            await self.rawmsg('PASS', password)

        # Then nickname...
        self._attempted_nickname = self._nickname
        await self.set_nickname(self._nickname)
        # And now for the rest of the user information.
        await self.rawmsg('USER', self.username, '0', '*', self.realname)

    ## Message handling.

    def _has_message(self):
        """ Whether or not we have messages available for processing. """
        sep = protocol.MINIMAL_LINE_SEPARATOR.encode(self.encoding)
        return sep in self._receive_buffer

    def _create_message(self, command, *params, **kwargs):
        return parsing.RFC1459Message(command, params, **kwargs)

    def _parse_message(self):
        sep = protocol.MINIMAL_LINE_SEPARATOR.encode(self.encoding)
        message, _, data = self._receive_buffer.partition(sep)
        self._receive_buffer = data
        return parsing.RFC1459Message.parse(message + sep, encoding=self.encoding)

    ## IRC API.

    async def set_nickname(self, nickname):
        """
        Set nickname to given nickname.
        Users should only rely on the nickname actually being changed when receiving an on_nick callback.
        """
        await self.rawmsg('NICK', nickname)

    async def join(self, channel, password=None):
        """ Join channel, optionally with password. """
        if password:
            await self.rawmsg('JOIN', channel, password)
        else:
            await self.rawmsg('JOIN', channel)

    async def part(self, channel, message=None):
        """ Leave channel, optionally with message. """
        if message:
            await self.rawmsg('PART', channel, message)
        else:
            await self.rawmsg('PART', channel)

    async def quit(self, message=None):
        """ Quit network. """
        if message is None:
            message = self.DEFAULT_QUIT_MESSAGE

        await self.rawmsg('QUIT', message)
        await self.disconnect(expected=True)

    async def message(self, target, message):
        """ Message channel or user. """
        for chunk in self._chunk_message('PRIVMSG', target, message):
            # Some IRC servers respond with "412 Bot :No text to send" on empty messages.
            await self.rawmsg('PRIVMSG', target, chunk or ' ')

    async def notice(self, target, message):
        """ Notice channel or user. """
        for chunk in self._chunk_message('NOTICE', target, message):
            await self.rawmsg('NOTICE', target, chunk)

    async def topic(self, channel, topic=None):
        """
        Query the topic of a channel, or set it if a topic is given.
        The server answers a query with a 332 reply, see on_rpl_topic.
        """
        if topic is None:
            await self.rawmsg('TOPIC', channel)
        else:
            await self.rawmsg('TOPIC', channel, topic)

    def _chunk_message(self, command, target, message):
        # The server relays our full hostmask along with the message, leave room for the longest one.
        relayed = ':{n}!{u}@{h} {cmd} {target} :'.format(
            n=self.nickname, u=self.username, h='*' * protocol.HOSTNAME_LENGTH_LIMIT, cmd=command, target=target)
        chunklen = protocol.MESSAGE_LENGTH_LIMIT - len(relayed) - len(protocol.LINE_SEPARATOR)

        for line in message.replace('\r', '').split('\n'):
            yield from chunkify(line, chunklen)

    ## Callback handlers.

    async def on_raw_error(self, message):
        """ Server encountered an error and will now close the connection. """
        error = protocol.ServerError(' '.join(message.params))
        await self._emit_error(error, message)
        await self.disconnect(expected=False)

    async def on_raw_pong(self, message):
        self.logger.debug('>> PONG received')

    async def on_raw_invite(self, message):
        """ INVITE command. """
        target, channel = message.params[:2]
        await self._emit(events.Invite(message.nick, channel, message))

    async def on_raw_join(self, message):
        """ JOIN command. """
        channels = message.params[0].split(',')
        account, realname = self._join_extras(message)

        for channel in channels:
            await self._emit(events.Join(message.nick, channel, account, realname, message))

    async def on_raw_kick(self, message):
        """ KICK command. """
        if len(message.params) > 2:
            channels, targets, reason = message.params[:3]
        else:
            channels, targets = message.params
            reason = None

        for channel, target in itertools.product(channels.split(','), targets.split(',')):
            await self._emit(events.Kick(message.nick, channel, target, reason, message))

    async def on_raw_nick(self, message):
        """ NICK command. """
        new = message.params[0]

        # Acknowledgement of nickname change: set it internally, too.
        # Alternatively, we were force nick-changed. Nothing much we can do about it.
        if self.is_same_nick(self.nickname, message.nick):
            self.nickname = new

        await self._emit(events.NickChange(message.nick, new, message))

    async def on_raw_notice(self, message):
        """ NOTICE command. """
        target, text = message.params[:2]
        await self._emit(events.Notice(message.nick, target, text, message))

    async def on_raw_part(self, message):
        """ PART command. """
        channels = message.params[0].split(',')
        if len(message.params) > 1:
            reason = message.params[1]
        else:
            reason = None
        removal = parsing.parse_remove_reason(reason)

        for channel in channels:
            await self._emit(events.Part(message.nick, channel, reason, message))
            # Someone used REMOVE, which shows up as a PART with a telling reason.
            if removal:
                remover, removal_reason = removal
                await self._emit(events.Remove(remover, channel, message.nick, removal_reason, message))

    async def on_raw_ping(self, message):
        """ PING command. """
        # Echo the arguments back exactly as the server sent them.
        if message._raw is not None:
            await self.raw('PONG ' + parsing.raw_arguments(message._raw))
        else:
            await self.rawmsg('PONG', *message.params)

    async def on_raw_privmsg(self, message):
        """ PRIVMSG command. """
        target, text = message.params[:2]
        await self._emit(events.PrivateMessage(message.nick, target, text, message))

    async def on_raw_quit(self, message):
        """ QUIT command. """
        if message.params:
            reason = message.params[0]
        else:
            reason = None

        await self._emit(events.Quit(message.nick, reason, message))

    async def on_raw_topic(self, message):
        """ TOPIC command. """
        channel, topic = message.params[:2]
        await self._emit(events.TopicChange(message.nick, channel, topic, message))

    async def on_raw_wallops(self, message):
        """ WALLOPS command. """
        text = message.params[0] if message.params else ''
        await self._emit(events.Wallops(message.nick, text, message))

    ## Numeric responses.

    async def on_raw_001(self, message):
        """ Welcome message: we're connected and registered. """
        if self.registered:
            return

        self.state.registered = True
        self.state.phase = models.REGISTERED
        # The server tells us which nickname we ended up with.
        self.nickname = message.params[0] if message.params else self._attempted_nickname

        await self._emit(events.Registered(self.nickname, message))

        # Auto-join channels.
        for channel in self._autojoin_channels:
            await self.join(channel)

    async def on_raw_332(self, message):
        """ Current topic on channel join. """
        target, channel, topic = message.params[:3]
        await self._emit(events.TopicReply(channel, topic, message))

    async def on_raw_353(self, message):
        """ Response to /NAMES. """
        if not self.names:
            return

        # The visibility sigil is missing on some servers, so count from the end.
        channel, names = message.params[-2:]
        buffer = self.state.names_buffer.setdefault(channel, {})

        for entry in names.split(' '):
            nick, modes = parsing.parse_names_entry(entry, self._nickname_prefixes)
            if not nick:
                # nonsense nickname
                continue
            buffer[nick] = modes

    async def on_raw_366(self, message):
        """ End of /NAMES list. """
        if not self.names:
            return

        target, channel = message.params[:2]
        if channel not in self.state.names_buffer:
            error = InternalConsistency('End of NAMES for {} without any names received.'.format(channel))
            await self._emit_error(error, message)
            return

        names = self.state.names_buffer.pop(channel)
        await self._emit(events.EndOfNames(names, channel, message))

    async def on_raw_421(self, message):
        """ Server responded with 'unknown command'. """
        self.logger.warning('Server responded with "Unknown command: %s"', message.params[1] if len(message.params) > 1 else '')

    async def on_raw_433(self, message):
        """ Nickname in use. """
        if self.registered or self._nicknames_exhausted:
            return

        nickname = self._next_nickname()
        if nickname is None:
            # Stop trying; the server will drop us eventually.
            self._nicknames_exhausted = True
            error = protocol.NicknameUnavailable(
                'Gave up on registering a nickname after {} attempts.'.format(self.state.nick_suffix_counter - 1))
            await self._emit_error(error, message)
            return

        self.state.nick_suffix_counter += 1
        self._attempted_nickname = nickname
        await self.set_nickname(nickname)

    on_raw_432 = on_raw_433  # Erroneous nickname.
    on_raw_435 = on_raw_433  # Cannot change nickname while banned on channel.
    on_raw_436 = BasicClient._ignored  # Nickname collision, issued right before the server kills us.
    on_raw_437 = on_raw_433  # Nickname temporarily unavailable.
    on_raw_451 = BasicClient._ignored  # You have to register first.
    on_raw_462 = BasicClient._ignored  # You may not re-register.


## Helpers.

def chunkify(message, chunksize):
    if not message:
        yield message
    else:
        while message:
            chunk = message[:chunksize]
            message = message[chunksize:]
            yield chunk
