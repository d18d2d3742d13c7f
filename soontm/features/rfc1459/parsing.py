## parsing.py
# RFC1459 parsing and construction.
import soontm.protocol
from . import protocol


class RFC1459Message(soontm.protocol.Message):
    def __init__(self, command, params, source=None, tags=None, _raw=None, _valid=True, **kw):
        self._kw = kw
        self._kw['command'] = command
        self._kw['params'] = list(params)
        self._kw['source'] = source or ''
        self._kw['tags'] = tags if tags is not None else {}
        self._valid = _valid
        self._raw = _raw
        self.__dict__.update(self._kw)

        # Source details. Server-originated lines use the server name as nickname.
        if self.source:
            self.nick, self.ident, self.host = parse_user(self.source)
        else:
            self.nick = self.ident = self.host = None

        # Attached by the client while processing the message.
        self.account = None
        self.away = None
        self.status = None
        self.ctcp = None

    @classmethod
    def parse(cls, line, encoding=soontm.protocol.DEFAULT_ENCODING):
        """
        Parse given line into IRC message structure.
        Returns a Message. Malformed lines are parsed as far as possible and marked invalid.
        """
        valid = True

        # Decode message.
        if isinstance(line, bytes):
            try:
                message = line.decode(encoding)
            except UnicodeDecodeError:
                # Try our fallback encoding.
                message = line.decode(soontm.protocol.FALLBACK_ENCODING)
        else:
            message = line

        # Strip message separator.
        if message.endswith(protocol.LINE_SEPARATOR):
            message = message[:-len(protocol.LINE_SEPARATOR)]
        elif message.endswith(protocol.MINIMAL_LINE_SEPARATOR):
            message = message[:-len(protocol.MINIMAL_LINE_SEPARATOR)]

        # Sanity check for message length.
        if len(message) + len(protocol.LINE_SEPARATOR) > protocol.MESSAGE_LENGTH_LIMIT:
            valid = False

        # Sanity check for forbidden characters.
        if any(ch in message for ch in protocol.FORBIDDEN_CHARACTERS):
            valid = False

        # Extract message sections.
        # Format: (:source)? command parameter*
        tokens = message.split(protocol.ARGUMENT_SEPARATOR)
        if tokens[0].startswith(protocol.SOURCE_PREFIX):
            source = tokens.pop(0)[len(protocol.SOURCE_PREFIX):]
        else:
            source = ''

        command = tokens.pop(0) if tokens else ''

        # Sanity check for command.
        if not protocol.COMMAND_PATTERN.match(command):
            valid = False

        # Extract parameters properly.
        # Format: (word)* (:sentence)?
        params = []
        for index, token in enumerate(tokens):
            # The first token starting with a colon starts the only parameter that can contain spaces.
            if token.startswith(protocol.TRAILING_PREFIX):
                trailing = protocol.ARGUMENT_SEPARATOR.join(tokens[index:])
                params.append(trailing[len(protocol.TRAILING_PREFIX):])
                break
            params.append(token)

        return cls(command, params, source=source, _valid=valid, _raw=message)

    def construct(self, force=False):
        """ Construct a raw IRC message. """
        # Sanity check for command.
        command = str(self.command)
        if not protocol.COMMAND_PATTERN.match(command) and not force:
            raise soontm.protocol.ProtocolViolation('The constructed command does not follow the command pattern ({pat})'.format(pat=protocol.COMMAND_PATTERN.pattern), message=command)
        message = command.upper()

        # Add parameters.
        for idx, param in enumerate(self.params):
            # Trailing parameter?
            if not param or ' ' in param or param[0] == protocol.TRAILING_PREFIX:
                if idx + 1 < len(self.params) and not force:
                    raise soontm.protocol.ProtocolViolation('Only the final parameter of an IRC message can be trailing and thus contain spaces, or start with a colon.', message=param)
                message += ' ' + protocol.TRAILING_PREFIX + param
            # Regular parameter.
            else:
                message += ' ' + param

        # Prepend source.
        if self.source:
            message = protocol.SOURCE_PREFIX + self.source + ' ' + message

        # Sanity check for characters.
        if any(ch in message for ch in protocol.FORBIDDEN_CHARACTERS) and not force:
            raise soontm.protocol.ProtocolViolation('The constructed message contains forbidden characters ({chs}).'.format(chs=', '.join(repr(ch) for ch in sorted(protocol.FORBIDDEN_CHARACTERS))), message=message)

        # Sanity check for length.
        message += protocol.LINE_SEPARATOR
        if len(message) > protocol.MESSAGE_LENGTH_LIMIT and not force:
            raise soontm.protocol.ProtocolViolation('The constructed message is too long. ({len} > {maxlen})'.format(len=len(message), maxlen=protocol.MESSAGE_LENGTH_LIMIT), message=message)

        return message

    def __repr__(self):
        return '<{cls} source={src!r} command={cmd!r} params={params!r}>'.format(
            cls=self.__class__.__name__, src=self.source, cmd=self.command, params=self.params)


# Parsing.

def parse_user(raw):
    """ Parse nick(!user)?(@host)? structure. """
    nick = raw
    user = None
    host = None

    # Attempt to extract host.
    if protocol.HOST_SEPARATOR in raw:
        raw, _, host = raw.partition(protocol.HOST_SEPARATOR)
        nick = raw
    # Attempt to extract user.
    if protocol.USER_SEPARATOR in raw:
        nick, _, user = raw.partition(protocol.USER_SEPARATOR)

    return nick, user, host

def parse_names_entry(entry, prefixes=protocol.NICKNAME_PREFIXES):
    """ Split a NAMES entry into its nickname and its prefix modes (e.g. '@+'). """
    safe_entry = entry.lstrip(prefixes)
    modes = entry[:len(entry) - len(safe_entry)]

    # Strip user and host in case the server sends them (userhost-in-names).
    nick, _, _ = parse_user(safe_entry)
    return nick, modes

def parse_remove_reason(reason):
    """ Return (remover, reason) if a PART reason was left by REMOVE, else None. """
    if not reason:
        return None
    match = protocol.REMOVE_PATTERN.match(reason)
    if not match:
        return None
    return match.group(1), match.group(2)

def raw_arguments(line):
    """ Return everything after the command of a raw line, exactly as transmitted. """
    line = line.lstrip(protocol.ARGUMENT_SEPARATOR)
    # Message tags, then source.
    if line.startswith('@'):
        line = line.partition(protocol.ARGUMENT_SEPARATOR)[2].lstrip(protocol.ARGUMENT_SEPARATOR)
    if line.startswith(protocol.SOURCE_PREFIX):
        line = line.partition(protocol.ARGUMENT_SEPARATOR)[2].lstrip(protocol.ARGUMENT_SEPARATOR)

    _, _, arguments = line.partition(protocol.ARGUMENT_SEPARATOR)
    return arguments


# Case mapping.

def normalize(input, case_mapping=protocol.DEFAULT_CASE_MAPPING):
    """ Lowercase input according to the given case mapping (RFC 2812, section 2.2). """
    if case_mapping not in protocol.CASE_MAPPINGS:
        raise soontm.protocol.ProtocolViolation('Unknown case mapping ({})'.format(case_mapping))

    input = input.lower()

    if case_mapping in ('rfc1459', 'strict-rfc1459'):
        input = input.replace('[', '{').replace(']', '}').replace('\\', '|')
    if case_mapping == 'rfc1459':
        input = input.replace('~', '^')

    return input
