## isupport.py
# ISUPPORT (server-side IRC extension indication) support.
# See: http://tools.ietf.org/html/draft-hardy-irc-isupport-00
import soontm.protocol
from soontm.features import rfc1459

__all__ = [ 'ISUPPORTSupport', 'parse_isupport_token' ]


FEATURE_DISABLED_PREFIX = '-'
FEATURE_VALUE_SEPARATOR = '='


class ISUPPORTSupport(rfc1459.RFC1459Support):
    """ ISUPPORT support. """

    ## Command handlers.

    async def on_raw_005(self, message):
        """ ISUPPORT indication. """
        isupport = {}

        # Parse response.
        # Strip target (first argument) and 'are supported by this server' (last argument).
        for token in message.params[1:-1]:
            feature, value = parse_isupport_token(token)
            isupport[feature] = value

        # Update the session map first.
        self.state.isupport.update(isupport)

        # And have callbacks update other internals.
        for entry, value in isupport.items():
            if value is False:
                continue

            # A value of True means there was no value supplied; correct this for callbacks.
            if value is True:
                value = None

            method = 'on_isupport_' + soontm.protocol.identifierify(entry)
            if hasattr(self, method):
                await getattr(self, method)(value)


    ## ISUPPORT handlers.

    async def on_isupport_casemapping(self, value):
        """ Case mapping used to compare nicknames and channel names. """
        if value in rfc1459.protocol.CASE_MAPPINGS:
            self._case_mapping = value
        else:
            self.logger.warning('Unknown case mapping %s, keeping %s.', value, self._case_mapping)

    async def on_isupport_namesx(self, value):
        """ Let the server know we do in fact support NAMESX. Effectively the same as CAP multi-prefix. """
        if 'multi-prefix' not in self.state.capabilities:
            await self.rawmsg('PROTOCTL', 'NAMESX')

    async def on_isupport_network(self, value):
        """ IRC network name. """
        self.network = value

    async def on_isupport_nicklen(self, value):
        """ Nickname length limit. """
        if isinstance(value, int):
            self._nickname_length_limit = value

    async def on_isupport_prefix(self, value):
        """ Nickname prefixes on channels and their associated modes. """
        if not value:
            return

        # (modes)prefixes, e.g. (qaohv)~&@%+
        modes, _, prefixes = value.lstrip('(').partition(')')
        # Keep the defaults too: NAMES entries from other sources may still carry them.
        self._nickname_prefixes = ''.join(dict.fromkeys(prefixes + rfc1459.protocol.NICKNAME_PREFIXES))


## Helpers.

def parse_isupport_token(token):
    """
    Split an ISUPPORT token into its upper-cased name and coerced value.
    Purely numeric values become integers, valueless tokens become True and -TOKEN becomes False.
    """
    if token.startswith(FEATURE_DISABLED_PREFIX):
        return token[len(FEATURE_DISABLED_PREFIX):].upper(), False

    feature, _, value = token.partition(FEATURE_VALUE_SEPARATOR)
    if not value:
        value = True
    elif value.isascii() and value.isdigit():
        value = int(value)

    return feature.upper(), value
