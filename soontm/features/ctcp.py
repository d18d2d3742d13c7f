## ctcp.py
# Client-to-Client-Protocol (CTCP) support.
import soontm.protocol
from soontm.features import rfc1459
__all__ = [ 'CTCPSupport', 'is_ctcp', 'construct_ctcp', 'parse_ctcp' ]


CTCP_DELIMITER = '\x01'
CTCP_SEPARATOR = ' '


class CTCPSupport(rfc1459.RFC1459Support):
    """
    Support for CTCP messages.

    CTCP queries and replies are delivered as ordinary privmsg and notice events, with their tokens in line.ctcp.
    Queries with a dedicated on_ctcp_<type> handler are answered by that handler instead. VERSION and PING are
    answered out of the box; pass version= to change what VERSION answers.
    """

    def __init__(self, *args, version=None, **kwargs):
        super().__init__(*args, **kwargs)
        if version is None:
            import soontm
            version = '{name} v{ver}'.format(name=soontm.__name__, ver=soontm.__version__)
        self.version = version

    ## Built-in handlers.

    async def on_ctcp_version(self, by, target, contents):
        """ Built-in CTCP version as some networks seem to require it. """
        await self.ctcp_reply(by, 'VERSION', self.version)

    async def on_ctcp_ping(self, by, target, contents):
        """ Echo pings back. """
        await self.ctcp_reply(by, 'PING', contents)


    ## IRC API.

    async def ctcp(self, target, query, contents=None):
        """ Send a CTCP request to a target. """
        await self.message(target, construct_ctcp(query, contents))

    async def ctcp_reply(self, target, query, response):
        """ Send a CTCP reply to a target. """
        await self.notice(target, construct_ctcp(query, response))

    async def action(self, target, message):
        """ Perform an action (/me) towards a channel or user. """
        await self.ctcp(target, 'ACTION', message)


    ## Handler overrides.

    async def on_raw_privmsg(self, message):
        """ Modify PRIVMSG to answer CTCP queries. """
        target, msg = message.params[:2]

        if is_ctcp(msg) and message.nick:
            message.ctcp = parse_ctcp(msg)
            query, contents = message.ctcp[0], CTCP_SEPARATOR.join(message.ctcp[1:])

            # Find dedicated handler if it exists.
            attr = 'on_ctcp_' + soontm.protocol.identifierify(query)
            if hasattr(self, attr):
                await getattr(self, attr)(message.nick, target, contents or None)
                return

        await super().on_raw_privmsg(message)

    async def on_raw_notice(self, message):
        """ Modify NOTICE to take note of CTCP replies. These are never answered. """
        target, msg = message.params[:2]

        if is_ctcp(msg):
            message.ctcp = parse_ctcp(msg)

        await super().on_raw_notice(message)


## Helpers.

def is_ctcp(message):
    """ Check if message follows the CTCP format. """
    return len(message) >= 2 and message.startswith(CTCP_DELIMITER) and message.endswith(CTCP_DELIMITER)

def construct_ctcp(*parts):
    """ Construct CTCP message. Empty parts are left out. """
    message = CTCP_SEPARATOR.join(part for part in parts if part)
    return CTCP_DELIMITER + message + CTCP_DELIMITER

def parse_ctcp(query):
    """ Strip CTCP delimiters and split into tokens: the query type, followed by its arguments. """
    return query[len(CTCP_DELIMITER):-len(CTCP_DELIMITER)].split(CTCP_SEPARATOR)
