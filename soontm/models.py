## models.py
# Per-connection session state.

# Registration and capability negotiation phases, in order.
INIT = 'init'
LS_SENT = 'ls-sent'
REQ_SENT = 'req-sent'
AUTH_PENDING = 'auth-pending'
CAP_ENDED = 'cap-ended'
REGISTERED = 'registered'

PHASES = (INIT, LS_SENT, REQ_SENT, AUTH_PENDING, CAP_ENDED, REGISTERED)


class SessionState:
    """
    Everything the protocol engine remembers about one connection.
    A fresh instance is created for every connection; only the client's message handlers mutate it.
    """

    def __init__(self):
        # ISUPPORT tokens, merged across every 005 reply.
        self.isupport = {}

        # Negotiated capabilities.
        self.capabilities = set()
        self.away_notify_enabled = False
        self.phase = INIT

        # Presence tracking, keyed by current nickname.
        self.accounts = {}
        self.away_status = {}

        # Channel name -> {nickname: prefix modes}, only between the first 353 and the 366.
        self.names_buffer = {}

        # Registration.
        self.nick_suffix_counter = 1
        self.registered = False

    def rename(self, old, new):
        """ Move tracked presence information to a new nickname. """
        if old in self.accounts:
            self.accounts[new] = self.accounts.pop(old)
        if old in self.away_status:
            self.away_status[new] = self.away_status.pop(old)

    def forget(self, nickname):
        """ Drop tracked presence information for a nickname. """
        self.accounts.pop(nickname, None)
        self.away_status.pop(nickname, None)

    def __repr__(self):
        return '<{cls} phase={phase} registered={reg} capabilities={caps}>'.format(
            cls=self.__class__.__name__, phase=self.phase, reg=self.registered,
            caps=sorted(self.capabilities))
