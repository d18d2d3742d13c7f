## ircv3_1.py
# IRCv3.1 support.
from soontm.features import account, tls
from . import cap
from . import sasl

__all__ = [ 'IRCv3_1Support' ]


NO_ACCOUNT = '*'

class IRCv3_1Support(sasl.SASLSupport, cap.CapabilityNegotiationSupport, account.AccountSupport, tls.TLSSupport):
    """ Support for IRCv3.1's base and optional extensions. """

    def _join_extras(self, message):
        # extended-join: JOIN <channel> <account> :<realname>
        if 'extended-join' in self.state.capabilities and len(message.params) > 2:
            account, realname = message.params[1:3]
            if account == NO_ACCOUNT:
                account = None
            return account, realname
        return super()._join_extras(message)

    ## IRC callbacks.

    async def on_capability_account_notify_available(self, value):
        """ Take note of user account changes. """
        return True

    async def on_capability_away_notify_available(self, value):
        """ Take note of AWAY messages. """
        return True

    async def on_capability_away_notify_enabled(self):
        self.state.away_notify_enabled = True
        return cap.NEGOTIATED

    async def on_capability_away_notify_disabled(self):
        self.state.away_notify_enabled = False

    async def on_capability_extended_join_available(self, value):
        """ Take note of user account and realname on JOIN. """
        return True

    async def on_capability_multi_prefix_available(self, value):
        """ NAMES entries already have every prefix peeled off. """
        return True


    ## Message handlers.

    async def on_raw_account(self, message):
        """ Changes in the associated account for a nickname. """
        account = message.params[0] if message.params else NO_ACCOUNT
        if account == NO_ACCOUNT:
            self._sync_account(message.nick, None)
        else:
            self._sync_account(message.nick, account)

    async def on_raw_away(self, message):
        """ Process AWAY messages. """
        if not self.state.away_notify_enabled:
            return

        # A message means they went away, none means they're back.
        self._sync_away(message.nick, len(message.params) > 0)

    async def on_raw_join(self, message):
        """ Process extended JOIN messages. """
        if 'extended-join' in self.state.capabilities and len(message.params) > 2:
            account = message.params[1]
            self._sync_account(message.nick, None if account == NO_ACCOUNT else account)
        await super().on_raw_join(message)
