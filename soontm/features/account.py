## account.py
# Account and away status tracking.
from soontm.features import rfc1459

__all__ = [ 'AccountSupport' ]


AWAY_FLAG = 'G'
HERE_FLAG = 'H'


class AccountSupport(rfc1459.RFC1459Support):
    """
    Keeps track of which account every nickname is logged in to and whether it is away,
    and attaches both to every line a nickname sends.
    """

    ## Internal.

    def _sync_account(self, nickname, account):
        """ Record the account of a nickname. A falsy account means logged out. """
        if account:
            self.state.accounts[nickname] = account
        else:
            self.state.accounts.pop(nickname, None)

    def _sync_away(self, nickname, away):
        self.state.away_status[nickname] = away

    def _annotate(self, message):
        super()._annotate(message)
        if not message.nick:
            return

        message.account = self.state.accounts.get(message.nick)
        if self.state.away_notify_enabled:
            message.away = self.state.away_status.get(message.nick)
            # The same, as a WHO flag: G(one) or H(ere).
            if message.away is not None:
                message.status = AWAY_FLAG if message.away else HERE_FLAG

    ## Message handlers.

    async def on_raw_nick(self, message):
        # Tracked information follows the nickname.
        self.state.rename(message.nick, message.params[0])
        await super().on_raw_nick(message)

    async def on_raw_quit(self, message):
        await super().on_raw_quit(message)
        # We won't hear about them anymore.
        self.state.forget(message.nick)

    async def on_raw_330(self, message):
        """ WHOIS account name (Atheme). """
        target, nickname, account = message.params[:3]
        self._sync_account(nickname, account)
