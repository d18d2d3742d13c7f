## whox.py
# WHOX support.
from soontm.client import InternalConsistency
from soontm.features import isupport, account

__all__ = [ 'WHOXSupport', 'whox_query', 'parse_whox_reply' ]


NO_ACCOUNT = '0'
AWAY_FLAG = 'G'

# WHOX field selections: nickname and account, plus the here/gone flag when we track away status.
FIELDS_ACCOUNT = '%na'
FIELDS_AWAY_ACCOUNT = '%nfa'


class WHOXSupport(isupport.ISUPPORTSupport, account.AccountSupport):
    """ Fill in accounts (and away status) of everyone in a channel we join. """

    ## Overrides.

    async def on_raw_join(self, message):
        """ Override JOIN to send WHOX. """
        await super().on_raw_join(message)

        if self.is_same_nick(self.nickname, message.nick):
            # We joined: find out who everyone is.
            await self.rawmsg('WHO', message.params[0], whox_query(self.state.away_notify_enabled))

    async def on_raw_354(self, message):
        """ WHOX results have arrived. """
        # The field layout follows the query we sent, and that follows whether we track away status.
        away_notify = self.state.away_notify_enabled
        try:
            nickname, away, account = parse_whox_reply(message.params, away_notify)
        except ValueError as e:
            await self._emit_error(InternalConsistency(str(e)), message)
            return

        if away is not None:
            self._sync_away(nickname, away)
        self._sync_account(nickname, account)

    on_raw_315 = isupport.ISUPPORTSupport._ignored  # End of /WHO list.


## Helpers.

def whox_query(away_notify):
    """ WHOX field selection to request, given whether away-notify is active. """
    return FIELDS_AWAY_ACCOUNT if away_notify else FIELDS_ACCOUNT

def parse_whox_reply(params, away_notify):
    """
    Decode the parameters of a 354 reply to a query made with whox_query(away_notify).
    Returns (nickname, away, account): away is None unless away_notify, account is None when logged out.
    Raises ValueError when the reply does not have the expected number of fields.
    """
    # The first parameter is our own nickname.
    fields = params[1:]

    if away_notify:
        if len(fields) != 3:
            raise ValueError('WHOX reply has {} fields, expected nick, flags and account: {}'.format(len(fields), fields))
        nickname, flags, account = fields
        away = flags.startswith(AWAY_FLAG)
    else:
        if len(fields) != 2:
            raise ValueError('WHOX reply has {} fields, expected nick and account: {}'.format(len(fields), fields))
        nickname, account = fields
        away = None

    if account == NO_ACCOUNT:
        account = None
    return nickname, away, account
