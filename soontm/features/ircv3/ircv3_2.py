## ircv3_2.py
# IRCv3.2 support (account-tag, cap-notify and MONITOR).
from . import ircv3_1
from . import tags
from . import monitor

__all__ = [ 'IRCv3_2Support' ]


class IRCv3_2Support(monitor.MonitoringSupport, tags.TaggedMessageSupport, ircv3_1.IRCv3_1Support):
    """ Support for some of IRCv3.2's extensions. """

    def _annotate(self, message):
        # The account tag is the most recent word on the account of the sender.
        if 'account-tag' in self.state.capabilities and message.nick and 'account' in message.tags:
            self._sync_account(message.nick, message.tags['account'])
        super()._annotate(message)

    ## IRC callbacks.

    async def on_capability_account_tag_available(self, value):
        """ Add an account message tag to user messages. """
        return True

    async def on_capability_cap_notify_available(self, value):
        """ Take note of new or removed capabilities. """
        return True
