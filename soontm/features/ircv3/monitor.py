## monitor.py
# Online status monitoring support.
from soontm import events
from soontm.features.rfc1459 import parsing
from .. import isupport


class MonitoringSupport(isupport.ISUPPORTSupport):
    """ Support for monitoring the online/offline status of certain targets. """

    ## Internals.

    def _reset_attributes(self):
        super()._reset_attributes()
        self._monitoring = set()

    ## API.

    async def monitor(self, target):
        """ Start monitoring the online status of a user. """
        if 'MONITOR' not in self.state.isupport:
            self.logger.warning('Server did not advertise MONITOR support, sending MONITOR + %s anyway.', target)
        await self.rawmsg('MONITOR', '+', target)
        self._monitoring.add(target)

    async def unmonitor(self, target):
        """ Stop monitoring the online status of a user. """
        await self.rawmsg('MONITOR', '-', target)
        self._monitoring.discard(target)

    def is_monitoring(self, target):
        """ Return whether or not we are monitoring the target's online status. """
        return target in self._monitoring

    ## Message handlers.

    async def on_raw_730(self, message):
        """ Someone we are monitoring just came online. """
        for target in message.params[1].split(','):
            nickname, username, host = parsing.parse_user(target)
            await self._emit(events.MonitorOnline(nickname, username, host, message))

    async def on_raw_731(self, message):
        """ Someone we are monitoring got offline. """
        for target in message.params[1].split(','):
            nickname, _, _ = parsing.parse_user(target)
            await self._emit(events.MonitorOffline(nickname, message))

    async def on_raw_732(self, message):
        """ List of users we're monitoring. """
        for target in message.params[1].split(','):
            nickname, _, _ = parsing.parse_user(target)
            self._monitoring.add(nickname)

    on_raw_733 = isupport.ISUPPORTSupport._ignored  # End of MONITOR list.

    async def on_raw_734(self, message):
        """ Monitor list is full, can't add target. """
        # Remove from monitoring list, not much else we can do.
        targets = message.params[2].split(',') if len(message.params) > 2 else []
        self.logger.warning('Monitor list is full, could not monitor %s.', ', '.join(targets))
        self._monitoring.difference_update(targets)
