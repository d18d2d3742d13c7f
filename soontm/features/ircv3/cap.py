## cap.py
# Server <-> client optional extension indication support.
# See also: https://ircv3.net/specs/extensions/capability-negotiation
import soontm.protocol
from soontm import models
from soontm.client import Error
from soontm.features import rfc1459

__all__ = [ 'CapabilityNegotiationSupport', 'CapabilityNegotiationFailed', 'NEGOTIATED', 'NEGOTIATING', 'FAILED' ]


DISABLED_PREFIX = '-'
ACKNOWLEDGEMENT_REQUIRED_PREFIX = '~'
STICKY_PREFIX = '='
PREFIXES = '-~='
CAPABILITY_VALUE_DIVIDER = '='
MULTILINE_MARKER = '*'
NEGOTIATING = True
NEGOTIATED = None
FAILED = False


class CapabilityNegotiationFailed(Error):
    """ The server refused a capability, or a capability could not be set up (e.g. SASL authentication failed). """
    pass


class CapabilityNegotiationSupport(rfc1459.RFC1459Support):
    """ CAP command support. """

    ## Internal overrides.

    def _reset_attributes(self):
        super()._reset_attributes()
        self._capabilities_requested = set()
        self._capabilities_negotiating = set()
        self._capabilities_advertised = []

    async def _register(self):
        """ Hijack registration to send a CAP LS first. """
        if self.registered:
            self.logger.debug("skipping cap registration, already registered!")
            return

        # Ask server to list capabilities.
        await self.rawmsg('CAP', 'LS')
        self.state.phase = models.LS_SENT

        # Register as usual.
        await super()._register()

    def _capability_normalize(self, cap):
        cap = cap.lstrip(PREFIXES).lower()
        if CAPABILITY_VALUE_DIVIDER in cap:
            cap, _, value = cap.partition(CAPABILITY_VALUE_DIVIDER)
        else:
            value = None

        return cap, value

    async def _capability_enabled(self, capab):
        """ Commit capability and run its enabled callback. Returns the negotiation status. """
        self.state.capabilities.add(capab)

        attr = 'on_capability_' + soontm.protocol.identifierify(capab) + '_enabled'
        if hasattr(self, attr):
            return await getattr(self, attr)()
        return NEGOTIATED

    async def _capability_disabled(self, capab):
        """ Drop capability and run its disabled callback. """
        was_enabled = capab in self.state.capabilities
        self.state.capabilities.discard(capab)

        attr = 'on_capability_' + soontm.protocol.identifierify(capab) + '_disabled'
        if was_enabled and hasattr(self, attr):
            await getattr(self, attr)()

    async def _capability_negotiation_end(self):
        """ Send CAP END, once. """
        if self.state.phase in (models.CAP_ENDED, models.REGISTERED):
            return

        await self.rawmsg('CAP', 'END')
        self.state.phase = models.CAP_ENDED


    ## API.

    async def _capability_negotiated(self, capab):
        """ Mark capability as negotiated, and end negotiation if we're done. """
        self._capabilities_negotiating.discard(capab)

        if not self._capabilities_requested and not self._capabilities_negotiating:
            await self._capability_negotiation_end()


    ## Message handlers.

    async def on_raw_cap(self, message):
        """ Handle CAP message. """
        target, subcommand = message.params[:2]
        params = message.params[2:]

        # Call handler.
        attr = 'on_raw_cap_' + soontm.protocol.identifierify(subcommand)
        if hasattr(self, attr):
            await getattr(self, attr)(params, message)
        else:
            self.logger.warning('Unknown CAP subcommand sent from server: %s', subcommand)

    async def on_raw_cap_ls(self, params, message):
        """ Request every advertised capability we support, in advertised order. """
        tokens = params[-1].split() if params else []

        # Every chunk of a multi-line reply but the last puts a '*' before the token list.
        if len(params) > 1 and params[0] == MULTILINE_MARKER:
            self._capabilities_advertised.extend(tokens)
            return
        tokens = self._capabilities_advertised + tokens
        self._capabilities_advertised = []

        to_request = []
        for capab in tokens:
            capab, value = self._capability_normalize(capab)

            # Only process new capabilities.
            if capab in self.state.capabilities or capab in self._capabilities_requested:
                continue

            # Check if we support the capability.
            attr = 'on_capability_' + soontm.protocol.identifierify(capab) + '_available'
            supported = (await getattr(self, attr)(value)) if hasattr(self, attr) else False

            if supported:
                if isinstance(supported, str):
                    to_request.append(capab + CAPABILITY_VALUE_DIVIDER + supported)
                else:
                    to_request.append(capab)

        if to_request:
            # Request some capabilities.
            self._capabilities_requested.update(x.split(CAPABILITY_VALUE_DIVIDER, 1)[0] for x in to_request)
            await self.rawmsg('CAP', 'REQ', ' '.join(to_request))
            if self.state.phase == models.LS_SENT:
                self.state.phase = models.REQ_SENT
        elif not self._capabilities_requested and not self._capabilities_negotiating:
            # No capabilities requested, end negotiation.
            await self._capability_negotiation_end()

    async def on_raw_cap_list(self, params, message):
        """ Update active capabilities. """
        self.state.capabilities = set()
        for capab in params[-1].split() if params else []:
            capab, _ = self._capability_normalize(capab)
            self.state.capabilities.add(capab)

    async def on_raw_cap_ack(self, params, message):
        """ Update active capabilities: requested capability accepted. """
        for capab in params[-1].split() if params else []:
            cp, value = self._capability_normalize(capab)
            self._capabilities_requested.discard(cp)

            # Determine capability type and callback.
            if capab.startswith(DISABLED_PREFIX):
                await self._capability_disabled(cp)
                continue
            elif capab.startswith(STICKY_PREFIX):
                # Can't disable it. Do nothing.
                self.logger.error('Could not disable capability %s.', cp)
                continue

            # Indicate we're gonna use this capability if needed.
            if capab.startswith(ACKNOWLEDGEMENT_REQUIRED_PREFIX):
                await self.rawmsg('CAP', 'ACK', cp)

            status = await self._capability_enabled(cp)

            # If the process needs more time, add it to the database and end later.
            if status == NEGOTIATING:
                self._capabilities_negotiating.add(cp)
            elif status == FAILED:
                # Ruh-roh, negotiation failed. Disable the capability.
                self.logger.warning('Capability negotiation for %s failed. Attempting to disable capability again.', cp)
                self.state.capabilities.discard(cp)

                await self.rawmsg('CAP', 'REQ', DISABLED_PREFIX + cp)
                self._capabilities_requested.add(cp)

        # If we have no capabilities left to process, end it.
        if not self._capabilities_requested and not self._capabilities_negotiating:
            await self._capability_negotiation_end()

    async def on_raw_cap_nak(self, params, message):
        """ Update active capabilities: requested capability rejected. """
        rejected = []
        for capab in params[-1].split() if params else []:
            capab, _ = self._capability_normalize(capab)
            self._capabilities_requested.discard(capab)
            rejected.append(capab)

        error = CapabilityNegotiationFailed('Server rejected capabilities: {}'.format(' '.join(rejected)))
        await self._emit_error(error, message)

        # Never leave registration hanging.
        if not self._capabilities_requested and not self._capabilities_negotiating:
            await self._capability_negotiation_end()

    async def on_raw_cap_del(self, params, message):
        """ Server withdrew capabilities (cap-notify). """
        for capab in params[-1].split() if params else []:
            capab, _ = self._capability_normalize(capab)
            await self._capability_disabled(capab)

    async def on_raw_cap_new(self, params, message):
        """ Server started offering capabilities (cap-notify). """
        await self.on_raw_cap_ls(params, message)

    async def on_raw_410(self, message):
        """ Unknown CAP subcommand or CAP error. Force-end negotiations. """
        self.logger.error('Server sent "Unknown CAP subcommand: %s". Aborting capability negotiation.', message.params[-1])

        self._capabilities_requested = set()
        self._capabilities_negotiating = set()
        await self._capability_negotiation_end()

    async def on_raw_421(self, message):
        """ Hijack to ignore the absence of a CAP command. """
        if len(message.params) > 1 and message.params[1] == 'CAP':
            return
        await super().on_raw_421(message)

    async def on_raw_451(self, message):
        """ Hijack to ignore the absence of a CAP command. """
        if len(message.params) > 1 and message.params[1] == 'CAP':
            return
        await super().on_raw_451(message)
