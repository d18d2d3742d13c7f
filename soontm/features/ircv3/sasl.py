## sasl.py
# SASL authentication support. Currently we only support PLAIN authentication.
import base64

import puresasl
import puresasl.client

from soontm import models
from . import cap

__all__ = [ 'SASLSupport' ]


RESPONSE_LIMIT = 400
EMPTY_MESSAGE = '+'
ABORT_MESSAGE = '*'
MECHANISM = 'PLAIN'


class SASLSupport(cap.CapabilityNegotiationSupport):
    """
    SASL authentication support. Limited to the PLAIN mechanism.

    Pass sasl=True to authenticate. The username defaults to the client username,
    the identity to the SASL username and the password to the connection password.
    """

    ## Internal overrides.

    def __init__(self, *args, sasl=False, sasl_identity=None, sasl_username=None, sasl_password=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.sasl = sasl
        self.sasl_identity = sasl_identity
        self.sasl_username = sasl_username
        self.sasl_password = sasl_password

    def _reset_attributes(self):
        super()._reset_attributes()
        self._sasl_client = None
        self._sasl_challenge = b''

    def _server_password(self):
        # The password goes through SASL instead.
        if self._sasl_configured():
            return None
        return super()._server_password()

    def _sasl_credentials(self):
        """ Return (identity, username, password) with defaults filled in. """
        username = self.sasl_username or self.username
        identity = self.sasl_identity or username
        password = self.sasl_password or self.password
        return identity, username, password

    def _sasl_configured(self):
        """ Whether SASL was asked for and we have credentials to go with it. """
        if not self.sasl:
            return False
        _, username, password = self._sasl_credentials()
        return bool(username and password)


    ## SASL functionality.

    async def _sasl_start(self, mechanism):
        """ Initiate SASL authentication. """
        # The rest will be handled in on_raw_authenticate()/_sasl_respond().
        await self.rawmsg('AUTHENTICATE', mechanism)
        self.state.phase = models.AUTH_PENDING

    async def _sasl_abort(self, reason):
        """ Abort SASL authentication and carry on with registration. """
        await self.rawmsg('AUTHENTICATE', ABORT_MESSAGE)
        await self._sasl_failed(reason)

    async def _sasl_failed(self, reason, message=None):
        """ Report failed authentication. Registration goes on unauthenticated. """
        self._sasl_client = None
        await self._emit_error(cap.CapabilityNegotiationFailed('SASL authentication failed: {}'.format(reason)), message)
        await self._capability_negotiated('sasl')

    async def _sasl_end(self):
        """ Finalize SASL authentication. """
        self._sasl_client = None
        await self._capability_negotiated('sasl')

    async def _sasl_respond(self):
        """ Respond to SASL challenge with response. """
        # Formulate a response.
        try:
            response = self._sasl_client.process(self._sasl_challenge)
        except puresasl.SASLError:
            self.logger.exception('SASL challenge processing failed.')
            response = None
        self._sasl_challenge = b''

        if response is None:
            await self._sasl_abort('could not respond to the server challenge')
            return

        response = base64.b64encode(response).decode(self.encoding)
        to_send = len(response)

        # Send response in chunks.
        while to_send > 0:
            await self.rawmsg('AUTHENTICATE', response[:RESPONSE_LIMIT])
            response = response[RESPONSE_LIMIT:]
            to_send -= RESPONSE_LIMIT

        # If our message fit exactly in RESPONSE_LIMIT-byte chunks, send an empty message to indicate we're done.
        if to_send == 0:
            await self.rawmsg('AUTHENTICATE', EMPTY_MESSAGE)


    ## Capability callbacks.

    async def on_capability_sasl_available(self, value):
        """ Check whether or not we should authenticate. """
        if value and MECHANISM not in value.upper().split(','):
            self.logger.warning('Server does not offer SASL %s: not initiating SASL authentication.', MECHANISM)
            return False

        if not self._sasl_configured():
            return False

        await self._check_credential_transport('SASL credentials')
        return True

    async def on_capability_sasl_enabled(self):
        """ Start SASL authentication. """
        identity, username, password = self._sasl_credentials()
        self._sasl_client = puresasl.client.SASLClient(self.connection.hostname, 'irc',
            username=username,
            password=password,
            identity=identity
        )

        try:
            self._sasl_client.choose_mechanism([MECHANISM], allow_anonymous=False)
        except puresasl.SASLError:
            self.logger.exception('SASL mechanism choice failed: aborting SASL authentication.')
            self._sasl_client = None
            return cap.FAILED

        # Initialize SASL.
        await self._sasl_start(self._sasl_client.mechanism.upper())
        # Tell caller we need more time, and to not end capability negotiation just yet.
        return cap.NEGOTIATING


    ## Message handlers.

    async def on_raw_authenticate(self, message):
        """ Received part of the authentication challenge. """
        if not self._sasl_client:
            self.logger.warning('Received AUTHENTICATE without authenticating, ignoring.')
            return

        # Add response data.
        response = ' '.join(message.params)
        if response != EMPTY_MESSAGE:
            self._sasl_challenge += base64.b64decode(response)

        # If the response ain't exactly RESPONSE_LIMIT bytes long, it's the end. Process.
        if len(response) % RESPONSE_LIMIT > 0:
            await self._sasl_respond()

    on_raw_900 = cap.CapabilityNegotiationSupport._ignored # You are now logged in as...

    async def on_raw_903(self, message):
        """ SASL authentication successful. """
        await self._sasl_end()

    async def on_raw_904(self, message):
        """ Invalid mechanism or authentication failed. """
        await self._sasl_failed(message.params[-1] if message.params else 'authentication rejected', message)

    async def on_raw_905(self, message):
        """ SASL message too long. """
        await self._sasl_failed(message.params[-1] if message.params else 'message too long', message)

    on_raw_906 = cap.CapabilityNegotiationSupport._ignored # Completed registration while authenticating/registration aborted.
    on_raw_907 = cap.CapabilityNegotiationSupport._ignored # Already authenticated over SASL.
