import soontm

from unittest.mock import Mock


class MockServer:
    """
    A mock server that will receive lines from the client,
    and can send its own lines.
    """

    def __init__(self):
        self.connection = None
        self.received = []
        self.pending = []

    def queue(self, line):
        """ Have the client read this line the next time it reads from the connection. """
        self.pending.append((line + '\r\n').encode('utf-8'))

    def receive(self, line):
        self.received.append(line)

    def receives(self, line):
        """ Whether the client sent exactly this line. """
        return line in self.received

    def received_commands(self, command):
        """ Every line the client sent with the given command. """
        return [line for line in self.received if line.split(' ', 1)[0] == command]

    def clear(self):
        self.received = []

    async def send(self, line):
        await self.sendraw(line + '\r\n')

    async def sendraw(self, data):
        client = self.connection._mock_client
        await client.on_data(data.encode(client.encoding))


class MockClient(soontm.client.BasicClient):
    """ A client that substitutes its own connection for a mock connection to MockServer, and records its events. """

    def __init__(self, *args, mock_server=None, **kwargs):
        self._mock_server = mock_server
        self._mock_logger = Mock()
        self.events = []
        super().__init__(*args, **kwargs)

    @property
    def logger(self):
        return self._mock_logger

    @logger.setter
    def logger(self, val):
        pass

    async def _connect(self, hostname, port, channels=[], encoding=soontm.protocol.DEFAULT_ENCODING, tls=False, **kwargs):
        self._autojoin_channels = list(channels)
        self.encoding = encoding
        self.connection = MockConnection(
            hostname,
            port,
            tls=tls,
            mock_client=self,
            mock_server=self._mock_server,
        )
        await self.connection.connect()

    async def on_event(self, event):
        self.events.append(event)

    def events_of(self, kind):
        return [event for event in self.events if event.kind == kind]


class MockConnection(soontm.connection.Connection):
    """ A mock connection between a client and a server. """

    def __init__(self, *args, mock_client=None, mock_server=None, **kwargs):
        super().__init__(*args, **kwargs)
        self._mock_connected = False
        self._mock_server = mock_server
        self._mock_client = mock_client

    @property
    def connected(self):
        return self._mock_connected

    async def connect(self, *args, **kwargs):
        self._mock_server.connection = self
        self._mock_connected = True

    async def disconnect(self, *args, **kwargs):
        self._mock_connected = False

    async def recv(self, *, timeout=None):
        # Nothing left to read means the server hung up.
        if self._mock_server.pending:
            return self._mock_server.pending.pop(0)
        return b''

    async def send(self, data):
        for line in data.decode(self._mock_client.encoding).split('\r\n'):
            if line:
                self._mock_server.receive(line)
