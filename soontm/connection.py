import asyncio
import os.path as path
import ssl
import sys

__all__ = ['Connection']

DEFAULT_CA_PATHS = {
    'linux': '/etc/ssl/certs',
    'linux2': '/etc/ssl/certs',
    'freebsd': '/etc/ssl/certs'
}


class Connection:
    """ A TCP connection over the IRC protocol, delivering one line at a time. """
    CONNECT_TIMEOUT = 10

    def __init__(self, hostname, port, tls=False, tls_verify=True, tls_certificate_file=None,
                 tls_certificate_keyfile=None, tls_certificate_password=None, source_address=None):
        self.hostname = hostname
        self.port = port
        self.source_address = source_address

        self.tls = tls
        self.tls_context = None
        self.tls_verify = tls_verify
        self.tls_certificate_file = tls_certificate_file
        self.tls_certificate_keyfile = tls_certificate_keyfile
        self.tls_certificate_password = tls_certificate_password

        self.reader = None
        self.writer = None

    async def connect(self):
        """ Connect to target. """
        self.tls_context = None

        if self.tls:
            self.tls_context = self.create_tls_context()

        (self.reader, self.writer) = await asyncio.wait_for(
            asyncio.open_connection(
                host=self.hostname,
                port=self.port,
                local_addr=self.source_address,
                ssl=self.tls_context
            ),
            timeout=self.CONNECT_TIMEOUT
        )

    def create_tls_context(self):
        """ Create the TLS context for our socket. """
        tls_context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)

        # Load client certificate.
        if self.tls_certificate_file:
            tls_context.load_cert_chain(self.tls_certificate_file, self.tls_certificate_keyfile,
                                        password=self.tls_certificate_password)

        # Disable compression (CRIME) and session tickets (forward secrecy).
        for opt in ['NO_COMPRESSION', 'NO_TICKET']:
            if hasattr(ssl, 'OP_' + opt):
                tls_context.options |= getattr(ssl, 'OP_' + opt)

        if self.tls_verify:
            # Load certificate verification paths.
            tls_context.set_default_verify_paths()
            if sys.platform in DEFAULT_CA_PATHS and path.isdir(DEFAULT_CA_PATHS[sys.platform]):
                tls_context.load_verify_locations(capath=DEFAULT_CA_PATHS[sys.platform])

            tls_context.verify_mode = ssl.CERT_REQUIRED
            tls_context.check_hostname = True
        else:
            # check_hostname has to go first, the context refuses CERT_NONE otherwise.
            tls_context.check_hostname = False
            tls_context.verify_mode = ssl.CERT_NONE

        return tls_context

    async def disconnect(self):
        """ Disconnect from target. """
        if not self.connected:
            return

        self.writer.close()
        self.reader = None
        self.writer = None

    @property
    def connected(self):
        """ Whether this connection is... connected to something. """
        return self.reader is not None and self.writer is not None

    async def send(self, data):
        """ Write data and wait for the transport to accept it. """
        self.writer.write(data)
        await self.writer.drain()

    async def recv(self, *, timeout=None):
        """ Read a single line, including its line separator. Returns b'' once the stream closed. """
        return await asyncio.wait_for(self.reader.readline(), timeout=timeout)
