import soontm
from .mocks import MockServer, MockClient


def with_client(*features, connected=True, connect_options=None, **options):
    if not features:
        features = (soontm.client.BasicClient,)
    if features not in with_client.classes:
        with_client.classes[features] = soontm.featurize(MockClient, *features)

    def inner(f):
        async def run():
            server = MockServer()
            client = with_client.classes[features]('TestcaseRunner', mock_server=server, **options)
            if connected:
                await client.connect('mock://local', 1337, **(connect_options or {}))

            try:
                return await f(client=client, server=server)
            finally:
                await client.disconnect(expected=True)

        run.__name__ = f.__name__
        return run
    return inner

with_client.classes = {}


async def register(server, client, nickname='TestcaseRunner'):
    """ Have the server accept the registration of the client. """
    await server.send(':mock.local 001 {nick} :Welcome to the mock network {nick}'.format(nick=nickname))
