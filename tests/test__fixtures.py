import pytest
import soontm

from pytest import mark
from .fixtures import with_client
from .mocks import MockClient, MockServer, MockConnection


@pytest.mark.asyncio
@mark.meta
@with_client(connected=False)
async def test_fixtures_with_client(server, client):
    assert isinstance(server, MockServer)
    assert isinstance(client, MockClient)
    assert client.__class__.__mro__[1] is MockClient, 'MockClient should be first in method resolution order'

    assert not client.connected


@pytest.mark.asyncio
@mark.meta
@with_client(soontm.features.RFC1459Support, connected=False)
async def test_fixtures_with_client_features(server, client):
    assert isinstance(client, MockClient)
    assert client.__class__.__mro__[1] is MockClient, 'MockClient should be first in method resolution order'
    assert isinstance(client, soontm.features.RFC1459Support)


@pytest.mark.asyncio
@mark.meta
@with_client(username='test_runner')
async def test_fixtures_with_client_options(server, client):
    assert client.username == 'test_runner'


@pytest.mark.asyncio
@mark.meta
@with_client()
async def test_fixtures_with_client_connected(server, client):
    assert client.connected
    assert isinstance(client.connection, MockConnection)
    assert server.connection is client.connection


@pytest.mark.asyncio
@mark.meta
@with_client(soontm.features.TLSSupport, connect_options={'tls': True, 'channels': ['#a']})
async def test_fixtures_with_client_connect_options(server, client):
    assert client.secure
    assert client._autojoin_channels == ['#a']
