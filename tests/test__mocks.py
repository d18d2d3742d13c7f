import pytest
import soontm

from pytest import mark
from .fixtures import with_client
from .mocks import Mock


## Client.


@pytest.mark.asyncio
@mark.meta
@with_client(connected=False)
async def test_mock_client_connect(server, client):
    assert not client.connected
    await client.connect('mock://local', 1337)
    assert client.connected

    client.on_disconnect = Mock(side_effect=client.on_disconnect)
    await client.disconnect()
    assert not client.connected
    assert client.on_disconnect.called


@pytest.mark.asyncio
@mark.meta
@with_client()
async def test_mock_client_send(server, client):
    await client.raw('INSTALL Gentoo')
    assert server.receives('INSTALL Gentoo')


@pytest.mark.asyncio
@mark.meta
@with_client(soontm.features.RFC1459Support)
async def test_mock_client_rawmsg(server, client):
    await client.rawmsg('PRIVMSG', '#gentoo', 'emerge --sync')
    assert server.receives('PRIVMSG #gentoo :emerge --sync')
    assert server.received_commands('PRIVMSG') == ['PRIVMSG #gentoo :emerge --sync']


@pytest.mark.asyncio
@mark.meta
@with_client(soontm.features.RFC1459Support)
async def test_mock_client_receive(server, client):
    received = []
    client.raw_stream.on('PING', received.append)
    await server.send('PING test')

    assert len(received) == 1
    message = received[0]
    assert message.command == 'PING'
    assert message.params == ['test']


@pytest.mark.asyncio
@mark.meta
@with_client(soontm.features.RFC1459Support)
async def test_mock_client_records_events(server, client):
    await server.send(':mock.local 001 TestcaseRunner :Welcome')

    assert [event.kind for event in client.events] == ['registered']
    assert client.events_of('registered')[0].nickname == 'TestcaseRunner'


## Server.


@pytest.mark.asyncio
@mark.meta
@with_client()
async def test_mock_server_clear(server, client):
    await client.raw('PING x')
    server.clear()
    assert server.received == []
