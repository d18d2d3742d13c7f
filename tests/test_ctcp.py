import pytest
import soontm
from soontm.features.ctcp import is_ctcp, construct_ctcp, parse_ctcp
from .fixtures import with_client


@pytest.mark.asyncio
@with_client(soontm.features.CTCPSupport, version='soontm-test 1.0')
async def test_ctcp_version(server, client):
    server.clear()
    await server.send(':a!u@h PRIVMSG TestcaseRunner :\x01VERSION\x01')

    assert server.received == ['NOTICE a :\x01VERSION soontm-test 1.0\x01']
    assert not client.events_of('privmsg')


@pytest.mark.asyncio
@with_client(soontm.features.CTCPSupport)
async def test_ctcp_version_default(server, client):
    assert client.version == 'soontm v{}'.format(soontm.__version__)


@pytest.mark.asyncio
@with_client(soontm.features.CTCPSupport)
async def test_ctcp_ping(server, client):
    server.clear()
    await server.send(':a!u@h PRIVMSG TestcaseRunner :\x01PING 1234 5678\x01')
    await server.send(':a!u@h PRIVMSG TestcaseRunner :\x01PING\x01')

    assert server.received == ['NOTICE a :\x01PING 1234 5678\x01', 'NOTICE a \x01PING\x01']


@pytest.mark.asyncio
@with_client(soontm.features.CTCPSupport)
async def test_ctcp_unhandled_query_is_a_privmsg(server, client):
    server.clear()
    await server.send(':a!u@h PRIVMSG #c :\x01ACTION waves\x01')

    event, = client.events_of('privmsg')
    assert event.message == '\x01ACTION waves\x01'
    assert event.line.ctcp == ['ACTION', 'waves']
    assert server.received == []


@pytest.mark.asyncio
@with_client(soontm.features.CTCPSupport)
async def test_ctcp_custom_handler(server, client):
    seen = []

    async def on_ctcp_time(by, target, contents):
        seen.append((by, target, contents))

    client.on_ctcp_time = on_ctcp_time
    await server.send(':a!u@h PRIVMSG TestcaseRunner :\x01TIME\x01')

    assert seen == [('a', 'TestcaseRunner', None)]
    assert not client.events_of('privmsg')


@pytest.mark.asyncio
@with_client(soontm.features.CTCPSupport)
async def test_ctcp_reply_is_not_answered(server, client):
    server.clear()
    await server.send(':a!u@h NOTICE TestcaseRunner :\x01VERSION someclient 2.0\x01')

    event, = client.events_of('notice')
    assert event.line.ctcp == ['VERSION', 'someclient', '2.0']
    assert server.received == []


@pytest.mark.asyncio
@with_client(soontm.features.CTCPSupport)
async def test_ctcp_from_server_is_a_privmsg(server, client):
    await server.send('PRIVMSG TestcaseRunner :\x01VERSION\x01')

    assert len(client.events_of('privmsg')) == 1


@pytest.mark.asyncio
@with_client(soontm.features.CTCPSupport)
async def test_ctcp_outbound(server, client):
    server.clear()
    await client.ctcp('a', 'VERSION')
    await client.ctcp_reply('a', 'TIME', 'noon')
    await client.action('#c', 'waves')

    assert server.received == [
        'PRIVMSG a \x01VERSION\x01',
        'NOTICE a :\x01TIME noon\x01',
        'PRIVMSG #c :\x01ACTION waves\x01',
    ]


## Helpers.


@pytest.mark.parametrize('message, expected', [
    ('\x01VERSION\x01', True),
    ('\x01ACTION waves\x01', True),
    ('\x01', False),
    ('VERSION', False),
    ('\x01VERSION', False),
])
def test_is_ctcp(message, expected):
    assert is_ctcp(message) == expected


def test_construct_ctcp():
    assert construct_ctcp('PING') == '\x01PING\x01'
    assert construct_ctcp('PING', None) == '\x01PING\x01'
    assert construct_ctcp('ACTION', 'waves hello') == '\x01ACTION waves hello\x01'


def test_parse_ctcp():
    assert parse_ctcp('\x01VERSION\x01') == ['VERSION']
    assert parse_ctcp('\x01ACTION waves hello\x01') == ['ACTION', 'waves', 'hello']
