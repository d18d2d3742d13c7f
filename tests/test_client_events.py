import pytest
import soontm
from soontm import events
from .fixtures import with_client, register


## Messages.


@pytest.mark.asyncio
@with_client(soontm.features.RFC1459Support)
async def test_event_privmsg(server, client):
    await server.send(':a!u@h PRIVMSG #c :hi there')

    event, = client.events
    assert isinstance(event, events.PrivateMessage)
    assert event.kind == 'privmsg'
    assert event[:3] == ('a', '#c', 'hi there')
    assert event.line.nick == 'a'
    assert event.line.ctcp is None


@pytest.mark.asyncio
@with_client(soontm.features.RFC1459Support)
async def test_event_notice(server, client):
    await server.send(':a!u@h NOTICE TestcaseRunner :psst')

    event, = client.events
    assert event.kind == 'notice'
    assert event[:3] == ('a', 'TestcaseRunner', 'psst')


@pytest.mark.asyncio
@with_client(soontm.features.RFC1459Support)
async def test_event_callbacks(server, client):
    seen = []

    async def on_privmsg(nick, target, message, line):
        seen.append((nick, target, message, line.command))

    client.on_privmsg = on_privmsg
    await server.send(':a!u@h PRIVMSG #c :hi')

    assert seen == [('a', '#c', 'hi', 'PRIVMSG')]


## Membership.


@pytest.mark.asyncio
@with_client(soontm.features.RFC1459Support)
async def test_event_join(server, client):
    await server.send(':a!u@h JOIN #c')

    event, = client.events
    assert event.kind == 'join'
    assert event[:4] == ('a', '#c', None, None)


@pytest.mark.asyncio
@with_client(soontm.features.RFC1459Support)
async def test_event_join_multiple_channels(server, client):
    await server.send(':a!u@h JOIN #c,#d')
    assert [event.channel for event in client.events_of('join')] == ['#c', '#d']


@pytest.mark.asyncio
@with_client(soontm.features.RFC1459Support)
async def test_event_part(server, client):
    await server.send(':a!u@h PART #c :later')
    await server.send(':b!u@h PART #c')

    first, second = client.events
    assert first[:3] == ('a', '#c', 'later')
    assert second[:3] == ('b', '#c', None)
    assert not client.events_of('remove')


@pytest.mark.asyncio
@with_client(soontm.features.RFC1459Support)
async def test_event_remove(server, client):
    await server.send(':victim!u@h PART #c :requested by op (stop flooding)')

    assert [event.kind for event in client.events] == ['part', 'remove']
    remove = client.events_of('remove')[0]
    assert remove[:4] == ('op', '#c', 'victim', 'stop flooding')


@pytest.mark.asyncio
@with_client(soontm.features.RFC1459Support)
async def test_event_kick(server, client):
    await server.send(':op!u@h KICK #c victim :behave')
    await server.send(':op!u@h KICK #c,#d one,two')

    kicks = client.events_of('kick')
    assert kicks[0][:4] == ('op', '#c', 'victim', 'behave')
    assert [(kick.channel, kick.target, kick.message) for kick in kicks[1:]] == [
        ('#c', 'one', None), ('#c', 'two', None), ('#d', 'one', None), ('#d', 'two', None)
    ]


@pytest.mark.asyncio
@with_client(soontm.features.RFC1459Support)
async def test_event_quit(server, client):
    await server.send(':a!u@h QUIT :Ping timeout')

    event, = client.events
    assert event.kind == 'quit'
    assert event[:2] == ('a', 'Ping timeout')


@pytest.mark.asyncio
@with_client(soontm.features.RFC1459Support)
async def test_event_invite(server, client):
    await server.send(':a!u@h INVITE TestcaseRunner :#c')

    event, = client.events
    assert event.kind == 'invite'
    assert event[:2] == ('a', '#c')


## Channel information.


@pytest.mark.asyncio
@with_client(soontm.features.RFC1459Support)
async def test_event_topic(server, client):
    await server.send(':a!u@h TOPIC #c :a new topic')
    await server.send(':test.net 332 TestcaseRunner #c :the current topic')

    topic, reply = client.events
    assert topic.kind == 'topic'
    assert topic[:3] == ('a', '#c', 'a new topic')
    assert reply.kind == 'rpl_topic'
    assert reply[:2] == ('#c', 'the current topic')


@pytest.mark.asyncio
@with_client(soontm.features.RFC1459Support)
async def test_event_wallops(server, client):
    await server.send(':oper!u@h WALLOPS :network maintenance')

    event, = client.events
    assert event.kind == 'wallops'
    assert event[:2] == ('oper', 'network maintenance')


## Nicknames.


@pytest.mark.asyncio
@with_client(soontm.features.RFC1459Support)
async def test_event_nick_own(server, client):
    await register(server, client)
    await server.send(':TestcaseRunner!u@h NICK :renamed')

    event = client.events_of('nick')[0]
    assert event[:2] == ('TestcaseRunner', 'renamed')
    assert client.nickname == 'renamed'


@pytest.mark.asyncio
@with_client(soontm.features.RFC1459Support)
async def test_event_nick_other(server, client):
    await register(server, client)
    await server.send(':someone!u@h NICK other')

    assert client.events_of('nick')[0][:2] == ('someone', 'other')
    assert client.nickname == 'TestcaseRunner'


## Names.


@pytest.mark.asyncio
@with_client(soontm.features.RFC1459Support)
async def test_event_names(server, client):
    await server.send(':test.net 353 TestcaseRunner = #c :@op +voice')
    await server.send(':test.net 353 TestcaseRunner = #c :plain ~@owner')
    assert '#c' in client.state.names_buffer
    assert not client.events

    await server.send(':test.net 366 TestcaseRunner #c :End of /NAMES list.')

    event, = client.events
    assert event.kind == 'rpl_endofnames'
    assert event.channel == '#c'
    assert event.names == {'op': '@', 'voice': '+', 'plain': '', 'owner': '~@'}
    assert '#c' not in client.state.names_buffer


@pytest.mark.asyncio
@with_client(soontm.features.RFC1459Support)
async def test_event_names_per_channel(server, client):
    await server.send(':test.net 353 TestcaseRunner = #c :one')
    await server.send(':test.net 353 TestcaseRunner @ #d :two')
    await server.send(':test.net 366 TestcaseRunner #d :End of /NAMES list.')

    event, = client.events
    assert event.names == {'two': ''}
    assert client.state.names_buffer == {'#c': {'one': ''}}


@pytest.mark.asyncio
@with_client(soontm.features.RFC1459Support)
async def test_event_names_end_without_names(server, client):
    await server.send(':test.net 366 TestcaseRunner #nowhere :End of /NAMES list.')

    event, = client.events
    assert event.kind == 'error'
    assert isinstance(event.error, soontm.InternalConsistency)


@pytest.mark.asyncio
@with_client(soontm.features.RFC1459Support, names=False)
async def test_event_names_disabled(server, client):
    await server.send(':test.net 353 TestcaseRunner = #c :@op')
    await server.send(':test.net 366 TestcaseRunner #c :End of /NAMES list.')

    assert not client.events
    assert not client.state.names_buffer
