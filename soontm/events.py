## events.py
# Structured events handed to application code.
# Every event is a named tuple whose last field is the line that caused it.
from collections import namedtuple

__all__ = [
    'Registered', 'NickChange', 'PrivateMessage', 'Notice', 'Join', 'Part', 'Remove', 'Quit', 'Invite',
    'Kick', 'TopicChange', 'TopicReply', 'Wallops', 'MonitorOnline', 'MonitorOffline', 'EndOfNames',
    'ErrorEvent', 'ALL', 'KINDS'
]


class Registered(namedtuple('Registered', 'nickname line')):
    """ Registration completed (numeric 001). """
    __slots__ = ()
    kind = 'registered'


class NickChange(namedtuple('NickChange', 'old new line')):
    """ A user, possibly the client, changed their nickname. """
    __slots__ = ()
    kind = 'nick'


class PrivateMessage(namedtuple('PrivateMessage', 'nick target message line')):
    """ A PRIVMSG to a channel or to the client. CTCP queries carry their tokens in line.ctcp. """
    __slots__ = ()
    kind = 'privmsg'


class Notice(namedtuple('Notice', 'nick target message line')):
    """ A NOTICE to a channel or to the client. CTCP replies carry their tokens in line.ctcp. """
    __slots__ = ()
    kind = 'notice'


class Join(namedtuple('Join', 'nick channel account realname line')):
    """ A user, possibly the client, joined a channel. Account and realname are only known with extended-join. """
    __slots__ = ()
    kind = 'join'


class Part(namedtuple('Part', 'nick channel message line')):
    __slots__ = ()
    kind = 'part'


class Remove(namedtuple('Remove', 'nick channel target message line')):
    """ `nick` forced `target` out of a channel using REMOVE. """
    __slots__ = ()
    kind = 'remove'


class Quit(namedtuple('Quit', 'nick message line')):
    __slots__ = ()
    kind = 'quit'


class Invite(namedtuple('Invite', 'nick channel line')):
    __slots__ = ()
    kind = 'invite'


class Kick(namedtuple('Kick', 'nick channel target message line')):
    __slots__ = ()
    kind = 'kick'


class TopicChange(namedtuple('TopicChange', 'nick channel topic line')):
    """ Someone changed a channel topic (TOPIC). """
    __slots__ = ()
    kind = 'topic'


class TopicReply(namedtuple('TopicReply', 'channel topic line')):
    """ The current topic of a channel (numeric 332). """
    __slots__ = ()
    kind = 'rpl_topic'


class Wallops(namedtuple('Wallops', 'nick message line')):
    __slots__ = ()
    kind = 'wallops'


class MonitorOnline(namedtuple('MonitorOnline', 'nick username host line')):
    __slots__ = ()
    kind = 'rpl_mononline'


class MonitorOffline(namedtuple('MonitorOffline', 'nick line')):
    __slots__ = ()
    kind = 'rpl_monoffline'


class EndOfNames(namedtuple('EndOfNames', 'names channel line')):
    """ The complete nickname -> prefix modes mapping of a channel. """
    __slots__ = ()
    kind = 'rpl_endofnames'


class ErrorEvent(namedtuple('ErrorEvent', 'error line')):
    """ A non-fatal condition, or the server's fatal ERROR. `line` is None when no line caused it. """
    __slots__ = ()
    kind = 'error'


ALL = (
    Registered, NickChange, PrivateMessage, Notice, Join, Part, Remove, Quit, Invite, Kick,
    TopicChange, TopicReply, Wallops, MonitorOnline, MonitorOffline, EndOfNames, ErrorEvent
)
KINDS = {event.kind: event for event in ALL}
