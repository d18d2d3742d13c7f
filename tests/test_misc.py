"""
test_misc.py ~ Testing of Misc. Functions

Designed for those simple functions that don't need their own dedicated test files
But we want to hit them anyways
"""
from soontm import events
from soontm.protocol import identifierify


def test_identifierify():
    good_name = identifierify("MyVerySimpleName")
    bad_name = identifierify("I'mASpec!äl/Name!_")
    assert good_name == "myverysimplename"
    assert bad_name == "i_maspec__l_name__"
    assert identifierify("account-notify") == "account_notify"


def test_event_kinds():
    assert set(events.KINDS) == {event.kind for event in events.ALL}
    assert events.KINDS['privmsg'] is events.PrivateMessage
    assert events.KINDS['rpl_endofnames'] is events.EndOfNames
    # Every event carries the line that caused it last.
    assert all(event._fields[-1] == 'line' for event in events.ALL)
