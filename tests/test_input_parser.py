import pytest

from relaychat.chat.input_parser import QuitRequest, parse_input
from relaychat.errors.internal import InvalidIntentError
from relaychat.irc.commands import Join, Part, Raw, SendText


def test_plain_text_goes_to_current_target():
    assert parse_input("hello there\n", "#room") == [SendText("#room", "hello there")]


def test_double_slash_sends_literal_slash_text():
    assert parse_input("//shrug", "#room") == [SendText("#room", "/shrug")]


def test_plain_text_without_target_rejected():
    with pytest.raises(InvalidIntentError):
        parse_input("hello")


@pytest.mark.parametrize("text", ["", "   ", "\r\n"])
def test_blank_input_does_nothing(text):
    assert parse_input(text, "#room") == []


def test_join_normalizes_channels():
    assert parse_input("/join room #other") == [Join("#room"), Join("#other")]


def test_part_defaults_to_current_target():
    assert parse_input("/part", "#room") == [Part("#room")]
    assert parse_input("/leave other", "#room") == [Part("#other")]
    with pytest.raises(InvalidIntentError):
        parse_input("/part")


def test_msg_keeps_text_spacing():
    assert parse_input("/msg bob hi  there") == [SendText("bob", "hi  there")]
    with pytest.raises(InvalidIntentError):
        parse_input("/msg bob")


def test_nick_becomes_raw_nick_line():
    assert parse_input("/nick robert") == [Raw("NICK robert")]
    with pytest.raises(InvalidIntentError):
        parse_input("/nick a b")


def test_quit_request():
    assert parse_input("/quit") == QuitRequest()
    assert parse_input("/QUIT gone fishing") == QuitRequest("gone fishing")


def test_raw_and_unknown_commands_pass_through():
    assert parse_input("/raw MODE me +i") == [Raw("MODE me +i")]
    assert parse_input("/quote WHOIS bob") == [Raw("WHOIS bob")]
    assert parse_input("/whois bob") == [Raw("whois bob")]
    with pytest.raises(InvalidIntentError):
        parse_input("/raw   ")
    with pytest.raises(InvalidIntentError):
        parse_input("/ x")
