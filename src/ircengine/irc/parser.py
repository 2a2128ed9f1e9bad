"""IRC line parsing utilities."""

from __future__ import annotations

from ..errors import MalformedLineError
from .models import ParsedLine, UserInfo


def ping_token(line: str) -> str | None:
    """Return the PONG argument if ``line`` is a server PING, else None.

    ``PING :abc123`` yields ``abc123``. A bare ``PING`` is malformed.
    """
    tokens = line.split()
    if not tokens or tokens[0] != "PING":
        return None
    if len(tokens) < 2:
        raise MalformedLineError(line, "PING without token")
    token = tokens[1]
    return token[1:] if token.startswith(":") else token


def parse_line(line: str) -> ParsedLine:
    """Parse one protocol line into event name, source and params.

    ``:irc.example.net 001 bot :Welcome to the network`` becomes
    ``ParsedLine("001", "irc.example.net", ("bot", "Welcome to the network"))``.
    Tokens are whitespace separated; the first token after the command that
    starts with ``:`` opens the trailing parameter, which swallows the rest
    of the line (rejoined with single spaces).

    Raises:
        MalformedLineError: If the line has no command token.
    """
    tokens = line.split()
    if not tokens:
        raise MalformedLineError(line, "empty line")

    source = ""
    if tokens[0].startswith(":"):
        source = tokens[0][1:]
        tokens = tokens[1:]
    if not tokens:
        raise MalformedLineError(line, "missing command")

    event_name = tokens[0].lower()
    params: list[str] = []
    for i, token in enumerate(tokens[1:], start=1):
        if token.startswith(":"):
            params.append(" ".join(tokens[i:])[1:])
            break
        params.append(token)
    return ParsedLine(event_name=event_name, source=source, params=tuple(params))


def parse_userinfo(userinfo: str) -> UserInfo:
    """Split ``nick!user@host``; missing parts come back empty."""
    nick, bang, rest = userinfo.partition("!")
    if not bang:
        nick, _, host = userinfo.partition("@")
        return UserInfo(nick=nick, host=host)
    username, _, host = rest.partition("@")
    return UserInfo(nick=nick, username=username, host=host)
