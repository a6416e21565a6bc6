"""urlbuilder.parser
Two-stage decomposition of a URL string, followed by percent-decoding of the parts.
Nothing here validates against RFC 3986: anything decomposable is accepted.
"""

import dataclasses
import logging
import re

from typing import NamedTuple

from . import codec, idn
from .errors import InvalidPortError
from .grammar import AUTHORITY_PAT, URL_PAT
from .multimap import Multimap

_log: logging.Logger = logging.getLogger(__name__)

MAX_PORT: int = 65535

_PORT_PAT: re.Pattern[str] = re.compile(r"[0-9]+")


class RawComponents(NamedTuple):
    """The still-encoded groups of a URL. Absent groups are None; an empty path is ""."""

    scheme: str | None
    authority: str | None
    path: str
    query: str | None
    fragment: str | None


class Authority(NamedTuple):
    userinfo: str | None
    host: str
    port: int | None


@dataclasses.dataclass(frozen=True)
class ParsedUrl:
    """The decoded fields of a URL, as stored by Url."""

    scheme: str | None = None
    user_info: str | None = None
    host_name: str | None = None
    port: int | None = None
    path: str | None = None
    query: Multimap = dataclasses.field(default_factory=Multimap)
    fragment: str | None = None


def split_url(raw: str | None) -> RawComponents:
    if not raw:
        return RawComponents(None, None, "", None, None)
    m: re.Match[str] | None = URL_PAT.fullmatch(raw)
    if m is None:
        # URL_PAT matches every string, so this should be unreachable.
        _log.debug("no decomposition of %r", raw)
        return RawComponents(None, None, "", None, None)
    return RawComponents(m["scheme"], m["authority"], m["path"], m["query"], m["fragment"])


def parse_port(port: str | None) -> int | None:
    """Port text to number. "" and None are an absent port."""
    if not port:
        return None
    if _PORT_PAT.fullmatch(port) is None:
        raise InvalidPortError(port)
    result: int = int(port, base=10)
    if result > MAX_PORT:
        raise InvalidPortError(port)
    return result


def split_authority(authority: str) -> Authority:
    """userinfo@host:port, with the host converted to Unicode"""
    m: re.Match[str] = AUTHORITY_PAT.fullmatch(authority)  # type: ignore[assignment]
    return Authority(m["userinfo"], idn.to_unicode(m["host"]), parse_port(m["port"]))


def parse(raw: str | None, charset: codec.Charset = codec.DEFAULT_CHARSET) -> ParsedUrl:
    """Decomposes raw and decodes the path, query and fragment using charset.
    Raises MalformedEscapeError, InvalidPortError, UnknownCharsetError or InvalidHostError.
    """
    info = codec.resolve_charset(charset)
    parts: RawComponents = split_url(raw)
    _log.debug("split %r into %r", raw, parts)

    user_info: str | None = None
    host_name: str | None = None
    port: int | None = None
    if parts.authority is not None:
        user_info, host_name, port = split_authority(parts.authority)

    return ParsedUrl(
        scheme=parts.scheme,
        user_info=user_info,
        host_name=host_name,
        port=port,
        path=codec.decode_path(parts.path, info) if len(parts.path) > 0 else None,
        query=codec.parse_query_string(parts.query, info),
        fragment=codec.decode_fragment(parts.fragment, info),
    )
