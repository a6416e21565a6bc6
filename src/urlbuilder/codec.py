"""urlbuilder.codec
Percent-encoding and percent-decoding of URL components, parameterized by charset.
Decoding is the inverse of encoding for the same component and charset,
except that a literal "+" in a query decodes to a space, while encoding always produces "%20".
"""

import codecs
import enum
import re
import string

from collections.abc import Iterable
from typing import TypeAlias

from .errors import MalformedEscapeError, UnknownCharsetError
from .multimap import Entry, Multimap

DEFAULT_CHARSET: str = "utf-8"

Charset: TypeAlias = str | codecs.CodecInfo


class Component(enum.Enum):
    PATH = "path"
    QUERY = "query"
    FRAGMENT = "fragment"


# Each of these safe sets is derived from an ABNF rule in RFC 3986.

# unreserved = ALPHA / DIGIT / "-" / "." / "_" / "~"
_UNRESERVED: frozenset[str] = frozenset(string.ascii_letters + string.digits + "-._~")

# sub-delims = "!" / "$" / "&" / "'" / "(" / ")" / "*" / "+" / "," / ";" / "="
_SUB_DELIMS: frozenset[str] = frozenset("!$&'()*+,;=")

_SAFE: dict[Component, frozenset[str]] = {
    # segment = *pchar, plus the "/" between segments
    Component.PATH: _UNRESERVED | _SUB_DELIMS | {":", "@", "/"},
    # query = *( pchar / "/" / "?" ), less "&" and "=" which delimit pairs, and "+" which would decode as a space.
    Component.QUERY: _UNRESERVED | (_SUB_DELIMS - {"&", "=", "+"}) | {":", "@", "/", "?"},
    # fragment = *( pchar / "/" / "?" )
    Component.FRAGMENT: _UNRESERVED | _SUB_DELIMS | {":", "@", "/", "?"},
}

# A "%" that does not start a pct-encoded triple.
_BAD_ESCAPE_PAT: re.Pattern[str] = re.compile(r"%(?![0-9A-Fa-f]{2})")

# One or more consecutive pct-encoded triples; these are decoded together so that multi-byte characters survive.
_ESCAPE_RUN_PAT: re.Pattern[str] = re.compile(r"(?:%[0-9A-Fa-f]{2})+")


def resolve_charset(charset: Charset) -> codecs.CodecInfo:
    """Turns a charset name into a codec handle. Handles are returned unchanged."""
    if isinstance(charset, codecs.CodecInfo):
        return charset
    try:
        info: codecs.CodecInfo = codecs.lookup(charset)
    except LookupError as e:
        raise UnknownCharsetError(charset) from e
    # Bytes-to-bytes codecs such as "base64" are not charsets.
    if not getattr(info, "_is_text_encoding", True):
        raise UnknownCharsetError(charset)
    return info


def decode(raw: str | None, charset: Charset = DEFAULT_CHARSET, component: Component = Component.PATH) -> str | None:
    if raw is None:
        return None
    info: codecs.CodecInfo = resolve_charset(charset)

    bad: re.Match[str] | None = _BAD_ESCAPE_PAT.search(raw)
    if bad is not None:
        raise MalformedEscapeError(raw, bad.start())

    if component is Component.QUERY:
        raw = raw.replace("+", " ")

    def unescape(m: re.Match[str]) -> str:
        octets: bytes = bytes.fromhex(m[0].replace("%", ""))
        return info.decode(octets, "replace")[0]

    return _ESCAPE_RUN_PAT.sub(unescape, raw)


def encode(text: str | None, charset: Charset = DEFAULT_CHARSET, component: Component = Component.PATH) -> str | None:
    if text is None:
        return None
    safe: frozenset[str] = _SAFE[component]
    # A single incremental encoder, so stateful charsets (e.g. utf-16) emit at most one BOM.
    encoder: codecs.IncrementalEncoder = resolve_charset(charset).incrementalencoder("replace")
    result: list[str] = []
    for c in text:
        if c in safe:
            result.append(c)
        else:
            result.extend(f"%{octet:02X}" for octet in encoder.encode(c))
    return "".join(result)


def decode_path(raw: str | None, charset: Charset = DEFAULT_CHARSET) -> str | None:
    return decode(raw, charset, Component.PATH)


def decode_fragment(raw: str | None, charset: Charset = DEFAULT_CHARSET) -> str | None:
    return decode(raw, charset, Component.FRAGMENT)


def parse_query_string(raw: str | None, charset: Charset = DEFAULT_CHARSET) -> Multimap:
    """Decodes "k=v&k2&k3=" into a builder, in order.
    A pair with no "=" gets the value None. Empty pairs, as in "a&&b", are skipped.
    """
    result: Multimap = Multimap()
    if not raw:
        return result
    for pair in raw.split("&"):
        if len(pair) == 0:
            continue
        key, eq, value = pair.partition("=")
        result.add(
            decode(key, charset, Component.QUERY),
            decode(value, charset, Component.QUERY) if len(eq) > 0 else None,
        )
    return result


def encode_path(text: str | None, charset: Charset = DEFAULT_CHARSET) -> str | None:
    return encode(text, charset, Component.PATH)


def encode_query_component(text: str | None, charset: Charset = DEFAULT_CHARSET) -> str | None:
    return encode(text, charset, Component.QUERY)


def encode_fragment(text: str | None, charset: Charset = DEFAULT_CHARSET) -> str | None:
    return encode(text, charset, Component.FRAGMENT)


def encode_query(pairs: Iterable[Entry], charset: Charset = DEFAULT_CHARSET) -> str:
    """Inverse of parse_query_string: "key=value" for each pair, "key" alone when the value is None."""
    parts: list[str] = []
    for key, value in pairs:
        part: str = encode(key, charset, Component.QUERY)  # type: ignore[assignment]
        if value is not None:
            part += f"={encode(value, charset, Component.QUERY)}"
        parts.append(part)
    return "&".join(parts)
