"""urlbuilder.url
Immutable URL value objects.
"""

import dataclasses
import urllib.parse

from collections.abc import Iterable, Mapping
from typing import Self

from . import codec, idn, parser
from .errors import InvalidPortError, SyntaxConversionError, UrlError
from .grammar import check_uri_reference
from .multimap import EMPTY, ImmutableMultimap, Multimap


def _charset_name(charset: codec.Charset) -> str:
    return codec.resolve_charset(charset).name


def _check_parameter(key: str, value: str | None) -> None:
    # An empty key with no value serializes to nothing, so it could never be read back.
    if len(key) == 0 and value is None:
        raise UrlError("a query parameter needs a key or a value")


@dataclasses.dataclass(frozen=True)
class Url:
    """A URL whose components are held decoded. Instances never change after construction:
    every with_* method returns a new Url, sharing every component it did not replace.

    decode_charset is the charset the URL was parsed with, and the default for with_query(str).
    encode_charset is used by serialize(). Neither takes part in equality.
    """

    scheme: str | None = None
    user_info: str | None = None
    host_name: str | None = None
    port: int | None = None
    path: str | None = None
    query: ImmutableMultimap = EMPTY
    fragment: str | None = None
    decode_charset: str = dataclasses.field(default=codec.DEFAULT_CHARSET, compare=False)
    encode_charset: str = dataclasses.field(default=codec.DEFAULT_CHARSET, compare=False)

    def __post_init__(self: Self) -> None:
        # A builder passed to the constructor is frozen here; a snapshot is kept as is.
        object.__setattr__(self, "query", self.query.immutable())

    @classmethod
    def empty(cls: type[Self]) -> Self:
        return cls()

    @classmethod
    def from_string(cls: type[Self], url: str | None, input_charset: codec.Charset = codec.DEFAULT_CHARSET) -> Self:
        """Parses a full or partial URL. Percent-escapes are assumed to have been made with input_charset.
        e.g. Url.from_string("http://example.com:8080/a%20b?x=1").path == "/a b"
        """
        parsed: parser.ParsedUrl = parser.parse(url, input_charset)
        return cls(
            scheme=parsed.scheme,
            user_info=parsed.user_info,
            host_name=parsed.host_name,
            port=parsed.port,
            path=parsed.path,
            query=parsed.query.immutable(),
            fragment=parsed.fragment,
            decode_charset=_charset_name(input_charset),
        )

    @classmethod
    def from_split_result(cls: type[Self], result: urllib.parse.SplitResult) -> Self:
        """Scheme, userinfo, host and port are taken from urllib as-is; path, query and fragment are decoded as UTF-8."""
        return cls._from_urllib(result, result.path)

    @classmethod
    def from_parse_result(cls: type[Self], result: urllib.parse.ParseResult) -> Self:
        """Like from_split_result. The params are put back on the end of the path."""
        path: str = f"{result.path};{result.params}" if result.params else result.path
        return cls._from_urllib(result, path)

    @classmethod
    def _from_urllib(
        cls: type[Self], result: urllib.parse.SplitResult | urllib.parse.ParseResult, raw_path: str
    ) -> Self:
        user_info: str | None = None
        if "@" in result.netloc:
            user_info = result.netloc.rpartition("@")[0]

        # urllib strips the brackets from IPv6 literals.
        host: str | None = result.hostname
        if host is not None and ":" in host:
            host = f"[{host}]"

        try:
            port: int | None = result.port
        except ValueError as e:
            raise InvalidPortError(result.netloc.rpartition(":")[2]) from e

        return cls(
            scheme=result.scheme or None,
            user_info=user_info,
            host_name=idn.to_unicode(host) if host is not None else None,
            port=port,
            path=codec.decode_path(raw_path) or None,
            query=codec.parse_query_string(result.query).immutable(),
            fragment=codec.decode_fragment(result.fragment or None),
        )

    @property
    def query_parameters(self: Self) -> ImmutableMultimap:
        return self.query

    def encode_as(self: Self, charset: codec.Charset) -> Self:
        """Use charset when percent-escaping the output of serialize()."""
        return dataclasses.replace(self, encode_charset=_charset_name(charset))

    def with_scheme(self: Self, scheme: str | None) -> Self:
        return dataclasses.replace(self, scheme=scheme)

    def with_user_info(self: Self, user_info: str | None) -> Self:
        """Usually "username" or "username:password"."""
        return dataclasses.replace(self, user_info=user_info)

    def with_host(self: Self, host_name: str | None) -> Self:
        """Accepts internationalized host names in either form; they are stored as Unicode."""
        return dataclasses.replace(self, host_name=idn.to_unicode(host_name) if host_name is not None else None)

    def with_port(self: Self, port: int | None) -> Self:
        """None means the scheme's default port."""
        if port is not None and not 0 <= port <= parser.MAX_PORT:
            raise InvalidPortError(port)
        return dataclasses.replace(self, port=port)

    def with_path(self: Self, path: str | None, charset: codec.Charset | None = None) -> Self:
        """Sets the decoded path. If charset is given, path is percent-encoded and is decoded with charset first.
        An empty path is the same as no path.
        """
        if charset is not None:
            path = codec.decode_path(path, charset)
        return dataclasses.replace(self, path=path or None)

    def with_query(
        self: Self, query: Multimap | ImmutableMultimap | str | None, charset: codec.Charset | None = None
    ) -> Self:
        """Replaces the whole query.
        A string is percent-decoded with charset, or with decode_charset if charset is None.
        A multimap is copied, so later changes to it do not show through. None removes the query.
        """
        if query is None:
            return dataclasses.replace(self, query=EMPTY)
        if isinstance(query, str):
            decode_charset: codec.Charset = charset if charset is not None else self.decode_charset
            return dataclasses.replace(self, query=codec.parse_query_string(query, decode_charset).immutable())
        return dataclasses.replace(self, query=query.immutable())

    def with_parameters(
        self: Self, parameters: Mapping[str, str | None | Iterable[str | None]] | Iterable[tuple[str, str | None]]
    ) -> Self:
        """Replaces the query with the given parameters.
        Accepts a mapping, whose values may be single values or sequences of values, or an iterable of pairs.
        """
        if isinstance(parameters, (Multimap, ImmutableMultimap)):
            return self.with_query(parameters)
        builder: Multimap = Multimap()
        if isinstance(parameters, Mapping):
            for key, values in parameters.items():
                if values is None or isinstance(values, str):
                    builder.add(key, values)
                else:
                    for value in values:
                        builder.add(key, value)
        else:
            for key, value in parameters:
                builder.add(key, value)
        for key, value in builder.flatten():
            _check_parameter(key, value)
        return dataclasses.replace(self, query=builder.immutable())

    def add_parameter(self: Self, key: str, value: str | None) -> Self:
        """New parameters go at the end of the query string."""
        _check_parameter(key, value)
        return dataclasses.replace(self, query=self.query.deep_copy().add(key, value).immutable())

    def set_parameter(self: Self, key: str, value: str | None) -> Self:
        """Removes every parameter named key, then adds this one at the end of the query string."""
        _check_parameter(key, value)
        return dataclasses.replace(self, query=self.query.deep_copy().replace_values(key, value).immutable())

    def remove_parameter(self: Self, key: str, value: str | None) -> Self:
        return dataclasses.replace(self, query=self.query.deep_copy().remove(key, value).immutable())

    def remove_parameters(self: Self, key: str) -> Self:
        return dataclasses.replace(self, query=self.query.deep_copy().remove_all_values(key).immutable())

    def with_fragment(self: Self, fragment: str | None) -> Self:
        return dataclasses.replace(self, fragment=fragment)

    def serialize(self: Self) -> str:
        """scheme:[//[userinfo@]host[:port]]path[?query][#fragment], percent-encoded with encode_charset"""
        result: str = ""
        if self.scheme is not None:
            result += f"{self.scheme}:"
        if self.host_name is not None:
            result += "//"
            if self.user_info is not None:
                result += f"{self.user_info}@"
            result += idn.to_ascii(self.host_name)
            if self.port is not None:
                result += f":{self.port}"
        if self.path is not None:
            path: str = codec.encode_path(self.path, self.encode_charset)  # type: ignore[assignment]
            # After an authority the path must be empty or begin with "/".
            if self.host_name is not None and not path.startswith("/"):
                path = f"/{path}"
            # Without scheme or authority, a colon in the first segment would read back as a scheme.
            if self.scheme is None and self.host_name is None:
                first, slash, rest = path.partition("/")
                path = first.replace(":", "%3A") + slash + rest
            # Without an authority, a path starting with "//" would read back as one.
            if self.host_name is None and path.startswith("//"):
                path = f"/%2F{path[2:]}"
            result += path
        if self.query.entry_count() > 0:
            result += f"?{codec.encode_query(self.query.flatten(), self.encode_charset)}"
        if self.fragment is not None:
            result += f"#{codec.encode_fragment(self.fragment, self.encode_charset)}"
        return result

    def __str__(self: Self) -> str:
        return self.serialize()

    def _conforming(self: Self) -> str:
        serialized: str = self.serialize()
        try:
            return check_uri_reference(serialized)
        except ValueError as e:
            raise SyntaxConversionError(serialized) from e

    def to_split_result(self: Self) -> urllib.parse.SplitResult:
        """Raises SyntaxConversionError if the serialized URL is not an RFC 3986 URI-reference."""
        return urllib.parse.urlsplit(self._conforming())

    def to_parse_result(self: Self) -> urllib.parse.ParseResult:
        """Raises SyntaxConversionError if the serialized URL is not an RFC 3986 URI-reference."""
        return urllib.parse.urlparse(self._conforming())
