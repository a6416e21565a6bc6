"""urlbuilder.errors
Every error raised by this package is a UrlError, which is also a ValueError.
"""

from typing import Self


class UrlError(ValueError):
    pass


class MalformedEscapeError(UrlError):
    """A "%" was not followed by two hexadecimal digits."""

    def __init__(self: Self, data: str, index: int) -> None:
        super().__init__(f"malformed percent-escape at index {index}: {data[index : index + 3]!r}")
        self.data: str = data
        self.index: int = index


class InvalidPortError(UrlError):
    def __init__(self: Self, port: object) -> None:
        super().__init__(f"invalid port: {port!r}")
        self.port: object = port


class UnknownCharsetError(UrlError, LookupError):
    def __init__(self: Self, charset: str) -> None:
        super().__init__(f"unknown charset: {charset!r}")
        self.charset: str = charset


class InvalidHostError(UrlError):
    """The host could not be converted between its Unicode and ASCII (IDNA) forms."""

    def __init__(self: Self, host: str) -> None:
        super().__init__(f"invalid host: {host!r}")
        self.host: str = host


class SyntaxConversionError(UrlError):
    """A serialized URL did not conform to the strict RFC 3986 grammar."""

    def __init__(self: Self, url: str) -> None:
        super().__init__(f"not an RFC 3986 URI-reference: {url!r}")
        self.url: str = url
