__version__ = "0.1"

from .codec import Component, DEFAULT_CHARSET, decode, decode_fragment, decode_path, encode, encode_fragment, encode_path, encode_query, encode_query_component, parse_query_string, resolve_charset
from .errors import InvalidHostError, InvalidPortError, MalformedEscapeError, SyntaxConversionError, UnknownCharsetError, UrlError
from .multimap import FlatEntries, ImmutableMultimap, Multimap
from .url import Url
