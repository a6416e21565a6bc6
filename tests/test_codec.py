import codecs

import pytest

from urlbuilder import (
    Component,
    MalformedEscapeError,
    UnknownCharsetError,
    decode,
    decode_fragment,
    decode_path,
    encode,
    encode_fragment,
    encode_path,
    encode_query,
    encode_query_component,
    parse_query_string,
    resolve_charset,
)


def test_plus_is_space_only_in_query():
    assert decode_path("a+b") == "a+b"
    assert decode_fragment("a+b") == "a+b"
    assert decode("a+b", "utf-8", Component.QUERY) == "a b"
    assert decode("a%2Bb", "utf-8", Component.QUERY) == "a+b"


@pytest.mark.parametrize("raw", ["%e2%82%ac", "%E2%82%AC", "%E2%82%ac"])
def test_decode_multibyte_hex_case_insensitive(raw):
    assert decode_path(raw) == "€"


def test_decode_uses_charset():
    assert decode_path("caf%E9", "latin-1") == "café"
    assert decode_path("caf%C3%A9", "utf-8") == "café"


def test_decode_accepts_codec_handle():
    assert decode_path("caf%E9", codecs.lookup("latin-1")) == "café"


def test_decode_invalid_bytes_are_replaced():
    assert decode_path("%FF", "utf-8") == "\ufffd"


def test_decode_none():
    assert decode_path(None) is None
    assert encode_path(None) is None


@pytest.mark.parametrize("raw,index", [("%zz", 0), ("abc%4", 3), ("a%", 1), ("%41%g1", 3)])
def test_decode_malformed_escape(raw, index):
    with pytest.raises(MalformedEscapeError) as ctx:
        decode_path(raw)
    assert ctx.value.index == index
    assert isinstance(ctx.value, ValueError)


def test_unknown_charset():
    with pytest.raises(UnknownCharsetError) as ctx:
        resolve_charset("no-such-charset")
    assert ctx.value.charset == "no-such-charset"
    assert isinstance(ctx.value, LookupError)


def test_bytes_codec_is_not_a_charset():
    with pytest.raises(UnknownCharsetError):
        encode_path("x", "base64")


def test_space_is_always_percent_20():
    for component in Component:
        assert encode(" ", "utf-8", component) == "%20"


def test_encode_path():
    assert encode_path("/a b/c") == "/a%20b/c"
    assert encode_path("a?b#c") == "a%3Fb%23c"
    assert encode_path("/user@host:1/a+b;c") == "/user@host:1/a+b;c"
    assert encode_path("100%") == "100%25"


def test_encode_query_component():
    assert encode_query_component("a&b=c+d") == "a%26b%3Dc%2Bd"
    assert encode_query_component("/x?y:z@w") == "/x?y:z@w"
    assert encode_query_component("#") == "%23"


def test_encode_fragment():
    assert encode_fragment("a#b?c/d") == "a%23b?c/d"
    assert encode_fragment("[x]") == "%5Bx%5D"


def test_encode_uses_charset_and_uppercase_hex():
    assert encode_path("€") == "%E2%82%AC"
    assert encode_path("café", "latin-1") == "caf%E9"


def test_encode_unencodable_character_is_replaced():
    assert encode_path("€", "ascii") == "%3F"


def test_stateful_charset_round_trips():
    encoded = encode_path("éé", "utf-16")
    assert decode_path(encoded, "utf-16") == "éé"


@pytest.mark.parametrize(
    "encoded,component",
    [
        ("/a%20b/%E2%82%AC", Component.PATH),
        ("x%26y%3Dz%2B%20", Component.QUERY),
        ("sec%201?x=y", Component.FRAGMENT),
    ],
)
def test_encode_decode_is_stable_on_canonical_input(encoded, component):
    assert encode(decode(encoded, "utf-8", component), "utf-8", component) == encoded


def test_parse_query_string_absent_and_empty_values():
    assert list(parse_query_string("a&b=").flatten()) == [("a", None), ("b", "")]


def test_parse_query_string_splits_on_first_equals():
    assert list(parse_query_string("k=v=w").flatten()) == [("k", "v=w")]


def test_parse_query_string_skips_empty_pairs():
    assert list(parse_query_string("a=1&&b=2&").flatten()) == [("a", "1"), ("b", "2")]


def test_parse_query_string_decodes_each_part():
    assert list(parse_query_string("q=a+b&%C3%A9=%26").flatten()) == [("q", "a b"), ("é", "&")]


def test_parse_query_string_empty():
    assert parse_query_string(None).entry_count() == 0
    assert parse_query_string("").entry_count() == 0


def test_parse_query_string_malformed():
    with pytest.raises(MalformedEscapeError):
        parse_query_string("a=%2")


def test_encode_query():
    assert encode_query([("a", None), ("b", ""), ("c d", "e&f")]) == "a&b=&c%20d=e%26f"
    assert encode_query([]) == ""
