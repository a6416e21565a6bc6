import pytest

from urlbuilder import InvalidHostError, InvalidPortError, MalformedEscapeError, UnknownCharsetError
from urlbuilder.parser import parse, parse_port, split_authority, split_url


def test_split_url_all_groups():
    parts = split_url("http://user@example.com:8080/a%20b?x=1&y=2#frag")
    assert parts.scheme == "http"
    assert parts.authority == "user@example.com:8080"
    assert parts.path == "/a%20b"
    assert parts.query == "x=1&y=2"
    assert parts.fragment == "frag"


@pytest.mark.parametrize("raw", [None, ""])
def test_split_url_empty(raw):
    assert tuple(split_url(raw)) == (None, None, "", None, None)


def test_split_url_without_authority():
    parts = split_url("mailto:joe@example.com")
    assert parts.scheme == "mailto"
    assert parts.authority is None
    assert parts.path == "joe@example.com"


def test_split_url_relative():
    parts = split_url("//example.com")
    assert parts.scheme is None
    assert parts.authority == "example.com"
    assert parts.path == ""


def test_split_url_fragment_takes_the_rest():
    parts = split_url("/p?q#f#g?h\nline")
    assert parts.path == "/p"
    assert parts.query == "q"
    assert parts.fragment == "f#g?h\nline"


def test_split_url_empty_query_and_fragment_are_present():
    parts = split_url("/p?#")
    assert parts.query == ""
    assert parts.fragment == ""


def test_split_authority():
    assert tuple(split_authority("user:pw@host:80")) == ("user:pw", "host", 80)
    assert tuple(split_authority("host")) == (None, "host", None)
    assert tuple(split_authority("")) == (None, "", None)


def test_split_authority_userinfo_runs_to_last_at():
    assert split_authority("a@b@host").userinfo == "a@b"


def test_split_authority_ip_literal():
    assert tuple(split_authority("[::1]:8080")) == (None, "[::1]", 8080)


def test_split_authority_empty_port_is_absent():
    assert split_authority("host:").port is None


def test_split_authority_converts_host_to_unicode():
    assert split_authority("xn--bcher-kva.example").host == "bücher.example"


def test_split_authority_keeps_non_idna_hosts():
    assert split_authority("my_host").host == "my_host"
    assert split_authority("Example.COM").host == "Example.COM"


def test_split_authority_bad_ace_label():
    with pytest.raises(InvalidHostError):
        split_authority("xn--ls8h.example")


@pytest.mark.parametrize("port", ["notaport", "70000", "-1", "8o", "٣"])
def test_parse_port_invalid(port):
    with pytest.raises(InvalidPortError):
        parse_port(port)


def test_parse_port():
    assert parse_port("0") == 0
    assert parse_port("08080") == 8080
    assert parse_port("65535") == 65535
    assert parse_port(None) is None


def test_parse_decodes_components():
    parsed = parse("http://example.com:8080/a%20b?x=1&y=2#frag%21")
    assert parsed.scheme == "http"
    assert parsed.host_name == "example.com"
    assert parsed.port == 8080
    assert parsed.path == "/a b"
    assert list(parsed.query.flatten()) == [("x", "1"), ("y", "2")]
    assert parsed.fragment == "frag!"


def test_parse_empty_path_is_absent():
    assert parse("http://example.com").path is None


def test_parse_with_charset():
    parsed = parse("/caf%E9?q=%E9#%E9", "latin-1")
    assert parsed.path == "/café"
    assert parsed.query.get_first("q") == "é"
    assert parsed.fragment == "é"


def test_parse_invalid_port():
    with pytest.raises(InvalidPortError):
        parse("http://h:notaport/")


def test_parse_malformed_escape_fails_whole_call():
    with pytest.raises(MalformedEscapeError):
        parse("http://h/ok?x=%zz")


def test_parse_unknown_charset():
    with pytest.raises(UnknownCharsetError):
        parse("http://h/", "no-such-charset")


def test_split_authority_maps_unicode_host():
    assert split_authority("Bücher.example").host == "bücher.example"
