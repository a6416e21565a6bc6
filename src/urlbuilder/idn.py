"""urlbuilder.idn
Conversion of host names between their Unicode and ASCII-compatible (IDNA) forms.
ACE ("xn--") labels are decoded and non-ASCII labels get the UTS #46 mapping. Other ASCII labels,
including IP addresses and reg-names idna would reject like "my_host", pass through as written.
"""

import idna

from .errors import InvalidHostError

_ACE_PREFIX: str = "xn--"


def _unicode_label(label: str) -> str:
    if label.lower().startswith(_ACE_PREFIX):
        return idna.ulabel(label)
    if not label.isascii():
        # The same UTS #46 mapping to_ascii applies, so the stored form is what reads back.
        return idna.uts46_remap(label, std3_rules=False)
    return label


def to_unicode(host: str) -> str:
    """e.g. to_unicode("xn--bcher-kva.example") == to_unicode("Bücher.example") == "bücher.example" """
    labels: list[str] = host.split(".")
    if host.isascii() and not any(label.lower().startswith(_ACE_PREFIX) for label in labels):
        return host
    try:
        return ".".join(_unicode_label(label) for label in labels)
    except UnicodeError as e:  # idna.IDNAError, or a bad punycode payload
        raise InvalidHostError(host) from e


def to_ascii(host: str) -> str:
    """e.g. to_ascii("bücher.example") == "xn--bcher-kva.example" """
    if host.isascii():
        return host
    try:
        return ".".join(
            label if label.isascii() else idna.alabel(idna.uts46_remap(label, std3_rules=False)).decode("ascii")
            for label in host.split(".")
        )
    except UnicodeError as e:  # idna.IDNAError, or a bad punycode payload
        raise InvalidHostError(host) from e
