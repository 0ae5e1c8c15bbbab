"""Phone number helpers.

Numbers are stored in international format. Local Ethiopian numbers
(`09...`, `07...` or the nine-digit form without the leading zero) are
rewritten to `+251...`.
"""

import re

_STRIP = re.compile(r"[\s()\-]")
_LOCAL_WITH_ZERO = re.compile(r"^0[79]\d{8}$")
_LOCAL_NO_ZERO = re.compile(r"^[79]\d{8}$")
_VALID = re.compile(r"^\+251[79]\d{8}$")


def normalize_phone(raw):
    """Return the international form of `raw`, or None for empty input."""
    if raw is None:
        return None
    s = _STRIP.sub("", str(raw).strip())
    if not s:
        return None
    if _LOCAL_WITH_ZERO.match(s):
        s = "+251" + s[1:]
    elif _LOCAL_NO_ZERO.match(s):
        s = "+251" + s
    if not s.startswith("+"):
        s = "+" + s
    return s


def is_valid_phone(raw) -> bool:
    """Only Ethio Telecom (+2519) and Safaricom (+2517) mobile numbers are accepted."""
    normalized = normalize_phone(raw)
    return bool(normalized and _VALID.match(normalized))
