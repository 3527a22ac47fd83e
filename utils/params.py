import re

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value) -> int | None:
    """Read a leading integer the way browsers and query strings tend to send it.

    "12", " 12abc" and 12 give 12; "abc", "" and None give None.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return None
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def parse_page(value) -> int:
    page = parse_int(value)
    if page is None or page <= 0:
        return 1
    return page
