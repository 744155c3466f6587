import re

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def parse_int(raw: str | int | None) -> int | None:
    """Parse the leading integer of ``raw`` ("12abc" -> 12); None if there is none."""
    if raw is None:
        return None
    if isinstance(raw, int):
        return raw
    match = _LEADING_INT.match(raw)
    return int(match.group(1)) if match else None


def page_bounds(limit: str | int | None, offset: str | int | None) -> slice | None:
    """
    Slice for a ``limit``/``offset`` pair taken from a query string.
    - No limit (None or empty) means no paging: returns None
    - A limit without a leading integer selects nothing
    - An unparsable offset counts as 0
    - Negative values count from the end, as Python slicing does
    """
    if limit is None or limit == "":
        return None
    limit_num = parse_int(limit)
    if limit_num is None:
        return slice(0, 0)
    offset_num = parse_int(offset) or 0
    return slice(offset_num, offset_num + limit_num)
