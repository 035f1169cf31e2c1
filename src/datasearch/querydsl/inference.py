"""Value inference for raw search values.

Search values arrive as untyped text. `ValueInferencer.infer` decides what a
value means by trying a fixed precedence of interpretations, first match wins:

1. ``None`` or ``"null"`` (any case) -> ``None``
2. text with an unescaped comma -> ``list`` of inferred parts
3. ``"true"`` / ``"false"`` (any case) -> ``bool``
4. ``2023-05-01T10:00:00.000Z`` timestamps -> UTC ``datetime``
5. numeric text -> ``int`` or ``float``
6. anything else -> ``str`` with ``\\,`` unescaped

A rule whose parser fails simply falls through to the next one, so inference
never raises. Compilers decide how much to trust the result.
"""

from __future__ import annotations

import math
import re
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, List, Optional, Tuple, Union

from ..constants import NUMBER_PATTERN, TIMESTAMP_FORMAT, TIMESTAMP_PATTERN
from ..settings import settings as api_settings
from ..types import Scalar, Value

__all__ = (
    "ValueInferencer",
    "value_inferencer",
    "format_value",
    "infer",
    "parse_boolean",
    "parse_number",
    "parse_timestamp",
    "split_values",
    "unescape",
)

_UNESCAPED_COMMA = re.compile(r"(?<!\\),")
_TIMESTAMP_RE = re.compile(TIMESTAMP_PATTERN)
_NUMBER_RE = re.compile(NUMBER_PATTERN)

Rule = Tuple[Callable[[str], Any], Callable[[str], Any]]


def split_values(text: str) -> List[str]:
    """Split on commas not preceded by a backslash.

    Trailing empty parts are dropped, so ``"a,b,"`` yields ``["a", "b"]``.
    Escapes are left in place; see `unescape`.
    """
    parts = _UNESCAPED_COMMA.split(text)
    while parts and parts[-1] == "":
        parts.pop()
    return parts


def unescape(text: str) -> str:
    """Turn escaped commas (``\\,``) back into plain commas."""
    return text.replace("\\,", ",")


def has_unescaped_comma(text: str) -> bool:
    return _UNESCAPED_COMMA.search(text) is not None


def parse_boolean(text: Optional[str]) -> Optional[bool]:
    """Return the boolean for ``true``/``false`` (any case), else None."""
    if text is None:
        return None
    lowered = text.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return None


def parse_timestamp(text: Optional[str]) -> Optional[datetime]:
    """Parse ``yyyy-MM-ddTHH:mm:ss.SSSZ`` into an aware UTC datetime.

    Returns None when the text does not have that shape or names an
    impossible date (e.g. month 13).
    """
    if text is None or not _TIMESTAMP_RE.fullmatch(text):
        return None
    try:
        return datetime.strptime(text, TIMESTAMP_FORMAT).replace(tzinfo=timezone.utc)
    except ValueError:
        return None


class ValueInferencer:
    """Infer typed values from raw search text.

    Number parsing honours the configured grouping and decimal separators.
    Instances hold no mutable state and can be shared between threads.

    Args:
        grouping_separator: Thousands separator accepted inside the integer part
        decimal_separator: Separator between integer and fractional digits
    """

    def __init__(self, grouping_separator: str = ",", decimal_separator: str = ".") -> None:
        self.grouping_separator = grouping_separator
        self.decimal_separator = decimal_separator
        self._number_prefix = re.compile(
            r"^(-?)(\d[\d{g}]*)(?:{d}(\d*))?".format(
                g=re.escape(grouping_separator),
                d=re.escape(decimal_separator),
            )
        )
        # Ordered (matches, parse) pairs; a parse result of None falls through
        self._rules: List[Rule] = [
            (has_unescaped_comma, self._infer_list),
            (lambda text: text.lower() in ("true", "false"), parse_boolean),
            (_TIMESTAMP_RE.fullmatch, parse_timestamp),
            (_NUMBER_RE.fullmatch, self.parse_number),
        ]

    @classmethod
    def from_settings(cls) -> "ValueInferencer":
        return cls(
            grouping_separator=api_settings.NUMBER_GROUPING_SEPARATOR,
            decimal_separator=api_settings.NUMBER_DECIMAL_SEPARATOR,
        )

    def infer(self, text: Optional[str]) -> Value:
        """Infer the typed value of ``text``. Never raises."""
        if text is None or text.lower() == "null":
            return None
        for matches, parse in self._rules:
            if not matches(text):
                continue
            value = parse(text)
            if value is not None:
                return value
        return unescape(text)

    def _infer_list(self, text: str) -> List[Scalar]:
        return [self.infer(part) for part in split_values(text)]

    def parse_number(self, text: Optional[str]) -> Optional[Union[int, float]]:
        """Leniently parse the longest numeric prefix of ``text``.

        Grouping separators in the integer part are ignored and parsing stops
        at the first character that cannot continue the number, so
        ``"1,234.50"`` gives ``1234.5`` and ``"12abc"`` gives ``12``.
        Integral results are returned as ``int``.

        Returns:
            The number, or None when ``text`` does not start with digits or
            names a value too large to convert (an overlong digit string or a
            float overflowing to infinity).
        """
        if text is None:
            return None
        match = self._number_prefix.match(text)
        if match is None:
            return None
        sign, integer_part, fraction = match.groups()
        digits = integer_part.replace(self.grouping_separator, "")
        try:
            if fraction and fraction.strip("0"):
                number = float(f"{sign}{digits}.{fraction}")
                return number if math.isfinite(number) else None
            return int(f"{sign}{digits}")
        except ValueError:
            # int() refuses digit strings beyond sys.get_int_max_str_digits()
            return None

    def format_value(self, value: Any) -> str:
        """Render a typed value back into search text.

        The output is what `infer` reads back to an equal value: ``null``,
        ``true``/``false``, millisecond UTC timestamps, plain decimal numbers,
        strings with commas escaped, and list elements joined by commas.

        Numbers always use ``.`` as the decimal point whatever separators the
        inferencer parses with; a ``,`` would read back as a list.
        """
        if value is None:
            return "null"
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, datetime):
            if value.tzinfo is not None:
                value = value.astimezone(timezone.utc)
            return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"
        if isinstance(value, int):
            return str(value)
        if isinstance(value, float):
            if value.is_integer():
                return str(int(value))
            return format(Decimal(repr(value)), "f")
        if isinstance(value, (list, tuple)):
            return ",".join(self.format_value(item) for item in value)
        return str(value).replace(",", "\\,")


value_inferencer = ValueInferencer.from_settings()


def infer(text: Optional[str]) -> Value:
    """Infer with the separators configured in settings."""
    return value_inferencer.infer(text)


def parse_number(text: Optional[str]) -> Optional[Union[int, float]]:
    return value_inferencer.parse_number(text)


def format_value(value: Any) -> str:
    return value_inferencer.format_value(value)
