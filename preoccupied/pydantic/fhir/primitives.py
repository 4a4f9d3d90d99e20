# This library is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 3 of the License, or
# (at your option) any later version.
#
# This library is distributed in the hope that it will be useful, but
# WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the GNU
# General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this library; if not, see <http://www.gnu.org/licenses/>.

"""
preoccupied.pydantic.fhir.primitives

Pydantic-compatible FHIR temporal primitives.

FHIR dates and dateTimes allow partial precision (``2024``, ``2024-03``),
so these are kept as validated strings rather than converted into
``datetime`` objects. That way a value always encodes back exactly as it
was received.

Example:

```python
class Thing(BaseModel):
    when: DateTime

thing = Thing(when="2024-03")
assert thing.when.precision == "month"
```

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


import re
from datetime import date, datetime, time
from typing import Any, Callable, Pattern

from pydantic import GetJsonSchemaHandler
from pydantic.json_schema import JsonSchemaValue
from pydantic_core import core_schema


__all__ = (
    "Date",
    "DateTime",
    "Instant",
    "Time",
)


_YEAR = r"\d{4}"
_YEAR_MONTH = _YEAR + r"-(0[1-9]|1[0-2])"
_FULL_DATE = _YEAR_MONTH + r"-(0[1-9]|[12]\d|3[01])"
_CLOCK = r"([01]\d|2[0-3]):[0-5]\d:[0-5]\d(\.\d+)?"
_TIMESTAMP = _FULL_DATE + "T" + _CLOCK
_ZONE = r"(Z|[+-]((0\d|1[0-3]):[0-5]\d|14:00))"

_fraction = re.compile(r"\.(\d+)").sub


def _isoformat(text: str) -> str:
    """
    Rewrite a FHIR timestamp or clock time into a form
    ``fromisoformat`` accepts on every supported Python: a ``Z`` zone
    becomes ``+00:00`` and fractional seconds are cut or padded to
    microseconds.
    """

    text = _fraction(lambda found: "." + found.group(1)[:6].ljust(6, "0"), text)
    return text.replace("Z", "+00:00")


class _Primitive(str):
    """
    Shared validation and schema plumbing for string-backed primitives.
    """

    _pattern: Pattern[str]
    _expected: str


    @classmethod
    def parse(cls, value: Any) -> "_Primitive":
        """
        Validate ``value`` and return it as an instance of this primitive.
        """

        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise TypeError(f"{cls.__name__} requires a string, not {value!r}")
        if not cls._pattern.fullmatch(value):
            raise ValueError(
                f"invalid FHIR {cls.__name__} {value!r}"
                f" (expected {cls._expected})")
        return cls(value)


    @classmethod
    def __get_pydantic_core_schema__(
            cls,
            _source_type: Any,
            _handler: Callable[[Any], core_schema.CoreSchema]) -> core_schema.CoreSchema:

        from_str_schema = core_schema.chain_schema(
            [
                core_schema.str_schema(),
                core_schema.no_info_plain_validator_function(cls.parse),
            ],
        )

        return core_schema.json_or_python_schema(
            json_schema=from_str_schema,
            python_schema=core_schema.union_schema(
                [
                    core_schema.is_instance_schema(cls),
                    from_str_schema,
                ]
            ),
            serialization=core_schema.to_string_ser_schema(),
        )


    @classmethod
    def __get_pydantic_json_schema__(
            cls,
            _core_schema: core_schema.CoreSchema,
            handler: GetJsonSchemaHandler) -> JsonSchemaValue:

        schema = handler(core_schema.str_schema())
        schema["pattern"] = cls._pattern.pattern
        return schema


    def __repr__(self) -> str:
        return f"{type(self).__name__}({str.__repr__(self)})"


class Date(_Primitive):
    """
    A FHIR ``date``: YYYY, YYYY-MM or YYYY-MM-DD.
    """

    _pattern = re.compile(f"{_YEAR}|{_YEAR_MONTH}|{_FULL_DATE}")
    _expected = "YYYY, YYYY-MM, or YYYY-MM-DD"


    @property
    def precision(self) -> str:
        return ("year", "month", "day")[self.count("-")]


    def to_date(self) -> date:
        """
        Convert to a ``datetime.date``. Partial dates use the first day of
        the year or month.
        """

        parts = [int(part) for part in self.split("-")]
        parts += [1] * (3 - len(parts))
        return date(*parts)


class DateTime(_Primitive):
    """
    A FHIR ``dateTime``: a partial or full date, or a timestamp with an
    optional zone offset.
    """

    _pattern = re.compile(
        f"{_YEAR}|{_YEAR_MONTH}|{_FULL_DATE}|{_TIMESTAMP}{_ZONE}?")
    _expected = "YYYY, YYYY-MM, YYYY-MM-DD, or YYYY-MM-DDThh:mm:ss[.fff][zone]"


    @property
    def precision(self) -> str:
        if "T" in self:
            return "time"
        return ("year", "month", "day")[self.count("-")]


    def to_datetime(self) -> datetime:
        """
        Convert to a ``datetime.datetime``. Partial values use the first
        instant of their period.
        """

        if "T" in self:
            return datetime.fromisoformat(_isoformat(self))
        return datetime.combine(Date(self).to_date(), time())


class Instant(_Primitive):
    """
    A FHIR ``instant``: a full timestamp which always carries a zone.
    """

    _pattern = re.compile(f"{_TIMESTAMP}{_ZONE}")
    _expected = "YYYY-MM-DDThh:mm:ss[.fff] with Z or an offset"


    def to_datetime(self) -> datetime:
        return datetime.fromisoformat(_isoformat(self))


class Time(_Primitive):
    """
    A FHIR ``time`` of day: hh:mm:ss with optional fractional seconds.
    """

    _pattern = re.compile(_CLOCK)
    _expected = "hh:mm:ss[.fff]"


    def to_time(self) -> time:
        return time.fromisoformat(_isoformat(self))


# The end.
