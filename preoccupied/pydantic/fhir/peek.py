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
preoccupied.pydantic.fhir.peek

Shallow discriminator scanning.

:func:`peek_discriminator` reads the ``resourceType`` of a JSON object
without parsing the rest of the payload. Only the top level of the object
is walked; nested objects, arrays and strings are skipped over by scanning
for their closing delimiters, and the scan stops as soon as the key is
found. A large Bundle whose ``resourceType`` comes first therefore costs
almost nothing to identify.

The scanner only checks as much syntax as it needs to find its way. Full
validation happens when the payload is parsed for real.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


import re
from typing import Optional, Tuple, Union

from pydantic_core import from_json

from .errors import MalformedPayload


__all__ = (
    "peek_discriminator",
)


_whitespace = re.compile(rb"[ \t\n\r]*").match
_structural = re.compile(rb'["\[\]{}]').search
_scalar = re.compile(rb"[^,}\]\s]+").match
_null = re.compile(rb"null(?=[\s,}]|$)").match


def _skip_ws(data: bytes, pos: int) -> int:
    return _whitespace(data, pos).end()


def _expect(data: bytes, pos: int, char: bytes) -> int:
    if data[pos:pos + 1] != char:
        found = data[pos:pos + 1].decode("utf-8", "replace") or "end of input"
        raise MalformedPayload(
            f"expected {char.decode()!r} at offset {pos}, found {found!r}")
    return pos + 1


def _string_end(data: bytes, start: int) -> int:
    """
    Offset of the quote closing a string whose body begins at ``start``.
    """

    while True:
        end = data.find(b'"', start)
        if end < 0:
            raise MalformedPayload("unterminated string")

        back = end - 1
        while back >= start and data[back] == 0x5C:
            back -= 1

        # an even number of backslashes leaves the quote unescaped
        if (end - 1 - back) % 2 == 0:
            return end
        start = end + 1


def _read_string(data: bytes, pos: int) -> Tuple[str, int]:
    end = _string_end(data, pos + 1)
    body = data[pos + 1:end]
    if b"\\" not in body:
        try:
            text = body.decode("utf-8")
        except UnicodeDecodeError as error:
            raise MalformedPayload(
                f"invalid UTF-8 in string at offset {pos}") from error
    else:
        try:
            text = from_json(data[pos:end + 1])
        except ValueError as error:
            raise MalformedPayload(str(error)) from error
    return text, end + 1


def _skip_value(data: bytes, pos: int) -> int:
    lead = data[pos:pos + 1]

    if lead == b'"':
        return _string_end(data, pos + 1) + 1

    if lead in (b"{", b"["):
        depth = 1
        pos += 1
        while depth:
            found = _structural(data, pos)
            if found is None:
                raise MalformedPayload(f"unterminated {lead.decode()!r}")
            char = found.group()
            if char == b'"':
                pos = _string_end(data, found.end()) + 1
                continue
            depth += 1 if char in (b"{", b"[") else -1
            pos = found.end()
        return pos

    found = _scalar(data, pos)
    if found is None:
        raise MalformedPayload(f"expected a value at offset {pos}")
    return found.end()


def peek_discriminator(
        raw: Union[bytes, bytearray, str],
        key: str = "resourceType") -> Optional[str]:
    """
    Return the value of ``key`` at the top level of the JSON object in
    ``raw``, or None if the object has no such key or the key is null.

    Raises :class:`MalformedPayload` if ``raw`` is not a JSON object, if the
    scan meets broken syntax or invalid UTF-8, or if the key's value is
    neither a string nor null.
    """

    if isinstance(raw, str):
        data = raw.encode("utf-8")
    elif isinstance(raw, (bytes, bytearray)):
        data = bytes(raw)
    else:
        raise TypeError(f"Expected bytes or str, not {type(raw).__name__}")

    pos = _skip_ws(data, 0)
    if data[pos:pos + 1] != b"{":
        raise MalformedPayload("payload is not a JSON object")
    pos = _skip_ws(data, pos + 1)

    if data[pos:pos + 1] == b"}":
        return None

    while True:
        _expect(data, pos, b'"')
        name, pos = _read_string(data, pos)

        pos = _skip_ws(data, pos)
        pos = _expect(data, pos, b":")
        pos = _skip_ws(data, pos)

        if name == key:
            if _null(data, pos):
                return None
            if data[pos:pos + 1] != b'"':
                raise MalformedPayload(f"{key!r} must be a string")
            value, _pos = _read_string(data, pos)
            return value

        pos = _skip_ws(data, _skip_value(data, pos))
        sep = data[pos:pos + 1]
        if sep == b"}":
            return None
        pos = _skip_ws(data, _expect(data, pos, b","))


# The end.
