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
preoccupied.pydantic.fhir.options

Policy settings shared by the decoder and encoder.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


from dataclasses import dataclass
from typing import Literal, get_args

from typing_extensions import TypeAlias


__all__ = (
    "CodecOptions",
    "RequiredPolicy",
    "SummaryMode",
    "UnknownKeyPolicy",
)


RequiredPolicy: TypeAlias = Literal["strict", "lenient"]
UnknownKeyPolicy: TypeAlias = Literal["preserve", "drop"]
SummaryMode: TypeAlias = Literal["all", "true", "false", "text", "data"]


@dataclass(frozen=True)
class CodecOptions:
    """
    ``required`` decides what happens when a required field has no value:
    ``strict`` raises :class:`MissingRequiredField`, ``lenient`` logs a
    warning and leaves the field empty.

    ``unknown_keys`` decides what happens to wire keys no field claims:
    ``preserve`` keeps them on the instance so they are written back out on
    encode, ``drop`` discards them with a warning.

    ``summary`` selects which elements of a resource the encoder writes,
    after the FHIR ``_summary`` search parameter. ``all`` writes every
    element. ``true`` writes only the summary elements, and ``false`` only
    the elements outside the summary. ``text`` writes the narrative plus
    ``id`` and ``meta``, and ``data`` everything but the narrative. The
    ``resourceType`` is always written. Decoding ignores this setting.
    """

    required: RequiredPolicy = "strict"
    unknown_keys: UnknownKeyPolicy = "preserve"
    summary: SummaryMode = "all"


    def __post_init__(self) -> None:
        if self.required not in get_args(RequiredPolicy):
            raise ValueError(f"Invalid required policy: {self.required!r}")
        if self.unknown_keys not in get_args(UnknownKeyPolicy):
            raise ValueError(f"Invalid unknown_keys policy: {self.unknown_keys!r}")
        if self.summary not in get_args(SummaryMode):
            raise ValueError(f"Invalid summary mode: {self.summary!r}")


    @property
    def strict(self) -> bool:
        return self.required == "strict"


    @property
    def preserve(self) -> bool:
        return self.unknown_keys == "preserve"


DEFAULT_OPTIONS = CodecOptions()


# The end.
