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
preoccupied.pydantic.fhir.datatypes

FHIR R4 complex datatypes.

These are plain structures: they never carry a ``resourceType`` and are
decoded using the schema of whichever field holds them.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


from typing import Any, Dict, List, Optional

from pydantic import Field

from .choice import ChoiceValue
from .discriminator import Choice, Required
from .model import FHIRModel
from .primitives import Date, DateTime, Instant, Time


__all__ = (
    "Address",
    "Age",
    "Annotation",
    "Attachment",
    "BackboneElement",
    "CodeableConcept",
    "Coding",
    "ContactPoint",
    "Count",
    "DATATYPES",
    "Distance",
    "Dosage",
    "DosageDoseAndRate",
    "Duration",
    "Element",
    "Extensible",
    "Extension",
    "HumanName",
    "Identifier",
    "Meta",
    "Money",
    "Narrative",
    "OPEN_TYPES",
    "Period",
    "Quantity",
    "Range",
    "Ratio",
    "Reference",
    "SampledData",
    "Timing",
    "TimingRepeat",
)


class Extensible:
    """
    Helpers for structures carrying an ``extension`` list.
    """


    def get_extension(self, url: str) -> Optional["Extension"]:
        """
        Return the first extension with the given url, or None.
        """

        for ext in self.extension:
            if ext.url == url:
                return ext
        return None


    def get_extensions(self, url: str) -> List["Extension"]:
        """
        Return every extension with the given url, in order.
        """

        return [ext for ext in self.extension if ext.url == url]


    def add_extension(self, ext: "Extension") -> None:
        """
        Append an extension, keeping existing order.
        """

        if not isinstance(ext, Extension):
            raise TypeError(f"Expected an Extension, not {type(ext).__name__}")
        self.extension.append(ext)


class Element(Extensible, FHIRModel):
    """
    Base for all datatypes: an optional id plus extensions.
    """

    id: Optional[str] = None
    extension: List["Extension"] = Field(default_factory=list)


class BackboneElement(Element):
    """
    Base for the nested structures declared inside resources.
    """

    modifier_extension: List["Extension"] = Field(default_factory=list)


class Coding(Element):
    system: Optional[str] = None
    version: Optional[str] = None
    code: Optional[str] = None
    display: Optional[str] = None
    user_selected: Optional[bool] = None


class CodeableConcept(Element):
    coding: List[Coding] = Field(default_factory=list)
    text: Optional[str] = None


class Period(Element):
    start: Optional[DateTime] = None
    end: Optional[DateTime] = None


class Quantity(Element):
    value: Optional[float] = None
    comparator: Optional[str] = None
    unit: Optional[str] = None
    system: Optional[str] = None
    code: Optional[str] = None


class Age(Quantity):
    pass


class Count(Quantity):
    pass


class Distance(Quantity):
    pass


class Duration(Quantity):
    pass


class Money(Element):
    value: Optional[float] = None
    currency: Optional[str] = None


class Range(Element):
    low: Optional[Quantity] = None
    high: Optional[Quantity] = None


class Ratio(Element):
    numerator: Optional[Quantity] = None
    denominator: Optional[Quantity] = None


class Reference(Element):
    reference: Optional[str] = None
    type: Optional[str] = None
    identifier: Optional["Identifier"] = None
    display: Optional[str] = None


class Identifier(Element):
    use: Optional[str] = None
    type: Optional[CodeableConcept] = None
    system: Optional[str] = None
    value: Optional[str] = None
    period: Optional[Period] = None
    assigner: Optional[Reference] = None


class HumanName(Element):
    use: Optional[str] = None
    text: Optional[str] = None
    family: Optional[str] = None
    given: List[str] = Field(default_factory=list)
    prefix: List[str] = Field(default_factory=list)
    suffix: List[str] = Field(default_factory=list)
    period: Optional[Period] = None


class ContactPoint(Element):
    system: Optional[str] = None
    value: Optional[str] = None
    use: Optional[str] = None
    rank: Optional[int] = None
    period: Optional[Period] = None


class Address(Element):
    use: Optional[str] = None
    type: Optional[str] = None
    text: Optional[str] = None
    line: List[str] = Field(default_factory=list)
    city: Optional[str] = None
    district: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    period: Optional[Period] = None


class Attachment(Element):
    content_type: Optional[str] = None
    language: Optional[str] = None
    data: Optional[str] = None
    url: Optional[str] = None
    size: Optional[int] = None
    hash: Optional[str] = None
    title: Optional[str] = None
    creation: Optional[DateTime] = None


class Annotation(Element):
    author: Optional[ChoiceValue] = Choice(Reference=Reference, string=str)
    time: Optional[DateTime] = None
    text: Optional[str] = Required()


class Narrative(Element):
    status: Optional[str] = Required()
    div: Optional[str] = Required()


class Meta(Element):
    version_id: Optional[str] = None
    last_updated: Optional[Instant] = None
    source: Optional[str] = None
    profile: List[str] = Field(default_factory=list)
    security: List[Coding] = Field(default_factory=list)
    tag: List[Coding] = Field(default_factory=list)


class SampledData(Element):
    origin: Optional[Quantity] = Required()
    period: Optional[float] = Required()
    factor: Optional[float] = None
    lower_limit: Optional[float] = None
    upper_limit: Optional[float] = None
    dimensions: Optional[int] = Required()
    data: Optional[str] = None


class TimingRepeat(Element):
    bounds: Optional[ChoiceValue] = Choice(
        Duration=Duration,
        Range=Range,
        Period=Period)
    count: Optional[int] = None
    count_max: Optional[int] = None
    duration: Optional[float] = None
    duration_max: Optional[float] = None
    duration_unit: Optional[str] = None
    frequency: Optional[int] = None
    frequency_max: Optional[int] = None
    period: Optional[float] = None
    period_max: Optional[float] = None
    period_unit: Optional[str] = None
    day_of_week: List[str] = Field(default_factory=list)
    time_of_day: List[Time] = Field(default_factory=list)
    when: List[str] = Field(default_factory=list)
    offset: Optional[int] = None


class Timing(BackboneElement):
    event: List[DateTime] = Field(default_factory=list)
    repeat: Optional[TimingRepeat] = None
    code: Optional[CodeableConcept] = None


class DosageDoseAndRate(Element):
    type: Optional[CodeableConcept] = None
    dose: Optional[ChoiceValue] = Choice(
        Range=Range,
        Quantity=Quantity)
    rate: Optional[ChoiceValue] = Choice(
        Ratio=Ratio,
        Range=Range,
        Quantity=Quantity)


class Dosage(BackboneElement):
    sequence: Optional[int] = None
    text: Optional[str] = None
    additional_instruction: List[CodeableConcept] = Field(default_factory=list)
    patient_instruction: Optional[str] = None
    timing: Optional[Timing] = None
    as_needed: Optional[ChoiceValue] = Choice(
        boolean=bool,
        CodeableConcept=CodeableConcept)
    site: Optional[CodeableConcept] = None
    route: Optional[CodeableConcept] = None
    method: Optional[CodeableConcept] = None
    dose_and_rate: List[DosageDoseAndRate] = Field(default_factory=list)
    max_dose_per_period: Optional[Ratio] = None
    max_dose_per_administration: Optional[Quantity] = None
    max_dose_per_lifetime: Optional[Quantity] = None


# the open type list shared by Extension.value[x] and
# Parameters.parameter.value[x]
OPEN_TYPES: Dict[str, Any] = {
    "base64Binary": str,
    "boolean": bool,
    "canonical": str,
    "code": str,
    "date": Date,
    "dateTime": DateTime,
    "decimal": float,
    "id": str,
    "instant": Instant,
    "integer": int,
    "markdown": str,
    "oid": str,
    "positiveInt": int,
    "string": str,
    "time": Time,
    "unsignedInt": int,
    "uri": str,
    "url": str,
    "uuid": str,
    "Address": Address,
    "Age": Age,
    "Annotation": Annotation,
    "Attachment": Attachment,
    "CodeableConcept": CodeableConcept,
    "Coding": Coding,
    "ContactPoint": ContactPoint,
    "Count": Count,
    "Distance": Distance,
    "Duration": Duration,
    "HumanName": HumanName,
    "Identifier": Identifier,
    "Money": Money,
    "Period": Period,
    "Quantity": Quantity,
    "Range": Range,
    "Ratio": Ratio,
    "Reference": Reference,
    "SampledData": SampledData,
    "Timing": Timing,
    "Dosage": Dosage,
}


class Extension(Element):
    """
    An out-of-schema value identified by its ``url``. Extensions may nest,
    carrying either a value or further extensions.
    """

    url: Optional[str] = Required()
    value: Optional[ChoiceValue] = Choice(**OPEN_TYPES)


DATATYPES = (
    Element,
    BackboneElement,
    Coding,
    CodeableConcept,
    Period,
    Quantity,
    Age,
    Count,
    Distance,
    Duration,
    Money,
    Range,
    Ratio,
    Reference,
    Identifier,
    HumanName,
    ContactPoint,
    Address,
    Attachment,
    Annotation,
    Narrative,
    Meta,
    SampledData,
    TimingRepeat,
    Timing,
    DosageDoseAndRate,
    Dosage,
    Extension,
)


for _model in DATATYPES:
    _model.model_rebuild()
del _model


# The end.
