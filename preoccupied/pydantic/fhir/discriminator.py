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
preoccupied.pydantic.fhir.discriminator

Field markers describing how a model's fields appear on the wire.

Use the :func:`Discriminator` factory to declare the ``resourceType`` field
on the resource façade, and :func:`Match` to declare the value a concrete
resource answers to. :func:`Required` marks fields the schema requires, and
:func:`Choice` declares a ``name[x]`` choice field along with its permitted
types.

Elements which belong to the summary view of a resource are flagged with
:func:`Summary`, or with ``summary=True`` on the other factories.

Example:

```python
class Resource(FHIRModel):
    resource_type: str = Discriminator()

class Condition(Resource):
    resource_type: Literal["Condition"] = Match("Condition")
    code: Optional[CodeableConcept] = Summary()
    subject: Optional[Reference] = Required(summary=True)
    onset: Optional[ChoiceValue] = Choice(dateTime=DateTime, Age=Age, string=str)
```

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Type, TypeVar

from pydantic import Field
from pydantic.fields import FieldInfo


__all__ = (
    "Choice",
    "ChoiceConfig",
    "Discriminator",
    "DiscriminatorConfig",
    "Match",
    "MatchConfig",
    "Required",
    "RequiredConfig",
    "Summary",
    "SummaryConfig",
    "find_marker",
)


M = TypeVar("M")


@dataclass(frozen=True)
class DiscriminatorConfig:
    """
    Marker metadata identifying the discriminator field of a façade.
    """

    metadata: Mapping[str, Any]


@dataclass(frozen=True)
class MatchConfig:
    """
    Marker metadata identifying the discriminator value of a concrete model.
    """

    value: Any


@dataclass(frozen=True)
class RequiredConfig:
    """
    Marker metadata for a field the schema requires (cardinality 1..1 or
    1..*).
    """


@dataclass(frozen=True)
class ChoiceConfig:
    """
    Marker metadata for a choice field. ``alternatives`` maps each
    permitted FHIR type name (eg. ``dateTime``, ``Quantity``) to the Python
    type holding values of that alternative, in declaration order.
    """

    alternatives: Mapping[str, Any]
    required: bool = False


@dataclass(frozen=True)
class SummaryConfig:
    """
    Marker metadata for an element which belongs to the resource summary,
    ie. the elements returned for ``_summary=true``.
    """


def _append_marker(info: FieldInfo, marker: Any) -> FieldInfo:
    metadata = list(info.metadata)
    metadata.append(marker)

    # annoying.
    object.__setattr__(info, "metadata", metadata)

    return info


def find_marker(info: FieldInfo, marker_type: Type[M]) -> Optional[M]:
    """
    Return the first marker of ``marker_type`` attached to ``info``, if
    any.
    """

    for item in info.metadata:
        if isinstance(item, marker_type):
            return item
    return None


def Discriminator(  # noqa: N802 - factory function intentionally PascalCase
        default: Any = ...,
        *,
        metadata: Optional[Mapping[str, Any]] = None,
        **field_kwargs: Any) -> FieldInfo:
    """
    Create a FieldInfo configured as the discriminator selector.
    """

    info = Field(default, **field_kwargs)

    config = DiscriminatorConfig(metadata=dict(metadata or {}))
    return _append_marker(info, config)


def Match(value: Any) -> FieldInfo:  # noqa: N802 - PascalCase factory
    """
    Declare the discriminator value for a concrete model. The field is
    frozen, so an instance can never change which variant it is.
    """

    info = Field(default=value, frozen=True)
    return _append_marker(info, MatchConfig(value=value))


def Required(  # noqa: N802 - PascalCase factory
        *,
        summary: bool = False,
        **field_kwargs: Any) -> FieldInfo:
    """
    Declare a field the schema requires.

    The field still defaults to empty at the model level; whether a missing
    value is an error is decided by the codec's ``required`` policy.
    """

    if "default_factory" not in field_kwargs:
        field_kwargs.setdefault("default", None)

    info = Field(**field_kwargs)
    _append_marker(info, RequiredConfig())
    if summary:
        _append_marker(info, SummaryConfig())
    return info


def Summary(**field_kwargs: Any) -> FieldInfo:  # noqa: N802 - PascalCase factory
    """
    Declare an optional field which is part of the resource summary.
    """

    if "default_factory" not in field_kwargs:
        field_kwargs.setdefault("default", None)

    info = Field(**field_kwargs)
    return _append_marker(info, SummaryConfig())


def Choice(  # noqa: N802 - PascalCase factory
        *,
        required: bool = False,
        summary: bool = False,
        **alternatives: Any) -> FieldInfo:
    """
    Declare a ``name[x]`` choice field. Each keyword names a permitted FHIR
    type and gives the Python type its values are held as.

    The field's value is a :class:`ChoiceValue` tagged with the chosen
    alternative's name.
    """

    if not alternatives:
        raise ValueError("A choice field requires at least one alternative.")

    config = ChoiceConfig(
        alternatives=dict(alternatives),
        required=required,
    )

    info = Field(default=None)
    markers: List[Any] = [config]
    if required:
        markers.append(RequiredConfig())
    if summary:
        markers.append(SummaryConfig())

    for marker in markers:
        _append_marker(info, marker)
    return info


# The end.
