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
preoccupied.pydantic.fhir.schema

Wire-level field schemas derived from FHIR models.

The decoder and encoder never look at pydantic field definitions directly.
Instead :func:`field_schema` reduces a model to an ordered tuple of
:class:`FieldSpec` entries saying, for each field, its wire name, what kind
of field it is, and what it holds. A schema is computed once per model and
shared read-only afterwards.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


import sys
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from types import UnionType
from typing import (Any, Dict, ForwardRef, Optional, Tuple, Type, Union,
                    get_args, get_origin)

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from .discriminator import (ChoiceConfig, DiscriminatorConfig, MatchConfig,
                            RequiredConfig, SummaryConfig, find_marker)


_UNION_TYPES = (Union, UnionType)


__all__ = (
    "FieldKind",
    "FieldSchema",
    "FieldSpec",
    "discriminator_of",
    "field_schema",
    "is_resource_model",
    "describe",
    "match_value_of",
)


EXTENSION_FIELDS = ("extension", "modifier_extension")


class FieldKind(Enum):
    REQUIRED_SCALAR = "required-scalar"
    OPTIONAL_SCALAR = "optional-scalar"
    REPEATED_SCALAR = "repeated-scalar"
    REQUIRED_CHOICE = "required-choice"
    OPTIONAL_CHOICE = "optional-choice"
    REPEATED_NESTED = "repeated-nested"
    EXTENSION_SLOT = "extension-slot"


@dataclass(frozen=True)
class FieldSpec:
    """
    How a single model field is carried on the wire.

    ``target`` is the type of one value: the alternative-less type for
    scalar fields, or the item type for repeated fields. It is None for
    choice fields, whose types come from ``choice.alternatives``.
    ``resource`` is True when values are themselves resources, which carry
    their own discriminator. ``summary`` is True for elements included in
    the summary view of a resource.
    """

    name: str
    wire_name: str
    kind: FieldKind
    target: Any
    required: bool = False
    resource: bool = False
    choice: Optional[ChoiceConfig] = None
    summary: bool = False


    @property
    def repeated(self) -> bool:
        return self.kind in (FieldKind.REPEATED_SCALAR,
                             FieldKind.REPEATED_NESTED,
                             FieldKind.EXTENSION_SLOT)


    @property
    def nested(self) -> bool:
        """
        True when values are FHIR structures rather than primitives.
        """

        return isinstance(self.target, type) and issubclass(self.target, BaseModel)


@dataclass(frozen=True)
class FieldSchema:
    """
    The ordered wire schema of one model.

    ``discriminator`` is set for resource models: the FieldSpec of the
    ``resourceType`` field, which is kept apart from ``fields``.
    """

    model: Type[BaseModel]
    fields: Tuple[FieldSpec, ...]
    discriminator: Optional[FieldSpec] = None


    def wire_names(self) -> Tuple[str, ...]:
        """
        Wire names of every non-choice field, including the discriminator.
        """

        names = [spec.wire_name for spec in self.fields if spec.choice is None]
        if self.discriminator is not None:
            names.insert(0, self.discriminator.wire_name)
        return tuple(names)


    def choices(self) -> Tuple[FieldSpec, ...]:
        return tuple(spec for spec in self.fields if spec.choice is not None)


    def summary_names(self) -> Tuple[str, ...]:
        """
        Wire names of the summary elements, choice fields shown as
        ``name[x]``.
        """

        return tuple(f"{spec.wire_name}[x]" if spec.choice else spec.wire_name
                     for spec in self.fields if spec.summary)


def _unwrap(annotation: Any) -> Tuple[Any, bool]:
    """
    Strip ``Optional`` and list wrappers from an annotation, returning the
    item type and whether the field is repeated.
    """

    origin = get_origin(annotation)
    if origin in _UNION_TYPES:
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return _unwrap(args[0])
        return annotation, False

    if origin in (list, tuple):
        args = get_args(annotation)
        return (args[0] if args else Any), True

    return annotation, False


def _is_resource(target: Any) -> bool:
    return isinstance(target, type) and issubclass(target, BaseModel) \
        and is_resource_model(target)


def discriminator_of(model: Type[BaseModel]) -> Optional[Tuple[str, FieldInfo]]:
    """
    Find the field carrying a Discriminator or Match marker on ``model``.
    """

    for name, info in model.model_fields.items():
        if find_marker(info, DiscriminatorConfig) or find_marker(info, MatchConfig):
            return name, info
    return None


@lru_cache(maxsize=None)
def match_value_of(model: Type[BaseModel]) -> Any:
    """
    The Match value declared by a concrete resource model, or None for
    façades and plain structures.
    """

    for info in model.model_fields.values():
        config = find_marker(info, MatchConfig)
        if config is not None:
            return config.value
    return None


def is_resource_model(model: Type[BaseModel]) -> bool:
    """
    True for models carrying a discriminator, ie. resources.
    """

    return discriminator_of(model) is not None


def _resolve(target: Any, model: Type[BaseModel]) -> Any:
    """
    Look up a forward reference left in a field annotation by name, in the
    modules defining ``model`` and its bases.
    """

    name = target if isinstance(target, str) else target.__forward_arg__
    for base in model.__mro__:
        found = getattr(sys.modules.get(base.__module__), name, None)
        if found is not None:
            return found
    raise TypeError(f"Unresolved annotation {name!r} on {model.__name__}")


def _field_spec(model: Type[BaseModel], name: str, info: FieldInfo) -> FieldSpec:
    wire_name = info.alias or name
    required = find_marker(info, RequiredConfig) is not None
    summary = find_marker(info, SummaryConfig) is not None

    choice = find_marker(info, ChoiceConfig)
    if choice is not None:
        kind = FieldKind.REQUIRED_CHOICE if choice.required else FieldKind.OPTIONAL_CHOICE
        return FieldSpec(name, wire_name, kind, None, required=choice.required,
                         choice=choice, summary=summary)

    annotation = info.annotation
    target, repeated = _unwrap(annotation)
    if isinstance(target, (str, ForwardRef)):
        target = _resolve(target, model)

    if repeated:
        if name in EXTENSION_FIELDS:
            kind = FieldKind.EXTENSION_SLOT
        elif isinstance(target, type) and issubclass(target, BaseModel):
            kind = FieldKind.REPEATED_NESTED
        else:
            kind = FieldKind.REPEATED_SCALAR
    elif required:
        kind = FieldKind.REQUIRED_SCALAR
    else:
        kind = FieldKind.OPTIONAL_SCALAR

    return FieldSpec(name, wire_name, kind, target, required=required,
                     resource=_is_resource(target), summary=summary)


@lru_cache(maxsize=None)
def field_schema(model: Type[BaseModel]) -> FieldSchema:
    """
    Compute the wire schema of ``model``. Results are cached, so every
    caller shares one immutable schema per model.
    """

    # resolves forward references left over from class creation; a no-op
    # for completed models
    model.model_rebuild()

    discriminator: Optional[FieldSpec] = None
    fields = []

    found = discriminator_of(model)
    marked = found[0] if found else None

    for name, info in model.model_fields.items():
        if name == marked:
            discriminator = FieldSpec(name, info.alias or name,
                                      FieldKind.REQUIRED_SCALAR, str,
                                      required=True)
        else:
            fields.append(_field_spec(model, name, info))

    return FieldSchema(model, tuple(fields), discriminator)


def describe(model: Type[BaseModel]) -> Dict[str, str]:
    """
    A ``{wire name: kind}`` summary of ``model``'s schema, choice fields
    shown as ``name[x]``.
    """

    schema = field_schema(model)
    result = {}
    if schema.discriminator is not None:
        result[schema.discriminator.wire_name] = "discriminator"
    for spec in schema.fields:
        key = f"{spec.wire_name}[x]" if spec.choice else spec.wire_name
        result[key] = spec.kind.value
    return result


# The end.
