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
preoccupied.pydantic.fhir.encoder

Encoding of resource models back into FHIR JSON.

The ``resourceType`` is always written first. Fields follow in schema
order, choice fields under their suffixed key, and any keys preserved from
decoding come last. Empty values are left out entirely, as FHIR forbids
empty arrays and nulls.

With a ``summary`` mode other than ``all``, only some elements of each
resource are written. The mode selects among a resource's own fields.
Nested datatypes and backbone elements are written whole once selected,
while nested resources are filtered by the same mode.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


import logging
from functools import partial
from typing import Any, Dict, Optional

from pydantic import BaseModel
from pydantic_core import to_json

from .choice import encode_choice
from .errors import MissingDiscriminator, MissingRequiredField, UnknownVariant
from .options import DEFAULT_OPTIONS, CodecOptions
from .registry import ResourceRegistry, default_registry
from .schema import FieldSchema, FieldSpec, field_schema, is_resource_model


__all__ = (
    "ResourceEncoder",
)


logger = logging.getLogger(__name__)


# the narrative, plus enough to identify the resource
_TEXT_SUMMARY = ("id", "meta", "text")


def _in_summary(spec: FieldSpec, mode: str) -> bool:
    if mode == "true":
        return spec.summary
    if mode == "false":
        return not spec.summary
    if mode == "text":
        return spec.name in _TEXT_SUMMARY
    if mode == "data":
        return spec.name != "text"
    return True


class ResourceEncoder:
    """
    Encodes instances of the variants in ``registry`` as JSON.
    """

    def __init__(
            self,
            registry: Optional[ResourceRegistry] = None,
            options: Optional[CodecOptions] = None) -> None:

        self.registry = registry if registry is not None else default_registry()
        self.options = options if options is not None else DEFAULT_OPTIONS


    def encode(self, instance: BaseModel) -> bytes:
        return to_json(self.encode_mapping(instance))


    def encode_mapping(
            self,
            instance: BaseModel,
            path: Optional[str] = None) -> Dict[str, Any]:
        """
        Encode ``instance`` into a JSON-ready dict.

        Raises :class:`UnknownVariant` unless the instance is exactly the
        model registered for its ``resourceType``.
        """

        key = self.registry.discriminator_key
        identity = getattr(instance, self.registry.discriminator_field, None)
        if not identity:
            raise MissingDiscriminator(key, path)

        descriptor = self.registry.lookup(identity)
        if descriptor is None or type(instance) is not descriptor.model:
            raise UnknownVariant(identity, path)

        return self._encode_structure(descriptor.schema, instance, path or identity)


    def _missing(self, spec: FieldSpec, path: str) -> None:
        if self.options.strict:
            raise MissingRequiredField(spec.wire_name, path)
        logger.warning("Required field %r is empty at %s", spec.wire_name, path)


    def _encode_structure(
            self,
            schema: FieldSchema,
            instance: BaseModel,
            path: str) -> Dict[str, Any]:

        out: Dict[str, Any] = {}

        # only the fields of resources are subject to the summary mode
        mode = "all"

        disc = schema.discriminator
        if disc is not None:
            out[disc.wire_name] = getattr(instance, disc.name)
            mode = self.options.summary

        for spec in schema.fields:
            if not _in_summary(spec, mode):
                continue

            value = getattr(instance, spec.name)
            if value is None or (spec.repeated and not value):
                if spec.required:
                    self._missing(spec, path)
                continue

            where = f"{path}.{spec.wire_name}"

            if spec.choice is not None:
                wire_key, encoded = encode_choice(
                    spec.wire_name, value, spec.choice.alternatives,
                    encode=partial(self._encode_value, path=where),
                    path=path)
                out[wire_key] = encoded

            elif spec.repeated:
                out[spec.wire_name] = [
                    self._encode_value(item, f"{where}[{index}]")
                    for index, item in enumerate(value)]

            else:
                out[spec.wire_name] = self._encode_value(value, where)

        extra = instance.model_extra
        if extra and mode not in ("true", "text"):
            if self.options.preserve:
                for wire_key, value in extra.items():
                    out.setdefault(wire_key, value)
            else:
                logger.debug("Omitting unknown keys at %s: %s",
                             path, ", ".join(extra))

        return out


    def _encode_value(self, value: Any, path: str) -> Any:
        if isinstance(value, BaseModel):
            if is_resource_model(type(value)):
                return self.encode_mapping(value, path)
            return self._encode_structure(field_schema(type(value)), value, path)

        if isinstance(value, str):
            # FHIR primitives are str subclasses
            return str(value)

        return value


# The end.
