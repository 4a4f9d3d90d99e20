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
preoccupied.pydantic.fhir.decoder

Discriminator-dispatched decoding of FHIR JSON into resource models.

Decoding happens in two phases. First the ``resourceType`` is read with a
shallow scan of the payload, and the registry is consulted. Only when the
type is known is the payload parsed in full and walked against the
variant's field schema. Nested structures are decoded with the schema of
the field holding them, except for fields holding resources, which are
dispatched again on their own ``resourceType``.

Example:

```python
decoder = ResourceDecoder()
patient = decoder.decode(b'{"resourceType": "Patient", "active": true}')
assert patient.active is True
```

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


import logging
from functools import partial
from typing import Any, Dict, Mapping, Optional, Type, Union

from pydantic import BaseModel, ValidationError
from pydantic_core import from_json

from .choice import decode_choice, validate_alternative
from .errors import (MalformedPayload, MissingDiscriminator,
                     MissingRequiredField, UnknownVariant)
from .options import DEFAULT_OPTIONS, CodecOptions
from .peek import peek_discriminator
from .registry import ResourceRegistry, VariantDescriptor, default_registry
from .schema import FieldSchema, FieldSpec, field_schema


__all__ = (
    "ResourceDecoder",
)


logger = logging.getLogger(__name__)


class ResourceDecoder:
    """
    Decodes JSON payloads into instances of the variants in ``registry``.

    A decoder holds no per-call state and may be shared between threads.
    """

    def __init__(
            self,
            registry: Optional[ResourceRegistry] = None,
            options: Optional[CodecOptions] = None) -> None:

        self.registry = registry if registry is not None else default_registry()
        self.options = options if options is not None else DEFAULT_OPTIONS


    def decode(self, raw: Union[bytes, bytearray, str]) -> BaseModel:
        """
        Decode a complete JSON payload.

        Raises :class:`MissingDiscriminator` if the top level object has no
        ``resourceType``, and :class:`UnknownVariant` if it names a type
        which is not registered. Neither check parses more than the top
        level of the payload.
        """

        key = self.registry.discriminator_key

        identity = peek_discriminator(raw, key)
        if not identity:
            raise MissingDiscriminator(key)

        descriptor = self.registry.lookup(identity)
        if descriptor is None:
            raise UnknownVariant(identity)

        try:
            data = from_json(raw)
        except ValueError as error:
            raise MalformedPayload(str(error)) from error

        return self._decode_resource(descriptor, data, identity)


    def decode_mapping(
            self,
            data: Mapping[str, Any],
            path: Optional[str] = None) -> BaseModel:
        """
        Decode a JSON object which has already been parsed.
        """

        if not isinstance(data, Mapping):
            raise MalformedPayload("expected a JSON object", path)

        key = self.registry.discriminator_key
        identity = data.get(key)
        if identity is None or identity == "":
            raise MissingDiscriminator(key, path)
        if not isinstance(identity, str):
            raise MalformedPayload(f"{key!r} must be a string", path)

        descriptor = self.registry.lookup(identity)
        if descriptor is None:
            raise UnknownVariant(identity, path)

        return self._decode_resource(descriptor, data, path or identity)


    def _decode_resource(
            self,
            descriptor: VariantDescriptor,
            data: Mapping[str, Any],
            path: str) -> BaseModel:

        logger.debug("Dispatching %s to %s", path, descriptor.model.__name__)

        values = self._decode_structure(descriptor.schema, data, path)
        return self._validate(descriptor.model, values, path)


    def _validate(
            self,
            model: Type[BaseModel],
            values: Dict[str, Any],
            path: str) -> BaseModel:

        # values are keyed by wire name, so a leftover key which happens to
        # be a python attribute name stays an extra
        try:
            return model.model_validate(values, by_alias=True, by_name=False)
        except ValidationError as error:
            raise MalformedPayload(str(error), path) from error


    def _missing(self, spec: FieldSpec, path: str) -> None:
        if self.options.strict:
            raise MissingRequiredField(spec.wire_name, path)
        logger.warning("Required field %r is missing at %s", spec.wire_name, path)


    def _decode_structure(
            self,
            schema: FieldSchema,
            data: Mapping[str, Any],
            path: str) -> Dict[str, Any]:
        """
        Convert one JSON object into the keyword values for ``schema``'s
        model. Values are keyed by wire name.
        """

        values: Dict[str, Any] = {}
        consumed = set()

        disc = schema.discriminator
        if disc is not None and disc.wire_name in data:
            values[disc.wire_name] = data[disc.wire_name]
            consumed.add(disc.wire_name)

        reserved = schema.wire_names()

        for spec in schema.fields:
            where = f"{path}.{spec.wire_name}"

            if spec.choice is not None:
                found = decode_choice(
                    data, spec.wire_name, spec.choice.alternatives,
                    decode=partial(self._decode_value, path=where),
                    reserved=reserved, path=path)

                if found is None:
                    if spec.required:
                        self._missing(spec, path)
                    continue

                wire_key, choice = found
                consumed.add(wire_key)
                values[spec.wire_name] = choice
                continue

            raw = data.get(spec.wire_name)
            if spec.wire_name in data:
                consumed.add(spec.wire_name)

            if raw is None or (spec.repeated and raw == []):
                if spec.required:
                    self._missing(spec, path)
                continue

            if spec.repeated:
                if not isinstance(raw, list):
                    raise MalformedPayload("expected a JSON array", where)
                values[spec.wire_name] = [
                    self._decode_value(spec.target, item, f"{where}[{index}]",
                                       spec.resource)
                    for index, item in enumerate(raw)]
            else:
                values[spec.wire_name] = self._decode_value(
                    spec.target, raw, where, spec.resource)

        leftover = [key for key in data if key not in consumed]
        if leftover:
            if self.options.preserve:
                for key in leftover:
                    values[key] = data[key]
            else:
                logger.warning("Dropping unknown keys at %s: %s",
                               path, ", ".join(leftover))

        return values


    def _decode_value(
            self,
            target: Any,
            raw: Any,
            path: str,
            resource: bool = False) -> Any:

        if resource:
            found = self.decode_mapping(raw, path)
            if not isinstance(found, target):
                raise UnknownVariant(found.resource_type, path)
            return found

        if isinstance(target, type) and issubclass(target, BaseModel):
            if not isinstance(raw, Mapping):
                raise MalformedPayload(
                    f"expected a JSON object for {target.__name__}", path)
            values = self._decode_structure(field_schema(target), raw, path)
            return self._validate(target, values, path)

        return validate_alternative(target, raw, path)


# The end.
