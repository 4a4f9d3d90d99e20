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
preoccupied.pydantic.fhir.codec

Entry points for decoding and encoding single resources.

Example:

```python
patient = decode_resource(b'{"resourceType": "Patient", "gender": "female"}')
assert patient.resource_type == "Patient"

assert encode_resource(patient) == (
    b'{"resourceType":"Patient","gender":"female"}')
```

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


from dataclasses import replace
from typing import Optional, Union

from pydantic import BaseModel

from .decoder import ResourceDecoder
from .encoder import ResourceEncoder
from .options import DEFAULT_OPTIONS, CodecOptions
from .registry import ResourceRegistry, default_registry, register_variant
from .releases import registry_for


__all__ = (
    "decode_resource",
    "encode_resource",
    "encode_summary",
    "register_variant",
)


def _select_registry(
        registry: Optional[ResourceRegistry],
        fhir_version: Optional[str]) -> ResourceRegistry:

    if registry is not None:
        if fhir_version is not None:
            raise ValueError("Give either registry or fhir_version, not both.")
        return registry

    if fhir_version is not None:
        return registry_for(fhir_version)

    return default_registry()


def decode_resource(
        raw: Union[bytes, bytearray, str],
        *,
        registry: Optional[ResourceRegistry] = None,
        fhir_version: Optional[str] = None,
        options: Optional[CodecOptions] = None) -> BaseModel:
    """
    Decode one resource from a JSON payload, returning an instance of the
    model registered for its ``resourceType``.
    """

    decoder = ResourceDecoder(_select_registry(registry, fhir_version), options)
    return decoder.decode(raw)


def encode_resource(
        instance: BaseModel,
        *,
        registry: Optional[ResourceRegistry] = None,
        fhir_version: Optional[str] = None,
        options: Optional[CodecOptions] = None) -> bytes:
    """
    Encode one resource as JSON.
    """

    encoder = ResourceEncoder(_select_registry(registry, fhir_version), options)
    return encoder.encode(instance)


def encode_summary(
        instance: BaseModel,
        *,
        registry: Optional[ResourceRegistry] = None,
        fhir_version: Optional[str] = None,
        options: Optional[CodecOptions] = None) -> bytes:
    """
    Encode one resource keeping only its summary elements, as for a
    search with ``_summary=true``. Any other summary mode in ``options``
    is overridden.
    """

    options = replace(options or DEFAULT_OPTIONS, summary="true")
    return encode_resource(
        instance, registry=registry, fhir_version=fhir_version,
        options=options)


# The end.
