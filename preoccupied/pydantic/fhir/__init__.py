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
preoccupied.pydantic.fhir
Namespace package segment providing polymorphic FHIR resource decoding
with Pydantic models.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


from .choice import ChoiceValue, decode_choice, encode_choice, type_suffix
from .codec import (
    decode_resource, encode_resource, encode_summary, register_variant)
from .datatypes import Element, Extension
from .decoder import ResourceDecoder
from .discriminator import Choice, Discriminator, Match, Required, Summary
from .encoder import ResourceEncoder
from .errors import (
    AmbiguousChoice, FHIRCodecError, MalformedPayload, MissingDiscriminator,
    MissingRequiredField, RegistryFrozenError, UnknownChoiceAlternative,
    UnknownVariant, UnsupportedRelease)
from .model import FHIRModel
from .options import CodecOptions, SummaryMode
from .peek import peek_discriminator
from .primitives import Date, DateTime, Instant, Time
from .registry import ResourceRegistry, VariantDescriptor, default_registry
from .releases import ReleaseMap, registry_for
from .resources import CATALOGUE, Bundle, DomainResource, Resource
from .schema import FieldKind, FieldSchema, FieldSpec, field_schema


__all__ = (
    "decode_resource",
    "encode_resource",
    "encode_summary",
    "register_variant",

    "ResourceDecoder",
    "ResourceEncoder",
    "CodecOptions",
    "SummaryMode",
    "peek_discriminator",

    "ResourceRegistry",
    "VariantDescriptor",
    "default_registry",

    "ReleaseMap",
    "registry_for",

    "Choice",
    "Discriminator",
    "Match",
    "Required",
    "Summary",

    "ChoiceValue",
    "decode_choice",
    "encode_choice",
    "type_suffix",

    "FieldKind",
    "FieldSchema",
    "FieldSpec",
    "field_schema",

    "FHIRModel",
    "Element",
    "Extension",
    "Resource",
    "DomainResource",
    "Bundle",
    "CATALOGUE",

    "Date",
    "DateTime",
    "Instant",
    "Time",

    "FHIRCodecError",
    "AmbiguousChoice",
    "MalformedPayload",
    "MissingDiscriminator",
    "MissingRequiredField",
    "UnknownChoiceAlternative",
    "UnknownVariant",
    "RegistryFrozenError",
    "UnsupportedRelease",
)


# The end.
