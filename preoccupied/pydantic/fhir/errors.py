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
preoccupied.pydantic.fhir.errors
Exceptions raised while decoding or encoding FHIR resources.

All decode/encode failures derive from :class:`FHIRCodecError`, which is
itself a ``ValueError`` so callers that only care about "bad input" can
catch that.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


from typing import Optional, Sequence


__all__ = (
    "AmbiguousChoice",
    "FHIRCodecError",
    "MalformedPayload",
    "MissingDiscriminator",
    "MissingRequiredField",
    "RegistryFrozenError",
    "UnknownChoiceAlternative",
    "UnknownVariant",
    "UnsupportedRelease",
)


class FHIRCodecError(ValueError):
    """
    Base class for every decode and encode failure.

    ``path`` is the dotted location inside the payload where the problem
    was found, eg. ``Bundle.entry[2].resource``. It may be None when the
    failure concerns the payload as a whole.
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        if path:
            message = f"{path}: {message}"
        super().__init__(message)
        self.path = path


class MalformedPayload(FHIRCodecError):
    """
    The payload is not well-formed JSON, or a value does not have the
    shape its field requires.
    """


class MissingDiscriminator(FHIRCodecError):
    """
    The ``resourceType`` field is absent or empty.
    """

    def __init__(self, key: str, path: Optional[str] = None) -> None:
        super().__init__(f"missing {key!r} field", path)
        self.key = key


class UnknownVariant(FHIRCodecError):
    """
    The discriminator names a resource type which is not registered.
    """

    def __init__(self, identity: str, path: Optional[str] = None) -> None:
        super().__init__(f"unknown resource type {identity!r}", path)
        self.identity = identity


class MissingRequiredField(FHIRCodecError):
    """
    A required field or required choice field has no value.
    """

    def __init__(self, field: str, path: Optional[str] = None) -> None:
        super().__init__(f"required field {field!r} is missing", path)
        self.field = field


class AmbiguousChoice(FHIRCodecError):
    """
    More than one wire key was supplied for a single choice field, eg. both
    ``onsetDateTime`` and ``onsetAge``.
    """

    def __init__(
            self,
            base: str,
            suffixes: Sequence[str],
            path: Optional[str] = None) -> None:

        joined = ", ".join(base + suffix for suffix in suffixes)
        super().__init__(
            f"choice field '{base}[x]' has more than one value: {joined}",
            path)
        self.base = base
        self.suffixes = tuple(suffixes)


class UnknownChoiceAlternative(MalformedPayload):
    """
    A wire key carries a choice field's base name, but its type suffix is
    not one of the field's permitted types.
    """

    def __init__(
            self,
            base: str,
            suffix: str,
            path: Optional[str] = None) -> None:

        if suffix:
            message = (f"{suffix!r} is not a permitted type for choice field"
                       f" '{base}[x]'")
        else:
            message = f"choice field '{base}[x]' is missing its type suffix"

        super().__init__(message, path)
        self.base = base
        self.suffix = suffix


class RegistryFrozenError(RuntimeError):
    """
    A variant was registered after the registry was frozen.
    """


class UnsupportedRelease(ValueError):
    """
    No catalogue is registered for the requested FHIR version.
    """


# The end.
