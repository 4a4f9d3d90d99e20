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
preoccupied.pydantic.fhir.choice

Choice field values and their wire codec.

A FHIR choice field such as ``Condition.onset[x]`` holds exactly one value
out of a closed set of types. On the wire the chosen type is not tagged
inside the value; instead it is appended to the field name, so an onset
given as a dateTime appears as ``onsetDateTime`` and one given as an Age
appears as ``onsetAge``.

In a model the field holds a :class:`ChoiceValue`, which records both the
alternative's FHIR type name and the value itself.

Example:

```python
alternatives = {"dateTime": DateTime, "string": str}

key, found = decode_choice({"onsetString": "childhood"}, "onset", alternatives)
assert key == "onsetString"
assert found == ChoiceValue(type="string", value="childhood")

assert encode_choice("onset", found, alternatives) == ("onsetString", "childhood")
```

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


from functools import lru_cache
from typing import (Any, Callable, Collection, Iterable, List, Mapping,
                    Optional, Tuple)

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from .errors import AmbiguousChoice, MalformedPayload, UnknownChoiceAlternative


__all__ = (
    "ChoiceValue",
    "coerce_choice",
    "decode_choice",
    "encode_choice",
    "match_choice_keys",
    "type_suffix",
)


class ChoiceValue(BaseModel):
    """
    The resolved value of a choice field, tagged with the FHIR type name of
    the alternative it holds.
    """

    model_config = ConfigDict(frozen=True)

    type: str
    value: Any


    @property
    def suffix(self) -> str:
        """
        The wire suffix for this alternative, eg. ``DateTime``.
        """

        return type_suffix(self.type)


def type_suffix(type_name: str) -> str:
    """
    Capitalize a FHIR type name into its wire suffix. Only the first letter
    changes, so ``dateTime`` becomes ``DateTime`` and ``CodeableConcept``
    is left alone.
    """

    return type_name[:1].upper() + type_name[1:]


@lru_cache(maxsize=None)
def _adapter(target: Any) -> TypeAdapter:
    return TypeAdapter(target)


def validate_alternative(
        target: Any,
        raw: Any,
        path: Optional[str] = None) -> Any:
    """
    Validate ``raw`` as an instance of an alternative's Python type.
    """

    try:
        return _adapter(target).validate_python(raw)
    except ValidationError as error:
        raise MalformedPayload(str(error), path) from error


def coerce_choice(
        base: str,
        value: ChoiceValue,
        alternatives: Mapping[str, Any],
        path: Optional[str] = None) -> ChoiceValue:
    """
    Check that ``value`` holds one of the permitted ``alternatives`` and that
    its value has that alternative's Python type. Returns ``value`` itself
    when nothing needed converting.
    """

    target = alternatives.get(value.type)
    if target is None:
        raise UnknownChoiceAlternative(base, type_suffix(value.type), path)

    converted = validate_alternative(target, value.value, path)
    if converted is value.value:
        return value
    return ChoiceValue(type=value.type, value=converted)


def match_choice_keys(
        keys: Iterable[str],
        base: str,
        alternatives: Mapping[str, Any],
        reserved: Collection[str] = (),
        path: Optional[str] = None) -> List[Tuple[str, str]]:
    """
    Find every key which carries the choice field ``base``, returning
    ``(key, type_name)`` pairs in key order.

    A key counts as carrying the field when it is ``base`` followed by an
    upper-case suffix. Keys listed in ``reserved`` belong to other fields of
    the same structure and are skipped. A carrying key whose suffix names no
    permitted alternative raises :class:`UnknownChoiceAlternative`, as does
    the bare ``base`` with no suffix at all.
    """

    suffixes = {type_suffix(name): name for name in alternatives}
    size = len(base)

    found = []
    for key in keys:
        if key in reserved or not key.startswith(base):
            continue

        suffix = key[size:]
        if not suffix:
            # the bare name is never a wire key for a choice field
            raise UnknownChoiceAlternative(base, suffix, path)
        if not suffix[:1].isupper():
            continue

        name = suffixes.get(suffix)
        if name is None:
            raise UnknownChoiceAlternative(base, suffix, path)
        found.append((key, name))

    return found


def decode_choice(
        payload: Mapping[str, Any],
        base: str,
        alternatives: Mapping[str, Any],
        decode: Optional[Callable[[Any, Any], Any]] = None,
        reserved: Collection[str] = (),
        path: Optional[str] = None) -> Optional[Tuple[str, ChoiceValue]]:
    """
    Resolve the choice field ``base`` out of a decoded JSON object.

    Returns None when no key carries the field. Otherwise returns the wire
    key that was consumed and the resolved :class:`ChoiceValue`. The raw
    value is converted by ``decode(target_type, raw)``, which defaults to
    plain pydantic validation against the alternative's type.

    Two or more keys for the same field raise :class:`AmbiguousChoice`;
    picking one would silently discard the others.
    """

    matches = match_choice_keys(payload.keys(), base, alternatives, reserved, path)
    if not matches:
        return None

    if len(matches) > 1:
        suffixes = [key[len(base):] for key, _name in matches]
        raise AmbiguousChoice(base, suffixes, path)

    key, name = matches[0]
    target = alternatives[name]
    raw = payload[key]

    if decode is None:
        value = validate_alternative(target, raw, path)
    else:
        value = decode(target, raw)

    return key, ChoiceValue(type=name, value=value)


def encode_choice(
        base: str,
        value: ChoiceValue,
        alternatives: Optional[Mapping[str, Any]] = None,
        encode: Optional[Callable[[Any], Any]] = None,
        path: Optional[str] = None) -> Tuple[str, Any]:
    """
    Produce the single ``(key, value)`` wire pair for a choice field. The
    key is always ``base`` plus the suffix of the alternative ``value``
    holds.
    """

    if alternatives is not None and value.type not in alternatives:
        raise UnknownChoiceAlternative(base, value.suffix, path)

    key = base + value.suffix
    if encode is None:
        return key, value.value
    return key, encode(value.value)


# The end.
