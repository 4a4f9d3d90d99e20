"""
tests.test_encoder
Encoding resource instances back into FHIR JSON.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


import logging
from typing import Literal

import pytest
from pydantic_core import from_json

from preoccupied.pydantic.fhir import (
    ChoiceValue, CodecOptions, Match, MissingRequiredField, ResourceEncoder,
    UnknownChoiceAlternative, UnknownVariant, encode_resource)
from preoccupied.pydantic.fhir.datatypes import (
    Age, CodeableConcept, Extension, HumanName, Reference)
from preoccupied.pydantic.fhir.resources import (
    Basic, Bundle, BundleEntry, Condition, Observation, Patient, Resource)


def test_basic_scenario():
    """
    Only populated fields are written, the discriminator first.
    """

    basic = Basic(code=CodeableConcept(text="x"))
    assert encode_resource(basic) == b'{"resourceType":"Basic","code":{"text":"x"}}'


def test_discriminator_first():
    """
    The resourceType key leads the object.
    """

    patient = Patient(id="1", gender="female", name=[HumanName(family="Chalmers")])
    encoded = ResourceEncoder().encode_mapping(patient)

    assert list(encoded) == ["resourceType", "id", "name", "gender"]
    assert encoded["name"] == [{"family": "Chalmers"}]


def test_choice_field_suffix():
    """
    Choice fields are written under their suffixed key.
    """

    condition = Condition(
        subject=Reference(reference="Patient/1"),
        onset=ChoiceValue(type="Age", value=Age(value=42, unit="a")))

    encoded = from_json(encode_resource(condition))
    assert encoded == {
        "resourceType": "Condition",
        "subject": {"reference": "Patient/1"},
        "onsetAge": {"value": 42, "unit": "a"},
    }


def test_choice_primitive_suffix():
    """
    Primitive alternatives are capitalized in the key.
    """

    patient = Patient(deceased=ChoiceValue(type="dateTime", value="2020-02-02"))
    encoded = ResourceEncoder().encode_mapping(patient)
    assert encoded == {"resourceType": "Patient", "deceasedDateTime": "2020-02-02"}
    assert type(encoded["deceasedDateTime"]) is str


def test_false_is_not_empty():
    """
    False and zero are values, not absences.
    """

    patient = Patient(active=False,
                      multiple_birth=ChoiceValue(type="integer", value=0))
    encoded = ResourceEncoder().encode_mapping(patient)
    assert encoded["active"] is False
    assert encoded["multipleBirthInteger"] == 0


def test_missing_required_strict():
    """
    Strict encoding refuses an instance missing a required field.
    """

    with pytest.raises(MissingRequiredField) as error:
        encode_resource(Observation(status="final"))
    assert error.value.field == "code"


def test_missing_required_lenient(caplog):
    """
    Lenient encoding writes what there is and warns.
    """

    options = CodecOptions(required="lenient")
    with caplog.at_level(logging.WARNING, logger="preoccupied.pydantic.fhir"):
        encoded = encode_resource(Observation(status="final"), options=options)

    assert from_json(encoded) == {"resourceType": "Observation", "status": "final"}
    assert "'code'" in caplog.text


def test_nested_resources():
    """
    Nested resources carry their own discriminator.
    """

    bundle = Bundle(type="collection", entry=[
        BundleEntry(full_url="urn:uuid:1", resource=Patient(id="1")),
        BundleEntry(resource=Basic(code=CodeableConcept(text="b"))),
    ])

    encoded = from_json(encode_resource(bundle))
    assert encoded["entry"] == [
        {"fullUrl": "urn:uuid:1",
         "resource": {"resourceType": "Patient", "id": "1"}},
        {"resource": {"resourceType": "Basic", "code": {"text": "b"}}},
    ]


def test_extensions_written_in_order():
    """
    Extensions keep the order they were added in.
    """

    patient = Patient()
    patient.add_extension(Extension(url="http://c",
                                    value=ChoiceValue(type="string", value="3")))
    patient.add_extension(Extension(url="http://a",
                                    value=ChoiceValue(type="boolean", value=True)))
    patient.add_extension(Extension(url="http://b", extension=[
        Extension(url="http://b1", value=ChoiceValue(type="integer", value=1))]))

    encoded = ResourceEncoder().encode_mapping(patient)
    assert encoded["extension"] == [
        {"url": "http://c", "valueString": "3"},
        {"url": "http://a", "valueBoolean": True},
        {"extension": [{"url": "http://b1", "valueInteger": 1}],
         "url": "http://b"},
    ]


def test_add_extension_type_checked():
    """
    Only Extension instances may be added.
    """

    with pytest.raises(TypeError):
        Patient().add_extension({"url": "http://a"})


def test_extras_written_last():
    """
    Preserved unknown keys follow the declared fields.
    """

    patient = Patient(gender="male", nickname="Bo")
    encoded = ResourceEncoder().encode_mapping(patient)
    assert list(encoded) == ["resourceType", "gender", "nickname"]

    options = CodecOptions(unknown_keys="drop")
    encoded = ResourceEncoder(options=options).encode_mapping(patient)
    assert "nickname" not in encoded


def test_unregistered_subclass_rejected():
    """
    Only the exact registered model may be encoded for an identity.
    """

    class SpecialPatient(Patient):
        """
        A subclass unknown to the registry.
        """

    with pytest.raises(UnknownVariant):
        encode_resource(SpecialPatient())


def test_unregistered_identity_rejected():
    """
    A resource type missing from the registry cannot be encoded.
    """

    class Unicorn(Resource):
        """
        A resource type no FHIR release defines.
        """

        resource_type: Literal["Unicorn"] = Match("Unicorn")

    with pytest.raises(UnknownVariant) as error:
        encode_resource(Unicorn())
    assert error.value.identity == "Unicorn"


def test_choice_checked_on_encode():
    """
    A choice value which bypassed validation is still checked on the way
    out.
    """

    condition = Condition(subject=Reference(reference="Patient/1"))
    condition.__dict__["onset"] = ChoiceValue(type="boolean", value=True)

    with pytest.raises(UnknownChoiceAlternative):
        encode_resource(condition)


# The end.
