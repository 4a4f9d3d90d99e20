"""
tests.test_summary
Summary mode encoding of resources.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


import pytest
from pydantic_core import from_json, to_json

from preoccupied.pydantic.fhir import (
    CodecOptions, MissingRequiredField, decode_resource, encode_resource,
    encode_summary, field_schema)
from preoccupied.pydantic.fhir.resources import Patient


PATIENT = {
    "resourceType": "Patient",
    "id": "p",
    "meta": {"versionId": "1"},
    "text": {"status": "generated", "div": "<div>Jane</div>"},
    "extension": [{"url": "http://example.org/a", "valueString": "x"}],
    "gender": "female",
    "birthDate": "1970",
    "deceasedBoolean": False,
    "maritalStatus": {"text": "married"},
    "contact": [{"name": {"family": "Doe"}}],
    "customFlag": True,
}


def _keys(*names):
    return {name: PATIENT[name] for name in ("resourceType",) + names}


@pytest.mark.parametrize(
    "mode, expected, note",
    [
        ("all", PATIENT, "everything"),
        ("true", _keys("id", "meta", "gender", "birthDate", "deceasedBoolean"),
         "summary elements only"),
        ("false", _keys("text", "extension", "maritalStatus", "contact",
                        "customFlag"),
         "elements outside the summary"),
        ("text", _keys("id", "meta", "text"), "narrative"),
        ("data", {k: v for k, v in PATIENT.items() if k != "text"},
         "all but the narrative"),
    ],
)
def test_summary_modes(mode, expected, note):
    """
    Each summary mode writes its own selection of elements.
    """

    found = decode_resource(to_json(PATIENT))
    encoded = encode_resource(found, options=CodecOptions(summary=mode))

    assert from_json(encoded) == expected, note
    assert from_json(encoded)["resourceType"] == "Patient", note


def test_encode_summary():
    """
    The summary entry point matches the ``true`` mode, whatever mode the
    options name.
    """

    found = decode_resource(to_json(PATIENT))
    expected = encode_resource(found, options=CodecOptions(summary="true"))

    assert encode_summary(found) == expected
    assert encode_summary(
        found, options=CodecOptions(summary="text")) == expected


def test_summary_nested_resources():
    """
    Resources inside a bundle are filtered as well, while the entries
    holding them are written whole.
    """

    payload = {
        "resourceType": "Bundle",
        "type": "searchset",
        "total": 1,
        "entry": [{"fullUrl": "http://h/Patient/p", "resource": PATIENT,
                   "search": {"mode": "match"}}],
    }

    found = decode_resource(to_json(payload))
    encoded = from_json(encode_summary(found))

    assert encoded["type"] == "searchset"
    assert encoded["total"] == 1

    entry = encoded["entry"][0]
    assert entry["fullUrl"] == "http://h/Patient/p"
    assert entry["search"] == {"mode": "match"}
    assert entry["resource"] == _keys(
        "id", "meta", "gender", "birthDate", "deceasedBoolean")


def test_summary_nested_elements_whole():
    """
    Datatypes are written in full, summary or not.
    """

    payload = {
        "resourceType": "Patient",
        "name": [{"family": "Doe", "given": ["Jane"], "period": {"start": "2000"}}],
    }

    found = decode_resource(to_json(payload))
    assert from_json(encode_summary(found)) == payload


def test_summary_skips_excluded_required():
    """
    Required fields left out by the summary mode are not checked.
    """

    raw = (b'{"resourceType": "Observation", "id": "o",'
           b' "text": {"status": "generated", "div": "<div/>"}}')

    found = decode_resource(raw, options=CodecOptions(required="lenient"))

    encoded = encode_resource(found, options=CodecOptions(summary="text"))
    assert from_json(encoded) == {
        "resourceType": "Observation", "id": "o",
        "text": {"status": "generated", "div": "<div/>"}}

    with pytest.raises(MissingRequiredField) as error:
        encode_resource(found, options=CodecOptions(summary="true"))
    assert error.value.field in ("status", "code")


def test_summary_names():
    """
    The schema lists the wire names of its summary elements.
    """

    names = field_schema(Patient).summary_names()

    for name in ("id", "meta", "implicitRules", "identifier", "gender",
                 "birthDate", "deceased[x]", "managingOrganization"):
        assert name in names

    for name in ("text", "contact", "maritalStatus", "multipleBirth[x]"):
        assert name not in names


def test_invalid_summary_mode():
    """
    Unknown summary modes are refused.
    """

    with pytest.raises(ValueError) as error:
        CodecOptions(summary="count")
    assert "Invalid summary mode" in str(error.value)


# The end.
