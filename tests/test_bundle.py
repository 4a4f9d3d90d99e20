"""
tests.test_bundle
Convenience accessors on Bundle and contained resources.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


import pytest
from pydantic_core import from_json

from preoccupied.pydantic.fhir import decode_resource, encode_resource
from preoccupied.pydantic.fhir.datatypes import Reference
from preoccupied.pydantic.fhir.resources import (
    Bundle, Observation, Organization, Parameters, Patient)


SEARCHSET = b'''{
    "resourceType": "Bundle",
    "type": "searchset",
    "total": 3,
    "link": [
        {"relation": "self", "url": "http://h/fhir/Observation?page=2"},
        {"relation": "next", "url": "http://h/fhir/Observation?page=3"},
        {"relation": "previous", "url": "http://h/fhir/Observation?page=1"}
    ],
    "entry": [
        {"fullUrl": "http://h/fhir/Patient/p1",
         "resource": {"resourceType": "Patient", "id": "p1", "gender": "female"}},
        {"fullUrl": "http://h/fhir/Observation/o1",
         "resource": {"resourceType": "Observation", "id": "o1", "status": "final",
                      "code": {"text": "a"}, "subject": {"reference": "Patient/p1"}}},
        {"fullUrl": "urn:uuid:0c3151bd-1cbf-4d64-b04d-cd9187a4c6e0",
         "resource": {"resourceType": "Observation", "id": "o2", "status": "final",
                      "code": {"text": "b"}}},
        {"fullUrl": "http://h/fhir/OperationOutcome/warn",
         "search": {"mode": "outcome"}},
        {"resource": {"resourceType": "OperationOutcome",
                      "issue": [{"severity": "warning", "code": "processing"}]}}
    ]
}'''


@pytest.fixture
def bundle() -> Bundle:
    """
    Provide a decoded search result bundle.
    """

    return decode_resource(SEARCHSET)


def test_resources(bundle):
    """
    Entries without a resource are skipped.
    """

    found = bundle.resources()
    assert len(found) == 4
    assert [res.resource_type for res in found] == [
        "Patient", "Observation", "Observation", "OperationOutcome"]


def test_resources_of_type(bundle):
    """
    Resources can be filtered by type.
    """

    found = bundle.resources_of_type("Observation")
    assert [res.id for res in found] == ["o1", "o2"]
    assert all(isinstance(res, Observation) for res in found)

    assert bundle.resources_of_type("Encounter") == []


def test_resource_types(bundle):
    """
    Distinct types are listed in order of first appearance.
    """

    assert bundle.resource_types() == ["Patient", "Observation", "OperationOutcome"]


@pytest.mark.parametrize(
    "resource_type, count",
    [
        ("Patient", 1),
        ("Observation", 2),
        ("OperationOutcome", 1),
        ("Encounter", 0),
    ],
)
def test_count_by_type(bundle, resource_type, count):
    """
    Resources can be counted by type.
    """

    assert bundle.count_by_type(resource_type) == count


def test_find_resource(bundle):
    """
    Resources can be found by type and id.
    """

    assert bundle.find_resource("Observation", "o2").code.text == "b"
    assert bundle.find_resource("Patient", "o2") is None


@pytest.mark.parametrize(
    "reference, expected, note",
    [
        ("Patient/p1", "p1", "relative"),
        ("Observation/o1/_history/3", "o1", "versioned"),
        ("http://h/fhir/Observation/o1", "o1", "full url"),
        ("urn:uuid:0c3151bd-1cbf-4d64-b04d-cd9187a4c6e0", "o2", "uuid full url"),
        ("Patient/missing", None, "absent"),
        ("nonsense", None, "not a reference"),
    ],
)
def test_resolve_reference(bundle, reference, expected, note):
    """
    References resolve against the entries by full url or type and id.
    """

    found = bundle.resolve_reference(reference)
    if expected is None:
        assert found is None, note
    else:
        assert found.id == expected, note


def test_resolve_subject(bundle):
    """
    A resource's reference resolves to its target in the same bundle.
    """

    observation = bundle.find_resource("Observation", "o1")
    patient = bundle.resolve_reference(observation.subject.reference)
    assert isinstance(patient, Patient)
    assert patient.gender == "female"


def test_link_url(bundle):
    """
    Paging links are found by relation.
    """

    assert bundle.link_url("next") == "http://h/fhir/Observation?page=3"
    assert bundle.link_url("previous") == "http://h/fhir/Observation?page=1"
    assert bundle.link_url("last") is None


def test_empty_bundle():
    """
    A bundle with no entries has no resources.
    """

    bundle = Bundle(type="collection")
    assert bundle.resources() == []
    assert bundle.resource_types() == []
    assert bundle.link_url("self") is None


def test_parameters_get():
    """
    Parameters can be fetched by name.
    """

    found = decode_resource(
        b'{"resourceType": "Parameters", "parameter": ['
        b'{"name": "a", "valueString": "x"}, {"name": "b", "valueInteger": 1}]}')

    assert isinstance(found, Parameters)
    assert found.get("b").value.value == 1
    assert found.get("c") is None


def test_add_entry_sets_total():
    """
    Adding to a bundle without a total counts its entries.
    """

    bundle = Bundle(type="collection")
    assert bundle.total is None

    entry = bundle.add_entry(Patient(id="p1"), "http://h/fhir/Patient/p1")
    assert entry.full_url == "http://h/fhir/Patient/p1"
    assert entry.resource.id == "p1"
    assert bundle.total == 1

    bundle.add_entry(Observation(id="o1", status="final"))
    assert bundle.total == 2
    assert [res.id for res in bundle.resources()] == ["p1", "o1"]
    assert bundle.entry[1].full_url is None


def test_add_entry_increments_total(bundle):
    """
    An existing total is incremented rather than recounted.
    """

    assert len(bundle.entry) == 5
    assert bundle.total == 3

    bundle.add_entry(Patient(id="p2"))
    assert bundle.total == 4
    assert len(bundle.entry) == 6
    assert bundle.find_resource("Patient", "p2") is not None


def test_add_entry_encoded():
    """
    Added entries are written out with the bundle.
    """

    bundle = Bundle(type="collection")
    bundle.add_entry(Patient(id="p1", gender="male"), "urn:uuid:1")

    assert from_json(encode_resource(bundle)) == {
        "resourceType": "Bundle",
        "type": "collection",
        "total": 1,
        "entry": [{"fullUrl": "urn:uuid:1",
                   "resource": {"resourceType": "Patient", "id": "p1",
                                "gender": "male"}}],
    }


def test_add_entry_not_a_resource():
    """
    Only resources can be added as entries.
    """

    bundle = Bundle(type="collection")
    with pytest.raises(TypeError):
        bundle.add_entry({"resourceType": "Patient"})

    assert bundle.entry == []
    assert bundle.total is None


def test_add_contained():
    """
    Contained resources are appended in order and can be found again by
    local reference.
    """

    patient = Patient(id="p1")
    patient.add_contained(Organization(id="org1", name="First"))
    patient.add_contained(Organization(id="org2", name="Second"))

    assert [res.id for res in patient.contained] == ["org1", "org2"]
    assert patient.find_contained("#org2").name == "Second"

    found = from_json(encode_resource(patient))
    assert found["contained"] == [
        {"resourceType": "Organization", "id": "org1", "name": "First"},
        {"resourceType": "Organization", "id": "org2", "name": "Second"},
    ]


def test_add_contained_not_a_resource():
    """
    Only resources can be contained.
    """

    patient = Patient(id="p1")
    with pytest.raises(TypeError):
        patient.add_contained(Reference(reference="Organization/1"))
    assert patient.contained == []


# The end.
