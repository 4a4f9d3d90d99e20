"""
tests.test_registry
Registration and lookup of resource variants.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


from types import SimpleNamespace
from typing import List, Literal, Optional

import pytest
from pydantic import Field, ValidationError

from preoccupied.pydantic.fhir import (
    CATALOGUE, Discriminator, DomainResource, FHIRModel, Match,
    RegistryFrozenError, Resource, ResourceDecoder, ResourceRegistry,
    UnknownVariant, VariantDescriptor, default_registry, field_schema,
    register_variant)
from preoccupied.pydantic.fhir.datatypes import Reference
from preoccupied.pydantic.fhir.resources import Basic, Observation, Patient


@pytest.fixture
def unicorns() -> SimpleNamespace:
    """
    Provide a namespace with a locally defined resource variant.
    """

    class Unicorn(DomainResource):
        """
        A resource type no FHIR release defines.
        """

        resource_type: Literal["Unicorn"] = Match("Unicorn")
        horn: Optional[str] = None
        friends: List[Reference] = Field(default_factory=list)

    registry = ResourceRegistry(Resource)
    registry.register(Patient)
    registry.register(Unicorn)
    registry.freeze()

    return SimpleNamespace(**locals())


def test_facade_requires_single_discriminator():
    """
    A registry façade must declare exactly one Discriminator field.
    """

    with pytest.raises(ValueError) as error:
        ResourceRegistry(Reference)
    assert "must declare exactly one Discriminator field" in str(error.value)

    class TwoHeaded(FHIRModel):
        """
        Façade declaring two discriminators.
        """

        first: str = Discriminator()
        second: str = Discriminator()

    with pytest.raises(ValueError) as error:
        ResourceRegistry(TwoHeaded)
    assert "must declare exactly one Discriminator field" in str(error.value)


def test_variant_requires_match():
    """
    Façades cannot be registered as variants.
    """

    registry = ResourceRegistry(Resource)
    with pytest.raises(ValueError) as error:
        registry.register(DomainResource)
    assert "must declare exactly one Match field" in str(error.value)


def test_duplicate_identity_rejected():
    """
    Each identity may be registered once.
    """

    registry = ResourceRegistry(Resource)
    registry.register(Patient)

    with pytest.raises(ValueError) as error:
        registry.register(Patient)
    assert "Duplicate selector value 'Patient'" in str(error.value)


def test_variant_must_extend_facade():
    """
    Only subclasses of the façade may be registered.
    """

    registry = ResourceRegistry(Resource)
    descriptor = VariantDescriptor("Reference", Reference, field_schema(Reference))
    with pytest.raises(TypeError):
        registry.register_variant(descriptor)


def test_frozen_registry_rejects_registration():
    """
    Registration ends when the registry is frozen.
    """

    registry = ResourceRegistry(Resource)
    registry.register(Basic)
    registry.freeze()

    assert registry.frozen
    with pytest.raises(RegistryFrozenError):
        registry.register(Patient)
    assert "Patient" not in registry


def test_lookup_and_new(unicorns):
    """
    Lookup finds descriptors; new builds empty instances.
    """

    registry = unicorns.registry

    descriptor = registry.lookup("Unicorn")
    assert descriptor.identity == "Unicorn"
    assert descriptor.model is unicorns.Unicorn
    assert descriptor.schema is field_schema(unicorns.Unicorn)

    assert registry.lookup("unicorn") is None
    assert registry.lookup("Observation") is None

    fresh = registry.new("Unicorn")
    assert isinstance(fresh, unicorns.Unicorn)
    assert fresh.resource_type == "Unicorn"
    assert fresh.horn is None
    assert fresh.friends == []

    assert registry.new("Pegasus") is None


def test_identities(unicorns):
    """
    A registry reports what it holds.
    """

    registry = unicorns.registry
    assert registry.identities() == ("Patient", "Unicorn")
    assert len(registry) == 2
    assert "Unicorn" in registry
    assert "Basic" not in registry
    assert registry.discriminator_key == "resourceType"


def test_custom_registry_decodes(unicorns):
    """
    A decoder uses whatever registry it is given.
    """

    decoder = ResourceDecoder(unicorns.registry)

    found = decoder.decode(b'{"resourceType": "Unicorn", "horn": "spiral"}')
    assert isinstance(found, unicorns.Unicorn)
    assert found.horn == "spiral"

    with pytest.raises(UnknownVariant):
        decoder.decode(b'{"resourceType": "Basic", "code": {"text": "x"}}')


def test_default_registry_catalogue():
    """
    The default registry holds the whole catalogue and is frozen.
    """

    registry = default_registry()
    assert registry is default_registry()
    assert registry.frozen
    assert len(registry) >= len(CATALOGUE)
    for model in CATALOGUE:
        assert registry.lookup(model.model_fields["resource_type"].default).model is model


def test_late_registration_rejected(unicorns):
    """
    Variants cannot be added once the default registry is in use.
    """

    default_registry()
    descriptor = VariantDescriptor.for_model(unicorns.Unicorn)

    with pytest.raises(RegistryFrozenError):
        register_variant(descriptor)
    assert "Unicorn" not in default_registry()


@pytest.mark.parametrize(
    "payload, expected, note",
    [
        ({"resourceType": "Patient", "active": True}, Patient, "patient"),
        ({"resourceType": "Observation", "status": "final"}, Observation,
         "observation"),
        ({"resource_type": "Basic"}, Basic, "python field name"),
    ],
)
def test_facade_dispatch(payload, expected, note):
    """
    Validating against the Resource façade yields the concrete variant.
    """

    found = Resource.model_validate(payload)
    assert type(found) is expected, note


@pytest.mark.parametrize(
    "payload, note",
    [
        ({"active": True}, "missing resourceType"),
        ({"resourceType": ""}, "empty resourceType"),
        ({"resourceType": "Unicorn"}, "unregistered resourceType"),
    ],
)
def test_facade_dispatch_failures(payload, note):
    """
    The façade rejects payloads it cannot dispatch.
    """

    with pytest.raises(ValidationError):
        Resource.model_validate(payload)


def test_domain_resource_facade_narrows():
    """
    A narrower façade only dispatches to its own subclasses.
    """

    assert isinstance(DomainResource.model_validate({"resourceType": "Patient"}),
                      Patient)

    with pytest.raises(ValidationError):
        DomainResource.model_validate({"resourceType": "Bundle", "type": "batch"})


# The end.
