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
preoccupied.pydantic.fhir.resources

The resource façade and the FHIR R4 resources in the catalogue.

:class:`Resource` declares the ``resourceType`` discriminator; each concrete
resource answers to one value of it via :func:`Match`. Validating a mapping
against the :class:`Resource` façade (directly, or through a field typed as
``Resource``) selects the concrete class from the default registry.

Example:

```python
patient = Resource.model_validate({"resourceType": "Patient", "active": True})
assert isinstance(patient, Patient)
```

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


from typing import Any, List, Literal, Mapping, Optional

from pydantic import Field, model_validator

from .choice import ChoiceValue
from .datatypes import (OPEN_TYPES, Address, Age, Annotation, Attachment,
                        BackboneElement, CodeableConcept, Coding, ContactPoint,
                        Dosage, Duration, Extensible, Extension, HumanName,
                        Identifier, Meta, Narrative, Period, Quantity, Range,
                        Ratio, Reference, SampledData, Timing)
from .discriminator import Choice, Discriminator, Match, Required, Summary
from .errors import MissingDiscriminator, UnknownVariant
from .model import FHIRModel
from .primitives import Date, DateTime, Instant, Time
from .schema import match_value_of


__all__ = (
    "AllergyIntolerance",
    "Basic",
    "Binary",
    "Bundle",
    "CATALOGUE",
    "Condition",
    "DomainResource",
    "Encounter",
    "FamilyMemberHistory",
    "Goal",
    "Immunization",
    "MedicationRequest",
    "Observation",
    "OperationOutcome",
    "Organization",
    "Parameters",
    "Patient",
    "Practitioner",
    "Procedure",
    "Resource",
)


class Resource(FHIRModel):
    """
    Façade for all resources. Concrete resources override
    ``resource_type`` with a :func:`Match` value.
    """

    resource_type: str = Discriminator(
        description="Identifier selecting the concrete resource model.",
    )
    id: Optional[str] = Summary()
    meta: Optional[Meta] = Summary()
    implicit_rules: Optional[str] = Summary()
    language: Optional[str] = None


    @model_validator(mode="wrap")
    @classmethod
    def _select_variant(cls, data: Any, handler: Any) -> Any:
        """
        Dispatch mappings given to a façade class to the registered
        concrete resource.
        """

        if match_value_of(cls) is not None or not isinstance(data, Mapping):
            return handler(data)

        identity = data.get("resourceType", data.get("resource_type"))
        if not identity:
            raise MissingDiscriminator("resourceType")

        # deferred, the registry is built from this module
        from .registry import default_registry

        descriptor = default_registry().lookup(identity)
        if descriptor is None or not issubclass(descriptor.model, cls):
            raise UnknownVariant(identity)
        return descriptor.model.model_validate(data)


class DomainResource(Extensible, Resource):
    """
    Façade for resources with narrative, contained resources and extensions.
    """

    text: Optional[Narrative] = None
    contained: List[Resource] = Field(default_factory=list)
    extension: List[Extension] = Field(default_factory=list)
    modifier_extension: List[Extension] = Field(default_factory=list)


    def find_contained(self, id: str) -> Optional[Resource]:
        """
        Return the contained resource with the given id, or None. Local
        references to contained resources are written ``#id``.
        """

        id = id[1:] if id.startswith("#") else id
        for resource in self.contained:
            if resource.id == id:
                return resource
        return None


    def add_contained(self, resource: Resource) -> None:
        """
        Append a resource to ``contained``, keeping existing order. Local
        references to it are written ``#id``.
        """

        if not isinstance(resource, Resource):
            raise TypeError(f"Expected a Resource, not {type(resource).__name__}")
        self.contained.append(resource)


class Basic(DomainResource):
    resource_type: Literal["Basic"] = Match("Basic")
    identifier: List[Identifier] = Summary(default_factory=list)
    code: Optional[CodeableConcept] = Required(summary=True)
    subject: Optional[Reference] = Summary()
    created: Optional[Date] = None
    author: Optional[Reference] = Summary()


class Binary(Resource):
    resource_type: Literal["Binary"] = Match("Binary")
    content_type: Optional[str] = Required(summary=True)
    security_context: Optional[Reference] = Summary()
    data: Optional[str] = None


class PatientContact(BackboneElement):
    relationship: List[CodeableConcept] = Field(default_factory=list)
    name: Optional[HumanName] = None
    telecom: List[ContactPoint] = Field(default_factory=list)
    address: Optional[Address] = None
    gender: Optional[str] = None
    organization: Optional[Reference] = None
    period: Optional[Period] = None


class PatientCommunication(BackboneElement):
    language: Optional[CodeableConcept] = Required()
    preferred: Optional[bool] = None


class PatientLink(BackboneElement):
    other: Optional[Reference] = Required()
    type: Optional[str] = Required()


class Patient(DomainResource):
    resource_type: Literal["Patient"] = Match("Patient")
    identifier: List[Identifier] = Summary(default_factory=list)
    active: Optional[bool] = Summary()
    name: List[HumanName] = Summary(default_factory=list)
    telecom: List[ContactPoint] = Summary(default_factory=list)
    gender: Optional[str] = Summary()
    birth_date: Optional[Date] = Summary()
    deceased: Optional[ChoiceValue] = Choice(
        summary=True,
        boolean=bool,
        dateTime=DateTime)
    address: List[Address] = Summary(default_factory=list)
    marital_status: Optional[CodeableConcept] = None
    multiple_birth: Optional[ChoiceValue] = Choice(
        boolean=bool,
        integer=int)
    photo: List[Attachment] = Field(default_factory=list)
    contact: List[PatientContact] = Field(default_factory=list)
    communication: List[PatientCommunication] = Field(default_factory=list)
    general_practitioner: List[Reference] = Field(default_factory=list)
    managing_organization: Optional[Reference] = Summary()
    link: List[PatientLink] = Summary(default_factory=list)


class PractitionerQualification(BackboneElement):
    identifier: List[Identifier] = Field(default_factory=list)
    code: Optional[CodeableConcept] = Required()
    period: Optional[Period] = None
    issuer: Optional[Reference] = None


class Practitioner(DomainResource):
    resource_type: Literal["Practitioner"] = Match("Practitioner")
    identifier: List[Identifier] = Summary(default_factory=list)
    active: Optional[bool] = Summary()
    name: List[HumanName] = Summary(default_factory=list)
    telecom: List[ContactPoint] = Summary(default_factory=list)
    address: List[Address] = Summary(default_factory=list)
    gender: Optional[str] = Summary()
    birth_date: Optional[Date] = Summary()
    photo: List[Attachment] = Field(default_factory=list)
    qualification: List[PractitionerQualification] = Field(default_factory=list)
    communication: List[CodeableConcept] = Field(default_factory=list)


class OrganizationContact(BackboneElement):
    purpose: Optional[CodeableConcept] = None
    name: Optional[HumanName] = None
    telecom: List[ContactPoint] = Field(default_factory=list)
    address: Optional[Address] = None


class Organization(DomainResource):
    resource_type: Literal["Organization"] = Match("Organization")
    identifier: List[Identifier] = Summary(default_factory=list)
    active: Optional[bool] = Summary()
    type: List[CodeableConcept] = Summary(default_factory=list)
    name: Optional[str] = Summary()
    alias: List[str] = Field(default_factory=list)
    telecom: List[ContactPoint] = Field(default_factory=list)
    address: List[Address] = Field(default_factory=list)
    part_of: Optional[Reference] = Summary()
    contact: List[OrganizationContact] = Field(default_factory=list)


class EncounterParticipant(BackboneElement):
    type: List[CodeableConcept] = Field(default_factory=list)
    period: Optional[Period] = None
    individual: Optional[Reference] = None


class EncounterDiagnosis(BackboneElement):
    condition: Optional[Reference] = Required()
    use: Optional[CodeableConcept] = None
    rank: Optional[int] = None


class EncounterLocation(BackboneElement):
    location: Optional[Reference] = Required()
    status: Optional[str] = None
    physical_type: Optional[CodeableConcept] = None
    period: Optional[Period] = None


class Encounter(DomainResource):
    resource_type: Literal["Encounter"] = Match("Encounter")
    identifier: List[Identifier] = Summary(default_factory=list)
    status: Optional[str] = Required(summary=True)
    class_: Optional[Coding] = Required(summary=True, alias="class")
    type: List[CodeableConcept] = Summary(default_factory=list)
    service_type: Optional[CodeableConcept] = Summary()
    priority: Optional[CodeableConcept] = None
    subject: Optional[Reference] = Summary()
    participant: List[EncounterParticipant] = Summary(default_factory=list)
    period: Optional[Period] = None
    length: Optional[Duration] = None
    reason_code: List[CodeableConcept] = Summary(default_factory=list)
    reason_reference: List[Reference] = Summary(default_factory=list)
    diagnosis: List[EncounterDiagnosis] = Summary(default_factory=list)
    location: List[EncounterLocation] = Field(default_factory=list)
    service_provider: Optional[Reference] = None
    part_of: Optional[Reference] = None


class ConditionStage(BackboneElement):
    summary: Optional[CodeableConcept] = None
    assessment: List[Reference] = Field(default_factory=list)
    type: Optional[CodeableConcept] = None


class ConditionEvidence(BackboneElement):
    code: List[CodeableConcept] = Field(default_factory=list)
    detail: List[Reference] = Field(default_factory=list)


class Condition(DomainResource):
    resource_type: Literal["Condition"] = Match("Condition")
    identifier: List[Identifier] = Summary(default_factory=list)
    clinical_status: Optional[CodeableConcept] = Summary()
    verification_status: Optional[CodeableConcept] = Summary()
    category: List[CodeableConcept] = Field(default_factory=list)
    severity: Optional[CodeableConcept] = None
    code: Optional[CodeableConcept] = Summary()
    body_site: List[CodeableConcept] = Summary(default_factory=list)
    subject: Optional[Reference] = Required(summary=True)
    encounter: Optional[Reference] = Summary()
    onset: Optional[ChoiceValue] = Choice(
        summary=True,
        dateTime=DateTime,
        Age=Age,
        Period=Period,
        Range=Range,
        string=str)
    abatement: Optional[ChoiceValue] = Choice(
        dateTime=DateTime,
        Age=Age,
        Period=Period,
        Range=Range,
        string=str)
    recorded_date: Optional[DateTime] = Summary()
    recorder: Optional[Reference] = Summary()
    asserter: Optional[Reference] = Summary()
    stage: List[ConditionStage] = Field(default_factory=list)
    evidence: List[ConditionEvidence] = Field(default_factory=list)
    note: List[Annotation] = Field(default_factory=list)


# Observation.value[x] and Observation.component.value[x]
OBSERVATION_VALUE_TYPES = {
    "Quantity": Quantity,
    "CodeableConcept": CodeableConcept,
    "string": str,
    "boolean": bool,
    "integer": int,
    "Range": Range,
    "Ratio": Ratio,
    "SampledData": SampledData,
    "time": Time,
    "dateTime": DateTime,
    "Period": Period,
}


class ObservationReferenceRange(BackboneElement):
    low: Optional[Quantity] = None
    high: Optional[Quantity] = None
    type: Optional[CodeableConcept] = None
    applies_to: List[CodeableConcept] = Field(default_factory=list)
    age: Optional[Range] = None
    text: Optional[str] = None


class ObservationComponent(BackboneElement):
    code: Optional[CodeableConcept] = Required()
    value: Optional[ChoiceValue] = Choice(**OBSERVATION_VALUE_TYPES)
    data_absent_reason: Optional[CodeableConcept] = None
    interpretation: List[CodeableConcept] = Field(default_factory=list)
    reference_range: List[ObservationReferenceRange] = Field(default_factory=list)


class Observation(DomainResource):
    resource_type: Literal["Observation"] = Match("Observation")
    identifier: List[Identifier] = Summary(default_factory=list)
    based_on: List[Reference] = Summary(default_factory=list)
    part_of: List[Reference] = Summary(default_factory=list)
    status: Optional[str] = Required(summary=True)
    category: List[CodeableConcept] = Field(default_factory=list)
    code: Optional[CodeableConcept] = Required(summary=True)
    subject: Optional[Reference] = Summary()
    focus: List[Reference] = Summary(default_factory=list)
    encounter: Optional[Reference] = Summary()
    effective: Optional[ChoiceValue] = Choice(
        summary=True,
        dateTime=DateTime,
        Period=Period,
        Timing=Timing,
        instant=Instant)
    issued: Optional[Instant] = Summary()
    performer: List[Reference] = Summary(default_factory=list)
    value: Optional[ChoiceValue] = Choice(summary=True, **OBSERVATION_VALUE_TYPES)
    data_absent_reason: Optional[CodeableConcept] = None
    interpretation: List[CodeableConcept] = Field(default_factory=list)
    note: List[Annotation] = Field(default_factory=list)
    body_site: Optional[CodeableConcept] = None
    method: Optional[CodeableConcept] = None
    specimen: Optional[Reference] = None
    device: Optional[Reference] = None
    reference_range: List[ObservationReferenceRange] = Field(default_factory=list)
    has_member: List[Reference] = Summary(default_factory=list)
    derived_from: List[Reference] = Summary(default_factory=list)
    component: List[ObservationComponent] = Summary(default_factory=list)


class AllergyIntoleranceReaction(BackboneElement):
    substance: Optional[CodeableConcept] = None
    manifestation: List[CodeableConcept] = Required(default_factory=list)
    description: Optional[str] = None
    onset: Optional[DateTime] = None
    severity: Optional[str] = None
    exposure_route: Optional[CodeableConcept] = None
    note: List[Annotation] = Field(default_factory=list)


class AllergyIntolerance(DomainResource):
    resource_type: Literal["AllergyIntolerance"] = Match("AllergyIntolerance")
    identifier: List[Identifier] = Summary(default_factory=list)
    clinical_status: Optional[CodeableConcept] = Summary()
    verification_status: Optional[CodeableConcept] = Summary()
    type: Optional[str] = Summary()
    category: List[str] = Summary(default_factory=list)
    criticality: Optional[str] = Summary()
    code: Optional[CodeableConcept] = Summary()
    patient: Optional[Reference] = Required(summary=True)
    encounter: Optional[Reference] = None
    onset: Optional[ChoiceValue] = Choice(
        dateTime=DateTime,
        Age=Age,
        Period=Period,
        Range=Range,
        string=str)
    recorded_date: Optional[DateTime] = None
    recorder: Optional[Reference] = None
    asserter: Optional[Reference] = None
    last_occurrence: Optional[DateTime] = None
    note: List[Annotation] = Field(default_factory=list)
    reaction: List[AllergyIntoleranceReaction] = Field(default_factory=list)


class ProcedurePerformer(BackboneElement):
    function: Optional[CodeableConcept] = None
    actor: Optional[Reference] = Required()
    on_behalf_of: Optional[Reference] = None


class Procedure(DomainResource):
    resource_type: Literal["Procedure"] = Match("Procedure")
    identifier: List[Identifier] = Summary(default_factory=list)
    instantiates_canonical: List[str] = Summary(default_factory=list)
    instantiates_uri: List[str] = Summary(default_factory=list)
    based_on: List[Reference] = Summary(default_factory=list)
    part_of: List[Reference] = Summary(default_factory=list)
    status: Optional[str] = Required(summary=True)
    status_reason: Optional[CodeableConcept] = Summary()
    category: Optional[CodeableConcept] = Summary()
    code: Optional[CodeableConcept] = Summary()
    subject: Optional[Reference] = Required(summary=True)
    encounter: Optional[Reference] = Summary()
    performed: Optional[ChoiceValue] = Choice(
        summary=True,
        dateTime=DateTime,
        Period=Period,
        string=str,
        Age=Age,
        Range=Range)
    recorder: Optional[Reference] = Summary()
    asserter: Optional[Reference] = Summary()
    performer: List[ProcedurePerformer] = Summary(default_factory=list)
    location: Optional[Reference] = Summary()
    reason_code: List[CodeableConcept] = Summary(default_factory=list)
    reason_reference: List[Reference] = Summary(default_factory=list)
    body_site: List[CodeableConcept] = Summary(default_factory=list)
    outcome: Optional[CodeableConcept] = Summary()
    report: List[Reference] = Field(default_factory=list)
    complication: List[CodeableConcept] = Field(default_factory=list)
    complication_detail: List[Reference] = Field(default_factory=list)
    follow_up: List[CodeableConcept] = Field(default_factory=list)
    note: List[Annotation] = Field(default_factory=list)
    used_reference: List[Reference] = Field(default_factory=list)
    used_code: List[CodeableConcept] = Field(default_factory=list)


class ImmunizationPerformer(BackboneElement):
    function: Optional[CodeableConcept] = None
    actor: Optional[Reference] = Required()


class ImmunizationProtocolApplied(BackboneElement):
    series: Optional[str] = None
    authority: Optional[Reference] = None
    target_disease: List[CodeableConcept] = Field(default_factory=list)
    dose_number: Optional[ChoiceValue] = Choice(
        required=True,
        positiveInt=int,
        string=str)
    series_doses: Optional[ChoiceValue] = Choice(
        positiveInt=int,
        string=str)


class Immunization(DomainResource):
    resource_type: Literal["Immunization"] = Match("Immunization")
    identifier: List[Identifier] = Summary(default_factory=list)
    status: Optional[str] = Required(summary=True)
    status_reason: Optional[CodeableConcept] = None
    vaccine_code: Optional[CodeableConcept] = Required(summary=True)
    patient: Optional[Reference] = Required(summary=True)
    encounter: Optional[Reference] = None
    occurrence: Optional[ChoiceValue] = Choice(
        summary=True,
        required=True,
        dateTime=DateTime,
        string=str)
    recorded: Optional[DateTime] = None
    primary_source: Optional[bool] = Summary()
    location: Optional[Reference] = None
    manufacturer: Optional[Reference] = None
    lot_number: Optional[str] = None
    expiration_date: Optional[Date] = None
    site: Optional[CodeableConcept] = None
    route: Optional[CodeableConcept] = None
    dose_quantity: Optional[Quantity] = None
    performer: List[ImmunizationPerformer] = Summary(default_factory=list)
    note: List[Annotation] = Field(default_factory=list)
    reason_code: List[CodeableConcept] = Field(default_factory=list)
    is_subpotent: Optional[bool] = Summary()
    protocol_applied: List[ImmunizationProtocolApplied] = Field(default_factory=list)


class MedicationRequestSubstitution(BackboneElement):
    allowed: Optional[ChoiceValue] = Choice(
        required=True,
        boolean=bool,
        CodeableConcept=CodeableConcept)
    reason: Optional[CodeableConcept] = None


class MedicationRequest(DomainResource):
    resource_type: Literal["MedicationRequest"] = Match("MedicationRequest")
    identifier: List[Identifier] = Summary(default_factory=list)
    status: Optional[str] = Required(summary=True)
    status_reason: Optional[CodeableConcept] = None
    intent: Optional[str] = Required(summary=True)
    category: List[CodeableConcept] = Field(default_factory=list)
    priority: Optional[str] = Summary()
    do_not_perform: Optional[bool] = Summary()
    reported: Optional[ChoiceValue] = Choice(
        summary=True,
        boolean=bool,
        Reference=Reference)
    medication: Optional[ChoiceValue] = Choice(
        summary=True,
        required=True,
        CodeableConcept=CodeableConcept,
        Reference=Reference)
    subject: Optional[Reference] = Required(summary=True)
    encounter: Optional[Reference] = None
    authored_on: Optional[DateTime] = Summary()
    requester: Optional[Reference] = Summary()
    reason_code: List[CodeableConcept] = Field(default_factory=list)
    reason_reference: List[Reference] = Field(default_factory=list)
    note: List[Annotation] = Field(default_factory=list)
    dosage_instruction: List[Dosage] = Field(default_factory=list)
    substitution: Optional[MedicationRequestSubstitution] = None


class FamilyMemberHistoryCondition(BackboneElement):
    code: Optional[CodeableConcept] = Required()
    outcome: Optional[CodeableConcept] = None
    contributed_to_death: Optional[bool] = None
    onset: Optional[ChoiceValue] = Choice(
        Age=Age,
        Range=Range,
        Period=Period,
        string=str)
    note: List[Annotation] = Field(default_factory=list)


class FamilyMemberHistory(DomainResource):
    resource_type: Literal["FamilyMemberHistory"] = Match("FamilyMemberHistory")
    identifier: List[Identifier] = Summary(default_factory=list)
    status: Optional[str] = Required(summary=True)
    patient: Optional[Reference] = Required(summary=True)
    date: Optional[DateTime] = Summary()
    name: Optional[str] = None
    relationship: Optional[CodeableConcept] = Required(summary=True)
    sex: Optional[CodeableConcept] = None
    born: Optional[ChoiceValue] = Choice(
        Period=Period,
        date=Date,
        string=str)
    age: Optional[ChoiceValue] = Choice(
        Age=Age,
        Range=Range,
        string=str)
    estimated_age: Optional[bool] = None
    deceased: Optional[ChoiceValue] = Choice(
        boolean=bool,
        Age=Age,
        Range=Range,
        date=Date,
        string=str)
    reason_code: List[CodeableConcept] = Field(default_factory=list)
    note: List[Annotation] = Field(default_factory=list)
    condition: List[FamilyMemberHistoryCondition] = Field(default_factory=list)


class GoalTarget(BackboneElement):
    measure: Optional[CodeableConcept] = None
    detail: Optional[ChoiceValue] = Choice(
        Quantity=Quantity,
        Range=Range,
        CodeableConcept=CodeableConcept,
        string=str,
        boolean=bool,
        integer=int,
        Ratio=Ratio)
    due: Optional[ChoiceValue] = Choice(
        date=Date,
        Duration=Duration)


class Goal(DomainResource):
    resource_type: Literal["Goal"] = Match("Goal")
    identifier: List[Identifier] = Summary(default_factory=list)
    lifecycle_status: Optional[str] = Required(summary=True)
    achievement_status: Optional[CodeableConcept] = Summary()
    category: List[CodeableConcept] = Summary(default_factory=list)
    priority: Optional[CodeableConcept] = Summary()
    description: Optional[CodeableConcept] = Required(summary=True)
    subject: Optional[Reference] = Required(summary=True)
    start: Optional[ChoiceValue] = Choice(
        summary=True,
        date=Date,
        CodeableConcept=CodeableConcept)
    target: List[GoalTarget] = Field(default_factory=list)
    status_date: Optional[Date] = Summary()
    status_reason: Optional[str] = None
    expressed_by: Optional[Reference] = Summary()
    addresses: List[Reference] = Summary(default_factory=list)
    note: List[Annotation] = Field(default_factory=list)
    outcome_code: List[CodeableConcept] = Field(default_factory=list)
    outcome_reference: List[Reference] = Field(default_factory=list)


class OperationOutcomeIssue(BackboneElement):
    severity: Optional[str] = Required()
    code: Optional[str] = Required()
    details: Optional[CodeableConcept] = None
    diagnostics: Optional[str] = None
    location: List[str] = Field(default_factory=list)
    expression: List[str] = Field(default_factory=list)


class OperationOutcome(DomainResource):
    resource_type: Literal["OperationOutcome"] = Match("OperationOutcome")
    issue: List[OperationOutcomeIssue] = Required(summary=True, default_factory=list)


class BundleLink(BackboneElement):
    relation: Optional[str] = Required()
    url: Optional[str] = Required()


class BundleEntrySearch(BackboneElement):
    mode: Optional[str] = None
    score: Optional[float] = None


class BundleEntryRequest(BackboneElement):
    method: Optional[str] = Required()
    url: Optional[str] = Required()
    if_none_match: Optional[str] = None
    if_modified_since: Optional[Instant] = None
    if_match: Optional[str] = None
    if_none_exist: Optional[str] = None


class BundleEntryResponse(BackboneElement):
    status: Optional[str] = Required()
    location: Optional[str] = None
    etag: Optional[str] = None
    last_modified: Optional[Instant] = None
    outcome: Optional[Resource] = None


class BundleEntry(BackboneElement):
    link: List[BundleLink] = Field(default_factory=list)
    full_url: Optional[str] = None
    resource: Optional[Resource] = None
    search: Optional[BundleEntrySearch] = None
    request: Optional[BundleEntryRequest] = None
    response: Optional[BundleEntryResponse] = None


class Bundle(Resource):
    """
    A container for a collection of resources, such as search results or a
    transaction.
    """

    resource_type: Literal["Bundle"] = Match("Bundle")
    identifier: Optional[Identifier] = Summary()
    type: Optional[str] = Required(summary=True)
    timestamp: Optional[Instant] = Summary()
    total: Optional[int] = Summary()
    link: List[BundleLink] = Summary(default_factory=list)
    entry: List[BundleEntry] = Summary(default_factory=list)


    def add_entry(
            self,
            resource: Resource,
            full_url: Optional[str] = None) -> BundleEntry:
        """
        Append a new entry holding ``resource`` and return it. A ``total``
        already present is incremented, otherwise it is set to the number
        of entries.
        """

        if not isinstance(resource, Resource):
            raise TypeError(f"Expected a Resource, not {type(resource).__name__}")

        entry = BundleEntry(full_url=full_url, resource=resource)
        self.entry.append(entry)

        if self.total is None:
            self.total = len(self.entry)
        else:
            self.total += 1
        return entry


    def resources(self) -> List[Resource]:
        """
        Every entry's resource, in entry order. Entries without a resource
        are skipped.
        """

        return [entry.resource for entry in self.entry if entry.resource is not None]


    def resources_of_type(self, resource_type: str) -> List[Resource]:
        return [res for res in self.resources() if res.resource_type == resource_type]


    def resource_types(self) -> List[str]:
        """
        The distinct resource types present, in order of first appearance.
        """

        found: List[str] = []
        for res in self.resources():
            if res.resource_type not in found:
                found.append(res.resource_type)
        return found


    def count_by_type(self, resource_type: str) -> int:
        return len(self.resources_of_type(resource_type))


    def find_resource(self, resource_type: str, id: str) -> Optional[Resource]:
        for res in self.resources_of_type(resource_type):
            if res.id == id:
                return res
        return None


    def resolve_reference(self, reference: str) -> Optional[Resource]:
        """
        Find the entry resource a reference points at. Accepts either an
        entry's ``fullUrl`` or a relative ``Type/id`` reference; a
        versioned reference (``Type/id/_history/2``) matches on type and id.
        """

        for entry in self.entry:
            if entry.full_url == reference and entry.resource is not None:
                return entry.resource

        parts = reference.split("/")
        if len(parts) >= 4 and parts[-2] == "_history":
            parts = parts[:-2]
        if len(parts) < 2:
            return None
        return self.find_resource(parts[-2], parts[-1])


    def link_url(self, relation: str) -> Optional[str]:
        """
        The url of the bundle link with the given relation, eg. ``next`` or
        ``self``.
        """

        for link in self.link:
            if link.relation == relation:
                return link.url
        return None


class ParametersParameter(BackboneElement):
    name: Optional[str] = Required()
    value: Optional[ChoiceValue] = Choice(**OPEN_TYPES)
    resource: Optional[Resource] = None
    part: List["ParametersParameter"] = Field(default_factory=list)


class Parameters(Resource):
    resource_type: Literal["Parameters"] = Match("Parameters")
    parameter: List[ParametersParameter] = Field(default_factory=list)


    def get(self, name: str) -> Optional[ParametersParameter]:
        for param in self.parameter:
            if param.name == name:
                return param
        return None


CATALOGUE = (
    AllergyIntolerance,
    Basic,
    Binary,
    Bundle,
    Condition,
    Encounter,
    FamilyMemberHistory,
    Goal,
    Immunization,
    MedicationRequest,
    Observation,
    OperationOutcome,
    Organization,
    Parameters,
    Patient,
    Practitioner,
    Procedure,
)


for _model in (Resource, DomainResource, ParametersParameter, *CATALOGUE):
    _model.model_rebuild()
del _model


# The end.
