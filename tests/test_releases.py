"""
tests.test_releases
Selecting a registry by FHIR release version.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


import pytest
from semver import Version

from preoccupied.pydantic.fhir import (
    CodecOptions, ReleaseMap, ResourceRegistry, Resource, UnsupportedRelease,
    decode_resource, default_registry, encode_resource, registry_for)
from preoccupied.pydantic.fhir.resources import Basic, Patient


@pytest.fixture
def releases() -> ReleaseMap:
    """
    Provide a ReleaseMap with several releases, counting registry builds.
    """

    built = []

    def factory(name):
        def build():
            built.append(name)
            registry = ResourceRegistry(Resource)
            registry.register(Basic)
            registry.freeze()
            return registry
        return build

    mapping = ReleaseMap()
    mapping.set("4.0.0", factory("4.0.0"))
    mapping.set("4.0.1", factory("4.0.1"), name="R4")
    mapping.set("4.3.0", factory("4.3.0"), name="R4B")
    mapping.set("5.0.0", factory("5.0.0"), name="R5")
    mapping.built = built
    return mapping


@pytest.mark.parametrize(
    "selector, expected, note",
    [
        ("4.0.1", "4.0.1", "exact"),
        ("4.0.0", "4.0.0", "exact older patch"),
        ("4.0", "4.0.1", "newest patch of minor"),
        ("4.0.7", "4.0.1", "newest patch not above request"),
        ("4.3", "4.3.0", "other minor"),
        ("R4", "4.0.1", "release name"),
        ("r4b", "4.3.0", "release names ignore case"),
        (" 5.0.0 ", "5.0.0", "whitespace"),
        (Version(4, 0, 1), "4.0.1", "Version instance"),
    ],
)
def test_resolve(releases, selector, expected, note):
    """
    Requests resolve to the newest matching release of their minor version.
    """

    assert releases.resolve(selector) == Version.parse(expected), note


@pytest.mark.parametrize(
    "selector, note",
    [
        ("4.1", "unregistered minor"),
        ("3.0.2", "unregistered major"),
        ("4.2.0", "no release of that minor"),
        ("R6", "unknown name"),
        ("four", "not a version"),
        ("4", "major only"),
    ],
)
def test_resolve_unsupported(releases, selector, note):
    """
    Requests with no matching release are unsupported.
    """

    with pytest.raises(UnsupportedRelease):
        releases.resolve(selector)


def test_registry_built_once(releases):
    """
    Each release's registry is built on first use and then reused.
    """

    assert releases.built == []

    first = releases.registry("4.0")
    second = releases.registry("R4")
    assert first is second
    assert releases.built == ["4.0.1"]

    releases.registry("5.0.0")
    assert releases.built == ["4.0.1", "5.0.0"]


def test_versions_sorted(releases):
    """
    Registered versions are kept in order.
    """

    assert [str(v) for v in releases.versions()] == [
        "4.0.0", "4.0.1", "4.3.0", "5.0.0"]


def test_default_release_is_r4():
    """
    The built-in R4 release serves the default registry.
    """

    assert registry_for("4.0.1") is default_registry()
    assert registry_for("4.0") is default_registry()
    assert registry_for("R4") is default_registry()

    with pytest.raises(UnsupportedRelease):
        registry_for("5.0.0")


def test_codec_version_selection():
    """
    The codec entry points accept a FHIR version.
    """

    raw = b'{"resourceType":"Patient","active":true}'
    found = decode_resource(raw, fhir_version="4.0.1")
    assert isinstance(found, Patient)
    assert encode_resource(found, fhir_version="R4") == raw

    with pytest.raises(UnsupportedRelease):
        decode_resource(raw, fhir_version="5.0.0")


def test_codec_rejects_registry_and_version():
    """
    A registry and a version cannot both be given.
    """

    with pytest.raises(ValueError):
        decode_resource(b'{"resourceType":"Basic"}',
                        registry=default_registry(), fhir_version="4.0.1",
                        options=CodecOptions(required="lenient"))


def test_options_validated():
    """
    Policy names are checked.
    """

    with pytest.raises(ValueError):
        CodecOptions(required="sometimes")

    with pytest.raises(ValueError):
        CodecOptions(unknown_keys="ignore")


# The end.
