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
preoccupied.pydantic.fhir.registry

Resource registry mapping ``resourceType`` identities to variant
descriptors.

A registry is filled once and then frozen. After freezing it is only ever
read, so a single registry may be shared by any number of concurrent
decoders and encoders without locking.

Example:

```python
registry = ResourceRegistry(Resource)
registry.register(Patient)
registry.freeze()

assert registry.lookup("Patient").model is Patient
assert registry.lookup("Unicorn") is None
```

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


import logging
from dataclasses import dataclass
from threading import Lock
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type

from pydantic import BaseModel

from .discriminator import DiscriminatorConfig, MatchConfig
from .errors import RegistryFrozenError
from .schema import FieldSchema, field_schema


__all__ = (
    "ResourceRegistry",
    "VariantDescriptor",
    "default_registry",
    "register_variant",
)


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VariantDescriptor:
    """
    Everything the codec needs to know about one concrete resource: its
    identity, the model used to construct it, and its wire schema.
    """

    identity: str
    model: Type[BaseModel]
    schema: FieldSchema


    @classmethod
    def for_model(
            cls,
            model: Type[BaseModel],
            identity: Optional[str] = None) -> "VariantDescriptor":
        """
        Build a descriptor for ``model``. The identity defaults to the
        model's Match value.
        """

        if identity is None:
            found = discover_matches(model)
            if len(found) != 1:
                raise ValueError(
                    f"{model.__name__} must declare exactly one Match field."
                )
            identity = found[0][1].value

        return cls(identity=identity, model=model, schema=field_schema(model))


    def new(self) -> BaseModel:
        """
        A fresh instance with every field empty.
        """

        return self.model()


def discover_matches(model: Type[BaseModel]) -> List[Tuple[str, MatchConfig]]:
    found = []
    for name, field_info in model.model_fields.items():
        for item in field_info.metadata:
            if isinstance(item, MatchConfig):
                found.append((name, item))
    return found


class ResourceRegistry:
    """
    Maps discriminator values to :class:`VariantDescriptor` entries for the
    concrete subclasses of a façade model.
    """

    def __init__(self, facade: Type[BaseModel]) -> None:
        self.facade = facade
        self._entries: Dict[str, VariantDescriptor] = {}
        self._frozen = False

        found = self.discover_discriminators()
        if len(found) != 1:
            raise ValueError(
                f"{self.facade.__name__} must declare exactly one Discriminator field."
            )
        self.discriminator_field, self.discriminator_config = found[0]

        info = self.facade.model_fields[self.discriminator_field]
        self.discriminator_key = info.alias or self.discriminator_field


    def discover_discriminators(self) -> List[Tuple[str, DiscriminatorConfig]]:
        found = []
        for name, field_info in self.facade.model_fields.items():
            for item in field_info.metadata:
                if isinstance(item, DiscriminatorConfig):
                    found.append((name, item))
        return found


    @property
    def frozen(self) -> bool:
        return self._frozen


    def freeze(self) -> None:
        """
        Disallow any further registration.
        """

        self._frozen = True


    def register(self, model: Type[BaseModel]) -> VariantDescriptor:
        """
        Register a concrete model under its Match value.
        """

        descriptor = VariantDescriptor.for_model(model)
        self.register_variant(descriptor)
        return descriptor


    def register_variant(self, descriptor: VariantDescriptor) -> None:
        if self._frozen:
            raise RegistryFrozenError(
                f"Cannot register {descriptor.identity!r}; the registry is frozen."
            )

        if not issubclass(descriptor.model, self.facade):
            raise TypeError(
                f"{descriptor.model.__name__} is not a subclass of"
                f" {self.facade.__name__}."
            )

        identity = descriptor.identity
        if identity in self._entries:
            existing = self._entries[identity].model
            raise ValueError(
                f"Duplicate selector value '{identity}' for"
                f" {descriptor.model.__name__}; "
                f"existing mapping points to {existing.__name__}."
            )

        self._entries[identity] = descriptor
        logger.debug("Registered %s as %r", descriptor.model.__name__, identity)


    def lookup(self, identity: str) -> Optional[VariantDescriptor]:
        return self._entries.get(identity)


    def new(self, identity: str) -> Optional[BaseModel]:
        """
        A fresh empty instance of the variant registered as ``identity``, or
        None if there is no such variant.
        """

        descriptor = self._entries.get(identity)
        return None if descriptor is None else descriptor.new()


    def identities(self) -> Tuple[str, ...]:
        return tuple(sorted(self._entries))


    def __contains__(self, identity: Any) -> bool:
        return identity in self._entries


    def __len__(self) -> int:
        return len(self._entries)


    def __repr__(self) -> str:
        state = "frozen" if self._frozen else "open"
        return f"<ResourceRegistry {self.facade.__name__} {len(self)} {state}>"


def build_registry(
        models: Iterable[Type[BaseModel]],
        extra: Iterable[VariantDescriptor] = ()) -> ResourceRegistry:
    """
    Create and freeze a registry holding ``models`` followed by any
    ``extra`` descriptors.
    """

    from .resources import Resource

    registry = ResourceRegistry(Resource)
    for model in models:
        registry.register(model)
    for descriptor in extra:
        registry.register_variant(descriptor)
    registry.freeze()
    return registry


_lock = Lock()
_default: Optional[ResourceRegistry] = None
_pending: List[VariantDescriptor] = []


def register_variant(descriptor: VariantDescriptor) -> None:
    """
    Queue an additional variant for the default registry. This must happen
    at start-up, before the default registry is first used; afterwards it
    raises :class:`RegistryFrozenError`.
    """

    with _lock:
        if _default is not None:
            raise RegistryFrozenError(
                f"Cannot register {descriptor.identity!r}; the default"
                " registry has already been built."
            )
        if any(item.identity == descriptor.identity for item in _pending):
            raise ValueError(
                f"Duplicate selector value '{descriptor.identity}' for"
                f" {descriptor.model.__name__}."
            )
        _pending.append(descriptor)


def default_registry() -> ResourceRegistry:
    """
    The frozen registry of the R4 catalogue plus any variants queued with
    :func:`register_variant`. Built on first use.
    """

    global _default

    registry = _default
    if registry is not None:
        return registry

    with _lock:
        if _default is None:
            from .resources import CATALOGUE

            _default = build_registry(CATALOGUE, _pending)
            logger.debug("Built default registry with %d variants", len(_default))
        return _default


# The end.
