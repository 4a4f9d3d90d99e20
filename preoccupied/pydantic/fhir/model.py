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
preoccupied.pydantic.fhir.model

Common base for every FHIR structure, element or resource.

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from .choice import ChoiceValue, coerce_choice
from .discriminator import ChoiceConfig, find_marker


__all__ = (
    "FHIRModel",
)


class FHIRModel(BaseModel):
    """
    Base model for FHIR structures.

    Python attributes are snake_case and are aliased to the camelCase names
    used on the wire. Keys which the model does not declare are kept as
    extras so that they survive a round trip.

    Choice fields may only hold a :class:`ChoiceValue` whose alternative is
    one the field permits. This is checked both at construction and on
    assignment.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        validate_assignment=True,
        extra="allow",
    )


    @model_validator(mode="after")
    def _check_choices(self) -> "FHIRModel":
        fields = type(self).model_fields

        # values are written straight into __dict__ so that assignment
        # validation is not re-entered
        updates: Dict[str, Any] = {}
        for name, info in fields.items():
            config = find_marker(info, ChoiceConfig)
            if config is None:
                continue

            value = self.__dict__.get(name)
            if value is None:
                continue

            if not isinstance(value, ChoiceValue):
                raise ValueError(
                    f"{type(self).__name__}.{name} requires a ChoiceValue,"
                    f" not {type(value).__name__}")

            checked = coerce_choice(info.alias or name, value, config.alternatives)
            if checked is not value:
                updates[name] = checked

        self.__dict__.update(updates)
        return self


# The end.
