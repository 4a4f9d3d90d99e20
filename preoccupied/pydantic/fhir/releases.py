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
preoccupied.pydantic.fhir.releases

Selection of a resource registry by FHIR release.

Releases are keyed by semantic version. A requested version resolves to
the newest registered release sharing its major and minor version and not
newer than the request. A request without a patch level accepts any patch
of that minor version.

Example:

```python
releases = ReleaseMap()
releases.set("4.0.1", default_registry, name="R4")

assert releases.resolve("4.0") == Version(4, 0, 1)
assert releases.resolve("R4") == Version(4, 0, 1)
assert releases.registry("4.0.1") is default_registry()
```

:author: Christopher O'Brien <obriencj@preoccupied.net>
:license: GNU General Public License v3
"""


import logging
import re
from threading import Lock
from typing import Callable, Dict, List, Optional, Union

from semver import Version

from .errors import UnsupportedRelease
from .registry import ResourceRegistry, default_registry


__all__ = (
    "R4",
    "ReleaseMap",
    "registry_for",
)


logger = logging.getLogger(__name__)


R4 = "4.0.1"


version_like = re.compile(r"^(\d+)\.(\d+)(?:\.(\d+))?$").match


RegistryFactory = Callable[[], ResourceRegistry]


class ReleaseMap:
    """
    Mapping of FHIR release versions to registry factories. Each factory is
    called at most once, on first use of its release.
    """

    def __init__(self) -> None:
        self._factories: Dict[Version, RegistryFactory] = {}
        self._names: Dict[str, Version] = {}
        self._versions: List[Version] = []
        self._built: Dict[Version, ResourceRegistry] = {}
        self._lock = Lock()


    def set(
            self,
            version: Union[str, Version],
            factory: RegistryFactory,
            name: Optional[str] = None) -> None:
        """
        Register ``factory`` as the source of the registry for ``version``.
        ``name`` is an optional release label, eg. ``R4``.
        """

        if isinstance(version, str):
            version = Version.parse(version)

        with self._lock:
            self._factories[version] = factory
            self._built.pop(version, None)
            self._versions = sorted(self._factories)
            if name:
                self._names[name.upper()] = version


    def versions(self) -> List[Version]:
        return list(self._versions)


    def resolve(self, selector: Union[str, Version]) -> Version:
        """
        Find the registered release satisfying ``selector``.
        """

        if isinstance(selector, Version):
            matchers = [f">={selector.major}.{selector.minor}.0",
                        f"<={selector}"]

        else:
            text = selector.strip()
            named = self._names.get(text.upper())
            if named is not None:
                return named

            found = version_like(text)
            if found is None:
                raise UnsupportedRelease(f"Invalid FHIR version: {selector!r}")

            major, minor, patch = found.groups()
            matchers = [f">={major}.{minor}.0"]
            if patch is None:
                matchers.append(f"<{major}.{int(minor) + 1}.0")
            else:
                matchers.append(f"<={major}.{minor}.{patch}")

        for version in reversed(self._versions):
            if all(version.match(matcher) for matcher in matchers):
                return version

        raise UnsupportedRelease(f"No registered FHIR release matches {selector!r}")


    def registry(self, selector: Union[str, Version]) -> ResourceRegistry:
        """
        The registry for the release satisfying ``selector``, building it on
        first use.
        """

        version = self.resolve(selector)

        built = self._built.get(version)
        if built is not None:
            return built

        with self._lock:
            built = self._built.get(version)
            if built is None:
                logger.debug("Building registry for FHIR %s", version)
                built = self._factories[version]()
                self._built[version] = built
            return built


RELEASES = ReleaseMap()
RELEASES.set(R4, default_registry, name="R4")


def registry_for(version: Union[str, Version]) -> ResourceRegistry:
    """
    The registry for the FHIR release ``version``, eg. ``"4.0.1"``,
    ``"4.0"`` or ``"R4"``.
    """

    return RELEASES.registry(version)


# The end.
