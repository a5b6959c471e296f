"""Resource kinds known to the engine and the lookup table that maps them.

Adding a managed kind means adding a ``KindInfo`` and registering it; nothing
in the store or pipeline branches on the kind.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from fluxer.domain.errors import UnsupportedKindError

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator


@dataclass(frozen=True, slots=True)
class KindInfo:
    """API coordinates for one resource kind."""

    kind: str
    group: str
    version: str
    plural: str

    @property
    def api_version(self) -> str:
        return f"{self.group}/{self.version}"


FLUX_APP = KindInfo(kind="FluxApp", group="apps.kloudy.uk", version="v1", plural="fluxapps")

IMAGE_REPOSITORY = KindInfo(
    kind="ImageRepository",
    group="image.toolkit.fluxcd.io",
    version="v1beta2",
    plural="imagerepositories",
)
IMAGE_POLICY = KindInfo(
    kind="ImagePolicy",
    group="image.toolkit.fluxcd.io",
    version="v1beta2",
    plural="imagepolicies",
)
HELM_REPOSITORY = KindInfo(
    kind="HelmRepository",
    group="source.toolkit.fluxcd.io",
    version="v1",
    plural="helmrepositories",
)
HELM_RELEASE = KindInfo(
    kind="HelmRelease",
    group="helm.toolkit.fluxcd.io",
    version="v2",
    plural="helmreleases",
)


@dataclass(slots=True)
class KindRegistry:
    """Explicit kind-name to ``KindInfo`` table injected into the store."""

    _kinds: dict[str, KindInfo] = field(default_factory=dict[str, KindInfo])

    def register(self, info: KindInfo) -> None:
        self._kinds[info.kind] = info

    def lookup(self, kind: str) -> KindInfo:
        try:
            return self._kinds[kind]
        except KeyError:
            raise UnsupportedKindError(f"unsupported kind: {kind}") from None

    def __contains__(self, kind: object) -> bool:
        return kind in self._kinds

    def __iter__(self) -> Iterator[KindInfo]:
        return iter(self._kinds.values())

    @classmethod
    def of(cls, kinds: Iterable[KindInfo]) -> KindRegistry:
        registry = cls()
        for info in kinds:
            registry.register(info)
        return registry


def flux_kinds() -> KindRegistry:
    """Registry of the four child kinds managed for a ``FluxApp``."""

    return KindRegistry.of((IMAGE_REPOSITORY, IMAGE_POLICY, HELM_REPOSITORY, HELM_RELEASE))
