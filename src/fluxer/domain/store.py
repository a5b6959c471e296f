"""Fetch-or-initialize / commit abstraction over managed child objects.

``fetch`` never fails on absence: it returns a fresh object named after the
requested key. When the object exists, a deep copy is kept as the patch
baseline before the caller gets a chance to mutate it, so ``commit`` sends only
the fields the engine changed and leaves fields written by other controllers
alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from fluxer.domain.errors import NotFoundError
from fluxer.domain.merge_patch import create_merge_patch
from fluxer.domain.model import ManagedObject, ObjectMeta

if TYPE_CHECKING:
    from fluxer.domain.model import KindRegistry, NamespacedName
    from fluxer.domain.ports import ManagedObjectClient

log = getLogger(__name__)


class CommitOutcome(StrEnum):
    CREATED = "created"
    PATCHED = "patched"
    UNCHANGED = "unchanged"


@dataclass(slots=True)
class ManagedResourceRecord:
    """A fetched-or-initialized object plus its pre-mutation snapshot."""

    object: ManagedObject
    baseline: ManagedObject | None = None

    @property
    def existed(self) -> bool:
        return self.baseline is not None


@dataclass(slots=True)
class ManagedResourceStore:
    client: ManagedObjectClient
    kinds: KindRegistry

    def fetch(self, kind: str, key: NamespacedName) -> ManagedResourceRecord:
        """Load ``kind`` at ``key`` or initialize an empty object in its place."""

        info = self.kinds.lookup(kind)
        try:
            current = self.client.get(info, key)
        except NotFoundError:
            log.debug("%s %s not found, initializing", kind, key)
            fresh = ManagedObject(
                kind=info,
                metadata=ObjectMeta(name=key.name, namespace=key.namespace),
            )
            return ManagedResourceRecord(object=fresh)
        return ManagedResourceRecord(object=current, baseline=current.deep_copy())

    def commit(self, record: ManagedResourceRecord) -> CommitOutcome:
        """Create ``record.object`` or patch it relative to its baseline."""

        obj = record.object
        if record.baseline is None:
            record.object = self.client.create(obj)
            return CommitOutcome.CREATED

        patch = create_merge_patch(record.baseline.to_manifest(), obj.to_manifest())
        if not patch:
            return CommitOutcome.UNCHANGED
        record.object = self.client.patch(obj.kind, obj.key, patch)
        return CommitOutcome.PATCHED
