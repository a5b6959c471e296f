"""Controller owner references linking child objects back to their parent."""

from __future__ import annotations

from typing import TYPE_CHECKING

from fluxer.domain.errors import OwnershipError
from fluxer.domain.model import OwnerReference

if TYPE_CHECKING:
    from fluxer.domain.model import FluxApp, ResourceObject


def set_controller_reference(child: ResourceObject, owner: FluxApp) -> bool:
    """Record ``owner`` as the controller of ``child``.

    Returns ``True`` when the reference was added and ``False`` when ``child``
    already carried it. Raises ``OwnershipError`` when the owner has no uid, lives
    in another namespace, or ``child`` is already controlled by someone else.
    """

    if not owner.metadata.uid:
        raise OwnershipError(f"owner {owner.kind.kind} {owner.key} has no uid yet")
    if child.namespace and child.namespace != owner.namespace:
        raise OwnershipError(
            f"cross-namespace owner references are not allowed: owner {owner.key}, "
            f"child {child.kind.kind} {child.namespace}/{child.name}"
        )

    reference = OwnerReference(
        api_version=owner.kind.api_version,
        kind=owner.kind.kind,
        name=owner.name,
        uid=owner.metadata.uid,
        controller=True,
        block_owner_deletion=True,
    )

    references = child.metadata.owner_references
    for index, existing in enumerate(references):
        if existing.controller and existing.uid != reference.uid:
            raise OwnershipError(
                f"{child.kind.kind} {child.namespace}/{child.name} is already controlled "
                f"by {existing.kind} {existing.name}"
            )
        if existing.uid == reference.uid:
            if existing == reference:
                return False
            references[index] = reference
            return True

    references.append(reference)
    return True



def controller_of(child: ResourceObject) -> OwnerReference | None:
    """Return the reference marked as controller on ``child``, if any."""

    return next((ref for ref in child.metadata.owner_references if ref.controller), None)
