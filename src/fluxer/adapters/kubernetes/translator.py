"""Translate Kubernetes payloads into domain objects."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from fluxer.domain.errors import InvalidInputError, MalformedUpstreamDataError
from fluxer.domain.model import (
    MATCH_ANY_VERSION,
    ChartSpec,
    ChartStatus,
    Condition,
    ConditionStatus,
    FluxApp,
    FluxAppSpec,
    FluxAppStatus,
    ManagedObject,
    ObjectMeta,
    OwnerReference,
)

from .schema import ConditionSchema, FluxAppSchema, ManagedObjectSchema, ObjectMetaSchema

if TYPE_CHECKING:
    from collections.abc import Mapping

    from fluxer.domain.model import KindInfo


def translate_flux_app(payload: Mapping[str, Any]) -> FluxApp:
    try:
        schema = FluxAppSchema.model_validate(payload)
    except ValidationError as exc:
        raise InvalidInputError(f"invalid FluxApp payload: {exc}") from exc

    return FluxApp(
        metadata=_translate_meta(schema.metadata),
        spec=FluxAppSpec(
            chart=ChartSpec(
                repository=schema.spec.chart.repository,
                version=schema.spec.chart.version or MATCH_ANY_VERSION,
            ),
            target_namespace=schema.spec.target_namespace,
        ),
        status=FluxAppStatus(
            chart=ChartStatus(
                repository=schema.status.chart.repository,
                name=schema.status.chart.name,
                version=schema.status.chart.version,
            ),
            conditions=_translate_conditions(schema.status.conditions),
        ),
    )


def translate_managed_object(kind: KindInfo, payload: Mapping[str, Any]) -> ManagedObject:
    try:
        schema = ManagedObjectSchema.model_validate(payload)
    except ValidationError as exc:
        raise MalformedUpstreamDataError(f"invalid {kind.kind} payload: {exc}") from exc

    return ManagedObject(
        kind=kind,
        metadata=_translate_meta(schema.metadata),
        spec=schema.spec,
        status=schema.status,
    )


def _translate_meta(meta: ObjectMetaSchema) -> ObjectMeta:
    return ObjectMeta(
        name=meta.name,
        namespace=meta.namespace,
        uid=meta.uid,
        resource_version=meta.resource_version,
        generation=meta.generation,
        labels=dict(meta.labels),
        annotations=dict(meta.annotations),
        owner_references=[
            OwnerReference(
                api_version=ref.api_version,
                kind=ref.kind,
                name=ref.name,
                uid=ref.uid,
                controller=bool(ref.controller),
                block_owner_deletion=bool(ref.block_owner_deletion),
            )
            for ref in meta.owner_references
        ],
        finalizers=list(meta.finalizers),
        deletion_timestamp=meta.deletion_timestamp,
    )


def _translate_conditions(conditions: list[ConditionSchema]) -> list[Condition]:
    translated: list[Condition] = []
    for condition in conditions:
        try:
            status = ConditionStatus(condition.status)
        except ValueError:
            continue
        translated.append(
            Condition(
                type=condition.type,
                status=status,
                reason=condition.reason,
                message=condition.message,
                last_transition_time=condition.last_transition_time,
                observed_generation=condition.observed_generation,
            )
        )
    return translated
