"""Minimal Pydantic models for the Kubernetes object payloads fluxer reads."""

from __future__ import annotations

from datetime import datetime  # noqa: TC003
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class KubeBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", alias_generator=to_camel, populate_by_name=True)


class OwnerReferenceSchema(KubeBaseModel):
    api_version: str
    kind: str
    name: str
    uid: str
    controller: bool | None = None
    block_owner_deletion: bool | None = None


class ObjectMetaSchema(KubeBaseModel):
    name: str = ""
    namespace: str = ""
    uid: str = ""
    resource_version: str = ""
    generation: int | None = None
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)
    owner_references: list[OwnerReferenceSchema] = Field(
        default_factory=list["OwnerReferenceSchema"]
    )
    finalizers: list[str] = Field(default_factory=list)
    deletion_timestamp: datetime | None = None


class ConditionSchema(KubeBaseModel):
    type: str
    status: str
    reason: str = ""
    message: str = ""
    last_transition_time: datetime | None = None
    observed_generation: int | None = None


class ChartSpecSchema(KubeBaseModel):
    repository: str
    version: str = ""


class FluxAppSpecSchema(KubeBaseModel):
    chart: ChartSpecSchema
    target_namespace: str = ""


class ChartStatusSchema(KubeBaseModel):
    repository: str = ""
    name: str = ""
    version: str = ""


class FluxAppStatusSchema(KubeBaseModel):
    chart: ChartStatusSchema = Field(default_factory=ChartStatusSchema)
    conditions: list[ConditionSchema] = Field(default_factory=list["ConditionSchema"])


class FluxAppSchema(KubeBaseModel):
    metadata: ObjectMetaSchema
    spec: FluxAppSpecSchema
    status: FluxAppStatusSchema = Field(default_factory=FluxAppStatusSchema)


class ManagedObjectSchema(KubeBaseModel):
    metadata: ObjectMetaSchema
    spec: dict[str, Any] = Field(default_factory=dict)
    status: dict[str, Any] = Field(default_factory=dict)
