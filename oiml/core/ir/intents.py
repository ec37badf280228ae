"""IR envelopes, one per intent kind. All share {kind, irVersion, provenance, diagnostics}."""
from __future__ import annotations

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import Field

from oiml.core.ir.common import Diagnostic, IRModel, Provenance
from oiml.core.ir.entity import EntityIR
from oiml.core.ir.field import FieldIR
from oiml.core.ir.types import ReferenceType

HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]
RoutePath = Annotated[str, Field(pattern=r"^/")]
NonEmpty = Annotated[str, Field(min_length=1)]


class _Envelope(IRModel):
    ir_version: Literal["1.0.0"] = "1.0.0"
    provenance: Provenance
    diagnostics: List[Diagnostic] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Data
# ---------------------------------------------------------------------------

class AddEntityIR(_Envelope):
    kind: Literal["AddEntity"] = "AddEntity"
    entity: EntityIR


class AddFieldIR(_Envelope):
    kind: Literal["AddField"] = "AddField"
    entity_name: NonEmpty
    fields: List[FieldIR] = Field(min_length=1)


class RemoveFieldIR(_Envelope):
    kind: Literal["RemoveField"] = "RemoveField"
    entity_name: NonEmpty
    field_names: List[NonEmpty] = Field(min_length=1)


class RemoveEntityIR(_Envelope):
    kind: Literal["RemoveEntity"] = "RemoveEntity"
    entity_name: NonEmpty
    cascade: bool


class RenameEntityIR(_Envelope):
    kind: Literal["RenameEntity"] = "RenameEntity"
    from_name: NonEmpty
    to_name: NonEmpty
    update_references: bool


class RenameFieldIR(_Envelope):
    kind: Literal["RenameField"] = "RenameField"
    entity_name: NonEmpty
    from_name: NonEmpty
    to_name: NonEmpty
    update_references: bool


class RelationIR(IRModel):
    source_entity: NonEmpty
    target_entity: NonEmpty
    field_name: NonEmpty
    type: ReferenceType
    emit_migration: bool


class AddRelationIR(_Envelope):
    kind: Literal["AddRelation"] = "AddRelation"
    relation: RelationIR


# ---------------------------------------------------------------------------
# API
# ---------------------------------------------------------------------------

class EndpointAuth(IRModel):
    required: bool
    roles: Optional[List[str]] = None


class EndpointIR(IRModel):
    method: HttpMethod
    path: RoutePath
    description: Optional[str] = None
    entity: Optional[str] = None
    response_fields: Optional[List[FieldIR]] = None
    request_fields: Optional[List[FieldIR]] = None
    auth: Optional[EndpointAuth] = None


class AddEndpointIR(_Envelope):
    kind: Literal["AddEndpoint"] = "AddEndpoint"
    endpoint: EndpointIR


class RelationSource(IRModel):
    type: Literal["relation"] = "relation"
    relation: NonEmpty
    field: Optional[str] = None


class EntityFieldSource(IRModel):
    type: Literal["field"] = "field"
    entity: NonEmpty
    field: NonEmpty


class ComputedSource(IRModel):
    type: Literal["computed"] = "computed"
    expression: NonEmpty


class JoinSource(IRModel):
    type: Literal["join"] = "join"
    foreign_key: NonEmpty
    target_entity: NonEmpty
    target_field: NonEmpty


FieldSource = Annotated[
    Union[RelationSource, EntityFieldSource, ComputedSource, JoinSource],
    Field(discriminator="type"),
]


class AddFieldUpdate(IRModel):
    name: NonEmpty
    source: FieldSource


class EndpointUpdates(IRModel):
    add_fields: Optional[List[AddFieldUpdate]] = None
    remove_fields: Optional[List[NonEmpty]] = None


class UpdateEndpointIR(_Envelope):
    kind: Literal["UpdateEndpoint"] = "UpdateEndpoint"
    method: HttpMethod
    path: RoutePath
    updates: EndpointUpdates


# ---------------------------------------------------------------------------
# UI
# ---------------------------------------------------------------------------

class ComponentIR(IRModel):
    name: NonEmpty
    template: Literal["List", "Form", "Custom"]
    entity: Optional[str] = None
    display_fields: Optional[List[NonEmpty]] = None
    route: Optional[str] = None


class AddComponentIR(_Envelope):
    kind: Literal["AddComponent"] = "AddComponent"
    component: ComponentIR


# ---------------------------------------------------------------------------
# Capabilities
# ---------------------------------------------------------------------------

class CapabilityEndpoint(IRModel):
    method: Optional[HttpMethod] = None
    path: Optional[RoutePath] = None
    group: Optional[str] = None
    description: Optional[str] = None


class EmailSender(IRModel):
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    name: Optional[str] = None


class EmailWebhooks(IRModel):
    events: List[str]
    endpoint: str
    verify_signature: Optional[bool] = None


class EmailOverlay(IRModel):
    type: Literal["email"] = "email"
    webhooks: Optional[EmailWebhooks] = None
    sender: Optional[EmailSender] = Field(default=None, alias="from")


class StorageBucket(IRModel):
    name: str
    public: bool
    file_size_limit: Optional[int] = None
    allowed_mime_types: Optional[List[str]] = None
    cache_control: Optional[str] = None


class ImageQuality(IRModel):
    default: Optional[int] = Field(default=None, ge=1, le=100)
    min: Optional[int] = Field(default=None, ge=1, le=100)
    max: Optional[int] = Field(default=None, ge=1, le=100)


class ImageTransformations(IRModel):
    enabled: bool
    formats: Optional[List[Literal["webp", "avif", "jpeg", "png"]]] = None
    quality: Optional[ImageQuality] = None


class CdnConfig(IRModel):
    enabled: bool
    custom_domain: Optional[str] = None


class StorageOverlay(IRModel):
    type: Literal["storage"] = "storage"
    buckets: List[StorageBucket]
    image_transformations: Optional[ImageTransformations] = None
    cdn: Optional[CdnConfig] = None


class SessionCookie(IRModel):
    name: str
    http_only: Optional[bool] = None
    secure: Optional[bool] = None
    same_site: Optional[Literal["strict", "lax", "none"]] = None


class SessionConfig(IRModel):
    # seconds
    duration: int
    storage: Literal["cookie", "localStorage", "database"]
    cookie: Optional[SessionCookie] = None


class PasswordPolicy(IRModel):
    min_length: Optional[int] = None
    require_uppercase: Optional[bool] = None
    require_lowercase: Optional[bool] = None
    require_numbers: Optional[bool] = None
    require_special_chars: Optional[bool] = None


class AuthOverlay(IRModel):
    type: Literal["auth"] = "auth"
    strategies: List[Literal["jwt", "session", "oauth", "magic-link", "passwordless"]]
    session: Optional[SessionConfig] = None
    password: Optional[PasswordPolicy] = None


class BillingPlan(IRModel):
    id: str
    name: str
    # smallest currency unit
    price: int
    currency: str = Field(min_length=3, max_length=3)
    interval: Literal["month", "year", "week", "day", "one-time"]
    features: Optional[List[str]] = None


class BillingWebhooks(IRModel):
    events: List[str]
    endpoint: str


class BillingOverlay(IRModel):
    type: Literal["billing"] = "billing"
    provider: Literal["stripe", "paypal", "square", "braintree"]
    plans: List[BillingPlan]
    webhooks: Optional[BillingWebhooks] = None


class VirusScanning(IRModel):
    enabled: bool
    provider: Optional[str] = None


class FileUploadOverlay(IRModel):
    type: Literal["file_upload"] = "file_upload"
    # bytes
    max_file_size: int
    allowed_types: List[str]
    destination: Literal["local", "s3", "gcs", "azure", "cloudinary"]
    destination_config: Optional[Dict[str, Any]] = None
    resumable: Optional[bool] = None
    virus_scanning: Optional[VirusScanning] = None


CapabilityOverlay = Annotated[
    Union[EmailOverlay, StorageOverlay, AuthOverlay, BillingOverlay, FileUploadOverlay],
    Field(discriminator="type"),
]

CapabilityType = Literal[
    "auth", "email", "storage", "billing", "file_upload", "file_stream", "sse", "websocket",
]


class CapabilityIR(IRModel):
    type: CapabilityType
    framework: NonEmpty
    provider: Optional[str] = None
    config: Optional[Dict[str, Any]] = None
    endpoints: Optional[List[CapabilityEndpoint]] = None
    overlay: Optional[CapabilityOverlay] = None


class AddCapabilityIR(_Envelope):
    kind: Literal["AddCapability"] = "AddCapability"
    capability: CapabilityIR


IntentIR = Annotated[
    Union[
        AddEntityIR,
        AddFieldIR,
        RemoveFieldIR,
        RemoveEntityIR,
        RenameEntityIR,
        RenameFieldIR,
        AddRelationIR,
        AddEndpointIR,
        UpdateEndpointIR,
        AddComponentIR,
        AddCapabilityIR,
    ],
    Field(discriminator="kind"),
]
