"""
add_capability lowering.

Known capability types get a typed overlay pre-filled with defaults
(CAP001-CAP015, CAP000 once built); other types pass through with CAP100.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional

from oiml.core.ir.common import DiagnosticCollector
from oiml.core.ir.intents import AddCapabilityIR
from oiml.core.ir.transform.base import TransformContext, envelope, finalize

EMAIL_WEBHOOK_EVENTS = [
    "email.sent",
    "email.delivered",
    "email.bounced",
    "email.opened",
    "email.clicked",
    "email.complained",
    "email.delivery_delayed",
]

BILLING_WEBHOOK_EVENTS = [
    "payment.succeeded",
    "payment.failed",
    "subscription.created",
    "subscription.updated",
    "subscription.canceled",
]

DEFAULT_SESSION_SECONDS = 86400
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024
DEFAULT_BUCKET_CACHE_CONTROL = "3600"

OverlayBuilder = Callable[[Dict[str, Any], DiagnosticCollector], Dict[str, Any]]


def _webhook_endpoint(intent: Dict[str, Any]) -> Optional[str]:
    for ep in intent.get("endpoints") or []:
        if "webhook" in (ep.get("path") or ""):
            return ep["path"]
    return None


def _email(intent: Dict[str, Any], diagnostics: DiagnosticCollector) -> Dict[str, Any]:
    overlay: Dict[str, Any] = {"type": "email"}
    config = intent.get("config") or {}

    if config.get("from_email"):
        overlay["from"] = {"email": config["from_email"], "name": config.get("from_name") or "Your App"}
        diagnostics.info("CAP001", "Configured default sender from intent config", "$.config.from_email")
    else:
        diagnostics.info("CAP001", "No default sender configured - using environment defaults", "$.config")

    webhook = _webhook_endpoint(intent)
    if webhook:
        overlay["webhooks"] = {"events": list(EMAIL_WEBHOOK_EVENTS), "endpoint": webhook, "verifySignature": True}
        diagnostics.info("CAP002", "Inferred webhook configuration from endpoint", "$.endpoints")

    provider = intent.get("provider")
    if provider and provider != "resend":
        diagnostics.info("CAP003", f"Custom provider '{provider}' detected - SMTP configuration may be needed", "$.provider")

    return overlay


def _storage(intent: Dict[str, Any], diagnostics: DiagnosticCollector) -> Dict[str, Any]:
    overlay: Dict[str, Any] = {"type": "storage", "buckets": []}

    buckets = intent.get("buckets")
    if buckets:
        for b in buckets:
            bucket: Dict[str, Any] = {
                "name": b["name"],
                "public": b.get("public") is not False,
                "cacheControl": b.get("cache_control") or DEFAULT_BUCKET_CACHE_CONTROL,
            }
            if b.get("file_size_limit") is not None:
                bucket["fileSizeLimit"] = b["file_size_limit"]
            if b.get("allowed_mime_types") is not None:
                bucket["allowedMimeTypes"] = list(b["allowed_mime_types"])
            overlay["buckets"].append(bucket)
        diagnostics.info("CAP004", f"Configured {len(overlay['buckets'])} storage bucket(s)", "$.buckets")
    else:
        diagnostics.warn("CAP005", "No buckets configured - you'll need to create them manually", "$.buckets")

    if intent.get("provider") == "supabase":
        overlay["imageTransformations"] = {
            "enabled": True,
            "formats": ["webp", "avif", "jpeg", "png"],
            "quality": {"default": 80, "min": 50, "max": 100},
        }
        diagnostics.info("CAP006", "Enabled image transformations for Supabase provider", "$.provider")
        overlay["cdn"] = {"enabled": True}
        diagnostics.info("CAP007", "Supabase Storage includes built-in CDN", "$.provider")

    return overlay


def _auth(intent: Dict[str, Any], diagnostics: DiagnosticCollector) -> Dict[str, Any]:
    config = intent.get("config") or {}
    overlay: Dict[str, Any] = {"type": "auth", "strategies": ["jwt"]}

    strategies = config.get("strategies")
    if strategies:
        overlay["strategies"] = list(strategies)
        diagnostics.info("CAP008", f"Configured auth strategies: {', '.join(map(str, strategies))}", "$.config.strategies")
    else:
        diagnostics.info("CAP008", "Using default JWT authentication strategy", "$.config")

    overlay["session"] = {
        "duration": DEFAULT_SESSION_SECONDS,
        "storage": "cookie",
        "cookie": {"name": "session", "httpOnly": True, "secure": True, "sameSite": "lax"},
    }
    diagnostics.info("CAP009", "Using default session configuration (24h, cookie-based)", "$.config")

    overlay["password"] = {
        "minLength": 8,
        "requireUppercase": True,
        "requireLowercase": True,
        "requireNumbers": True,
        "requireSpecialChars": False,
    }
    diagnostics.info("CAP010", "Using default password requirements", "$.config")

    return overlay


def _billing(intent: Dict[str, Any], diagnostics: DiagnosticCollector) -> Dict[str, Any]:
    overlay: Dict[str, Any] = {"type": "billing", "provider": intent.get("provider") or "stripe", "plans": []}

    plans = intent.get("plans")
    if plans:
        overlay["plans"] = [dict(p) for p in plans]
        diagnostics.info("CAP011", f"Configured {len(plans)} pricing plan(s)", "$.plans")
    else:
        diagnostics.warn("CAP012", "No pricing plans configured", "$.plans")

    webhook = _webhook_endpoint(intent)
    if webhook:
        overlay["webhooks"] = {"events": list(BILLING_WEBHOOK_EVENTS), "endpoint": webhook}
        diagnostics.info("CAP013", "Inferred webhook configuration for billing events", "$.endpoints")

    return overlay


def _file_upload(intent: Dict[str, Any], diagnostics: DiagnosticCollector) -> Dict[str, Any]:
    config = intent.get("config") or {}
    overlay: Dict[str, Any] = {
        "type": "file_upload",
        "maxFileSize": config.get("max_file_size") or DEFAULT_MAX_UPLOAD_BYTES,
        "allowedTypes": list(config.get("allowed_types") or ["*/*"]),
        "destination": config.get("destination") or "local",
    }
    diagnostics.info("CAP014", f"File upload destination: {overlay['destination']}", "$.config.destination")

    overlay["virusScanning"] = {"enabled": False}
    diagnostics.info("CAP015", "Virus scanning disabled by default - enable for production", "$.config")

    return overlay


OVERLAY_BUILDERS: Dict[str, OverlayBuilder] = {
    "email": _email,
    "storage": _storage,
    "auth": _auth,
    "billing": _billing,
    "file_upload": _file_upload,
}


def _endpoints(intent: Dict[str, Any]) -> List[Dict[str, Any]]:
    out = []
    for ep in intent.get("endpoints") or []:
        out.append({k: ep[k] for k in ("method", "path", "group", "description") if ep.get(k)})
    return out


def transform_add_capability(intent: Dict[str, Any], context: TransformContext) -> AddCapabilityIR:
    diagnostics = DiagnosticCollector()
    kind = intent["capability"]

    capability: Dict[str, Any] = {"type": kind, "framework": intent["framework"]}
    if intent.get("provider"):
        capability["provider"] = intent["provider"]
    if intent.get("config"):
        capability["config"] = dict(intent["config"])

    endpoints = _endpoints(intent)
    if endpoints:
        capability["endpoints"] = endpoints

    builder = OVERLAY_BUILDERS.get(kind)
    if builder is None:
        diagnostics.info("CAP100", f"No overlay builder for capability type '{kind}'", "$.capability")
    else:
        capability["overlay"] = builder(intent, diagnostics)
        diagnostics.info("CAP000", f"Built {kind} capability overlay with defaults", "$.capability")

    return finalize(AddCapabilityIR, envelope("AddCapability", context, diagnostics, capability=capability), diagnostics)
