from __future__ import annotations

import json
import logging
from typing import Any

import yaml

from oiml.core.errors import DocumentParseError

_log = logging.getLogger("oiml.validation")

SUPPORTED_FORMATS = ("json", "yaml")

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _DocumentLoader(yaml.SafeLoader):
    """SafeLoader that keeps ISO timestamps as plain strings; schemas match them by pattern."""


_DocumentLoader.yaml_implicit_resolvers = {
    first: [(tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def unwrap_message_content(content: str) -> str:
    """
    Some clients wrap the document as a message block list:
        [{"type": "text", "text": "<document>"}]
    Returns the inner text when that shape is detected, else the input.
    """
    if not isinstance(content, str) or not content.strip().startswith("[{"):
        return content
    try:
        blocks = json.loads(content)
    except json.JSONDecodeError:
        return content
    if isinstance(blocks, list) and blocks and isinstance(blocks[0], dict):
        text = blocks[0].get("text")
        if isinstance(text, str) and text:
            _log.debug("Unwrapped message block content")
            return text
    return content


def parse(text: str, fmt: str) -> Any:
    fmt = (fmt or "").strip().lower()
    if fmt not in SUPPORTED_FORMATS:
        raise DocumentParseError(f"Unsupported format: {fmt}. Supported formats: {', '.join(SUPPORTED_FORMATS)}")

    text = unwrap_message_content(text)
    try:
        if fmt == "json":
            return json.loads(text)
        return yaml.load(text, Loader=_DocumentLoader)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise DocumentParseError(f"Parse error: {exc}") from exc
