"""Document codecs for the record-store gateway.

A codec maps an entity's camelCase JSON shape to the document stored in
the database and back. The chatbot codec keeps the knowledge base's
nested collections as JSON-encoded strings.
"""

import json
from typing import Any

from flowdesk.interfaces.storage import DocumentCodecInterface
from flowdesk.logging import get_logger

__all__ = [
    "ChatbotDocumentCodec",
    "DocumentCodec",
    "decode_json_list",
    "encode_json_list",
]

logger = get_logger(__name__)

KNOWLEDGE_JSON_FIELDS = ("files", "urls", "faqs")


def encode_json_list(value: list[Any] | None) -> str:
    """Encode a nested collection as a JSON string scalar."""
    return json.dumps(value or [])


def decode_json_list(raw: Any, field: str = "") -> list[Any]:
    """Decode a JSON string scalar into a list.

    Anything that is not a JSON-encoded list decodes to [] so one corrupt
    column never makes the owning record unreadable.
    """
    if raw is None or raw == "":
        return []
    if isinstance(raw, list):
        return raw
    try:
        value = json.loads(raw)
    except (TypeError, json.JSONDecodeError) as e:
        logger.warning("json_field_decode_failed", field=field, error=str(e))
        return []
    if not isinstance(value, list):
        logger.warning("json_field_not_a_list", field=field)
        return []
    return value


class DocumentCodec(DocumentCodecInterface):
    """Stores the entity JSON as-is."""

    def encode(self, data: dict[str, Any]) -> dict[str, Any]:
        return dict(data)

    def decode(self, doc: dict[str, Any]) -> dict[str, Any]:
        return dict(doc)


class ChatbotDocumentCodec(DocumentCodec):
    """Stores knowledge files, urls and faqs as JSON text."""

    def encode(self, data: dict[str, Any]) -> dict[str, Any]:
        doc = super().encode(data)
        knowledge = doc.get("knowledge")
        if isinstance(knowledge, dict):
            knowledge = dict(knowledge)
            for field in KNOWLEDGE_JSON_FIELDS:
                knowledge[field] = encode_json_list(knowledge.get(field))
            doc["knowledge"] = knowledge
        return doc

    def decode(self, doc: dict[str, Any]) -> dict[str, Any]:
        data = super().decode(doc)
        knowledge = data.get("knowledge")
        if isinstance(knowledge, dict):
            knowledge = dict(knowledge)
            for field in KNOWLEDGE_JSON_FIELDS:
                knowledge[field] = decode_json_list(knowledge.get(field), field=f"knowledge.{field}")
            data["knowledge"] = knowledge
        return data
