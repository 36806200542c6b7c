"""Collection gateways for flowdesk.

This module exports both gateway variants and the document codecs.
"""

from flowdesk.gateways.blob import BlobCollectionGateway
from flowdesk.gateways.codecs import (
    ChatbotDocumentCodec,
    DocumentCodec,
    decode_json_list,
    encode_json_list,
)
from flowdesk.gateways.document import DocumentCollectionGateway

__all__ = [
    "BlobCollectionGateway",
    "ChatbotDocumentCodec",
    "DocumentCodec",
    "DocumentCollectionGateway",
    "decode_json_list",
    "encode_json_list",
]
