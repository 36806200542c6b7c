"""MongoDB infrastructure for flowdesk."""

from flowdesk.infra.mongo.client import MongoClient

__all__ = ["MongoClient"]
