from app.models.base import Base, TimestampMixin
from app.models.client import Client
from app.models.document import Document
from app.models.document_type import DocumentType

__all__ = [
    "Base",
    "TimestampMixin",
    "Client",
    "Document",
    "DocumentType",
]
