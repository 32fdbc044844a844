from app.coherence_engine.service import CoherenceService
from app.completeness_engine.service import CompletenessService
from app.config import settings
from app.database import get_db
from app.services.document_analyzer import ClaudeDocumentAnalyzer
from app.services.document_service import DocumentService

# Re-export get_db for use in Depends()
get_db = get_db


def get_document_analyzer() -> ClaudeDocumentAnalyzer:
    return ClaudeDocumentAnalyzer(settings)


def get_document_service() -> DocumentService:
    return DocumentService(settings)


def get_completeness_service() -> CompletenessService:
    return CompletenessService(settings)


def get_coherence_service() -> CoherenceService:
    return CoherenceService(settings, get_document_analyzer())
