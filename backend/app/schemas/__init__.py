from app.schemas.coherence import CoherenceResponse
from app.schemas.completeness import CompletenessResponse, ReturningClientResponse
from app.schemas.document import DocumentCreate, DocumentDetail, DocumentReviewRequest
from app.schemas.document_type import DocumentTypeListResponse, DocumentTypeResponse
from app.schemas.health import HealthResponse

__all__ = [
    "CoherenceResponse",
    "CompletenessResponse",
    "DocumentCreate",
    "DocumentDetail",
    "DocumentReviewRequest",
    "DocumentTypeListResponse",
    "DocumentTypeResponse",
    "HealthResponse",
    "ReturningClientResponse",
]
