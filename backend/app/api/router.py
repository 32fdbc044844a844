from fastapi import APIRouter

from app.api.v1 import clients, document_types, documents, health

api_router = APIRouter()

api_router.include_router(health.router, prefix="/v1", tags=["health"])
api_router.include_router(document_types.router, prefix="/v1/document-types", tags=["document-types"])
api_router.include_router(documents.router, prefix="/v1/documents", tags=["documents"])
api_router.include_router(clients.router, prefix="/v1/clients", tags=["clients"])
