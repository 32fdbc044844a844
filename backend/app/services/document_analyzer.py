"""
Claude-backed document analyzer.

Reads an uploaded client document (image, PDF or plain text), asks Claude to extract the
fields the coherence comparators need and to judge whether the document looks valid.

Supports:
- Vision analysis for scanned IDs and photos (JPEG, PNG, WebP, GIF)
- Native PDF document blocks
- Plain-text documents

Every failure (SDK, file I/O, unparseable or malformed response) surfaces as
UpstreamAnalyzerError. There are no retries here.
"""

import base64
import json
import logging
from pathlib import Path
from typing import Any

import aiofiles
import anthropic
from pydantic import BaseModel, Field

from app.config import Settings
from app.document_registry.catalog import DocumentCategory
from app.exceptions import UpstreamAnalyzerError

logger = logging.getLogger("onboarding.analyzer")

ANALYSIS_SYSTEM_PROMPT = """You are a Mexican KYC document analyst. You receive one client document (INE, CURP, Constancia de Situación Fiscal, comprobante de domicilio, acta constitutiva, comprobante de ingresos, estado de cuenta, or similar).

Extract the requested fields exactly as printed. If a field is not present, use null. Dates must use ISO 8601 format (YYYY-MM-DD).
Set "is_valid" to false if the document is illegible, altered, of a different type than declared, or visibly expired.
"confidence" is your confidence in the extraction between 0 and 1.

Respond with valid JSON only, no additional text."""

RESPONSE_ENVELOPE = """{
  "is_valid": true,
  "confidence": 0.0,
  "detected_type": "string or null",
  "notes": "string or null",
  "extracted_fields": %s
}"""

FIELD_TEMPLATES: dict[DocumentCategory, str] = {
    DocumentCategory.IDENTITY_DOCUMENT: """{
    "full_name": "string",
    "national_id": "CURP, 18 characters",
    "birth_date": "YYYY-MM-DD or null",
    "address": "single-line address or null",
    "elector_key": "string or null",
    "valid_until": "YYYY-MM-DD or null"
  }""",
    DocumentCategory.TAX_REGISTRATION: """{
    "tax_id": "RFC, 12 or 13 characters",
    "legal_name": "string or null",
    "full_name": "string or null",
    "tax_regime": "string or null",
    "address": "single-line address or null",
    "issue_date": "YYYY-MM-DD or null"
  }""",
    DocumentCategory.NATIONAL_ID: """{
    "national_id": "CURP, 18 characters",
    "full_name": "string or null",
    "birth_date": "YYYY-MM-DD or null"
  }""",
    DocumentCategory.PROOF_OF_ADDRESS: """{
    "holder": "name of the service holder",
    "address": "single-line address",
    "issuer": "utility or bank name or null",
    "issue_date": "YYYY-MM-DD or null"
  }""",
    DocumentCategory.INCORPORATION_DOCUMENT: """{
    "legal_name": "string",
    "legal_representative": "string or null",
    "incorporation_date": "YYYY-MM-DD or null",
    "deed_number": "string or null",
    "notary": "string or null"
  }""",
    DocumentCategory.INCOME_PROOF: """{
    "holder": "name of the income recipient",
    "tax_id": "RFC or null",
    "employer": "string or null",
    "period": "string or null",
    "net_amount": 0
  }""",
    DocumentCategory.BANK_STATEMENT: """{
    "holder": "account holder name",
    "bank": "string or null",
    "clabe": "18-digit CLABE or null",
    "period": "string or null"
  }""",
}

GENERIC_FIELD_TEMPLATE = """{
    "full_name": "string or null",
    "tax_id": "string or null",
    "issue_date": "YYYY-MM-DD or null"
  }"""

IMAGE_MEDIA_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".gif": "image/gif",
}
PDF_MEDIA_TYPE = "application/pdf"


class DocumentAnalysis(BaseModel):
    """Structured analyzer output for one document."""

    is_valid: bool = False
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    # Shape is checked by the coherence comparators, not here
    extracted_fields: Any = Field(default_factory=dict)
    detected_type: str | None = None
    notes: str | None = None


def _parse_json_response(response_text: str) -> dict:
    """Parse JSON from Claude response, handling markdown code blocks."""
    text = response_text.strip()
    if "```json" in text:
        text = text.split("```json")[1].split("```")[0].strip()
    elif "```" in text:
        text = text.split("```")[1].split("```")[0].strip()

    try:
        return json.loads(text)
    except (json.JSONDecodeError, IndexError) as e:
        logger.error("Failed to parse Claude response as JSON: %s", e)
        raise ValueError(f"Claude response was not valid JSON: {e}") from e


def media_type_for(path: Path) -> str:
    """Media type by file suffix; anything unknown is treated as plain text."""
    suffix = path.suffix.lower()
    if suffix == ".pdf":
        return PDF_MEDIA_TYPE
    return IMAGE_MEDIA_TYPES.get(suffix, "text/plain")


def _build_prompt(declared_type: str, category: DocumentCategory | None) -> str:
    template = FIELD_TEMPLATES.get(category, GENERIC_FIELD_TEMPLATE) if category else GENERIC_FIELD_TEMPLATE
    return (
        f"Declared document type: {declared_type}\n\n"
        "Analyze the document and respond with the following JSON structure:\n\n"
        f"{RESPONSE_ENVELOPE % template}"
    )


def _build_content(payload: bytes, media_type: str, prompt: str) -> list[dict]:
    """Build Claude message content array for one document (vision, PDF or text)."""
    if media_type == PDF_MEDIA_TYPE:
        return [
            {
                "type": "document",
                "source": {
                    "type": "base64",
                    "media_type": media_type,
                    "data": base64.b64encode(payload).decode("ascii"),
                },
            },
            {"type": "text", "text": prompt},
        ]

    if media_type.startswith("image/"):
        return [
            {
                "type": "image",
                "source": {
                    "type": "base64",
                    "media_type": media_type,
                    "data": base64.b64encode(payload).decode("ascii"),
                },
            },
            {"type": "text", "text": prompt},
        ]

    text = payload.decode("utf-8", errors="replace")
    return [{"type": "text", "text": f"{prompt}\n\nDocument content:\n\n{text}"}]


class ClaudeDocumentAnalyzer:
    def __init__(self, settings: Settings):
        self.client = anthropic.AsyncAnthropic(api_key=settings.anthropic_api_key)
        self.model = settings.claude_model
        self.max_tokens = settings.claude_max_tokens
        self.upload_dir = Path(settings.upload_dir)

    def resolve_path(self, document_reference: str) -> Path:
        path = Path(document_reference)
        if not path.is_absolute():
            path = self.upload_dir / path
        return path

    async def analyze(
        self,
        document_reference: str | None,
        declared_type: str,
        category: DocumentCategory | None = None,
        document_id: int | None = None,
    ) -> DocumentAnalysis:
        """Extract fields and a validity verdict for one stored document.

        Args:
            document_reference: Storage reference (path relative to the upload dir or absolute).
            declared_type: Catalog name of the document type the client declared.
            category: Comparator variant, selects the field template.
            document_id: Used only for error context.
        """
        if not document_reference:
            raise UpstreamAnalyzerError("Document has no stored file to analyze", document_id)

        path = self.resolve_path(document_reference)
        try:
            async with aiofiles.open(path, "rb") as f:
                payload = await f.read()

            content = _build_content(payload, media_type_for(path), _build_prompt(declared_type, category))

            message = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=ANALYSIS_SYSTEM_PROMPT,
                messages=[{"role": "user", "content": content}],
            )

            result = _parse_json_response(message.content[0].text)
            analysis = DocumentAnalysis.model_validate(result)
        except (anthropic.APIError, OSError, ValueError, IndexError) as e:
            logger.error("Analyzer failed for document %s (%s): %s", document_id, declared_type, e)
            raise UpstreamAnalyzerError(f"Document analyzer failed: {e}", document_id) from e

        logger.info(
            "Analyzed document %s as %s (valid=%s, confidence=%.2f)",
            document_id, declared_type, analysis.is_valid, analysis.confidence,
        )
        return analysis
