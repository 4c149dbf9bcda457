"""RFQ upload endpoint - POST /api/document-from-rfq/parse."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, UploadFile, status
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.ext.asyncio import AsyncSession

from bidplatform.app.api.auth import require_roles
from bidplatform.app.config import Settings, get_settings
from bidplatform.app.db.context import RequestContext
from bidplatform.app.db.engine import get_session
from bidplatform.app.errors import NoFileUploaded, ProcessingFailed, UnsupportedFileType
from bidplatform.app.extraction.uploads import save_upload
from bidplatform.app.llm.client import LLMClient, get_llm_client
from bidplatform.app.pipeline.orchestrator import DocumentStore, RFQPipeline
from bidplatform.app.storage.credentials import ClientCredentialsTokenProvider
from bidplatform.app.storage.sharepoint import SharePointClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/document-from-rfq", tags=["rfq"])

CREATOR_ROLES = ("Admin", "Bid Creator")


class ParseResponse(BaseModel):
    """Response for POST /api/document-from-rfq/parse."""

    model_config = ConfigDict(populate_by_name=True)

    message: str
    document_id: str = Field(..., alias="documentId")
    technical_proposal: str = Field(..., alias="technicalProposal")
    proposal_review: str = Field(..., alias="proposalReview")


def get_llm(settings: Annotated[Settings, Depends(get_settings)]) -> LLMClient:
    """Dependency providing the text-generation client."""
    return get_llm_client(settings)


def get_store(settings: Annotated[Settings, Depends(get_settings)]) -> DocumentStore:
    """Dependency providing the SharePoint client."""
    return SharePointClient.from_settings(
        settings, ClientCredentialsTokenProvider.from_settings(settings)
    )


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/parse", response_model=ParseResponse, response_model_by_alias=True)
async def parse_rfq(
    ctx: Annotated[RequestContext, Depends(require_roles(CREATOR_ROLES))],
    session: Annotated[AsyncSession, Depends(get_session)],
    settings: Annotated[Settings, Depends(get_settings)],
    llm: Annotated[LLMClient, Depends(get_llm)],
    store: Annotated[DocumentStore, Depends(get_store)],
    document: Annotated[UploadFile | None, File()] = None,
) -> ParseResponse | JSONResponse:
    """Generate, review and store a technical proposal from an uploaded RFQ.

    Args:
        ctx: Authenticated creator (Admin or Bid Creator)
        session: Database session
        settings: Application settings (upload directory)
        llm: Text-generation client
        store: Remote document store
        document: Multipart file field holding the RFQ (PDF, DOCX or text)

    Returns:
        Document id plus generated proposal and review, or an ``{"error"}`` body
    """
    pipeline = RFQPipeline(session=session, llm=llm, store=store)

    try:
        upload = (
            await run_in_threadpool(save_upload, document, settings.upload_dir)
            if document
            else None
        )
        result = await pipeline.run(upload, ctx)
    except NoFileUploaded:
        return _error(status.HTTP_400_BAD_REQUEST, "No file uploaded")
    except UnsupportedFileType:
        return _error(status.HTTP_400_BAD_REQUEST, "Unsupported file type")
    except ProcessingFailed as e:
        logger.error(
            "Error parsing document, generating or reviewing proposal: %r",
            e.__cause__,
            exc_info=e.__cause__,
        )
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error processing document")
    except OSError as e:
        logger.error("Could not spool uploaded file: %s", e)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Error processing document")

    return ParseResponse(
        message="Document parsed, proposal generated, reviewed, and saved successfully",
        document_id=str(result.document_id),
        technical_proposal=result.technical_proposal,
        proposal_review=result.proposal_review,
    )
