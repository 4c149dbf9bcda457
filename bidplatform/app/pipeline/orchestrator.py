"""RFQ-to-proposal pipeline.

Strictly sequential: extract -> generate -> review -> remote folder and
artifacts -> document/version -> approval -> notifications. Nothing created
by an earlier step is rolled back when a later step fails.
"""

import logging
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Protocol

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from bidplatform.app.db.context import RequestContext
from bidplatform.app.db.documents import create_approval, notify_users, save_document
from bidplatform.app.db.models import Document, DocumentVersion
from bidplatform.app.db.users import list_users
from bidplatform.app.errors import NoFileUploaded, ProcessingFailed, UnsupportedFileType
from bidplatform.app.extraction.extractor import derive_project_name, extract_text
from bidplatform.app.extraction.uploads import UploadedFile
from bidplatform.app.llm.client import LLMClient
from bidplatform.app.models.documents import (
    PROPOSAL_SECTION,
    VersionContent,
    VersionFile,
    VersionFileContent,
    version_docx_name,
    version_file_name,
)
from bidplatform.app.storage.docx_writer import html_to_docx
from bidplatform.app.utils.logging import StructuredStepLogger
from bidplatform.app.utils.metrics import metrics

logger = logging.getLogger(__name__)

INITIAL_STATUS = "draft"


class DocumentStore(Protocol):
    """Remote store operations the pipeline needs."""

    async def create_folder(self, folder_name: str) -> dict[str, Any]: ...

    async def upload_file(
        self, folder_name: str, file_name: str, content: str | bytes
    ) -> dict[str, Any]: ...


@dataclass(frozen=True)
class RFQPipelineResult:
    """What the caller gets back from a successful run."""

    document_id: uuid.UUID
    technical_proposal: str
    proposal_review: str


def notification_text(actor_name: str) -> str:
    return f"A new technical proposal has been generated from an RFQ by {actor_name}."


class RFQPipeline:
    """Turns one uploaded RFQ into a stored, reviewed proposal."""

    def __init__(
        self,
        *,
        session: AsyncSession,
        llm: LLMClient,
        store: DocumentStore,
    ) -> None:
        self.session = session
        self.llm = llm
        self.store = store

    async def run(self, upload: UploadedFile | None, ctx: RequestContext) -> RFQPipelineResult:
        """Execute the pipeline for one upload.

        Raises:
            NoFileUploaded: If ``upload`` is None
            UnsupportedFileType: If the upload's media type has no parser
            ProcessingFailed: If any later step fails (cause is chained)
        """
        if upload is None:
            raise NoFileUploaded("No file uploaded")

        step_log = StructuredStepLogger(trace_id=f"trace_{uuid.uuid4().hex[:8]}")

        try:
            with self._step(step_log, "extract"):
                rfq_text = await run_in_threadpool(extract_text, upload.path, upload.media_type)
        except UnsupportedFileType:
            metrics.inc_run("unsupported")
            raise
        except Exception as e:
            metrics.inc_run("error")
            raise ProcessingFailed("Error processing document") from e

        try:
            result = await self._process(rfq_text, upload.filename, ctx, step_log)
        except Exception as e:
            metrics.inc_run("error")
            raise ProcessingFailed("Error processing document") from e

        metrics.inc_run("success")
        return result

    async def _process(
        self,
        rfq_text: str,
        filename: str,
        ctx: RequestContext,
        step_log: StructuredStepLogger,
    ) -> RFQPipelineResult:
        project_name = derive_project_name(filename)
        display_name = f"Technical Proposal - {project_name}"

        with self._step(step_log, "generate"):
            technical_proposal = await self.llm.generate_proposal(rfq_text)

        with self._step(step_log, "review"):
            proposal_review = await self.llm.review_proposal(rfq_text, technical_proposal)

        document_id = uuid.uuid4()
        document = Document(
            document_id=document_id,
            name=display_name,
            creator_id=ctx.user_id,
            used_model=self.llm.model,
            current_status=INITIAL_STATUS,
            versions=[],
        )
        folder_name = str(document_id)
        version_number = len(document.versions) + 1
        json_file_name = version_file_name(version_number)
        docx_file_name = version_docx_name(version_number)
        sections = {PROPOSAL_SECTION: technical_proposal}

        with self._step(step_log, "create_folder", folder_name):
            logger.info("Creating folder in SharePoint: %s", folder_name)
            await self.store.create_folder(folder_name)

        with self._step(step_log, "upload_json", folder_name):
            version_file = VersionFile(
                content=VersionFileContent(technical_proposal=project_name, sections=sections)
            )
            await self.store.upload_file(
                folder_name,
                json_file_name,
                version_file.model_dump_json(by_alias=True, indent=2),
            )

        with self._step(step_log, "upload_docx", folder_name):
            docx_bytes = await run_in_threadpool(html_to_docx, technical_proposal)
            await self.store.upload_file(folder_name, docx_file_name, docx_bytes)

        with self._step(step_log, "save_document", folder_name):
            content = VersionContent(
                name=project_name, sections=sections, proposal_review=proposal_review
            )
            document.versions.append(
                DocumentVersion(
                    id=uuid.uuid4(),
                    version_id=json_file_name,
                    version_number=version_number,
                    name=display_name,
                    content=content.model_dump(by_alias=True),
                    last_modified=datetime.now(timezone.utc),
                    docx_file=docx_file_name,
                )
            )
            await save_document(self.session, document)

        with self._step(step_log, "create_approval", folder_name):
            await create_approval(self.session, document_id, status=INITIAL_STATUS)

        with self._step(step_log, "notify", folder_name):
            users = await list_users(self.session)
            sent = await notify_users(
                self.session,
                users=users,
                document_id=document_id,
                text=notification_text(ctx.name),
            )
            logger.info("Queued %d notifications for document %s", sent, folder_name)

        return RFQPipelineResult(
            document_id=document_id,
            technical_proposal=technical_proposal,
            proposal_review=proposal_review,
        )

    @contextmanager
    def _step(
        self, step_log: StructuredStepLogger, step: str, document_id: str | None = None
    ) -> Iterator[None]:
        """Time a step and record its outcome in logs and metrics."""
        start = time.perf_counter()
        try:
            yield
        except Exception as e:
            latency_ms = (time.perf_counter() - start) * 1000
            metrics.record_step(step, "error", latency_ms)
            step_log.log_step(
                step, "error", latency_ms, document_id=document_id, error_reason=type(e).__name__
            )
            raise
        latency_ms = (time.perf_counter() - start) * 1000
        metrics.record_step(step, "success", latency_ms)
        step_log.log_step(step, "success", latency_ms, document_id=document_id)
