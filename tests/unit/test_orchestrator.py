"""Tests for the RFQ pipeline with a recording store and the stub LLM."""

import json
import threading
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bidplatform.app.db.context import RequestContext
from bidplatform.app.db.documents import get_document
from bidplatform.app.db.models import Approval, Document, Notification, User
from bidplatform.app.errors import (
    GenerationFailed,
    NoFileUploaded,
    ProcessingFailed,
    UnsupportedFileType,
)
from bidplatform.app.extraction.uploads import UploadedFile
from bidplatform.app.llm.client import DeterministicStubClient
from bidplatform.app.pipeline import orchestrator
from bidplatform.app.pipeline.orchestrator import RFQPipeline, notification_text

RFQ_BODY = "RFQ 42: Campus Wi-Fi\nSupply and install 120 access points."


class FailingLLM(DeterministicStubClient):
    async def review_proposal(self, rfq_text: str, proposal: str) -> str:
        raise GenerationFailed("Text generation failed during review")


def _upload(tmp_path: Path, filename: str = "RFQ-42.txt", media_type: str = "text/plain") -> UploadedFile:
    path = tmp_path / "spooled-upload"
    path.write_text(RFQ_BODY, encoding="utf-8")
    return UploadedFile(path=path, filename=filename, media_type=media_type)


def _ctx(user: User) -> RequestContext:
    return RequestContext(user_id=user.user_id, name=user.name, role=user.role)


async def _count(session: AsyncSession, model: type) -> int:
    result = await session.execute(select(func.count()).select_from(model))
    return int(result.scalar_one())


@pytest.mark.asyncio
async def test_run_persists_first_version_and_uploads_artifacts(
    tmp_path: Path,
    db_session: AsyncSession,
    make_user: Callable[..., Awaitable[User]],
    store: Any,
) -> None:
    creator = await make_user(role="Bid Creator", name="Dana")
    pipeline = RFQPipeline(session=db_session, llm=DeterministicStubClient(), store=store)
    upload = _upload(tmp_path)

    result = await pipeline.run(upload, _ctx(creator))

    # Temporary upload is gone
    assert not upload.path.exists()

    folder = str(result.document_id)
    assert store.folders == [folder]
    assert set(store.files) == {f"{folder}/version-1.json", f"{folder}/version-1.docx"}

    version_file = json.loads(store.files[f"{folder}/version-1.json"])
    assert version_file == {
        "content": {
            "technicalProposal": "RFQ-42",
            "sections": {"Technical Proposal": result.technical_proposal},
        }
    }
    assert store.files[f"{folder}/version-1.docx"][:2] == b"PK"

    document = await get_document(db_session, result.document_id)
    assert document is not None
    assert document.name == "Technical Proposal - RFQ-42"
    assert document.creator_id == creator.user_id
    assert document.used_model == "stub"
    assert document.current_status == "draft"
    assert len(document.versions) == 1

    version = document.versions[0]
    assert version.version_number == 1
    assert version.version_id == "version-1.json"
    assert version.docx_file == "version-1.docx"
    assert version.name == "Technical Proposal - RFQ-42"
    assert version.content == {
        "name": "RFQ-42",
        "sections": {"Technical Proposal": result.technical_proposal},
        "proposalReview": result.proposal_review,
    }

    approval = (await db_session.execute(select(Approval))).scalar_one()
    assert approval.document_id == result.document_id
    assert approval.status == "draft"


@pytest.mark.asyncio
async def test_run_notifies_every_user_including_creator(
    tmp_path: Path,
    db_session: AsyncSession,
    make_user: Callable[..., Awaitable[User]],
    store: Any,
) -> None:
    creator = await make_user(role="Bid Creator", name="Dana")
    await make_user(role="Bid Reviewer")
    await make_user(role="Client")
    pipeline = RFQPipeline(session=db_session, llm=DeterministicStubClient(), store=store)

    result = await pipeline.run(_upload(tmp_path), _ctx(creator))

    notifications = (await db_session.execute(select(Notification))).scalars().all()
    assert len(notifications) == 3
    assert {n.document_id for n in notifications} == {result.document_id}
    assert {n.text for n in notifications} == {notification_text("Dana")}
    assert creator.user_id in {n.user_id for n in notifications}


@pytest.mark.asyncio
async def test_run_without_upload_raises_no_file(
    db_session: AsyncSession,
    make_user: Callable[..., Awaitable[User]],
    store: Any,
) -> None:
    creator = await make_user()
    pipeline = RFQPipeline(session=db_session, llm=DeterministicStubClient(), store=store)

    with pytest.raises(NoFileUploaded):
        await pipeline.run(None, _ctx(creator))


@pytest.mark.asyncio
async def test_unsupported_upload_touches_nothing(
    tmp_path: Path,
    db_session: AsyncSession,
    make_user: Callable[..., Awaitable[User]],
    store: Any,
) -> None:
    creator = await make_user()
    pipeline = RFQPipeline(session=db_session, llm=DeterministicStubClient(), store=store)
    upload = _upload(tmp_path, filename="diagram.png", media_type="image/png")

    with pytest.raises(UnsupportedFileType):
        await pipeline.run(upload, _ctx(creator))

    assert not upload.path.exists()
    assert store.folders == []
    assert await _count(db_session, Document) == 0


@pytest.mark.asyncio
async def test_generation_failure_is_wrapped_before_any_side_effect(
    tmp_path: Path,
    db_session: AsyncSession,
    make_user: Callable[..., Awaitable[User]],
    store: Any,
) -> None:
    creator = await make_user()
    pipeline = RFQPipeline(session=db_session, llm=FailingLLM(), store=store)

    with pytest.raises(ProcessingFailed) as exc_info:
        await pipeline.run(_upload(tmp_path), _ctx(creator))

    assert isinstance(exc_info.value.__cause__, GenerationFailed)
    assert store.folders == []
    assert store.files == {}
    assert await _count(db_session, Document) == 0


@pytest.mark.asyncio
async def test_store_failure_leaves_no_document(
    tmp_path: Path,
    db_session: AsyncSession,
    make_user: Callable[..., Awaitable[User]],
    make_store: Any,
) -> None:
    creator = await make_user()
    store = make_store(fail_on="create_folder")
    pipeline = RFQPipeline(session=db_session, llm=DeterministicStubClient(), store=store)

    with pytest.raises(ProcessingFailed) as exc_info:
        await pipeline.run(_upload(tmp_path), _ctx(creator))

    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert await _count(db_session, Document) == 0
    assert await _count(db_session, Notification) == 0


@pytest.mark.asyncio
async def test_upload_failure_keeps_created_folder(
    tmp_path: Path,
    db_session: AsyncSession,
    make_user: Callable[..., Awaitable[User]],
    make_store: Any,
) -> None:
    """A folder created before a failing upload is not cleaned up."""
    creator = await make_user()
    store = make_store(fail_on="upload_file")
    pipeline = RFQPipeline(session=db_session, llm=DeterministicStubClient(), store=store)

    with pytest.raises(ProcessingFailed):
        await pipeline.run(_upload(tmp_path), _ctx(creator))

    assert len(store.folders) == 1
    assert await _count(db_session, Document) == 0
    assert await _count(db_session, Approval) == 0


@pytest.mark.asyncio
async def test_file_parsing_and_rendering_run_off_the_event_loop(
    tmp_path: Path,
    db_session: AsyncSession,
    make_user: Callable[..., Awaitable[User]],
    store: Any,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    loop_thread = threading.get_ident()
    threads: dict[str, int] = {}

    def wrap(name: str, func: Callable[..., Any]) -> Callable[..., Any]:
        def wrapper(*args: Any) -> Any:
            threads[name] = threading.get_ident()
            return func(*args)

        return wrapper

    monkeypatch.setattr(orchestrator, "extract_text", wrap("extract", orchestrator.extract_text))
    monkeypatch.setattr(orchestrator, "html_to_docx", wrap("docx", orchestrator.html_to_docx))
    creator = await make_user()
    pipeline = RFQPipeline(session=db_session, llm=DeterministicStubClient(), store=store)

    await pipeline.run(_upload(tmp_path), _ctx(creator))

    assert set(threads) == {"extract", "docx"}
    assert loop_thread not in threads.values()
