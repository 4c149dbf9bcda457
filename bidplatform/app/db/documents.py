"""Repository functions for documents, approvals and notifications."""

import uuid
from collections.abc import Sequence

from sqlalchemy import insert, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from bidplatform.app.db.models import Approval, Document, Notification, User


async def save_document(session: AsyncSession, document: Document) -> Document:
    """Persist a document together with its versions.

    Raises:
        ValueError: If the document has no versions.
    """
    if not document.versions:
        raise ValueError("Refusing to persist a document without versions")

    session.add(document)
    await session.commit()
    return document


async def create_approval(
    session: AsyncSession, document_id: uuid.UUID, status: str = "draft"
) -> Approval:
    """Create the approval record that accompanies a new document."""
    approval = Approval(approval_id=uuid.uuid4(), document_id=document_id, status=status)
    session.add(approval)
    await session.commit()
    return approval


async def notify_users(
    session: AsyncSession,
    *,
    users: Sequence[User],
    document_id: uuid.UUID,
    text: str,
) -> int:
    """Insert one notification per user as a single batch.

    Returns:
        Number of notifications written
    """
    rows = [
        {
            "notification_id": uuid.uuid4(),
            "user_id": user.user_id,
            "document_id": document_id,
            "text": text,
        }
        for user in users
    ]
    if not rows:
        return 0

    await session.execute(insert(Notification), rows)
    await session.commit()
    return len(rows)


async def get_document(session: AsyncSession, document_id: uuid.UUID) -> Document | None:
    """Load a document with its versions eagerly."""
    result = await session.execute(
        select(Document)
        .where(Document.document_id == document_id)
        .options(selectinload(Document.versions))
    )
    return result.scalar_one_or_none()
