"""Document library - list and delete a user's documents."""

import logging
from uuid import UUID

from contract_search.db.context import RequestContext
from contract_search.db.repositories import DocumentFilter, DocumentStore
from contract_search.errors import DocumentNotFoundError
from contract_search.models.common import DocumentStatus
from contract_search.models.docs import ContractDocument

logger = logging.getLogger(__name__)


async def list_documents(
    *,
    ctx: RequestContext,
    store: DocumentStore,
    status: DocumentStatus | None = None,
) -> list[ContractDocument]:
    """List the caller's documents, newest first.

    Args:
        ctx: Request context
        store: Document store
        status: Optional lifecycle status filter

    Returns:
        Documents owned by the caller
    """
    return await store.select_documents(DocumentFilter(user_id=ctx.user_id, status=status))


async def delete_document(
    *,
    ctx: RequestContext,
    doc_id: UUID,
    store: DocumentStore,
) -> None:
    """Delete a caller-owned document and all of its chunks.

    Args:
        ctx: Request context
        doc_id: Document to delete
        store: Document store

    Raises:
        DocumentNotFoundError: If the document is absent or owned by another user
        StoreError: If the store fails
    """
    owned = await store.select_documents(
        DocumentFilter(user_id=ctx.user_id, id_in=[doc_id]), limit=1
    )
    if not owned:
        raise DocumentNotFoundError(doc_id)

    await store.delete_document(doc_id)
    logger.info(f"[library] deleted doc_id={doc_id} user_id={ctx.user_id}")
