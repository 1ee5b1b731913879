"""Find documents similar to a given one."""

from ..errors import NotFoundError
from ..models import SimilarDocument
from ..storage import DocumentStoreBase
from ..vectors import cosine_similarity


def find_similar_documents(
    document_id: str,
    tenant_id: str,
    store: DocumentStoreBase,
    limit: int = 5,
    threshold: float = 0.7,
) -> list[SimilarDocument]:
    """Rank the tenant's other documents by similarity to ``document_id``.

    The target is represented by its first embedded chunk; every other
    document scores as its best-matching chunk.

    Raises:
        NotFoundError: If the target has no embedded chunk in the tenant's
            completed corpus.
    """
    chunks = store.fetch_chunks_with_documents(tenant_id)

    target = next(
        (c.embedding for c in chunks if c.document_id == document_id and c.embedding),
        None,
    )
    if target is None:
        raise NotFoundError(f"Document {document_id} has no embedded chunk in tenant {tenant_id}")

    best: dict[str, SimilarDocument] = {}
    for chunk in chunks:
        if chunk.document_id == document_id or not chunk.embedding:
            continue
        sim = cosine_similarity(target, chunk.embedding)
        current = best.get(chunk.document_id)
        if current is None or sim > current.similarity:
            best[chunk.document_id] = SimilarDocument(
                document_id=chunk.document_id,
                title=chunk.document.title,
                similarity=sim,
            )

    matches = [m for m in best.values() if m.similarity >= threshold]
    matches.sort(key=lambda m: (-m.similarity, m.document_id))
    return matches[:max(limit, 0)]
