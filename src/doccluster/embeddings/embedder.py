"""Chunk embedding using sentence-transformers."""

import logging
from typing import Any

from rich.progress import Progress

from ..models import ChunkEmbedding

logger = logging.getLogger(__name__)


class Embedder:
    """Fills in missing chunk embeddings with a sentence-transformers model."""

    def __init__(self, config: dict[str, Any], model=None):
        self.model_name = config.get("embedding_model", "intfloat/e5-large-v2")
        self._model = model

    @property
    def model(self):
        """Lazy-load the embedding model."""
        if self._model is None:
            from sentence_transformers import SentenceTransformer
            self._model = SentenceTransformer(self.model_name)
        return self._model

    def embed_texts(self, texts: list[str]) -> list[list[float]]:
        # e5 models need "passage: " prefix for documents
        vectors = self.model.encode([f"passage: {t}" for t in texts])
        return [[float(x) for x in v] for v in vectors]

    def embed_chunks(self, chunks: list[ChunkEmbedding], batch_size: int = 32, show_progress: bool = True) -> int:
        """Embed every chunk that has no embedding yet, in place.

        Returns number of chunks embedded.
        """
        pending = [c for c in chunks if not c.embedding]
        if not pending:
            return 0

        logger.debug(f"Embedding {len(pending)} chunk(s) with {self.model_name}")
        with Progress(disable=not show_progress) as progress:
            task = progress.add_task("Embedding...", total=len(pending))
            for i in range(0, len(pending), batch_size):
                batch = pending[i:i + batch_size]
                for chunk, vector in zip(batch, self.embed_texts([c.content for c in batch])):
                    chunk.embedding = vector
                progress.advance(task, len(batch))

        return len(pending)
