"""SentenceTransformer-based embedding provider."""

import logging

import numpy as np
from sentence_transformers import SentenceTransformer

logger = logging.getLogger(__name__)


class SentenceTransformerEmbedder:
    """Embedding provider backed by a local sentence-transformers model.

    The model is loaded on first use, so building a store never pays the
    torch import and download cost unless something is actually embedded.
    Vectors are L2-normalized float32, one row per input text.
    """

    DEFAULT_MODEL = "all-MiniLM-L6-v2"

    def __init__(
        self,
        model_name: str | None = None,
        device: str | None = None,
        batch_size: int = 32,
    ):
        """Initialize the embedder.

        Args:
            model_name: sentence-transformers model id or local path;
                all-MiniLM-L6-v2 if None
            device: Torch device ("cpu", "cuda", ...); auto-selected if None
            batch_size: Texts per forward pass inside ``encode``
        """
        self._model_name = model_name or self.DEFAULT_MODEL
        self._device = device
        self.batch_size = batch_size
        self._model: SentenceTransformer | None = None

    @property
    def model(self) -> SentenceTransformer:
        if self._model is None:
            logger.info(f"Loading embedding model {self._model_name}")
            self._model = SentenceTransformer(self._model_name, device=self._device)
        return self._model

    @property
    def dimension(self) -> int:
        return self.model.get_sentence_embedding_dimension()

    @property
    def model_name(self) -> str:
        return self._model_name

    def embed(self, texts: list[str]) -> np.ndarray:
        if not texts:
            return np.zeros((0, self.dimension), dtype=np.float32)

        embeddings = self.model.encode(
            texts,
            batch_size=self.batch_size,
            convert_to_numpy=True,
            normalize_embeddings=True,
            show_progress_bar=False,
        )
        return np.asarray(embeddings, dtype=np.float32).reshape(len(texts), -1)
