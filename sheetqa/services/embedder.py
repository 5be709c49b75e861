import logging
from typing import Any, List

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from sheetqa.errors import EmbeddingError
from sheetqa.services.metrics import now, elapsed_ms, record_llm
from sheetqa.services.openai_client import TRANSIENT_ERRORS

DEFAULT_MODEL = "text-embedding-3-small"

logger = logging.getLogger(__name__)


def _first_embedding(resp: Any) -> List[float]:
    data = getattr(resp, "data", None)
    if not data:
        raise EmbeddingError("embedding response contained no data")
    vec = getattr(data[0], "embedding", None)
    if not isinstance(vec, list) or not vec:
        raise EmbeddingError("embedding response item has no embedding vector")
    try:
        return [float(x) for x in vec]
    except (TypeError, ValueError) as e:
        raise EmbeddingError("embedding vector is not numeric") from e


class EmbeddingClient:
    """Maps text to an embedding vector through the /embeddings endpoint."""

    def __init__(self, client, model: str = DEFAULT_MODEL):
        self.client = client
        self.model = model

    @retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
    )
    async def _create(self, text: str):
        return await self.client.embeddings.create(model=self.model, input=text, encoding_format="float")

    async def embed(self, text: str) -> List[float]:
        t0 = now()
        try:
            resp = await self._create(text)
            vec = _first_embedding(resp)
        except EmbeddingError:
            record_llm("openai", self.model, latency_ms=elapsed_ms(t0), ok=False)
            raise
        except Exception as e:
            record_llm("openai", self.model, latency_ms=elapsed_ms(t0), ok=False)
            logger.warning("embedder: request failed model=%s err=%s", self.model, e)
            raise EmbeddingError(f"embedding request failed: {e}") from e
        record_llm("openai", self.model, latency_ms=elapsed_ms(t0), ok=True)
        return vec
