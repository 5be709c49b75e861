import logging
from typing import List, Mapping, Sequence, Tuple

from sheetqa.services.similarity import cosine_similarity

logger = logging.getLogger(__name__)


def score_documents(question_vec: Sequence[float], embeddings: Mapping[str, Sequence[float]]) -> List[Tuple[str, float]]:
    scored = [(title, cosine_similarity(vec, question_vec)) for title, vec in embeddings.items()]
    # sorted() is stable, so equal scores keep the mapping's (sheet row) order
    return sorted(scored, key=lambda x: -x[1])


async def rank_documents(question: str, embeddings: Mapping[str, Sequence[float]], embedder) -> List[Tuple[str, float]]:
    """Every document ordered by descending similarity to ``question``.

    Raises EmbeddingError when the question cannot be embedded.
    """
    qvec = await embedder.embed(question)
    ranked = score_documents(qvec, embeddings)
    logger.info("retriever: ranked=%d top_sims=%s", len(ranked), [(t, round(s, 3)) for t, s in ranked[:3]])
    return ranked
