# Ensure `import sheetqa` works when tests run from a checkout without installing
import os
import sys
import hashlib
from typing import Dict, List, Optional

import numpy as np
import pytest

REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from sheetqa.errors import CompletionError, EmbeddingError
from sheetqa.services.document_store import CorpusSnapshot

EMBED_DIM = 8


def hashed_vector(text: str) -> List[float]:
    seed = int(hashlib.sha256(text.encode("utf-8")).hexdigest()[:8], 16)
    rng = np.random.default_rng(seed)
    v = rng.random(EMBED_DIM)
    return (v / (np.linalg.norm(v) + 1e-8)).tolist()


class FakeEmbedder:
    """Deterministic embedder; explicit vectors win over the hashed fallback."""

    def __init__(self, vectors: Optional[Dict[str, List[float]]] = None, fail: bool = False):
        self.vectors = vectors or {}
        self.fail = fail
        self.calls: List[str] = []

    async def embed(self, text: str) -> List[float]:
        self.calls.append(text)
        if self.fail:
            raise EmbeddingError("embedding service unavailable")
        if text in self.vectors:
            return list(self.vectors[text])
        return hashed_vector(text)


class FakeCompleter:
    def __init__(self, answer: str = "X is a thing.", fail: bool = False):
        self.answer = answer
        self.fail = fail
        self.prompts: List[str] = []

    async def complete(self, prompt: str, options=None) -> str:
        self.prompts.append(prompt)
        if self.fail:
            raise CompletionError("completion service unavailable")
        return self.answer


class FakeSheetSource:
    def __init__(self, rows=None, error: Optional[Exception] = None):
        self.rows = rows or []
        self.error = error
        self.requests = []

    def fetch_rows(self, sheet_id: str, sheet_name: str):
        self.requests.append((sheet_id, sheet_name))
        if self.error is not None:
            raise self.error
        return self.rows


@pytest.fixture
def embedder():
    return FakeEmbedder()


@pytest.fixture
def completer():
    return FakeCompleter()


@pytest.fixture
def x_snapshot():
    return CorpusSnapshot({"X": "X is a thing."}, {"X": hashed_vector("X\nX is a thing.")})
