from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from sheetqa.errors import StoreLoadError

logger = logging.getLogger(__name__)

# Row 1 is the header; (title, body) pairs start on row 2 in columns A:B
FIRST_ROW = 2


class CorpusSnapshot:
    """Read-only title -> body and title -> vector mappings, built once at startup."""

    def __init__(self, documents: Mapping[str, str], embeddings: Mapping[str, Sequence[float]]):
        if set(documents) != set(embeddings):
            raise ValueError("documents and embeddings must share the same titles")
        self.documents: Mapping[str, str] = MappingProxyType(dict(documents))
        self.embeddings: Mapping[str, Tuple[float, ...]] = MappingProxyType(
            {t: tuple(v) for t, v in embeddings.items()}
        )

    def __len__(self) -> int:
        return len(self.documents)

    @classmethod
    def empty(cls) -> "CorpusSnapshot":
        return cls({}, {})


class SheetSource:
    """Reads rows from a Google Sheets tab via the Sheets v4 API."""

    def __init__(self, api_key: Optional[str] = None, service=None):
        self.api_key = api_key
        self._svc = service

    def _service(self):
        if self._svc is None:
            from googleapiclient.discovery import build  # lazy import

            # Without an API key the client falls back to application-default credentials
            self._svc = build("sheets", "v4", developerKey=self.api_key, cache_discovery=False)
        return self._svc

    def fetch_rows(self, sheet_id: str, sheet_name: str) -> List[List[str]]:
        sheet_range = f"{sheet_name}!A{FIRST_ROW}:B"
        resp = (
            self._service()
            .spreadsheets()
            .values()
            .get(spreadsheetId=sheet_id, range=sheet_range)
            .execute()
        )
        return resp.get("values", []) or []


def _split_row(row: Sequence) -> Tuple[str, str]:
    title = str(row[0]) if len(row) > 0 and row[0] is not None else ""
    body = str(row[1]) if len(row) > 1 and row[1] is not None else ""
    return title, body


async def load_snapshot(source, embedder, sheet_id: Optional[str], sheet_name: str) -> CorpusSnapshot:
    """Fetch every row and embed ``title + "\\n" + body``.

    Any failure raises StoreLoadError; callers treat it as fatal.
    """
    if not sheet_id:
        raise StoreLoadError("no spreadsheet id configured (SPREADSHEET_ID)")
    try:
        rows = source.fetch_rows(sheet_id, sheet_name)
    except Exception as e:
        raise StoreLoadError(f"could not read sheet {sheet_name!r}: {e}") from e

    documents: Dict[str, str] = {}
    embeddings: Dict[str, List[float]] = {}
    for offset, row in enumerate(rows):
        title, body = _split_row(row)
        if not title.strip():
            logger.warning("store: skipping row %d with blank title", FIRST_ROW + offset)
            continue
        if title in documents:
            logger.warning("store: duplicate title %r on row %d replaces earlier row", title, FIRST_ROW + offset)
        try:
            vec = await embedder.embed(title + "\n" + body)
        except Exception as e:
            raise StoreLoadError(f"could not embed row {FIRST_ROW + offset} ({title!r}): {e}") from e
        documents[title] = body
        embeddings[title] = vec

    if not documents:
        logger.warning("store: sheet %r returned no documents; answers will have no context", sheet_name)
    logger.info("store: loaded %d documents from sheet %r", len(documents), sheet_name)
    return CorpusSnapshot(documents, embeddings)
