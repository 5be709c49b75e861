import logging
from typing import List, Mapping, Sequence, Tuple

from sheetqa.errors import MissingDocumentError
from sheetqa.services.text_metrics import count_words

DEFAULT_WORD_BUDGET = 1125  # rough word equivalent of the completion model's context window
SECTION_MARKER = "\n*"
PROMPT_PREAMBLE = (
    "Answer the question as truthfully as possible using the provided context, "
    "and if the answer is not contained within the text below, say \"I don't know.\"\n"
)

logger = logging.getLogger(__name__)


def select_sections(
    documents: Mapping[str, str],
    ranked: Sequence[Tuple[str, float]],
    word_budget: int = DEFAULT_WORD_BUDGET,
) -> List[str]:
    """Bodies of the top-ranked documents that fit in ``word_budget``.

    Stops at the first document that would overflow the budget; shorter
    documents further down the ranking are not considered.
    """
    chosen: List[str] = []
    total = 0
    for title, _score in ranked:
        body = documents.get(title)
        if body is None:
            raise MissingDocumentError(title)
        total += count_words(body)
        if total > word_budget:
            break
        chosen.append(body)
    return chosen


def assemble_prompt(question: str, sections: Sequence[str], preamble: str = PROMPT_PREAMBLE) -> str:
    context = "".join(SECTION_MARKER + body for body in sections)
    return preamble + "\nContext:\n" + context + "\n\n Q: " + question + "\n A:"


def build_prompt(
    question: str,
    documents: Mapping[str, str],
    ranked: Sequence[Tuple[str, float]],
    word_budget: int = DEFAULT_WORD_BUDGET,
    preamble: str = PROMPT_PREAMBLE,
) -> str:
    sections = select_sections(documents, ranked, word_budget)
    logger.info("prompt: selected %d document sections (budget=%d words)", len(sections), word_budget)
    return assemble_prompt(question, sections, preamble)
