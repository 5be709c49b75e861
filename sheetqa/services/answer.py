import logging
from typing import Optional

from sheetqa.errors import AnswerPipelineError
from sheetqa.models.types import AnswerOutcome, AnswerState, CompletionOptions
from sheetqa.services.document_store import CorpusSnapshot
from sheetqa.services.metrics import begin_run, end_run
from sheetqa.services.prompt import DEFAULT_WORD_BUDGET, PROMPT_PREAMBLE, assemble_prompt, select_sections
from sheetqa.services.retriever import rank_documents

logger = logging.getLogger(__name__)


class AnswerService:
    """Ranks the snapshot against a question, packs a prompt and completes it.

    One instance serves every request; the snapshot is read-only and all
    per-request state lives in ``answer``'s locals.
    """

    def __init__(
        self,
        snapshot: CorpusSnapshot,
        embedder,
        completer,
        word_budget: int = DEFAULT_WORD_BUDGET,
        options: Optional[CompletionOptions] = None,
        preamble: str = PROMPT_PREAMBLE,
    ):
        self.snapshot = snapshot
        self.embedder = embedder
        self.completer = completer
        self.word_budget = word_budget
        self.options = options
        self.preamble = preamble

    async def answer(self, question: str) -> AnswerOutcome:
        token = begin_run()
        state: AnswerState = "received"
        top_titles = []
        sections = []
        try:
            state = "ranking"
            ranked = await rank_documents(question, self.snapshot.embeddings, self.embedder)
            top_titles = [t for t, _ in ranked[:5]]

            state = "prompt_building"
            sections = select_sections(self.snapshot.documents, ranked, self.word_budget)
            prompt = assemble_prompt(question, sections, self.preamble)
            logger.debug("answer: prompt=%r", prompt)

            state = "completing"
            text = await self.completer.complete(prompt, self.options)
        except AnswerPipelineError as e:
            logger.error("answer: failed stage=%s q=%r err=%s", state, question, e)
            return AnswerOutcome(
                state="failed",
                stage=state,
                error=str(e),
                sections=len(sections),
                top_titles=top_titles,
            )
        finally:
            metrics = end_run(token)
            logger.info("answer: q=%r stage=%s metrics=%s", question, state, metrics)

        logger.info("answer: answered q=%r sections=%d answer_chars=%d", question, len(sections), len(text))
        return AnswerOutcome(state="answered", answer=text, sections=len(sections), top_titles=top_titles)
