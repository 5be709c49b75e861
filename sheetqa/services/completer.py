import logging
from typing import Any, Optional

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from sheetqa.errors import CompletionError
from sheetqa.models.types import CompletionOptions
from sheetqa.services.metrics import now, elapsed_ms, record_llm
from sheetqa.services.openai_client import TRANSIENT_ERRORS

DEFAULT_MODEL = "gpt-3.5-turbo-instruct"

logger = logging.getLogger(__name__)


def _first_text(resp: Any) -> str:
    choices = getattr(resp, "choices", None)
    if not choices:
        raise CompletionError("completion response contained no choices")
    text = getattr(choices[0], "text", None)
    if not isinstance(text, str):
        raise CompletionError("completion choice has no text")
    return text.strip(" \n")


class CompletionClient:
    """Sends a finished prompt to the legacy /completions endpoint."""

    def __init__(self, client, model: str = DEFAULT_MODEL, options: Optional[CompletionOptions] = None):
        self.client = client
        self.model = model
        self.options = options or CompletionOptions()

    @retry(
        reraise=True,
        stop=stop_after_attempt(2),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=2),
        retry=retry_if_exception_type(TRANSIENT_ERRORS),
    )
    async def _create(self, prompt: str, options: CompletionOptions):
        return await self.client.completions.create(
            model=self.model,
            prompt=prompt,
            temperature=options.temperature,
            max_tokens=options.max_tokens,
            top_p=options.top_p,
            frequency_penalty=options.frequency_penalty,
            presence_penalty=options.presence_penalty,
        )

    async def complete(self, prompt: str, options: Optional[CompletionOptions] = None) -> str:
        opts = options or self.options
        t0 = now()
        try:
            resp = await self._create(prompt, opts)
            text = _first_text(resp)
        except CompletionError:
            record_llm("openai", self.model, latency_ms=elapsed_ms(t0), ok=False)
            raise
        except Exception as e:
            record_llm("openai", self.model, latency_ms=elapsed_ms(t0), ok=False)
            logger.warning("completer: request failed model=%s err=%s", self.model, e)
            raise CompletionError(f"completion request failed: {e}") from e
        record_llm("openai", self.model, latency_ms=elapsed_ms(t0), ok=True)
        return text
