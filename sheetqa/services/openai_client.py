import openai

# Errors worth another attempt; everything else (4xx, bad payloads) fails fast.
TRANSIENT_ERRORS = (
    openai.APIConnectionError,  # includes APITimeoutError
    openai.RateLimitError,
    openai.InternalServerError,
)


def make_client(api_key: str, base_url: str = None, timeout: float = 30.0) -> openai.AsyncOpenAI:
    # tenacity owns retries, so the SDK's own retry loop is disabled
    return openai.AsyncOpenAI(api_key=api_key, base_url=base_url or None, timeout=timeout, max_retries=0)
