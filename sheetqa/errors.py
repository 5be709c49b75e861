class SheetQAError(Exception):
    """Base class for every error raised by sheetqa."""


class AnswerPipelineError(SheetQAError):
    """A per-request failure; collapsed to an empty answer at the HTTP boundary."""


class EmbeddingError(AnswerPipelineError):
    pass


class CompletionError(AnswerPipelineError):
    pass


class MissingDocumentError(AnswerPipelineError):
    def __init__(self, title: str):
        super().__init__(f"ranked title has no document body: {title!r}")
        self.title = title


class StoreLoadError(SheetQAError):
    """Startup-only; the service must not start serving after this."""


class ConfigurationError(SheetQAError):
    pass
