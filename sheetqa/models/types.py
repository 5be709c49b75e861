from typing import List, Optional, Literal
from pydantic import BaseModel


class QuestionRequest(BaseModel):
    question: str


class CompletionOptions(BaseModel):
    temperature: float = 0.0
    max_tokens: int = 300
    top_p: float = 1.0
    frequency_penalty: float = 0.0
    presence_penalty: float = 0.0


# Stages an answer request moves through; "answered" and "failed" are terminal.
AnswerState = Literal["received", "ranking", "prompt_building", "completing", "answered", "failed"]


class AnswerOutcome(BaseModel):
    state: AnswerState
    answer: str = ""
    stage: Optional[AnswerState] = None  # stage that failed
    error: Optional[str] = None
    sections: int = 0
    top_titles: List[str] = []

    @property
    def ok(self) -> bool:
        return self.state == "answered"
