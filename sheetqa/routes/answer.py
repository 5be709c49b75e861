from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import PlainTextResponse

from sheetqa.models.types import AnswerOutcome, QuestionRequest
from sheetqa.services.answer import AnswerService

router = APIRouter()


def get_answer_service(request: Request) -> AnswerService:
    service = getattr(request.app.state, "service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Document store is still loading")
    return service


def answer_text(outcome: AnswerOutcome) -> str:
    """The only place a failed outcome becomes an empty answer.

    Callers cannot tell "no answer" from an internal failure; the failure is
    logged by AnswerService.
    """
    return outcome.answer if outcome.ok else ""


@router.post("/generateAnswer", response_class=PlainTextResponse)
async def generate_answer(req: QuestionRequest, service: AnswerService = Depends(get_answer_service)):
    outcome = await service.answer(req.question)
    return PlainTextResponse(answer_text(outcome))
