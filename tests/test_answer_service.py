import asyncio
from types import SimpleNamespace

from sheetqa.services.answer import AnswerService
from sheetqa.services.document_store import CorpusSnapshot
from tests.conftest import FakeCompleter, FakeEmbedder


def test_end_to_end_prompt_and_answer(x_snapshot, embedder, completer):
    service = AnswerService(x_snapshot, embedder, completer)
    outcome = asyncio.run(service.answer("What is X?"))
    assert outcome.ok
    assert outcome.state == "answered"
    assert outcome.answer == "X is a thing."
    assert outcome.sections == 1
    assert outcome.top_titles == ["X"]
    prompt = completer.prompts[0]
    assert prompt.endswith("\n\n Q: What is X?\n A:")
    assert "I don't know." in prompt
    assert "\n*X is a thing." in prompt


def test_word_budget_is_applied():
    snap = CorpusSnapshot(
        {"A": "one two three", "B": "four five six seven eight"},
        {"A": [1.0, 0.0], "B": [0.5, 0.5]},
    )
    completer = FakeCompleter()
    service = AnswerService(snap, FakeEmbedder(vectors={"q": [1.0, 0.0]}), completer, word_budget=4)
    outcome = asyncio.run(service.answer("q"))
    assert outcome.sections == 1
    assert "four" not in completer.prompts[0]


def test_ranking_failure_yields_failed_outcome(x_snapshot, completer):
    service = AnswerService(x_snapshot, FakeEmbedder(fail=True), completer)
    outcome = asyncio.run(service.answer("What is X?"))
    assert outcome.state == "failed"
    assert outcome.stage == "ranking"
    assert outcome.answer == ""
    assert completer.prompts == []


def test_missing_document_fails_prompt_building(completer):
    broken = SimpleNamespace(documents={}, embeddings={"ghost": [1.0, 0.0]})
    service = AnswerService(broken, FakeEmbedder(vectors={"q": [1.0, 0.0]}), completer)
    outcome = asyncio.run(service.answer("q"))
    assert outcome.state == "failed"
    assert outcome.stage == "prompt_building"
    assert "ghost" in outcome.error


def test_completion_failure_yields_failed_outcome(x_snapshot, embedder):
    service = AnswerService(x_snapshot, embedder, FakeCompleter(fail=True))
    outcome = asyncio.run(service.answer("What is X?"))
    assert outcome.state == "failed"
    assert outcome.stage == "completing"
    assert outcome.sections == 1


def test_empty_snapshot_still_completes(embedder, completer):
    service = AnswerService(CorpusSnapshot.empty(), embedder, completer)
    outcome = asyncio.run(service.answer("q"))
    assert outcome.ok
    assert "\nContext:\n\n\n Q: q\n A:" in completer.prompts[0]
