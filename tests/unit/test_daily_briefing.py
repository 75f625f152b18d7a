from __future__ import annotations

import asyncio
import json
import urllib.error

from domain.services import DailyBriefingService
from domain.storage_keys import DAILY_BRIEFING_KEY
from tests.mocks import ScriptedLLMClient, make_job


def _briefing(ctx, llm):
    return DailyBriefingService(store=ctx.store, llm=llm, storage=ctx.storage, logger=ctx.logger)


def test_briefing_is_generated_and_cached_by_record_count(make_context) -> None:
    ctx = make_context(seed=(make_job(),))
    llm = ScriptedLLMClient(completions=["  Follow up with Acme.  ", "Should not be used."])
    service = _briefing(ctx, llm)

    assert asyncio.run(service.get_briefing()) == "Follow up with Acme."
    assert asyncio.run(service.get_briefing()) == "Follow up with Acme."
    assert len(llm.prompts) == 1
    assert json.loads(ctx.storage.items[DAILY_BRIEFING_KEY]) == {
        "count": 1,
        "text": "Follow up with Acme.",
    }
    assert "2024-01-20" in llm.prompts[0]
    assert '"company": "Acme"' in llm.prompts[0]


def test_briefing_refreshes_when_record_count_changes(make_context) -> None:
    ctx = make_context(seed=(make_job(),))
    llm = ScriptedLLMClient(completions=["First.", "Second."])
    service = _briefing(ctx, llm)

    asyncio.run(service.get_briefing())
    ctx.store.create({"company": "Globex", "role": "SRE"})

    assert asyncio.run(service.get_briefing()) == "Second."


def test_no_briefing_for_empty_pipeline(make_context) -> None:
    llm = ScriptedLLMClient(completions=["unused"])
    assert asyncio.run(_briefing(make_context(), llm).get_briefing()) is None
    assert llm.prompts == []


def test_no_briefing_without_llm(make_context) -> None:
    ctx = make_context(seed=(make_job(),))
    assert asyncio.run(_briefing(ctx, None).get_briefing()) is None


def test_llm_failure_yields_no_briefing(make_context) -> None:
    ctx = make_context(seed=(make_job(),))
    llm = ScriptedLLMClient(completions=[urllib.error.URLError("timed out")])

    assert asyncio.run(_briefing(ctx, llm).get_briefing()) is None
    assert DAILY_BRIEFING_KEY not in ctx.storage.items
    assert "daily_briefing_unavailable" in ctx.logger.messages("warning")


def test_corrupt_cache_is_regenerated(make_context) -> None:
    ctx = make_context(seed=(make_job(),))
    ctx.storage.items[DAILY_BRIEFING_KEY] = "not json"
    llm = ScriptedLLMClient(completions=["Fresh."])

    assert asyncio.run(_briefing(ctx, llm).get_briefing()) == "Fresh."
    assert "daily_briefing_cache_corrupt" in ctx.logger.messages("warning")
