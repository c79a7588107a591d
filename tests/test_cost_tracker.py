"""
Tests for cost records and sinks. Redis is mocked.
"""

import asyncio
import json
import threading
from unittest.mock import MagicMock

from config.settings import Settings
from utils.cost_tracker import (
    LoggingCostSink,
    RedisCostSink,
    build_cost_sink,
    emit_cost,
    load_cost_records,
    make_cost_record,
    summarize_costs,
)


def test_make_cost_record_totals():
    record = make_cost_record("run-1", "brand_brand_recall_claude", "anthropic/claude", 120, None)

    assert record.input_tokens == 120
    assert record.output_tokens == 0
    assert record.total_tokens == 120
    assert record.recorded_at


def test_redis_sink_appends_to_run_list():
    redis_client = MagicMock()
    sink = RedisCostSink(redis_client, ttl=60)
    record = make_cost_record("run-1", "competitive_summary", "anthropic/claude", 10, 5)

    sink(record)

    key, payload = redis_client.rpush.call_args[0]
    assert key == "costs:run-1"
    assert json.loads(payload)["total_tokens"] == 15
    redis_client.expire.assert_called_once_with("costs:run-1", 60)


def test_build_cost_sink_disabled():
    assert build_cost_sink(Settings(COST_TRACKING_ENABLED=False)) is None


def test_build_cost_sink_falls_back_to_logging(monkeypatch):
    def unavailable():
        raise ConnectionError("Redis connection failed: refused")

    monkeypatch.setattr("config.database.get_redis_client", unavailable)

    sink = build_cost_sink(Settings(COST_TRACKING_ENABLED=True))

    assert isinstance(sink, LoggingCostSink)


def test_build_cost_sink_uses_redis(monkeypatch):
    redis_client = MagicMock()
    monkeypatch.setattr("config.database.get_redis_client", lambda: redis_client)

    sink = build_cost_sink(Settings(COST_TRACKING_ENABLED=True, COST_RECORD_TTL=99))

    assert isinstance(sink, RedisCostSink)
    assert sink.ttl == 99


def test_emit_cost_swallows_sink_errors():
    def broken(record):
        raise RuntimeError("disk full")

    record = make_cost_record("run-1", "step", "model", 1, 1)

    asyncio.run(emit_cost(broken, record))
    asyncio.run(emit_cost(None, record))


def test_load_and_summarize_costs():
    records = [
        make_cost_record("run-1", "brand_brand_recall_chatgpt", "openai/gpt-4o", 10, 20),
        make_cost_record("run-1", "brand_service_check_chatgpt", "openai/gpt-4o", 5, 5),
        make_cost_record("run-1", "competitive_summary", "anthropic/claude", 100, 50),
    ]
    redis_client = MagicMock()
    redis_client.lrange.return_value = [json.dumps(r.model_dump()) for r in records]

    loaded = load_cost_records("run-1", redis_client)
    totals = summarize_costs(loaded)

    redis_client.lrange.assert_called_once_with("costs:run-1", 0, -1)
    assert loaded == records
    assert totals["openai/gpt-4o"] == {"calls": 2, "input_tokens": 15, "output_tokens": 25, "total_tokens": 40}
    assert totals["all"]["total_tokens"] == 190


def test_emit_cost_runs_plain_sinks_off_the_loop_thread():
    threads = []

    def sink(record):
        threads.append(threading.get_ident())

    class AsyncSink:
        async def __call__(self, record):
            threads.append(threading.get_ident())

    record = make_cost_record("run-1", "step", "model", 1, 1)
    loop_thread = threading.get_ident()

    asyncio.run(emit_cost(sink, record))
    asyncio.run(emit_cost(AsyncSink(), record))

    assert threads[0] != loop_thread
    assert threads[1] == loop_thread
