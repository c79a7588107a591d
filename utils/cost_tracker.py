"""
Cost/usage tracking for provider calls.

Provider adapters hand one CostRecord per successful call to an injected
sink. Sinks are plain callables, so tests can pass a list's append method.
"""

import asyncio
import inspect
import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field

from config.settings import Settings, settings as default_settings

logger = logging.getLogger(__name__)


class CostRecord(BaseModel):
    """Token usage of one provider call."""
    run_id: str
    step: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0
    recorded_at: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


CostSink = Callable[[CostRecord], Any]


def make_cost_record(run_id: str, step: str, model: str, input_tokens: int, output_tokens: int) -> CostRecord:
    """Build a CostRecord, deriving the total."""
    input_tokens = input_tokens or 0
    output_tokens = output_tokens or 0
    return CostRecord(
        run_id=run_id,
        step=step,
        model=model,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        total_tokens=input_tokens + output_tokens,
    )


async def emit_cost(cost_sink: Optional[CostSink], record: CostRecord) -> None:
    """
    Hand a record to the sink.

    Async sinks are awaited on the loop. Plain callables (the Redis sink does
    blocking round trips) run in a worker thread so concurrent provider calls
    keep going. Sink failures are logged and never reach the caller.
    """
    if cost_sink is None:
        return
    try:
        if _is_async_sink(cost_sink):
            await cost_sink(record)
            return
        outcome = await asyncio.to_thread(cost_sink, record)
        if inspect.isawaitable(outcome):
            await outcome
    except Exception as e:
        logger.warning(f"[{record.run_id}] Cost tracking failed for {record.step}: {e}")


def _is_async_sink(cost_sink: CostSink) -> bool:
    return inspect.iscoroutinefunction(cost_sink) or inspect.iscoroutinefunction(
        getattr(cost_sink, "__call__", None)
    )


class LoggingCostSink:
    """Writes cost records to the log only."""

    def __call__(self, record: CostRecord) -> None:
        logger.info(
            f"[{record.run_id}] cost {record.step} {record.model}: "
            f"{record.input_tokens} in / {record.output_tokens} out"
        )


class RedisCostSink:
    """Appends cost records as JSON to a per-run Redis list (costs:{run_id})."""

    def __init__(self, redis_client=None, ttl: int = default_settings.COST_RECORD_TTL):
        self._redis_client = redis_client
        self.ttl = ttl

    @property
    def redis_client(self):
        if self._redis_client is None:
            from config.database import get_redis_client
            self._redis_client = get_redis_client()
        return self._redis_client

    def __call__(self, record: CostRecord) -> None:
        key = f"costs:{record.run_id}"
        self.redis_client.rpush(key, json.dumps(record.model_dump()))
        self.redis_client.expire(key, self.ttl)


def build_cost_sink(config: Optional[Settings] = None) -> Optional[CostSink]:
    """
    Build the cost sink for the current configuration.

    Returns None when cost tracking is disabled. Falls back to logging when
    Redis is unreachable.
    """
    config = config or default_settings

    if not config.COST_TRACKING_ENABLED:
        return None

    try:
        from config.database import get_redis_client
        client = get_redis_client()
        return RedisCostSink(client, ttl=config.COST_RECORD_TTL)
    except ConnectionError as e:
        logger.warning(f"Cost tracking falling back to logs, Redis unavailable: {e}")
        return LoggingCostSink()


def load_cost_records(run_id: str, redis_client=None) -> List[CostRecord]:
    """Read back every cost record stored for a run."""
    if redis_client is None:
        from config.database import get_redis_client
        redis_client = get_redis_client()

    raw = redis_client.lrange(f"costs:{run_id}", 0, -1) or []
    return [CostRecord(**json.loads(item)) for item in raw]


def summarize_costs(records: List[CostRecord]) -> Dict[str, Dict[str, int]]:
    """Token totals per model, plus an "all" entry."""
    totals: Dict[str, Dict[str, int]] = {}
    for record in records:
        for key in (record.model, "all"):
            entry = totals.setdefault(key, {"calls": 0, "input_tokens": 0, "output_tokens": 0, "total_tokens": 0})
            entry["calls"] += 1
            entry["input_tokens"] += record.input_tokens
            entry["output_tokens"] += record.output_tokens
            entry["total_tokens"] += record.total_tokens
    return totals
