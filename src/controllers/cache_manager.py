"""
Report store backed by Redis.

One JSON document per run, keyed brand_awareness:{run_id}. Storage
failures are logged and never fail the run.
"""
import json
import logging
from typing import Optional, Dict

from config.settings import settings

logger = logging.getLogger(__name__)


def report_key(run_id: str) -> str:
    """Redis key of the persisted report for a run."""
    return f"brand_awareness:{run_id}"


def get_report(run_id: str, redis_client=None) -> Optional[Dict]:
    """Get a persisted report by run id."""
    key = report_key(run_id)
    try:
        if redis_client is None:
            from config.database import get_redis_client
            redis_client = get_redis_client()

        cached = redis_client.get(key)
        if cached:
            logger.info(f"Report HIT: {key}")
            if isinstance(cached, bytes):
                cached = cached.decode('utf-8')
            return json.loads(cached)

        logger.debug(f"Report MISS: {key}")
        return None
    except Exception as e:
        logger.warning(f"Report retrieval failed for {key}: {e}")
        return None


def save_report(run_id: str, report: Dict, ttl: Optional[int] = None, redis_client=None) -> bool:
    """Persist a report, replacing any earlier report for the same run."""
    key = report_key(run_id)
    try:
        if redis_client is None:
            from config.database import get_redis_client
            redis_client = get_redis_client()

        redis_client.setex(key, ttl or settings.REPORT_CACHE_TTL, json.dumps(report))
        logger.info(f"Saved report: {key}")
        return True
    except Exception as e:
        logger.warning(f"Report storage failed for {key}: {e}")
        return False


def delete_report(run_id: str, redis_client=None) -> bool:
    """Remove the persisted report for a run (re-enrichment starts clean)."""
    key = report_key(run_id)
    try:
        if redis_client is None:
            from config.database import get_redis_client
            redis_client = get_redis_client()

        deleted = redis_client.delete(key)
        if deleted:
            logger.info(f"Deleted previous report: {key}")
        return bool(deleted)
    except Exception as e:
        logger.warning(f"Report deletion failed for {key}: {e}")
        return False
