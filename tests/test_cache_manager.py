"""
Tests for the Redis report store. Redis is mocked.
"""

import json
from unittest.mock import MagicMock

from src.controllers.cache_manager import report_key, save_report, get_report, delete_report


def test_save_report():
    redis_client = MagicMock()

    assert save_report("run-1", {"status": "completed"}, ttl=30, redis_client=redis_client)

    redis_client.setex.assert_called_once_with("brand_awareness:run-1", 30, json.dumps({"status": "completed"}))


def test_get_report_decodes_bytes():
    redis_client = MagicMock()
    redis_client.get.return_value = json.dumps({"run_id": "run-1"}).encode("utf-8")

    assert get_report("run-1", redis_client=redis_client) == {"run_id": "run-1"}
    redis_client.get.assert_called_once_with(report_key("run-1"))


def test_get_missing_report():
    redis_client = MagicMock()
    redis_client.get.return_value = None

    assert get_report("run-2", redis_client=redis_client) is None


def test_storage_errors_are_not_raised():
    redis_client = MagicMock()
    redis_client.get.side_effect = ConnectionError("down")
    redis_client.setex.side_effect = ConnectionError("down")
    redis_client.delete.side_effect = ConnectionError("down")

    assert get_report("run-1", redis_client=redis_client) is None
    assert not save_report("run-1", {}, redis_client=redis_client)
    assert not delete_report("run-1", redis_client=redis_client)


def test_delete_report():
    redis_client = MagicMock()
    redis_client.delete.return_value = 1

    assert delete_report("run-1", redis_client=redis_client)
    redis_client.delete.assert_called_once_with("brand_awareness:run-1")
