"""
Shared fixtures. No test talks to a real provider or to Redis.
"""

import pytest

from models.schemas import BusinessProfile
from tests.fakes import FakeProvider, FailingProvider, acme_responder, PROVIDER_IDS


@pytest.fixture
def acme_profile():
    return BusinessProfile(
        business_name="Acme",
        business_type="design consultancy",
        location="Sydney, Australia",
        services=["consulting", "design"],
        key_phrases=["boutique design studio"]
    )


@pytest.fixture
def acme_providers():
    return {pid: FakeProvider(pid, responder=acme_responder(pid)) for pid in PROVIDER_IDS}


@pytest.fixture
def failing_providers():
    return {pid: FailingProvider(pid) for pid in PROVIDER_IDS}
