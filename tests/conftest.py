"""
Shared pytest fixtures for convergent tests.
"""

import pytest

from convergent import ReplicaTagGenerator, disable_logging


@pytest.fixture
def tags_for():
    """Factory for deterministic per-replica tag generators."""
    return lambda replica_id: ReplicaTagGenerator(f"r{replica_id}")


@pytest.fixture(autouse=True)
def silent_convergent():
    """Drop any console handler a test installed."""
    yield
    disable_logging()
