import pytest

from access_policy.core.config import settings
from access_policy.policy.evaluator import set_policy_evaluator


@pytest.fixture(autouse=True)
def _reset_policy_evaluator():
    """Every test starts from the default deny-all evaluator."""
    previous = set_policy_evaluator(None)
    yield
    set_policy_evaluator(previous)


@pytest.fixture()
def explain_enabled(monkeypatch):
    monkeypatch.setattr(settings, "PERMS_EXPLAIN", True)
