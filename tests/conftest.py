import pytest

from bfcore.config import ENV_VARS


@pytest.fixture(autouse=True)
def clean_bf_env(monkeypatch):
    """Keep BF_* variables from the developer's shell out of the tests."""
    for var in ENV_VARS.values():
        monkeypatch.delenv(var, raising=False)
