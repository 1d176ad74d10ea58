from __future__ import annotations

from collections import Counter
from typing import List

import pytest

from scopa.runner import Interpreter
from scopa.utils import ENV_DEBUG_PY_TRACE, ENV_MAX_DEPTH, ENV_SCOPING

SCOPA_ENV = (ENV_SCOPING, ENV_MAX_DEPTH, ENV_DEBUG_PY_TRACE)


def pytest_collection_modifyitems(
    session: pytest.Session,
    config: pytest.Config,
    items: List[pytest.Item],
) -> None:
    """Scenario tables are keyed by id; a repeated id would hide a row."""
    del session
    del config

    counts = Counter(item.nodeid for item in items)
    repeated = sorted(nodeid for nodeid, n in counts.items() if n > 1)
    if repeated:
        lines = "\n".join(f"- {nodeid}" for nodeid in repeated)
        raise pytest.UsageError(f"Repeated scenario ids:\n{lines}")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Run every test with the default mode, depth and traceback settings."""
    for name in SCOPA_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def interp(clean_env: None) -> Interpreter:
    del clean_env
    return Interpreter()
