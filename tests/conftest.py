"""
Pytest configuration and fixtures for Turbot tests
"""
from datetime import datetime, timedelta, timezone

import pytest

from turbot.store.types import Persona, ThoughtProduct
from turbot.store.workspace import WorkspaceStore

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def turbot_home(tmp_path, monkeypatch) -> str:
    """Point every store opened during a test at a private database."""
    home = tmp_path / "turbot-home"
    monkeypatch.setenv("TURBOT_HOME", str(home))
    monkeypatch.setenv("ANTHROPIC_API_KEY", "test-key")
    return str(home)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def store():
    store = WorkspaceStore()
    yield store
    store.close()


@pytest.fixture
def workspace_id(store) -> str:
    return store.create_workspace("Pricing research").id


@pytest.fixture
def make_tp():
    """Build a ThoughtProduct with sensible defaults; age is in days before NOW."""
    counter = {"n": 0}

    def _make(
        content: str = "Teams adopt tools bottom-up",
        type_: str = "insight",
        state: str = "surfaced",
        confidence: float = 0.5,
        citation_count: int = 0,
        age_days: float = 0,
        id_: str | None = None,
    ) -> ThoughtProduct:
        counter["n"] += 1
        return ThoughtProduct(
            id=id_ or f"tp-{counter['n']:03d}",
            workspace_id="ws-1",
            type=type_,  # type: ignore[arg-type]
            content=content,
            state=state,  # type: ignore[arg-type]
            confidence=confidence,
            citation_count=citation_count,
            created_at=(NOW - timedelta(days=age_days)).isoformat(),
        )

    return _make


@pytest.fixture
def make_persona():
    def _make(name: str = "Dana", traits: dict | None = None) -> Persona:
        return Persona(
            id=f"persona-{name.lower()}",
            workspace_id="ws-1",
            name=name,
            traits=traits if traits is not None else {"role": "founder"},
            voice=None,
            created_at=NOW.isoformat(),
        )

    return _make
