"""Shared test fixtures for the MemMachine node test suite."""

from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

import pytest

from memmachine_node.config import get_settings


@pytest.fixture
def test_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Empty config directory selected through MEMMACHINE_CONFIG_DIR."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("MEMMACHINE_CONFIG_DIR", str(config_dir))
    monkeypatch.delenv("MEMMACHINE_ENV", raising=False)
    return config_dir


@pytest.fixture
def mock_toml_files(test_config_dir: Path) -> Callable[[dict[str, str]], None]:
    """Write named TOML files into the test config directory."""

    def _write(files: dict[str, str]) -> None:
        for filename, content in files.items():
            (test_config_dir / filename).write_text(content)

    return _write


@pytest.fixture(autouse=True)
def clear_settings_cache() -> Generator[None, None, None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def flat_response() -> dict[str, Any]:
    """Search response in the flat ``memories[]`` shape, newest first."""
    return {
        "memories": [
            {"type": "episodic", "content": "m1", "producer": "user-1", "produced_for": "agent-1"},
            {"type": "episodic", "content": "m2", "producer": "agent-1", "produced_for": "user-1"},
            {"type": "episodic", "content": "m1", "producer": "user-1", "produced_for": "agent-1"},
            {"type": "profile", "tag": "Prefs", "feature_name": "color", "value": "blue"},
            {"type": "profile", "tag": "Prefs", "feature_name": "color", "value": "blue"},
        ]
    }


@pytest.fixture
def nested_response() -> dict[str, Any]:
    """Search response in the nested ``content`` shape with pre-bucketed ids."""
    return {
        "status": 0,
        "content": {
            "episodic_memory": {
                "short_term_memory": {
                    "episodes": [
                        {
                            "uid": "e1",
                            "content": "recent",
                            "producer_id": "user-1",
                            "produced_for_id": "agent-1",
                        },
                        {
                            "uid": "e2",
                            "content": "older",
                            "producer_id": "agent-1",
                            "produced_for_id": "user-1",
                        },
                    ],
                    "episode_summary": ["User asked about billing"],
                },
                "long_term_memory": {
                    "episodes": [
                        {
                            "uid": "e3",
                            "content": "ancient",
                            "producer_id": "user-1",
                            "produced_for_id": "agent-1",
                        },
                    ],
                },
            },
            "semantic_memory": [
                {"tag": "Profile", "feature_name": "name", "value": "Ada"},
            ],
        },
    }
