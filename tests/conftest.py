import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from watch_harness.config import HarnessConfig  # noqa: E402

FAKE_WATCHER = Path(__file__).resolve().parent / "fixtures" / "fake_watcher.py"


@pytest.fixture
def fake_watcher_command() -> list:
    return [sys.executable, str(FAKE_WATCHER)]


@pytest.fixture
def harness_config(fake_watcher_command: list) -> HarnessConfig:
    return HarnessConfig(
        build_command=[],
        watcher_command=fake_watcher_command,
        startup_grace=0.5,
        terminate_timeout=5.0,
    )
