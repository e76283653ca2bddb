from collections.abc import Iterator
from pathlib import Path

import pytest

from ccls_status.core.global_paths import GlobalPath
from ccls_status.util import log as log_module
from ccls_status.util.log import Log


@pytest.fixture(autouse=True)
def isolated_paths(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory) -> Iterator[Path]:
    root = tmp_path_factory.mktemp("ccls-status-home")
    monkeypatch.setattr(GlobalPath, "log", classmethod(lambda cls: str(root / "log")))
    monkeypatch.setattr(GlobalPath, "config", classmethod(lambda cls: str(root / "config")))
    monkeypatch.delenv("CCLS_STATUS_CONFIG_CONTENT", raising=False)
    yield root


@pytest.fixture(autouse=True)
def _log_teardown() -> Iterator[None]:
    yield
    Log.close()
    defaults = log_module.LogConfig()
    log_module._config.level = defaults.level
    log_module._config.format = defaults.format
    log_module._config.console = False
    log_module._config.file = False
    log_module._config.log_file_path = None


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"
