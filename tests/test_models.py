import logging

import pytest
from pydantic import ValidationError

from underbar import LibrarySettings, SchedulerBackend, WaitWindow, configure_logging


class TestLibrarySettings:
    """Test configuration defaults, validation and environment loading"""

    def test_defaults(self):
        settings = LibrarySettings()
        assert settings.scheduler_backend == SchedulerBackend.THREADING
        assert settings.log_level == "WARNING"

    def test_log_level_normalized(self):
        assert LibrarySettings(log_level=" debug ").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            LibrarySettings(log_level="chatty")

    def test_invalid_backend(self):
        with pytest.raises(ValidationError):
            LibrarySettings(scheduler_backend="gevent")

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv('UNDERBAR_SCHEDULER_BACKEND', 'asyncio')
        monkeypatch.setenv('UNDERBAR_LOG_LEVEL', 'info')
        settings = LibrarySettings.from_env()
        assert settings.scheduler_backend == SchedulerBackend.ASYNCIO
        assert settings.log_level == "INFO"

    def test_from_env_empty(self, monkeypatch):
        monkeypatch.delenv('UNDERBAR_SCHEDULER_BACKEND', raising=False)
        monkeypatch.delenv('UNDERBAR_LOG_LEVEL', raising=False)
        assert LibrarySettings.from_env() == LibrarySettings()


class TestWaitWindow:
    """Test wait normalization for delay/throttle"""

    def test_accepts_ints_and_floats(self):
        assert WaitWindow(wait_ms=100).wait_ms == 100.0
        assert WaitWindow(wait_ms=12.5).wait_ms == 12.5

    def test_negative_clamped_to_zero(self):
        assert WaitWindow(wait_ms=-10).wait_ms == 0.0

    def test_nan_rejected(self):
        with pytest.raises(ValidationError):
            WaitWindow(wait_ms=float('nan'))


class TestConfigureLogging:
    """Test that configure_logging applies the configured level"""

    def test_sets_root_level(self, monkeypatch):
        root = logging.getLogger()
        previous_level = root.level
        previous_handlers = list(root.handlers)
        # basicConfig is a no-op when handlers exist
        monkeypatch.setattr(root, 'handlers', [])
        try:
            configure_logging(LibrarySettings(log_level="DEBUG"))
            assert root.level == logging.DEBUG
        finally:
            root.handlers = previous_handlers
            root.setLevel(previous_level)
