"""Settings loading and validation."""

import pytest
from pydantic import ValidationError

from dotlife.config import Settings


class TestTowerMode:
    def test_default_is_tower(self):
        assert Settings().tower_mode == "tower"

    def test_free_mode_from_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("DOTLIFE_TOWER_MODE", "free")
        assert Settings().tower_mode == "free"

    def test_unknown_mode_fails_at_load(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("DOTLIFE_TOWER_MODE", "diagonal")
        with pytest.raises(ValidationError):
            Settings()
