from pixel_hunter.config import Settings


def test_defaults(monkeypatch):
    for name in ("PORT", "COUNTDOWN_SECONDS", "TARGET_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    settings = Settings(_env_file=None)
    assert settings.port == 3000
    assert settings.countdown_seconds == 3.2
    assert settings.target_level == 15


def test_port_overridable_from_environment(monkeypatch):
    monkeypatch.setenv("PORT", "4321")
    assert Settings(_env_file=None).port == 4321
