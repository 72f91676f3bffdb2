from storefront_chat.api.app import create_app
from storefront_chat.config import Settings
from storefront_chat.realtime.presence import PresencePolicy


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.presence_policy == PresencePolicy.FIRST_WINS
    assert settings.persist_realtime_messages is False
    assert settings.api_prefix == "/api/v1"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("STOREFRONT_CHAT_PRESENCE_POLICY", "last_wins")
    monkeypatch.setenv("STOREFRONT_CHAT_PERSIST_REALTIME_MESSAGES", "1")
    monkeypatch.setenv("STOREFRONT_CHAT_PORT", "9100")

    settings = Settings(_env_file=None)

    assert settings.presence_policy == PresencePolicy.LAST_WINS
    assert settings.persist_realtime_messages is True
    assert settings.port == 9100


def test_app_uses_configured_presence_policy():
    app = create_app(Settings(_env_file=None, presence_policy=PresencePolicy.LAST_WINS))

    assert app.state.registry.policy == PresencePolicy.LAST_WINS
    assert app.state.delivery.registry is app.state.registry
