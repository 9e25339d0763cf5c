"""
Tests for configuration model and loading
"""

import json

import pytest

from relaychat.config import ClientConfig, load_config, normalize_channel
from relaychat.config.config_loader import env_overrides, read_config_file
from relaychat.errors.internal import ConfigError


class TestClientConfig:
    def test_defaults(self):
        config = ClientConfig()
        assert config.host == "irc.libera.chat"
        assert config.port == 6667
        assert config.channels == []
        assert config.idle_timeout is None

    def test_channels_normalized_and_deduplicated(self):
        config = ClientConfig(channels=["room", " #room ", "&local", "", "#other"])
        assert config.channels == ["#room", "&local", "#other"]

    def test_channels_from_string(self):
        assert ClientConfig(channels="room, #other").channels == ["#room", "#other"]

    @pytest.mark.parametrize("nickname", ["", "two words", ":colon", "#hash", "nul\0"])
    def test_invalid_nickname_rejected(self, nickname):
        with pytest.raises(ValueError):
            ClientConfig(nickname=nickname)

    @pytest.mark.parametrize("port", [0, 70000])
    def test_port_range(self, port):
        with pytest.raises(ValueError):
            ClientConfig(port=port)

    def test_round_trip_through_dict(self):
        config = ClientConfig(host="irc.example.net", nickname="me", channels=["#a"])
        data = config.to_dict()
        assert "idle_timeout" not in data
        assert ClientConfig.from_dict(data) == config


def test_normalize_channel():
    assert normalize_channel(" room ") == "#room"
    assert normalize_channel("&local") == "&local"
    assert normalize_channel("   ") == ""


class TestLoadConfig:
    def test_missing_default_file_uses_defaults(self, tmp_path):
        config = load_config(environ={"RELAYCHAT_CONF_FILE": str(tmp_path / "none.json")})
        assert config == ClientConfig()

    def test_file_env_and_overrides_precedence(self, tmp_path):
        path = tmp_path / "relaychat.json"
        path.write_text(
            json.dumps({"host": "file.example", "port": 7000, "nickname": "filenick"}),
            encoding="utf-8",
        )
        config = load_config(
            path,
            {"nickname": "clinick", "port": None},
            environ={"RELAYCHAT_HOST": "env.example", "RELAYCHAT_CHANNELS": "a,b"},
        )
        assert config.host == "env.example"
        assert config.port == 7000
        assert config.nickname == "clinick"
        assert config.channels == ["#a", "#b"]

    def test_explicit_missing_file_is_error(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(tmp_path / "missing.json", environ={})

    def test_invalid_json_is_error(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ConfigError) as exc:
            read_config_file(path)
        assert exc.value.data == {"path": str(path)}

    def test_non_object_json_is_error(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path, environ={})

    def test_invalid_values_wrapped_in_config_error(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config(
                overrides={"port": 0},
                environ={"RELAYCHAT_CONF_FILE": str(tmp_path / "none.json")},
            )

    def test_env_overrides_ignore_empty_values(self):
        assert env_overrides({"RELAYCHAT_NICK": "", "RELAYCHAT_PORT": "6697"}) == {
            "port": "6697"
        }
