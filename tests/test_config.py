"""Flag and environment configuration."""

import pytest

from tmux_popup_control.config import ConfigError, parse_config
from tmux_popup_control.tracing import DEFAULT_LOG_FILE


class TestParseConfig:
    def test_defaults(self):
        config = parse_config([], environ={})
        assert config.width == 0 and config.height == 0
        assert not config.footer and not config.trace and not config.control_mode
        assert config.log_file == DEFAULT_LOG_FILE
        assert config.root_menu == ""

    def test_single_dash_flags(self):
        config = parse_config(["-width", "80", "-footer", "-root-menu", "pane:resize", "-socket", "/tmp/s"], environ={})
        assert config.width == 80
        assert config.footer
        assert config.root_menu == "pane:resize"
        assert config.socket == "/tmp/s"

    def test_environment(self):
        environ = {
            "TMUX_POPUP_CONTROL_HEIGHT": "30",
            "TMUX_POPUP_CONTROL_TRACE": "yes",
            "TMUX_POPUP_CONTROL_ROOT_MENU": " window ",
            "TMUX_POPUP_CONTROL_CONTROL_MODE": "1",
        }
        config = parse_config([], environ=environ)
        assert config.height == 30
        assert config.trace
        assert config.root_menu == "window"
        assert config.control_mode

    def test_flags_beat_environment(self):
        environ = {"TMUX_POPUP_CONTROL_FOOTER": "true", "TMUX_POPUP_CONTROL_WIDTH": "50"}
        config = parse_config(["--no-footer", "--width", "70"], environ=environ)
        assert not config.footer
        assert config.width == 70

    def test_bad_environment_values_fall_back(self):
        environ = {"TMUX_POPUP_CONTROL_WIDTH": "wide", "TMUX_POPUP_CONTROL_VERBOSE": "maybe"}
        config = parse_config([], environ=environ)
        assert config.width == 0
        assert not config.verbose

    @pytest.mark.parametrize("argv", [["-width", "-1"], ["--height=-5"]])
    def test_negative_dimensions(self, argv):
        with pytest.raises(ConfigError):
            parse_config(argv, environ={})

    def test_unknown_flag(self, capsys):
        with pytest.raises(ConfigError, match="invalid arguments"):
            parse_config(["--bogus"], environ={})

    def test_as_dict(self):
        assert parse_config(["-verbose"], environ={}).as_dict()["verbose"] is True
