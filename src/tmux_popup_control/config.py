"""Popup configuration from command-line flags and environment.

Flags win over TMUX_POPUP_CONTROL_* variables, which win over defaults.

PUBLIC API:
  - Config: Resolved settings
  - ConfigError: Invalid configuration
  - parse_config: Build a Config from argv and environ
  - ENV_PREFIX: Prefix of the environment variables
"""

import argparse
import logging
import os
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Mapping, Optional

from .tracing import DEFAULT_LOG_FILE

logger = logging.getLogger(__name__)

__all__ = ["Config", "ConfigError", "parse_config", "ENV_PREFIX"]

ENV_PREFIX = "TMUX_POPUP_CONTROL_"

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


class ConfigError(ValueError):
    """Raised for settings the popup cannot run with."""


@dataclass
class Config:
    socket: str = ""
    width: int = 0
    height: int = 0
    footer: bool = False
    verbose: bool = False
    trace: bool = False
    log_file: str = DEFAULT_LOG_FILE
    root_menu: str = ""
    control_mode: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _env_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    raw = environ.get(ENV_PREFIX + name, "").strip().lower()
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    if raw:
        logger.warning(f"Ignoring {ENV_PREFIX}{name}={raw!r}: not a boolean")
    return default


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    raw = environ.get(ENV_PREFIX + name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring {ENV_PREFIX}{name}={raw!r}: not an integer")
        return default


def _env_str(environ: Mapping[str, str], name: str, default: str) -> str:
    return environ.get(ENV_PREFIX + name, "").strip() or default


def _defaults(environ: Mapping[str, str]) -> Config:
    base = Config()
    return Config(
        socket=_env_str(environ, "SOCKET", base.socket),
        width=_env_int(environ, "WIDTH", base.width),
        height=_env_int(environ, "HEIGHT", base.height),
        footer=_env_bool(environ, "FOOTER", base.footer),
        verbose=_env_bool(environ, "VERBOSE", base.verbose),
        trace=_env_bool(environ, "TRACE", base.trace),
        log_file=_env_str(environ, "LOG_FILE", base.log_file),
        root_menu=_env_str(environ, "ROOT_MENU", base.root_menu),
        control_mode=_env_bool(environ, "CONTROL_MODE", base.control_mode),
    )


def _bool_flag(parser: argparse.ArgumentParser, name: str, default: bool, help: str) -> None:
    parser.add_argument(
        f"-{name}",
        f"--{name}",
        dest=name.replace("-", "_"),
        action=argparse.BooleanOptionalAction,
        default=default,
        help=help,
    )


def build_parser(defaults: Config) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tmux-popup-control",
        description="Fuzzy menu for tmux sessions, windows and panes, meant to run inside a popup.",
    )
    parser.add_argument("-socket", "--socket", default=defaults.socket, help="tmux socket path")
    parser.add_argument("-width", "--width", type=int, default=defaults.width, help="fixed width in cells (0 follows the terminal)")
    parser.add_argument("-height", "--height", type=int, default=defaults.height, help="fixed height in rows (0 follows the terminal)")
    _bool_flag(parser, "footer", defaults.footer, "show key hints")
    _bool_flag(parser, "verbose", defaults.verbose, "print the result of the chosen action on exit")
    _bool_flag(parser, "trace", defaults.trace, "write JSON trace entries to the log file")
    parser.add_argument("-log-file", "--log-file", dest="log_file", default=defaults.log_file, help="log file path")
    parser.add_argument("-root-menu", "--root-menu", dest="root_menu", default=defaults.root_menu, help="open this menu id as the root")
    _bool_flag(parser, "control-mode", defaults.control_mode, "reuse one tmux control-mode client for commands")
    return parser


def parse_config(argv: Optional[List[str]] = None, environ: Optional[Mapping[str, str]] = None) -> Config:
    """Resolve the configuration.

    Args:
        argv: Arguments without the program name. Defaults to none.
        environ: Environment to read. Defaults to os.environ.

    Raises:
        ConfigError: For bad flags or negative dimensions.
    """
    environ = os.environ if environ is None else environ
    defaults = _defaults(environ)
    parser = build_parser(defaults)
    try:
        args = parser.parse_args(argv or [])
    except SystemExit as e:
        # --help exits 0; anything else is a usage error
        if e.code == 0:
            raise
        raise ConfigError(f"invalid arguments: {' '.join(argv or [])}") from e

    config = Config(
        socket=args.socket.strip(),
        width=args.width,
        height=args.height,
        footer=args.footer,
        verbose=args.verbose,
        trace=args.trace,
        log_file=args.log_file.strip() or DEFAULT_LOG_FILE,
        root_menu=args.root_menu.strip(),
        control_mode=args.control_mode,
    )
    if config.width < 0:
        raise ConfigError("width must be zero or positive")
    if config.height < 0:
        raise ConfigError("height must be zero or positive")
    return config
