"""Command-line entry point for the tmux popup menu.

Parses flags, sets up logging and tracing, starts the backend watcher and
runs the popup until the user picks an action or leaves.
"""

import logging
import sys
from typing import List, Optional

from .backend import Watcher
from .config import ConfigError, parse_config
from .events import Tracer
from .tmux import ControlClient, install_transport, resolve_socket_path
from .tracing import TraceLog, configure_logging, resolve_log_path
from .ui import Model, PopupApp

logger = logging.getLogger(__name__)


def main(argv: Optional[List[str]] = None) -> int:
    """Run the popup.

    Returns 0 on a normal exit, 2 for configuration errors and 1 for any
    other failure.
    """
    argv = sys.argv[1:] if argv is None else argv
    try:
        config = parse_config(argv)
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2

    log_path = resolve_log_path(config.log_file)
    configure_logging(log_path)
    trace_log = TraceLog(log_path, enabled=config.trace)
    tracer = Tracer(trace_log)

    socket = resolve_socket_path(config.socket)
    tracer.app.start({"flags": list(argv), "tty": sys.stdin.isatty(), "config": config.as_dict()})
    logger.info(f"Starting popup on socket {socket}")

    client: Optional[ControlClient] = None
    watcher = None
    try:
        if config.control_mode:
            client = ControlClient(socket)
            if client.start():
                install_transport(client)
            else:
                logger.warning("Control mode unavailable, using tmux subprocesses")

        watcher = Watcher(socket).start()
        model = Model(
            socket=socket,
            width=config.width,
            height=config.height,
            show_footer=config.footer,
            verbose=config.verbose,
            watcher=watcher,
            root_menu=config.root_menu,
            tracer=tracer,
        )
        info = PopupApp(model).run()
    except Exception as e:
        tracer.error(e)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        if watcher is not None:
            watcher.stop()
        install_transport(None)
        if client is not None:
            client.shutdown()
        trace_log.close()

    if config.verbose and info:
        print(info)
    return 0


if __name__ == "__main__":
    sys.exit(main())
