"""CLI argument parsing and main entry point.

* ``pipechain serve``        - run the pipeline under Uvicorn.
* ``pipechain check-config`` - validate the config and print the chain.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import Optional

import uvicorn
from pydantic import ValidationError

from pipechain.config.loader import load_config
from pipechain.config.schema import PipechainConfig, ServerSettings
from pipechain.constants import (
    CONFIG_ENV_VAR,
    CONFIG_SEARCH_ORDER,
    DEFAULT_LOG_LEVEL,
    SERVER_NAME,
    SERVER_VERSION,
)
from pipechain.display.logging_config import setup_logging
from pipechain.errors import ConfigurationError

module_logger = logging.getLogger(__name__)


def _resolve_config_path(cli_path: Optional[str]) -> Optional[str]:
    """Resolve the config path: CLI flag → env var → auto-detect in CWD.

    Returns ``None`` when nothing is found, meaning built-in defaults.
    """
    if cli_path is not None:
        return os.path.abspath(cli_path)
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return os.path.abspath(env_path)
    for name in CONFIG_SEARCH_ORDER:
        candidate = os.path.join(os.getcwd(), name)
        if os.path.isfile(candidate):
            return candidate
    return None


def _load_or_exit(cli_path: Optional[str]) -> PipechainConfig:
    cfg_path = _resolve_config_path(cli_path)
    module_logger.info("Configuration file path resolved to: %s", cfg_path or "<defaults>")
    try:
        return load_config(cfg_path)
    except ConfigurationError as exc:
        module_logger.error("Configuration error: %s", exc)
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)


# ── ``pipechain serve`` ──────────────────────────────────────────────────


async def _run_server(config: PipechainConfig, log_lvl: str) -> None:
    """Async main for the serve subcommand."""
    from pipechain.server.app import create_app

    app = create_app(config)
    host, port = config.server.host, config.server.port

    uvicorn_cfg = uvicorn.Config(
        app=app,
        host=host,
        port=port,
        log_config=None,
        log_level=log_lvl.lower(),
    )
    server = uvicorn.Server(uvicorn_cfg)

    module_logger.info("Preparing to start Uvicorn server: http://%s:%s", host, port)
    try:
        await server.serve()
    except (KeyboardInterrupt, SystemExit) as e_exit:
        module_logger.info("Server stopped due to '%s'.", type(e_exit).__name__)
    finally:
        module_logger.info("%s has shut down or is shutting down.", SERVER_NAME)


def _cmd_serve(args: argparse.Namespace) -> None:
    log_lvl = setup_logging(args.log_level)
    module_logger.info("---- %s v%s starting (log level: %s) ----", SERVER_NAME, SERVER_VERSION, log_lvl)

    config = _load_or_exit(args.config)
    # CLI flags override the file.
    overrides = {}
    if args.host is not None:
        overrides["host"] = args.host
    if args.port is not None:
        overrides["port"] = args.port
    if overrides:
        try:
            server = ServerSettings.model_validate({**config.server.model_dump(), **overrides})
        except ValidationError as exc:
            module_logger.error("Invalid server override: %s", exc)
            print(f"Error: invalid --host/--port override:\n{exc}", file=sys.stderr)
            sys.exit(2)
        config = config.model_copy(update={"server": server})

    asyncio.run(_run_server(config, log_lvl))


# ── ``pipechain check-config`` ───────────────────────────────────────────


def _cmd_check_config(args: argparse.Namespace) -> None:
    setup_logging(args.log_level)
    config = _load_or_exit(args.config)

    from pipechain.server.app import build_chain

    chain = build_chain(config)
    print(f"Configuration OK. Listening on {config.server.host}:{config.server.port}")
    print(f"POST {config.pipeline.path} runs {len(chain)} interceptor(s) in order:")
    for pos, interceptor in enumerate(chain, start=1):
        print(f"  {pos}. {getattr(interceptor, '__name__', repr(interceptor))}")
    print(f"Fallback for a missing terminal handler: {config.pipeline.fallback}")


# ── CLI parser construction ──────────────────────────────────────────────


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser with serve/check-config subcommands."""
    parser = argparse.ArgumentParser(
        prog="pipechain",
        description=f"{SERVER_NAME} v{SERVER_VERSION}",
    )
    subparsers = parser.add_subparsers(dest="command")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        type=str,
        default=None,
        metavar="PATH",
        help=(
            "Path to configuration file (YAML). "
            f"Default: ${CONFIG_ENV_VAR}, then config.yaml/config.yml in CWD"
        ),
    )
    common.add_argument(
        "--log-level",
        type=str,
        default=DEFAULT_LOG_LEVEL.lower(),
        choices=["debug", "info", "warning", "error", "critical"],
        help="Set logging level (default: info)",
    )

    sp_serve = subparsers.add_parser(
        "serve",
        parents=[common],
        help="Run the interceptor pipeline under Uvicorn",
    )
    sp_serve.add_argument("--host", type=str, default=None, help="Host address (overrides config)")
    sp_serve.add_argument("--port", type=int, default=None, help="Port (overrides config)")
    sp_serve.set_defaults(func=_cmd_serve)

    sp_check = subparsers.add_parser(
        "check-config",
        parents=[common],
        help="Validate the configuration and show the interceptor order",
    )
    sp_check.set_defaults(func=_cmd_check_config)

    return parser


def main(argv: Optional[list] = None) -> None:
    """Program entry point: parse arguments and dispatch to subcommand."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)
    else:
        args.func(args)


if __name__ == "__main__":
    main()
