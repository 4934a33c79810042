"""
Shifting Manor - Entry Point

Serves an LLM-driven text adventure in an ever-changing mansion over a
small JSON web API.
"""

import argparse
import logging
import sys

import uvicorn

from mansion.llm.factory import load_config
from mansion.orchestrator import Orchestrator
from mansion.web.server import create_app


def main() -> None:
    """Parse arguments, load configuration, and serve the game."""
    parser = argparse.ArgumentParser(
        description="Shifting Manor - LLM-driven text adventure server"
    )
    parser.add_argument(
        "--config",
        default="config.json",
        help="Path to configuration file (default: config.json)",
    )
    parser.add_argument(
        "--games-dir",
        help="Override the saved games directory from config",
    )
    parser.add_argument(
        "--host",
        help="Override the web server host from config",
    )
    parser.add_argument(
        "--port",
        type=int,
        help="Override the web server port from config",
    )
    parser.add_argument(
        "--load",
        metavar="GAME_ID",
        help="Load a saved game instead of starting a new one",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[
            logging.StreamHandler(sys.stdout),
        ],
    )

    logger = logging.getLogger("mansion")

    try:
        config = load_config(args.config)

        if args.games_dir:
            config["games_dir"] = args.games_dir
        web_config = config.setdefault("web_server", {})
        if args.host:
            web_config["host"] = args.host
        if args.port:
            web_config["port"] = args.port

        orchestrator = Orchestrator(config)
        if args.load:
            orchestrator.load_game(args.load)

        web_host = web_config.get("host", "127.0.0.1")
        web_port = web_config.get("port", 8080)
        logger.info(
            f"Shifting Manor starting: game={orchestrator.game.metadata.id}, "
            f"games_dir={orchestrator.store.games_dir}"
        )
        logger.info(f"Web API available at http://{web_host}:{web_port}/api")

        uvicorn.run(create_app(orchestrator), host=web_host, port=web_port, log_level="warning")

    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        sys.exit(0)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
