"""Command-line entry points: run the server or migrate the database."""

import argparse

from sqlalchemy.exc import SQLAlchemyError

from reportconverter.app import create_app
from reportconverter.config import Config, get_config, load_config
from reportconverter.database import Database, get_database
from reportconverter.logger import new_logger


def _parser(prog: str, description: str) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=prog, description=description)
    parser.add_argument(
        "--config", help="path of the YAML configuration file (default: ./config.yaml)"
    )
    parser.add_argument(
        "--database-url", help="connect to this database URL instead of the configured one"
    )
    return parser


def _load(path: str | None) -> Config:
    return load_config(path) if path else get_config()


def _connect(args: argparse.Namespace, config: Config | None = None) -> Database:
    if args.database_url:
        return Database(args.database_url)
    return get_database(config if config is not None else _load(args.config))


def main(argv=None) -> int:
    """Start the HTTP server on the configured port."""
    args = _parser("reportconverter", "Serve the report converter API.").parse_args(argv)
    config = _load(args.config)
    logger = new_logger()
    database = _connect(args, config)
    app = create_app(config, database, logger)
    logger.info("Server started on port %d", config.server.port)
    app.run(host="0.0.0.0", port=config.server.port)
    return 0


def migrate(argv=None) -> int:
    """Create the database tables; return 1 if that fails."""
    args = _parser("reportconverter-migrate", "Create the database tables.").parse_args(argv)
    logger = new_logger()
    database = _connect(args)
    try:
        database.create_all()
    except SQLAlchemyError as exc:
        logger.critical("Failed to migrate database: %s", exc)
        return 1
    return 0