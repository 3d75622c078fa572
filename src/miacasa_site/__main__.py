import argparse
import json
import sys

from .config import get_settings
from .db import TABLES, ensure_schema, open_conn
from .logging_setup import configure_logging, get_logger
from .seed import seed_demo


logger = get_logger("cli")


def _cmd_serve(args) -> int:
    import uvicorn

    uvicorn.run(
        "miacasa_site.api.app:app",
        host=args.host,
        port=args.port,
        log_level=str(args.log_level or get_settings().log_level).lower(),
    )
    return 0


def _cmd_init_db(args) -> int:
    with open_conn(args.db) as conn:
        ensure_schema(conn)
    logger.info("schema ready", extra={"db_path": args.db or get_settings().db_path})
    print(json.dumps({"ok": True, "tables": list(TABLES)}))
    return 0


def _cmd_seed_demo(args) -> int:
    with open_conn(args.db) as conn:
        counts = seed_demo(conn, properties=args.count)
    print(json.dumps({"ok": True, "inserted": counts}))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="MiaCasa Investments site CLI",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, etc.)",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Emit logs as JSON lines",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the web app with uvicorn")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.set_defaults(func=_cmd_serve)

    init_db = sub.add_parser("init-db", help="Create tables if missing")
    init_db.add_argument("--db", default=None, help="SQLite path (defaults to MIACASA_DB_PATH)")
    init_db.set_defaults(func=_cmd_init_db)

    seed = sub.add_parser("seed-demo", help="Insert deterministic demo content")
    seed.add_argument("--db", default=None, help="SQLite path (defaults to MIACASA_DB_PATH)")
    seed.add_argument("--count", type=int, default=24, help="Number of demo properties")
    seed.set_defaults(func=_cmd_seed_demo)
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    settings = get_settings()
    configure_logging(
        level=args.log_level or settings.log_level,
        json_lines=args.log_json or settings.log_json,
        stream=sys.stderr,
    )
    return int(args.func(args) or 0)


if __name__ == "__main__":
    sys.exit(main())
