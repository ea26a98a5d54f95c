"""
Entry point for running the NCERT Study Library as a module.

Run with:
    python -m ncert_study serve [--host 0.0.0.0] [--port 8080]
    python -m ncert_study chat
"""

import argparse

import uvicorn

from ncert_study.logger import setup_logging


def main(argv: list[str] | None = None):
    parser = argparse.ArgumentParser(prog="ncert_study", description="NCERT Study Library")
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    commands = parser.add_subparsers(dest="command")

    serve = commands.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8080)

    commands.add_parser("chat", help="Interactive terminal study helper")

    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    if args.command == "serve":
        from ncert_study.interfaces.web_app import create_app

        uvicorn.run(create_app(), host=args.host, port=args.port)
    else:
        from ncert_study.interfaces.cli import main as chat

        chat()


if __name__ == "__main__":
    main()
