"""``saad-server`` command."""

import argparse
import os

LOG_LEVELS = ("debug", "info", "warning", "error")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="saad-server",
        description="Run the SAAD delivery tracking API",
    )
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8080)
    parser.add_argument("--local", action="store_true", help="use the local SQLite database (saad_local.db)")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default=None)
    parser.add_argument("--gemini-model", default=None, help="override SAAD_GEMINI_MODEL")
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    # Settings are read when saad.main is imported, so overrides go through the environment.
    if args.local:
        os.environ["SAAD_LOCAL_MODE"] = "1"
    if args.log_level:
        os.environ["SAAD_LOG_LEVEL"] = args.log_level
    if args.gemini_model:
        os.environ["SAAD_GEMINI_MODEL"] = args.gemini_model

    import uvicorn

    uvicorn.run("saad.main:app", host=args.host, port=args.port, log_level=args.log_level)


if __name__ == "__main__":
    main()
