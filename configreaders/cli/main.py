"""configreaders CLI entrypoint.

Usage: configreaders

No flags. The reader chain is chosen through CONFIGREADERS_* environment
variables (see CompositionConfig.from_env); a ``.env`` file in the working
directory is loaded first without overriding variables already set. Prints one
greeting line. Lookup failures are not handled and end the process non-zero.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from dotenv import load_dotenv

from configreaders.config.configs import CompositionConfig
from configreaders.core.compose import build_consumer, build_reader


def build_parser() -> argparse.ArgumentParser:
    return argparse.ArgumentParser(
        prog="configreaders",
        description="Print a greeting for the configured Name value.",
    )


def main(argv: list[str] | None = None) -> int:
    build_parser().parse_args(argv)
    logging.basicConfig(level=logging.WARNING)

    load_dotenv(Path.cwd() / ".env", override=False)

    config = CompositionConfig.from_env()
    consumer = build_consumer(build_reader(config))
    consumer.consume()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
