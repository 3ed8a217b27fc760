"""Run the webhook service: ``python -m remediator [--host H] [--port P]``."""

from __future__ import annotations

import argparse

import uvicorn
from dotenv import load_dotenv


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(prog="remediator", description=__doc__)
    parser.add_argument("--host", default="0.0.0.0")
    parser.add_argument("--port", type=int, default=8080)
    args = parser.parse_args(argv)

    # REMEDIATOR_* fallbacks may live in a local .env file
    load_dotenv()

    uvicorn.run(
        "remediator.api:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
