"""CLI entry point for the back-office API server."""

import argparse
import os


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="backoffice-server",
        description="Restaurant back-office API server with live staff alerts",
    )
    parser.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8080, help="Bind port (default: 8080)")
    parser.add_argument(
        "--local",
        action="store_true",
        help="Local dev mode: SQLite database, console logs",
    )
    parser.add_argument(
        "--no-alerts",
        action="store_true",
        help="Serve the API without polling for new notifications",
    )
    args = parser.parse_args(argv)

    if args.local:
        os.environ["BACKOFFICE_LOCAL_MODE"] = "1"
        os.environ["BACKOFFICE_LOCAL"] = "1"
    if args.no_alerts:
        os.environ["BACKOFFICE_ALERTS_ENABLED"] = "0"

    import uvicorn

    uvicorn.run("backoffice.main:app", host=args.host, port=args.port)


if __name__ == "__main__":
    main()
