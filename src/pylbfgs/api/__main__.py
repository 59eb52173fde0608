"""
Serve the REST API: python -m pylbfgs.api [--host HOST] [--port PORT]

Requires the ``api`` extra (``pip install -e '.[api]'``).
"""
import argparse
import logging

import uvicorn

logger = logging.getLogger("pylbfgs.api")


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="python -m pylbfgs.api",
        description="Serve /api/problems and /api/minimize over HTTP.",
    )
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Serving pylbfgs on http://%s:%d", args.host, args.port)
    uvicorn.run(
        "pylbfgs.api.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        log_level="debug" if args.verbose else "info",
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
