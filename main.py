"""
CSR issuer service — CLI entry point.

Usage:
  python main.py                        # Serve on HTTP_HOST:HTTP_PORT (default 0.0.0.0:8080)
  python main.py --port 9000            # Override the listen port
  python main.py --region eu-west-1 --ca-arn arn:aws:acm-pca:...
"""
from __future__ import annotations

import argparse
import logging

import structlog

log = logging.getLogger(__name__)


# ── Logging setup ─────────────────────────────────────────────────────────────


def configure_logging(level: str = "INFO") -> None:
    numeric = logging.getLevelName(level)
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
    )
    logging.basicConfig(
        level=numeric,
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


# ── Server runner ─────────────────────────────────────────────────────────────


def serve(host: str | None = None, port: int | None = None) -> None:
    """Run the HTTP server until interrupted."""
    from config import settings
    from server.httpd import CsrHttpServer
    from server.service import CsrService

    address = (host or settings.HTTP_HOST, port if port is not None else settings.HTTP_PORT)
    service = CsrService.from_settings()

    if settings.AWS_REGION == "your-region" or settings.CA_ARN.endswith("/CA-ID"):
        log.warning("AWS_REGION / CA_ARN still hold placeholder values; issuance will fail")

    httpd = CsrHttpServer(address, service)
    log.info("Server started on %s:%d", address[0], httpd.port)
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        log.info("Shutting down")
    finally:
        httpd.server_close()


# ── CLI ───────────────────────────────────────────────────────────────────────


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Generate CSRs and issue them through AWS Private CA",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py
  python main.py --host 127.0.0.1 --port 9000
  curl localhost:8080/generate-csr
  curl localhost:8080/issue-certificate
        """,
    )
    parser.add_argument("--host", help="Listen address (default: HTTP_HOST)")
    parser.add_argument("--port", type=int, help="Listen port (default: HTTP_PORT)")
    parser.add_argument("--region", help="Override AWS_REGION for this run")
    parser.add_argument("--ca-arn", help="Override CA_ARN for this run")

    args = parser.parse_args()

    from config import settings

    if args.region:
        settings.AWS_REGION = args.region
    if args.ca_arn:
        settings.CA_ARN = args.ca_arn

    configure_logging(settings.LOG_LEVEL)
    serve(host=args.host, port=args.port)


if __name__ == "__main__":
    main()
