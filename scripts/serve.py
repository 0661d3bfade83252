#!/usr/bin/env python3
"""
Run the community site API with uvicorn.

Usage:
  python scripts/serve.py [--host 0.0.0.0] [--port 3000] [--reload]
"""
from __future__ import annotations

import argparse

import uvicorn

from site_api.core.config import get_settings


def main() -> None:
    settings = get_settings()
    ap = argparse.ArgumentParser(description="Serve the community site API")
    ap.add_argument("--host", default=settings.host, help=f"bind address (default: {settings.host})")
    ap.add_argument("--port", type=int, default=settings.port, help=f"port (default: {settings.port})")
    ap.add_argument("--reload", action="store_true", help="reload on code changes (dev only)")
    args = ap.parse_args()

    print(f"Server running locally at http://localhost:{args.port}")
    uvicorn.run(
        "site_api.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
