#!/usr/bin/env python3
"""
Backend runner for Ads Flow.

Usage:
    python -m adsflow.run_backend --port 8000
    adsflow-backend --host 0.0.0.0 --reload
"""
import argparse
import sys

import uvicorn


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Run the Ads Flow API server")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development only)")
    parser.add_argument("--log-level", default="info")
    args = parser.parse_args(argv)

    print(f"[Backend] Starting Ads Flow backend on http://{args.host}:{args.port}")
    uvicorn.run(
        "adsflow.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
