#!/usr/bin/env python3
"""
Main entry point for running the FastAPI server as a module.
This allows the package to be run with: python -m fnsearch
"""

import argparse

import uvicorn


def main():
    parser = argparse.ArgumentParser(description="Serve function signature search")
    parser.add_argument("--host", default="0.0.0.0", help="Bind address")
    parser.add_argument("--port", type=int, default=8080, help="Bind port")
    parser.add_argument("--reload", action="store_true", help="Reload on code changes")
    args = parser.parse_args()

    uvicorn.run(
        "fnsearch.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info"
    )


if __name__ == "__main__":
    main()
