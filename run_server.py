#!/usr/bin/env python3
"""FastAPI server entry point for QueryRelay."""

import uvicorn
from dotenv import load_dotenv

load_dotenv()

if __name__ == "__main__":
    import argparse

    from config.config import Config

    config = Config()

    parser = argparse.ArgumentParser(description="QueryRelay FastAPI Server")
    parser.add_argument("--host", default=config.HOST, help="Host to bind to")
    parser.add_argument("--port", type=int, default=config.PORT, help="Port to bind to")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    args = parser.parse_args()

    uvicorn.run(
        "server.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )
