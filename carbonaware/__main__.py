"""Entry point for the carbonaware service."""

import argparse
import os

import uvicorn

from carbonaware.config import CONFIG_ENV_VAR


def main() -> None:
    """Run the carbonaware web service."""
    parser = argparse.ArgumentParser(description="Carbon Aware Emissions Service")
    parser.add_argument("--debug", action="store_true", help="Enable debug mode")
    parser.add_argument("--host", default="0.0.0.0", help="Host to bind to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    parser.add_argument("--config", help="Path to the YAML configuration file")

    args = parser.parse_args()

    if args.config:
        # Read by load_config() in the app lifespan, also in reloaded workers
        os.environ[CONFIG_ENV_VAR] = args.config

    uvicorn.run(
        "carbonaware.app:app",
        host=args.host,
        port=args.port,
        reload=args.debug,
        log_level="debug" if args.debug else "info",
    )


if __name__ == "__main__":
    main()
