#!/usr/bin/env python3
"""
PhoLight - Entry Point
========================
One-command startup for the PhoLight party lighting relay.

Usage:
    python app.py              # Start with default settings (port 3000)
    python app.py --port 9000  # Start on custom port

This script:
    1. Loads environment variables from .env
    2. Loads configuration from config.yaml (+ PHOLIGHT_* overrides)
    3. Creates the FastAPI web application
    4. Starts the uvicorn server

The host password is printed to the log at startup. Open host.html on the
host device and index.html on every audience device.
"""

import os
import argparse
import logging
import uvicorn
from dotenv import load_dotenv


def main():
    """Parse arguments, load config, and start the web server."""

    # -- Parse command-line arguments ------------------------------------------
    parser = argparse.ArgumentParser(
        description="PhoLight - Synchronized Party Lighting",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--port", type=int, default=None,
        help="Port number to listen on (overrides config.yaml)",
    )
    parser.add_argument(
        "--host", type=str, default=None,
        help="Host binding address (overrides config.yaml)",
    )
    parser.add_argument(
        "--log-level", type=str, default="info",
        choices=["debug", "info", "warning", "error"],
        help="Logging verbosity",
    )
    parser.add_argument(
        "--save-config", action="store_true",
        help="Write --host/--port into config.yaml before starting",
    )
    args = parser.parse_args()

    # -- Resolve project directory ---------------------------------------------
    project_dir = os.path.dirname(os.path.abspath(__file__))

    # -- Load environment variables from .env ----------------------------------
    env_path = os.path.join(project_dir, ".env")
    if os.path.exists(env_path):
        load_dotenv(env_path)

    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )

    # -- Load configuration ----------------------------------------------------
    from pholight.config import ConfigManager
    from pholight.main import create_app

    config_manager = ConfigManager(project_dir)

    if args.save_config:
        overrides = {}
        if args.host:
            overrides["host"] = args.host
        if args.port:
            overrides["port"] = args.port
        if overrides:
            config_manager.update({"web": overrides})
            print(f"[INIT] Saved {overrides} to config.yaml")

    config = config_manager.load()

    # Command-line args override config file and environment
    if args.host:
        config["web"]["host"] = args.host
    if args.port:
        config["web"]["port"] = args.port
    host = config["web"]["host"]
    port = config["web"]["port"]

    # -- Print startup banner --------------------------------------------------
    print()
    print("  ╔══════════════════════════════════════════════╗")
    print("  ║           PHOLIGHT                           ║")
    print("  ║   Synchronized Party Lighting Relay          ║")
    print("  ╚══════════════════════════════════════════════╝")
    print()
    print(f"  Audience : http://{host}:{port}/index.html")
    print(f"  Host     : http://{host}:{port}/host.html")
    print()

    # -- Start the web server --------------------------------------------------
    app = create_app(project_dir, config=config)
    uvicorn.run(
        app,
        host=host,
        port=port,
        reload=False,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
