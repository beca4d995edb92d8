#!/usr/bin/env python3
"""
Kiosk API startup script.

Usage:
    # Run with settings from .env / environment
    python run_kiosk.py

    # Run with custom port
    python run_kiosk.py --port 8001

    # Force a payment provider
    python run_kiosk.py --provider square

    # Run with reload for development
    python run_kiosk.py --reload
"""

import argparse
import os


def main():
    parser = argparse.ArgumentParser(
        description="Run the restaurant kiosk API"
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--port",
        "-p",
        type=int,
        default=int(os.getenv("PORT", "3001")),
        help="Port to run on (default: PORT env var or 3001)",
    )
    parser.add_argument(
        "--provider",
        choices=["stripe", "square"],
        help="Payment provider (overrides PAYMENT_PROVIDER)",
    )
    parser.add_argument(
        "--reload",
        "-r",
        action="store_true",
        help="Enable auto-reload for development",
    )

    args = parser.parse_args()

    # The app reads its configuration from the environment at import time
    if args.provider:
        os.environ["PAYMENT_PROVIDER"] = args.provider

    print(f"\n{'=' * 50}")
    print(f"Port:     {args.port}")
    print(f"Payments: {os.getenv('PAYMENT_PROVIDER', 'stripe')}")
    print(f"Database: {'configured' if os.getenv('DATABASE_URL') else 'not configured'}")
    print(f"{'=' * 50}\n")

    from kiosk_api.app_factory import run_server

    run_server(host=args.host, port=args.port, reload=args.reload)


if __name__ == "__main__":
    main()
