#!/usr/bin/env python3
# =============================================================================
# scripts/start_api.py - API Server Entry Point
# =============================================================================
# Starts the validation API with uvicorn, using API_HOST / API_PORT from
# settings.
#
# Usage:
#   python scripts/start_api.py
#
#   # Or use the uvicorn CLI directly
#   uvicorn app.main:app --reload --port 8080
# =============================================================================

import os
import sys

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

import uvicorn

from app.config import settings


def main():
    """Start the API server."""
    print("=" * 60)
    print("Model Validator API")
    print("=" * 60)
    print()
    print(f"Environment: {settings.ENVIRONMENT}")
    print(f"Listening on http://{settings.API_HOST}:{settings.API_PORT}")
    print("Press Ctrl+C to stop")
    print()

    uvicorn.run(
        "app.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.is_development and settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )


if __name__ == "__main__":
    main()
