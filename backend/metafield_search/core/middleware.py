"""
CORS middleware: configures allowed origins, methods, and headers.

The search UI is served from a different origin (the admin extension),
so the API only needs read access across origins.
Version: 1.0.0
"""
from typing import Sequence

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


def apply_cors(app: FastAPI, origins: Sequence[str] = ("*",)) -> None:
    """Apply CORS middleware for GET-only cross-origin access."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(origins),
        allow_credentials=False,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
