"""
CORS Configuration

Configures Cross-Origin Resource Sharing settings per environment.
"""

import os
from typing import List
from dataclasses import dataclass, field

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware


@dataclass
class CORSConfig:
    """CORS configuration settings."""

    allowed_origins: List[str] = field(default_factory=list)

    allow_credentials: bool = True

    allowed_methods: List[str] = field(default_factory=lambda: [
        "GET", "POST", "PUT", "DELETE", "OPTIONS"
    ])

    allowed_headers: List[str] = field(default_factory=lambda: [
        "Accept",
        "Content-Type",
        "Authorization",
        "X-Request-ID",
    ])

    expose_headers: List[str] = field(default_factory=lambda: [
        "X-Request-ID",
    ])

    # Preflight cache (seconds)
    max_age: int = 3600

    # Development only
    allow_all_origins: bool = False


CORS_CONFIGS = {
    "development": CORSConfig(
        allowed_origins=[
            "http://localhost:3000",
            "http://localhost:5173",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ],
        allow_all_origins=True,
    ),
    "test": CORSConfig(
        allowed_origins=["http://test"],
    ),
    "production": CORSConfig(),
}


def get_cors_config(environment: str) -> CORSConfig:
    """
    Get the CORS configuration for an environment.

    ``CORS_ORIGINS`` (comma-separated) extends the allowed origins.
    Unknown environments get the production configuration.
    """
    base = CORS_CONFIGS.get(environment, CORS_CONFIGS["production"])
    config = CORSConfig(
        allowed_origins=list(base.allowed_origins),
        allow_credentials=base.allow_credentials,
        allowed_methods=list(base.allowed_methods),
        allowed_headers=list(base.allowed_headers),
        expose_headers=list(base.expose_headers),
        max_age=base.max_age,
        allow_all_origins=base.allow_all_origins,
    )

    extra = os.getenv("CORS_ORIGINS", "")
    for origin in extra.split(","):
        origin = origin.strip()
        if origin and origin not in config.allowed_origins:
            config.allowed_origins.append(origin)

    return config


def setup_cors(app: FastAPI, config: CORSConfig) -> None:
    """Add the CORS middleware to the application."""
    if config.allow_all_origins:
        # Wildcard origins cannot be combined with credentials
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=False,
            allow_methods=config.allowed_methods,
            allow_headers=config.allowed_headers,
            expose_headers=config.expose_headers,
            max_age=config.max_age,
        )
        return

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=config.allow_credentials,
        allow_methods=config.allowed_methods,
        allow_headers=config.allowed_headers,
        expose_headers=config.expose_headers,
        max_age=config.max_age,
    )
