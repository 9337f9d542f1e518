#!/usr/bin/env python3
"""CLI for running the annotation gateway."""

import uvicorn


def main(host: str, port: int):
    """Serve the FastAPI app until interrupted."""
    from src.annotation_gateway.app.main import app

    print(f"Starting Annotation Gateway on {host}:{port}")
    uvicorn.run(app, host=host, port=port)
