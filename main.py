"""
Care Quality Engine - Root Entry Point.

Application logic lives in src/care_quality. This module exposes the ASGI
app for servers started as ``uvicorn main:app``.

For development: python main.py
"""

from care_quality.api.app import create_app
from care_quality.main import run_server

app = create_app()

if __name__ == "__main__":
    run_server()
