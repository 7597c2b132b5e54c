"""
Name: Backend ASGI Entrypoint (postboard.main)

Responsibilities:
  - Re-export the FastAPI app for ASGI servers and tooling
  - Keep this module side-effect free beyond importing postboard.api.main

Notes/Constraints:
  - No configuration or IO should live here
  - uvicorn postboard.main:app
"""

from postboard.api.main import app

__all__ = ["app"]
