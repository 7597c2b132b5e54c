"""Adapters HTTP (routers, schemas, mapeo de errores)."""
