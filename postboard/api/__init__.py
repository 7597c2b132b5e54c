"""Aplicación FastAPI: entrypoint, rutas de auth y handlers de error."""
