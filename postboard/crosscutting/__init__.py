"""Crosscutting: config, logging, errores RFC7807, métricas y middlewares."""
