"""Sub-routers HTTP por feature (posts / user / admin)."""
