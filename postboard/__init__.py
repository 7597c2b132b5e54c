"""postboard: backend de publicación de contenido (usuarios, posts, moderación)."""

__version__ = "0.1.0"
