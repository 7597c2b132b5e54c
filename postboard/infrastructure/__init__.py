"""
============================================================
TARJETA CRC - infrastructure/__init__.py
============================================================
Responsibilities:
  - Agrupar adapters de infraestructura (db, repositories, storage).

Policy:
  - Sin side effects al importar: los submódulos se importan explícitamente.
============================================================
"""
