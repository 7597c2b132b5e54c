"""
===============================================================================
TARJETA CRC - identity/passwords.py
===============================================================================

Módulo:
    Hashing de passwords (Argon2id) fuera del event loop

Responsabilidades:
    - Hashear passwords con un work factor FIJO y documentado.
    - Verificar password vs hash sin lanzar excepciones (False ante hash
      faltante, corrupto o mismatch).
    - Ejecutar hash/verify en un ThreadPoolExecutor dedicado para no bloquear
      requests concurrentes.

Colaboradores:
    - identity.credentials: register/authenticate.
    - crosscutting.metrics: duración de cada operación.
    - scripts/create_admin.py: hash síncrono.

Work factor (Argon2id, RFC 9106 "second recommended option"):
    - time_cost   = 3 iteraciones
    - memory_cost = 64 MiB (65536 KiB)
    - parallelism = 4 lanes
    - hash_len    = 32 bytes, salt_len = 16 bytes (salt aleatoria por hash)
    La comparación de argon2-cffi es de tiempo constante respecto de la
    posición del primer byte distinto.
===============================================================================
"""

from __future__ import annotations

import asyncio
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Final

from argon2 import PasswordHasher, Type
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError

from ..crosscutting.metrics import observe_password_hash_duration

ARGON2_TIME_COST: Final[int] = 3
ARGON2_MEMORY_COST_KIB: Final[int] = 64 * 1024
ARGON2_PARALLELISM: Final[int] = 4
ARGON2_HASH_LEN: Final[int] = 32
ARGON2_SALT_LEN: Final[int] = 16

# R: se usa para igualar tiempos cuando el email no existe.
_DUMMY_PASSWORD: Final[str] = "postboard-timing-equalizer"


class PasswordService:
    """
    Clase:
      PasswordService

    Responsabilidades:
      - hash / verify síncronos (scripts, tests)
      - hash_async / verify_async sobre un executor dedicado (requests)
    """

    def __init__(
        self,
        *,
        time_cost: int = ARGON2_TIME_COST,
        memory_cost: int = ARGON2_MEMORY_COST_KIB,
        parallelism: int = ARGON2_PARALLELISM,
        max_workers: int = 4,
    ):
        self._hasher = PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
            hash_len=ARGON2_HASH_LEN,
            salt_len=ARGON2_SALT_LEN,
            type=Type.ID,
        )
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="password-hash"
        )
        self._dummy_hash: str | None = None

    # ------------------------------------------------------------------
    # Sync
    # ------------------------------------------------------------------
    def hash(self, password: str) -> str:
        start = time.perf_counter()
        try:
            return self._hasher.hash(password)
        finally:
            observe_password_hash_duration("hash", time.perf_counter() - start)

    def verify(self, password: str | None, password_hash: str | None) -> bool:
        """Nunca lanza: hash ausente/inválido o mismatch => False."""
        if not password_hash:
            return False
        start = time.perf_counter()
        try:
            return self._hasher.verify(password_hash, password or "")
        except (VerifyMismatchError, VerificationError, InvalidHashError):
            return False
        finally:
            observe_password_hash_duration("verify", time.perf_counter() - start)

    def dummy_verify(self, password: str | None) -> bool:
        """Verificación descartable contra un hash fijo (siempre False)."""
        if self._dummy_hash is None:
            self._dummy_hash = self._hasher.hash(_DUMMY_PASSWORD)
        self.verify((password or "") + "\x00", self._dummy_hash)
        return False

    # ------------------------------------------------------------------
    # Async (executor dedicado)
    # ------------------------------------------------------------------
    async def hash_async(self, password: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self.hash, password)

    async def verify_async(self, password: str | None, password_hash: str | None) -> bool:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self._executor, self.verify, password, password_hash
        )

    async def dummy_verify_async(self, password: str | None) -> bool:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self.dummy_verify, password)

    def shutdown(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)
