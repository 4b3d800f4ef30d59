"""
Módulo de servicio para el borrado diferido de blobs.
"""
import asyncio
import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, Optional

from app.services.storage_service import StorageService

@dataclass
class CleanupJob:
    url: str
    blob_path: str
    label: str
    attempts: int = 0

class BlobCleanupService:
    """
    Cola acotada de borrados en segundo plano.

    La respuesta al usuario no espera estos borrados. Cada trabajo se reintenta
    hasta `max_attempts` veces; si sigue fallando se registra como dead letter.
    Si el proceso termina con trabajos pendientes, esos blobs quedan huérfanos.
    """

    def __init__(
            self,
            storage_service: StorageService,
            maxsize: int = 500,
            max_attempts: int = 3,
            retry_delay: float = 1.0
        ) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self.storage_service = storage_service
        self.maxsize = maxsize
        self.max_attempts = max(1, max_attempts)
        self.retry_delay = retry_delay
        self.dead_letters: Deque[CleanupJob] = deque(maxlen=1000)
        self._queue: Optional[asyncio.Queue] = None
        self._worker: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def start(self) -> None:
        """Arranca el worker en el event loop actual."""
        if self.is_running:
            return
        self._queue = asyncio.Queue(maxsize=self.maxsize)
        self._worker = asyncio.create_task(self._run(), name="blob-cleanup")
        self.logger.info("Cola de limpieza de blobs iniciada")

    async def stop(self, timeout: float = 5.0) -> None:
        """Espera a que se vacíe la cola (con límite) y detiene el worker."""
        if not self.is_running:
            return
        try:
            await asyncio.wait_for(self._queue.join(), timeout=timeout)
        except asyncio.TimeoutError:
            self.logger.warning(f"Se detiene la cola con {self._queue.qsize()} borrados pendientes (blobs huérfanos)")
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None

    async def drain(self) -> None:
        """Espera a que todos los trabajos encolados terminen."""
        if self._queue is not None:
            await self._queue.join()

    def enqueue(self, url: str, blob_path: str, label: str) -> bool:
        """
        Encola un borrado sin esperar su resultado.

        Returns:
            bool: False si la cola estaba llena (el trabajo pasa a dead letter).
        """
        if not self.is_running:
            self.start()
        job = CleanupJob(url=url, blob_path=blob_path, label=label)
        try:
            self._queue.put_nowait(job)
            return True
        except asyncio.QueueFull:
            self._dead_letter(job, "queue full")
            return False

    async def discard(self, url: str, blob_path: str, label: str) -> None:
        """
        Borra un blob cuyo registro ya se eliminó de los metadatos: en línea si
        el backend es el sistema de archivos, en segundo plano en otro caso.
        """
        if self.storage_service.needs_background_cleanup(url):
            self.enqueue(url, blob_path, label)
            return
        if not await self.storage_service.delete(url, blob_path):
            self.logger.error(f"Delete failed for {label} ({blob_path})")

    async def _run(self) -> None:
        while True:
            job = await self._queue.get()
            try:
                await self._process(job)
            except Exception as e:
                self.logger.error(f"Error inesperado procesando {job.label}: {e}", exc_info=True)
            finally:
                self._queue.task_done()

    async def _process(self, job: CleanupJob) -> None:
        while job.attempts < self.max_attempts:
            job.attempts += 1
            if await self.storage_service.delete(job.url, job.blob_path):
                return
            if job.attempts < self.max_attempts:
                self.logger.warning(f"Async delete failed for {job.label}, attempt {job.attempts}/{self.max_attempts}")
                await asyncio.sleep(self.retry_delay * job.attempts)
        self._dead_letter(job, f"{job.attempts} failed attempts")

    def _dead_letter(self, job: CleanupJob, reason: str) -> None:
        self.dead_letters.append(job)
        self.logger.error(f"Dead letter: could not delete {job.label} ({job.blob_path}): {reason}")
