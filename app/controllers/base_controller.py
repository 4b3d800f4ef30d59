"""
Controlador base del almacén de metadatos: documentos JSON versionados
persistidos a través del backend de blobs.
"""
import re
import json
import time
import uuid
import logging
from typing import Any, Dict, List, Optional

from app.utils import get_now
from app.storage import StorageBackend
from app.schemas import BlobInfo, MetadataDocument

_VERSION_NAME = re.compile(r"v(\d+)-(\d+)-[0-9a-f]+\.json$")

class BaseController:
    """
    Cada guardado escribe un objeto nuevo bajo el prefijo del documento; cada
    lectura lista el prefijo y toma el más reciente. No hay lectura-modificación-
    escritura atómica: dos escritores concurrentes resuelven por última escritura
    y no se compactan versiones antiguas.
    """
    def __init__(self, backend: StorageBackend) -> None:
        self.logger = logging.getLogger(self.__class__.__name__)
        self.backend = backend

    @staticmethod
    def _parse_version(info: BlobInfo) -> int:
        match = _VERSION_NAME.search(info.path)
        return int(match.group(1)) if match else 0

    @staticmethod
    def _sort_key(info: BlobInfo):
        match = _VERSION_NAME.search(info.path)
        created_ns = int(match.group(2)) if match else 0
        return (info.uploaded_at, created_ns, info.path)

    async def _list_versions(self, prefix: str) -> List[BlobInfo]:
        """
        Lista las versiones de un documento, de la más antigua a la más reciente.

        Args:
            prefix (str): Prefijo del documento (sin barra final).

        Returns:
            List[BlobInfo]: Versiones ordenadas por fecha de creación.
        """
        versions = await self.backend.list(f"{prefix}/")
        versions = [v for v in versions if v.path.endswith(".json")]
        return sorted(versions, key=self._sort_key)

    def _decode(self, raw: bytes) -> MetadataDocument:
        payload: Any = json.loads(raw)
        # Documentos antiguos guardaban la lista sin sobre
        if isinstance(payload, list):
            return MetadataDocument(items=payload)
        return MetadataDocument.model_validate(payload)

    async def _load_document(self, prefix: str) -> MetadataDocument:
        """
        Recupera la versión vigente de un documento.

        Args:
            prefix (str): Prefijo del documento.

        Returns:
            MetadataDocument: El documento más reciente o uno vacío.
        """
        versions = await self._list_versions(prefix)
        if not versions:
            return MetadataDocument()

        latest = versions[-1]
        if len(versions) > 1 and self._parse_version(versions[-2]) == self._parse_version(latest):
            self.logger.warning(
                f"Escrituras concurrentes en {prefix}: dos versiones {self._parse_version(latest)}, "
                f"prevalece {latest.path}"
            )

        raw = await self.backend.read_url(latest.url)
        if raw is None:
            self.logger.warning(f"La versión {latest.path} aparece listada pero no se pudo leer")
            return MetadataDocument()
        return self._decode(raw[0])

    async def _save_document(self, prefix: str, items: List[Dict[str, Any]]) -> MetadataDocument:
        """
        Escribe una versión nueva del documento (nunca modifica la existente).

        Args:
            prefix (str): Prefijo del documento.
            items (List[Dict[str, Any]]): Registros serializados.

        Returns:
            MetadataDocument: El documento escrito.
        """
        versions = await self._list_versions(prefix)
        version = (self._parse_version(versions[-1]) if versions else 0) + 1

        document = MetadataDocument(version=version, saved_at=get_now(), items=items)
        name = f"v{version:08d}-{time.time_ns():020d}-{uuid.uuid4().hex[:8]}.json"
        data = document.model_dump_json(by_alias=True).encode("utf-8")

        await self.backend.put(f"{prefix}/{name}", data, "application/json")
        self.logger.info(f"Guardada versión {version} de {prefix} ({len(items)} registros)")
        return document
