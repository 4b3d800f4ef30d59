"""
Módulo de validación de archivos subidos.
"""
import re
import logging
from dataclasses import dataclass
from typing import List, Optional

from app.enums import ImageMimeType
from app.errors import ValidationError

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9._-]")
_DOT_RUNS = re.compile(r"\.{2,}")

@dataclass
class UploadedImage:
    """Archivo recibido en un multipart, ya leído en memoria."""
    filename: str
    content_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

class UploadValidator:
    """
    Reglas de aceptación de imágenes: tipo, tamaño, número de archivos y
    cabecera real del contenido.
    """
    def __init__(self, max_file_bytes: int, max_files: int):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.max_file_bytes = max_file_bytes
        self.max_files = max_files

    def validate_file(self, upload: UploadedImage) -> ImageMimeType:
        """
        Valida tipo declarado y tamaño de un archivo.

        Returns:
            ImageMimeType: Tipo declarado en su forma canónica.

        Raises:
            ValidationError: Tipo no permitido, archivo vacío o demasiado grande.
        """
        try:
            declared = ImageMimeType((upload.content_type or "").lower())
        except ValueError:
            raise ValidationError(
                f"Invalid file type: {upload.content_type or 'unknown'}. Allowed types: "
                + ", ".join(ImageMimeType.get_types_list())
            )

        if upload.size == 0:
            raise ValidationError(f"File {upload.filename} is empty")

        if upload.size > self.max_file_bytes:
            max_mb = self.max_file_bytes // (1024 * 1024)
            raise ValidationError(f"File {upload.filename} is too large. Maximum size: {max_mb}MB")

        return declared.canonical

    def validate_files(self, uploads: List[UploadedImage]) -> List[ImageMimeType]:
        """
        Valida el lote completo antes de tocar el backend.

        Raises:
            ValidationError: Lote vacío, demasiados archivos, o cualquier
                archivo inválido (incluida una cabecera que no corresponde
                al tipo declarado).
        """
        if not uploads:
            raise ValidationError("No files uploaded")

        if len(uploads) > self.max_files:
            raise ValidationError(f"Too many files. Maximum: {self.max_files}")

        types = []
        for upload in uploads:
            declared = self.validate_file(upload)
            sniffed = self.sniff_image_type(upload.data)
            if sniffed != declared:
                self.logger.warning(
                    f"Contenido de {upload.filename} no coincide con {upload.content_type} (detectado: {sniffed})"
                )
                raise ValidationError(f"File {upload.filename} content does not match its type")
            types.append(declared)
        return types

    @staticmethod
    def sniff_image_type(data: bytes) -> Optional[ImageMimeType]:
        """
        Detecta el formato por los primeros bytes del contenido.

        Returns:
            Optional[ImageMimeType]: Tipo detectado o None si no se reconoce.
        """
        if data[:3] == b"\xff\xd8\xff":
            return ImageMimeType.JPEG
        if data[:8] == b"\x89PNG\r\n\x1a\n":
            return ImageMimeType.PNG
        if data[:6] in (b"GIF87a", b"GIF89a"):
            return ImageMimeType.GIF
        if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
            return ImageMimeType.WEBP
        if data[4:8] == b"ftyp" and data[8:12] in (b"avif", b"avis"):
            return ImageMimeType.AVIF
        return None

    @staticmethod
    def sanitize_filename(filename: Optional[str], max_length: int = 255) -> str:
        """
        Nombre seguro para usar en la ruta del objeto.

        Los caracteres fuera de [a-zA-Z0-9._-] pasan a '-', las secuencias de
        puntos se reducen a uno y se elimina el punto inicial. Si excede
        `max_length` se recorta la base y se conserva la extensión.
        """
        name = _UNSAFE_CHARS.sub("-", filename or "")
        name = _DOT_RUNS.sub(".", name)
        name = name.lstrip(".") or "photo"
        if len(name) <= max_length:
            return name

        stem, dot, extension = name.rpartition(".")
        if dot and stem and len(extension) + 1 < max_length:
            return f"{stem[:max_length - len(extension) - 1]}.{extension}"
        return name[:max_length]
