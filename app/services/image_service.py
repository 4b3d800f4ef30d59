"""
Módulo de servicio de optimización de imágenes.
"""
import io
import logging
from typing import Optional, Tuple
from PIL import Image, UnidentifiedImageError

from app.errors import ValidationError

DEFAULT_WIDTH = 1200
DEFAULT_QUALITY = 75

class ImageService:
    """
    Redimensiona y recodifica a WebP las imágenes servidas por el proxy.
    """
    def __init__(self, min_width: int = 16, max_width: int = 4096):
        self.logger = logging.getLogger(self.__class__.__name__)
        self.min_width = min_width
        self.max_width = max_width

    def parse_options(self, width: Optional[str], quality: Optional[str]) -> Tuple[int, int]:
        """Interpreta `w` y `q` de la query; valores inválidos usan el valor por defecto."""
        try:
            w = int(width) if width else DEFAULT_WIDTH
        except ValueError:
            w = DEFAULT_WIDTH
        try:
            q = int(quality) if quality else DEFAULT_QUALITY
        except ValueError:
            q = DEFAULT_QUALITY
        return min(max(w, self.min_width), self.max_width), min(max(q, 1), 100)

    def optimize(self, data: bytes, width: int = DEFAULT_WIDTH, quality: int = DEFAULT_QUALITY) -> bytes:
        """
        Ajusta la imagen al ancho pedido (sin ampliarla) y la convierte a WebP.

        Args:
            data (bytes): Imagen original.
            width (int): Ancho máximo.
            quality (int): Calidad WebP (1-100).

        Returns:
            bytes: Imagen WebP.

        Raises:
            ValidationError: Si el contenido no es una imagen legible.
        """
        try:
            with Image.open(io.BytesIO(data)) as img:
                if img.width > width:
                    # thumbnail() conserva la relación de aspecto
                    img.thumbnail((width, img.height))
                if img.mode not in ("RGB", "RGBA"):
                    img = img.convert("RGBA" if "A" in img.getbands() or img.mode == "P" else "RGB")
                output = io.BytesIO()
                img.save(output, format="WEBP", quality=quality)
                return output.getvalue()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            self.logger.error(f"No se pudo optimizar la imagen: {e}")
            raise ValidationError("Unsupported image")
