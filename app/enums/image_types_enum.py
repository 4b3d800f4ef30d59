from enum import StrEnum
from typing import List, Dict

class ImageMimeType(StrEnum):
    JPEG = "image/jpeg"
    JPG = "image/jpg"
    PNG = "image/png"
    GIF = "image/gif"
    WEBP = "image/webp"
    AVIF = "image/avif"

    def __str__(self) -> str:
        return self.value
    
    def __repr__(self) -> str:
        return self.value

    @property
    def canonical(self) -> "ImageMimeType":
        """'image/jpg' no es un tipo registrado, lo tratamos como 'image/jpeg'."""
        return ImageMimeType.JPEG if self is ImageMimeType.JPG else self
    
    @staticmethod
    def get_types_list() -> List[str]:
        return [mime.value for mime in ImageMimeType]
    
    @staticmethod
    def get_extensions_map() -> Dict[str, "ImageMimeType"]:
        return {
            ".jpg": ImageMimeType.JPEG,
            ".jpeg": ImageMimeType.JPEG,
            ".png": ImageMimeType.PNG,
            ".gif": ImageMimeType.GIF,
            ".webp": ImageMimeType.WEBP,
            ".avif": ImageMimeType.AVIF
        }
