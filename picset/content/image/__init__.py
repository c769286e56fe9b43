from ._models import ImageData, ImageInfo
from .component import Image

__all__ = ["Image", "ImageData", "ImageInfo"]
