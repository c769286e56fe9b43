"""
Image processed with Pillow.
"""

from __future__ import annotations

__all__ = ["Pillow"]


import base64
from io import BytesIO
from typing import Any

from PIL import Image as PILImage
from PIL import ImageCms, ImageOps, UnidentifiedImageError
from PIL.Image import Image
from pillow_heif import register_heif_opener

from picset.core import Context, Provider, warn
from picset.core.exceptions import BadRequestError, UnprocessableError

from .._models import ImageData, ImageInfo

register_heif_opener()

DECODE_ERRORS = (
    UnidentifiedImageError,
    PILImage.DecompressionBombError,
    OSError,
    SyntaxError,
    ValueError,
)


class Pillow(Provider):
    png_compress_level: int

    _init: bool
    _image: Image
    _image_bytes: dict

    def __init__(self, png_compress_level: int = 1, **kwargs):
        """Intialize.

        Args:
            png_compress_level:
                zlib level used for lossless PNG output.
                Lower is faster.
        """
        self.png_compress_level = png_compress_level
        self._init = False
        self._image_bytes = dict()

    def __setup__(self, context: Context | None = None) -> None:
        if self._init:
            return
        component = self.__component__
        try:
            if component._pil_image is not None:
                self._image = component._pil_image
            elif component.source:
                self._image = PILImage.open(component.source)
            elif component.stream is not None:
                self._image = PILImage.open(component.stream)
            elif component.content:
                self._image = PILImage.open(BytesIO(component.content))
            else:
                raise BadRequestError("Image not initialized.")
            # open() is lazy, truncated data only fails on load()
            self._image.load()
        except DECODE_ERRORS as e:
            raise UnprocessableError(f"Image could not be decoded: {e}") from e
        self._init = True

    def get_info(self, **kwargs) -> ImageInfo:
        self.__setup__()
        return ImageInfo(
            width=self._image.width,
            height=self._image.height,
            format=self._image.format,
            mode=self._image.mode,
        )

    def normalize(self, **kwargs) -> Any:
        from ..component import Image as ImageComponent

        self.__setup__()
        try:
            image = ImageOps.exif_transpose(self._image)
        except DECODE_ERRORS as e:
            raise UnprocessableError(f"Image could not be decoded: {e}") from e
        icc_profile = self._image.info.get("icc_profile")
        alpha = self._has_alpha(image)
        if image.mode in ("I;16", "I;16B", "I;16L", "I", "F"):
            image = image.convert("I").point(lambda v: v * (1 / 256))
            image = image.convert("L")
        if image.mode not in ("RGB", "RGBA", "CMYK"):
            image = image.convert("RGBA" if alpha else "RGB")
        if icc_profile:
            image = self._to_srgb(image, icc_profile, alpha)
        mode = "RGBA" if alpha else "RGB"
        if image.mode != mode:
            image = image.convert(mode)
        if image is self._image:
            image = image.copy()
        image.info = dict()

        byte_io = BytesIO()
        image.save(
            byte_io,
            format="PNG",
            compress_level=self.png_compress_level,
        )
        return ImageComponent(
            data=ImageData(content=byte_io.getvalue(), media_type="image/png"),
            _pil_image=image,
            __provider__=self._new_provider(),
        )

    def resize(
        self,
        width: int,
        height: int | None = None,
        upscale: bool = False,
        **kwargs,
    ) -> Any:
        from ..component import Image as ImageComponent

        self.__setup__()
        if width <= 0 or (height is not None and height <= 0):
            raise BadRequestError("Resize box must be positive.")
        source_width, source_height = self._image.size
        scale = width / source_width
        if height is not None:
            scale = min(scale, height / source_height)
        if not upscale:
            scale = min(scale, 1.0)
        new_width = min(max(1, round(source_width * scale)), width)
        new_height = max(1, round(source_height * scale))
        if height is not None:
            new_height = min(new_height, height)
        if (new_width, new_height) == self._image.size:
            resized = self._image.copy()
        else:
            resized = self._image.resize(
                (new_width, new_height),
                resample=PILImage.Resampling.LANCZOS,
            )
        return ImageComponent(
            _pil_image=resized, __provider__=self._new_provider()
        )

    def convert(
        self,
        type: str,
        format: str | None = None,
        quality: int | None = None,
        **kwargs,
    ) -> Any:
        self.__setup__()
        if format is not None:
            format = format.upper()
        if type == "pil":
            return self._image
        elif type == "bytes":
            return self._encode(format, quality)
        elif type == "base64":
            return base64.b64encode(self._encode(format, quality)).decode(
                "utf-8"
            )
        raise BadRequestError(f"Type {type} not supported")

    def save(self, path: str, format: str | None = None, **kwargs) -> None:
        self.__setup__()
        if format is not None:
            format = format.upper()
        self._image.save(path, format=format)

    def _encode(self, format: str | None, quality: int | None) -> bytes:
        format = format or self._image.format or "PNG"
        cache_key = (format, quality)
        if cache_key in self._image_bytes:
            return self._image_bytes[cache_key]
        image = self._image
        params: dict[str, Any] = dict()
        if format == "JPEG":
            if image.mode != "RGB":
                image = image.convert("RGB")
            params = dict(optimize=True, progressive=True)
            if quality is not None:
                params["quality"] = quality
        elif format == "WEBP":
            params = dict(method=4)
            if quality is not None:
                params["quality"] = quality
        elif format == "PNG":
            params = dict(compress_level=self.png_compress_level)
        byte_io = BytesIO()
        image.save(byte_io, format=format, **params)
        self._image_bytes[cache_key] = byte_io.getvalue()
        return self._image_bytes[cache_key]

    def _new_provider(self) -> Pillow:
        return Pillow(png_compress_level=self.png_compress_level)

    @staticmethod
    def _has_alpha(image: Image) -> bool:
        if image.mode in ("RGBA", "LA", "PA", "RGBa", "La"):
            return True
        return image.mode == "P" and "transparency" in image.info

    @staticmethod
    def _to_srgb(image: Image, icc_profile: bytes, alpha: bool) -> Image:
        try:
            source = ImageCms.ImageCmsProfile(BytesIO(icc_profile))
            return ImageCms.profileToProfile(
                image,
                source,
                ImageCms.createProfile("sRGB"),
                outputMode="RGBA" if alpha else "RGB",
            )
        except (ImageCms.PyCMSError, OSError, ValueError) as e:
            warn(f"Ignoring color profile that could not be applied: {e}")
            return image
