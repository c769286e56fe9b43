from __future__ import annotations

from typing import IO, Any

from picset.core import Component, operation

from ._models import ImageData, ImageInfo


class Image(Component):
    source: str | None
    content: bytes | None
    stream: IO | None
    media_type: str | None
    _pil_image: Any | None

    def __init__(
        self,
        source: str | None = None,
        content: bytes | None = None,
        stream: IO | None = None,
        data: ImageData | None = None,
        **kwargs,
    ):
        """Initialize.

        Args:
            source: Local path.
            content: Image bytes.
            stream: Image stream.
            data: Image data.
        """
        self.source = source
        self.content = content
        self.stream = stream
        self.media_type = None
        self._pil_image = kwargs.pop("_pil_image", None)
        if data is not None:
            self.source = data.source
            self.content = data.content
            self.media_type = data.media_type
        super().__init__(
            __provider__=kwargs.pop("__provider__", "pillow"),
            **kwargs,
        )

    @operation()
    def get_info(self, **kwargs) -> ImageInfo:
        """Get image info.

        Returns:
            Image info.

        Raises:
            UnprocessableError:
                Image could not be decoded.
        """
        ...

    @operation()
    def normalize(self, **kwargs) -> Image:
        """Canonicalize the image for further processing.

        Orientation metadata is applied to the pixels, an embedded
        color profile is converted to sRGB, the pixel mode is
        reduced to RGB or RGBA and all metadata is dropped.

        Returns:
            Normalized image backed by lossless PNG bytes.

        Raises:
            UnprocessableError:
                Image could not be decoded.
        """
        ...

    @operation()
    def resize(
        self,
        width: int,
        height: int | None = None,
        upscale: bool = False,
        **kwargs,
    ) -> Image:
        """Resize to fit within the given box.

        Args:
            width:
                Maximum width in pixels.
            height:
                Maximum height in pixels.
                If not provided, only the width is bounded.
            upscale:
                A value indicating whether images smaller
                than the box are enlarged.

        Returns:
            Resized image. Aspect ratio is preserved.
        """
        ...

    @operation()
    def convert(
        self,
        type: str,
        format: str | None = None,
        quality: int | None = None,
        **kwargs,
    ) -> Any:
        """Convert to type.

        Args:
            type: One of "bytes", "base64", "pil".
            format: One of "JPEG", "PNG", "WEBP".
            quality: Encoder quality for lossy formats.

        Returns:
            Converted image.
        """
        ...

    @operation()
    def save(
        self,
        path: str,
        format: str | None = None,
        **kwargs,
    ) -> None:
        """Save image.

        Args:
            path: Local path.
            format: One of "JPEG", "PNG", "WEBP".
        """
        ...

    @operation()
    async def aget_info(self, **kwargs) -> ImageInfo:
        """Get image info.

        Returns:
            Image info.
        """
        ...

    @operation()
    async def anormalize(self, **kwargs) -> Image:
        """Canonicalize the image for further processing.

        Returns:
            Normalized image.
        """
        ...

    @operation()
    async def aresize(
        self,
        width: int,
        height: int | None = None,
        upscale: bool = False,
        **kwargs,
    ) -> Image:
        """Resize to fit within the given box.

        Args:
            width: Maximum width in pixels.
            height: Maximum height in pixels.
            upscale: A value indicating whether to enlarge.

        Returns:
            Resized image.
        """
        ...

    @operation()
    async def aconvert(
        self,
        type: str,
        format: str | None = None,
        quality: int | None = None,
        **kwargs,
    ) -> Any:
        """Convert to type.

        Args:
            type: One of "bytes", "base64", "pil".
            format: One of "JPEG", "PNG", "WEBP".
            quality: Encoder quality for lossy formats.

        Returns:
            Converted image.
        """
        ...

    @operation()
    async def asave(
        self,
        path: str,
        format: str | None = None,
        **kwargs,
    ) -> None:
        """Save image.

        Args:
            path: Local path.
            format: One of "JPEG", "PNG", "WEBP".
        """
        ...
