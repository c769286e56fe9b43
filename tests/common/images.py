from io import BytesIO

import pillow_heif
from PIL import Image, ImageCms


def make_image(
    width: int,
    height: int,
    mode: str = "RGB",
    color: tuple = (200, 120, 40),
) -> Image.Image:
    if mode == "RGBA" and len(color) == 3:
        color = color + (128,)
    image = Image.new(mode, (width, height), color)
    # Asymmetric marker to check orientation.
    marker = (10, 200, 90) if mode == "RGB" else (10, 200, 90, 255)
    image.paste(marker, (0, 0, max(1, width // 4), max(1, height // 8)))
    return image


def encode(image: Image.Image, format: str, **params) -> bytes:
    byte_io = BytesIO()
    image.save(byte_io, format=format, **params)
    return byte_io.getvalue()


def jpeg_bytes(width: int, height: int, **params) -> bytes:
    return encode(make_image(width, height), "JPEG", quality=90, **params)


def png_bytes(width: int, height: int, mode: str = "RGB") -> bytes:
    return encode(make_image(width, height, mode), "PNG")


def webp_bytes(width: int, height: int) -> bytes:
    return encode(make_image(width, height), "WEBP", quality=90)


def heic_bytes(width: int, height: int) -> bytes:
    byte_io = BytesIO()
    pillow_heif.from_pillow(make_image(width, height)).save(
        byte_io, quality=90
    )
    return byte_io.getvalue()


def rotated_jpeg_bytes(width: int, height: int) -> bytes:
    """JPEG stored as width x height with orientation 6 (rotate 90)."""
    exif = Image.Exif()
    exif[0x0112] = 6
    return jpeg_bytes(width, height, exif=exif.tobytes())


def srgb_tagged_jpeg_bytes(width: int, height: int) -> bytes:
    profile = ImageCms.ImageCmsProfile(ImageCms.createProfile("sRGB"))
    return jpeg_bytes(width, height, icc_profile=profile.tobytes())


def size_of(content: bytes) -> tuple[int, int]:
    with Image.open(BytesIO(content)) as image:
        return image.size


def format_of(content: bytes) -> str | None:
    with Image.open(BytesIO(content)) as image:
        return image.format
