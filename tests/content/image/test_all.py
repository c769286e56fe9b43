# type: ignore
import os
from io import BytesIO

import pytest
from common.images import (
    format_of,
    jpeg_bytes,
    png_bytes,
    rotated_jpeg_bytes,
    size_of,
    srgb_tagged_jpeg_bytes,
)
from PIL import Image as PILImage

from picset.content.image import Image
from picset.core.exceptions import UnprocessableError

from ._providers import ImageProvider
from ._sync_and_async_client import ImageSyncAndAsyncClient

providers = [ImageProvider.PILLOW]


def get_client(provider_type, async_call, content):
    return ImageSyncAndAsyncClient(
        provider_type=provider_type,
        async_call=async_call,
        content=content,
    )


@pytest.mark.asyncio
@pytest.mark.parametrize("provider_type", providers)
@pytest.mark.parametrize("async_call", [False, True])
async def test_get_info(provider_type: str, async_call: bool):
    client = get_client(provider_type, async_call, jpeg_bytes(64, 48))
    info = await client.get_info()
    assert info.width == 64
    assert info.height == 48
    assert info.format == "JPEG"
    assert info.mode == "RGB"


@pytest.mark.asyncio
@pytest.mark.parametrize("provider_type", providers)
@pytest.mark.parametrize("async_call", [False, True])
async def test_normalize_orientation(provider_type: str, async_call: bool):
    client = get_client(provider_type, async_call, rotated_jpeg_bytes(64, 48))
    normalized = await client.normalize()
    assert isinstance(normalized, Image)
    assert normalized.media_type == "image/png"
    assert size_of(normalized.content) == (48, 64)
    with PILImage.open(BytesIO(normalized.content)) as image:
        assert image.format == "PNG"
        assert image.mode == "RGB"
        assert "exif" not in image.info
        assert "icc_profile" not in image.info


@pytest.mark.asyncio
@pytest.mark.parametrize("provider_type", providers)
@pytest.mark.parametrize("async_call", [False, True])
async def test_normalize_color_profile(provider_type: str, async_call: bool):
    client = get_client(
        provider_type, async_call, srgb_tagged_jpeg_bytes(32, 32)
    )
    normalized = await client.normalize()
    info = await client.wrap(normalized).get_info()
    assert info.mode == "RGB"
    with PILImage.open(BytesIO(normalized.content)) as image:
        assert "icc_profile" not in image.info


@pytest.mark.asyncio
@pytest.mark.parametrize("provider_type", providers)
@pytest.mark.parametrize("async_call", [False, True])
@pytest.mark.parametrize(
    "mode, expected",
    [("RGBA", "RGBA"), ("RGB", "RGB"), ("L", "RGB"), ("P", "RGB")],
)
async def test_normalize_mode(
    provider_type: str, async_call: bool, mode: str, expected: str
):
    if mode in ("L", "P"):
        image = PILImage.new("RGB", (20, 10), (1, 2, 3)).convert(mode)
        byte_io = BytesIO()
        image.save(byte_io, format="PNG")
        content = byte_io.getvalue()
    else:
        content = png_bytes(20, 10, mode)
    client = get_client(provider_type, async_call, content)
    normalized = await client.normalize()
    info = await client.wrap(normalized).get_info()
    assert info.mode == expected
    assert (info.width, info.height) == (20, 10)


@pytest.mark.asyncio
@pytest.mark.parametrize("provider_type", providers)
@pytest.mark.parametrize("async_call", [False, True])
async def test_normalize_deterministic(provider_type: str, async_call: bool):
    content = rotated_jpeg_bytes(120, 80)
    first = await get_client(provider_type, async_call, content).normalize()
    second = await get_client(provider_type, async_call, content).normalize()
    assert first.content == second.content


@pytest.mark.asyncio
@pytest.mark.parametrize("provider_type", providers)
@pytest.mark.parametrize("async_call", [False, True])
@pytest.mark.parametrize(
    "width, height, expected",
    [
        (200, None, (200, 150)),
        (1000, None, (400, 300)),
        (400, 100, (133, 100)),
        (1, None, (1, 1)),
    ],
)
async def test_resize(
    provider_type: str,
    async_call: bool,
    width: int,
    height: int | None,
    expected: tuple[int, int],
):
    client = get_client(provider_type, async_call, png_bytes(400, 300))
    resized = await client.resize(width=width, height=height)
    info = await client.wrap(resized).get_info()
    assert (info.width, info.height) == expected


@pytest.mark.asyncio
@pytest.mark.parametrize("provider_type", providers)
@pytest.mark.parametrize("async_call", [False, True])
async def test_resize_upscale(provider_type: str, async_call: bool):
    client = get_client(provider_type, async_call, png_bytes(40, 30))
    resized = await client.resize(width=80, upscale=True)
    info = await client.wrap(resized).get_info()
    assert (info.width, info.height) == (80, 60)


@pytest.mark.asyncio
@pytest.mark.parametrize("provider_type", providers)
@pytest.mark.parametrize("async_call", [False, True])
@pytest.mark.parametrize("format", ["WEBP", "JPEG", "PNG"])
@pytest.mark.parametrize("mode", ["RGB", "RGBA"])
async def test_convert(
    provider_type: str, async_call: bool, format: str, mode: str
):
    client = get_client(provider_type, async_call, png_bytes(50, 40, mode))
    content = await client.convert(type="bytes", format=format, quality=82)
    assert format_of(content) == format
    assert size_of(content) == (50, 40)
    encoded = await client.convert(type="base64", format=format, quality=82)
    assert isinstance(encoded, str)


@pytest.mark.asyncio
@pytest.mark.parametrize("provider_type", providers)
@pytest.mark.parametrize("async_call", [False, True])
async def test_save(provider_type: str, async_call: bool, tmp_path):
    client = get_client(provider_type, async_call, png_bytes(30, 20))
    path = os.path.join(tmp_path, "image.webp")
    await client.save(path=path, format="webp")
    with open(path, "rb") as file:
        assert format_of(file.read()) == "WEBP"


@pytest.mark.asyncio
@pytest.mark.parametrize("provider_type", providers)
@pytest.mark.parametrize("async_call", [False, True])
@pytest.mark.parametrize(
    "content",
    [b"not an image", jpeg_bytes(64, 48)[:200]],
    ids=["garbage", "truncated"],
)
async def test_undecodable(provider_type: str, async_call: bool, content):
    client = get_client(provider_type, async_call, content)
    with pytest.raises(UnprocessableError):
        await client.get_info()
    client = get_client(provider_type, async_call, content)
    with pytest.raises(UnprocessableError):
        await client.normalize()
