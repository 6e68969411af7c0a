from collections.abc import Mapping

from core.utils.constants import DEFAULT_IMAGE_MIME_TYPE, MIME_TYPE_EXTENSION_MAP

MAGIC_BYTES: Mapping[bytes, str] = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"GIF87a": "image/gif",
    b"GIF89a": "image/gif",
}


def detect_mime_type(file_data: bytes) -> str:
    for signature, mime in MAGIC_BYTES.items():
        if file_data.startswith(signature):
            return mime

    # WebP: "RIFF" <size> "WEBP"
    if file_data[:4] == b"RIFF" and file_data[8:12] == b"WEBP":
        return "image/webp"

    raise ValueError("Unsupported or unknown file type")


def guess_image_mime_type(file_data: bytes) -> str:
    """Detect the MIME type, falling back to the generator's PNG output."""
    try:
        return detect_mime_type(file_data)
    except ValueError:
        return DEFAULT_IMAGE_MIME_TYPE


def extension_for(mime_type: str) -> str:
    return MIME_TYPE_EXTENSION_MAP.get(mime_type, "png")
