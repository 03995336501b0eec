"""
Selectable images: built-in samples and user uploads.

Uploaded files are validated (image MIME type, size cap) and embedded
as base64 data URIs so feature extraction never depends on the file
remaining on disk. scan_image_directory() loads a whole folder of
images the same way, skipping anything that fails validation.
"""

import os
import base64
import logging
import mimetypes
import uuid
from typing import List

from .models import ImageReference

logger = logging.getLogger(__name__)

MAX_UPLOAD_BYTES = int(os.environ.get("MAX_UPLOAD_BYTES", str(5 * 1024 * 1024)))

IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.bmp', '.webp'}

SAMPLE_IMAGES = [
    ImageReference(1, "/images/samples/cat.png", "Cat", "A cute orange cat"),
    ImageReference(2, "/images/samples/dog.png", "Dog",
                   "Golden retriever running on grass"),
    ImageReference(3, "/images/samples/landscape.png", "Landscape",
                   "Beautiful mountains and lake"),
    ImageReference(4, "/images/samples/city.png", "City", "Modern city skyline"),
    ImageReference(5, "/images/samples/flowers.png", "Flowers",
                   "Blooming cherry blossoms"),
    ImageReference(6, "/images/samples/food.png", "Food",
                   "Delicious Italian pasta"),
]


class UploadRejected(ValueError):
    """Raised when an uploaded file is not an image or is too large."""


def load_upload(path: str, max_bytes: int = None) -> ImageReference:
    """
    Turn a local image file into a selectable image.

    Args:
        path: Path to the uploaded file.
        max_bytes: Size cap, defaults to MAX_UPLOAD_BYTES.

    Returns:
        ImageReference with a fresh unique id, a data URI source and the
        file name as label and description.

    Raises:
        UploadRejected: If the file isn't an image or exceeds the cap.
        OSError: If the file can't be read.
    """
    max_bytes = MAX_UPLOAD_BYTES if max_bytes is None else max_bytes
    filename = os.path.basename(path)

    mime_type, _ = mimetypes.guess_type(filename)
    if not mime_type or not mime_type.startswith("image/"):
        raise UploadRejected(f"File {filename} is not an image")

    size = os.path.getsize(path)
    if size > max_bytes:
        raise UploadRejected(
            f"File {filename} is too large ({size} bytes, limit {max_bytes})"
        )

    with open(path, "rb") as f:
        payload = base64.b64encode(f.read()).decode("ascii")

    logger.info(f"Uploaded {filename} ({size} bytes)")
    return ImageReference(
        id=uuid.uuid4().hex,
        src=f"data:{mime_type};base64,{payload}",
        alt=filename,
        description=filename,
    )


def scan_image_directory(image_dir: str, max_bytes: int = None) -> List[ImageReference]:
    """
    Load every image file in a directory as an upload.

    Files are visited in name order; rejected or unreadable files are
    logged and skipped.
    """
    filenames = sorted(
        f for f in os.listdir(image_dir)
        if os.path.splitext(f)[1].lower() in IMAGE_EXTENSIONS
    )

    images = []
    for filename in filenames:
        try:
            images.append(load_upload(os.path.join(image_dir, filename), max_bytes))
        except (UploadRejected, OSError) as e:
            logger.warning(f"Skipping {filename}: {e}")

    logger.info(f"Loaded {len(images)}/{len(filenames)} images from {image_dir}")
    return images
