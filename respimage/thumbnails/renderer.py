"""Thumbnail renderer and source inspection using Pillow."""

from __future__ import annotations

import os
from pathlib import Path

from PIL import Image, ImageOps, UnidentifiedImageError

from respimage.errors import SourceNotFoundError, ThumbnailIOError
from respimage.models.metadata import SourceMetadata

# Formats that cannot carry an alpha channel
_OPAQUE_FORMATS = {"JPEG", "BMP"}


def read_source_metadata(path: Path) -> SourceMetadata:
    """Inspect a source image without decoding its pixel data.

    Raises:
        SourceNotFoundError: if the file is missing or cannot be opened as an image
    """
    try:
        stat = path.stat()
        with Image.open(path) as image:
            width, height = image.size
            image_type = image.format or ""
            mime = image.get_format_mimetype() or Image.MIME.get(image_type, "")
    except FileNotFoundError as e:
        raise SourceNotFoundError(str(path)) from e
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise SourceNotFoundError(str(path), str(e)) from e

    return SourceMetadata(
        width=width,
        height=height,
        image_type=image_type,
        mime=mime,
        modified=int(stat.st_mtime),
        dirname=str(path.parent),
        basename=path.name,
        ext=path.suffix.lstrip("."),
        filename=path.stem,
    )


class ThumbnailRenderer:
    """Resizes source images and writes thumbnails to disk."""

    def __init__(self, background_color: str = "#ffffff") -> None:
        self.background_color = background_color

    def thumbnail(self, source: Path, width: int, height: int) -> Image.Image:
        """Create a resized copy of a source image.

        With both dimensions set the image is scaled to cover the box and
        center-cropped to exactly ``width`` x ``height``. With one dimension
        set to 0 the other is derived from the aspect ratio; such images are
        never enlarged.

        Raises:
            ThumbnailIOError: if the source cannot be decoded
        """
        try:
            with Image.open(source) as opened:
                image = ImageOps.exif_transpose(opened)
                image.load()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
            raise ThumbnailIOError(f"Failed to read image {source}: {e}") from e

        if width > 0 and height > 0:
            return ImageOps.fit(image, (width, height), Image.Resampling.LANCZOS)

        if width > 0:
            ratio = width / image.width
        else:
            ratio = height / image.height
        if ratio >= 1:
            return image.copy()

        new_size = (
            max(1, round(image.width * ratio)),
            max(1, round(image.height * ratio)),
        )
        return image.resize(new_size, Image.Resampling.LANCZOS)

    def save(self, image: Image.Image, target: Path, quality: int) -> None:
        """Write an image, choosing the format from the target extension.

        Raises:
            ThumbnailIOError: if the format is unknown or the write fails
        """
        extension = target.suffix.lower()
        image_format = Image.registered_extensions().get(extension)
        if image_format is None:
            raise ThumbnailIOError(f"Unsupported thumbnail format: {extension or target.name}")

        if image_format in _OPAQUE_FORMATS:
            image = self._flatten(image)

        tmp_path = target.with_name(f".{target.name}.tmp")
        try:
            image.save(tmp_path, format=image_format, quality=quality, optimize=True)
            os.replace(tmp_path, target)
        except (OSError, ValueError) as e:
            tmp_path.unlink(missing_ok=True)
            raise ThumbnailIOError(f"Failed to write thumbnail {target}: {e}") from e

    def _flatten(self, image: Image.Image) -> Image.Image:
        """Drop transparency by compositing onto the background color."""
        if image.mode == "P":
            image = image.convert("RGBA")
        if image.mode in ("RGBA", "LA"):
            background = Image.new("RGB", image.size, self.background_color)
            background.paste(image, (0, 0), image)
            return background
        if image.mode != "RGB":
            return image.convert("RGB")
        return image
