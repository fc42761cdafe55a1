"""Source image metadata record."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SourceMetadata(BaseModel):
    """Facts about a source image, derived from the file and cacheable."""

    width: int = Field(..., description="Image width in pixels")
    height: int = Field(..., description="Image height in pixels")
    image_type: str = Field(..., description="Pillow format name, e.g. JPEG")
    mime: str = Field(..., description="MIME type")
    modified: int = Field(..., description="Last-modified unix timestamp")
    dirname: str = Field(..., description="Containing directory")
    basename: str = Field(..., description="File name with extension")
    ext: str = Field(..., description="Extension without the leading dot")
    filename: str = Field(..., description="File name without extension")
