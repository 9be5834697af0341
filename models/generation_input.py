"""
Input variants accepted by the generation orchestrator: free-text requirements
or a screenshot of a user interface.
"""
import os
from dataclasses import dataclass
from typing import Union

# Image types the generation services accept, keyed by file extension.
IMAGE_MIME_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
}


@dataclass(frozen=True)
class TextRequirements:
    text: str


@dataclass(frozen=True)
class ScreenshotImage:
    data: bytes
    mime_type: str

    @classmethod
    def from_file(cls, path: str) -> "ScreenshotImage":
        """
        Reads a screenshot from disk and detects its mime type from the extension.

        Raises:
            ValueError: If the extension is not PNG, JPG/JPEG or GIF.
            FileNotFoundError: If the file does not exist.
        """
        mime_type = mime_type_for(path)
        with open(path, "rb") as f:
            return cls(data=f.read(), mime_type=mime_type)


GenerationInput = Union[TextRequirements, ScreenshotImage]


def mime_type_for(path: str) -> str:
    ext = os.path.splitext(path)[1].lower()
    try:
        return IMAGE_MIME_TYPES[ext]
    except KeyError:
        raise ValueError(f"Unsupported file type: {ext}. Please use PNG, JPG, or GIF.") from None
