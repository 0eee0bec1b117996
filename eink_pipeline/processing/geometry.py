from __future__ import annotations

from PIL import Image

from ..errors import GeometryError

_WHITE = (255, 255, 255)

# Pillow rotates counter-clockwise; display rotations are clockwise.
_CLOCKWISE_TRANSPOSE = {
    90: Image.Transpose.ROTATE_270,
    180: Image.Transpose.ROTATE_180,
    270: Image.Transpose.ROTATE_90,
}


def flatten(img: Image.Image) -> Image.Image:
    """Return an RGB copy with any transparency composited onto white."""
    has_alpha = img.mode in ("RGBA", "LA", "PA") or (
        img.mode == "P" and "transparency" in img.info
    )
    if not has_alpha:
        return img.convert("RGB")
    rgba = img.convert("RGBA")
    background = Image.new("RGBA", rgba.size, _WHITE + (255,))
    return Image.alpha_composite(background, rgba).convert("RGB")


def rotate(img: Image.Image, degrees: int) -> Image.Image:
    if degrees % 90 != 0:
        raise GeometryError(f"Rotation must be a multiple of 90 degrees, got {degrees}")
    transpose = _CLOCKWISE_TRANSPOSE.get(degrees % 360)
    if transpose is None:
        return img
    return img.transpose(transpose)


def place(
    img: Image.Image,
    width: int,
    height: int,
    offset_x: int = 0,
    offset_y: int = 0,
) -> Image.Image:
    """Fit ``img`` into a white ``width`` x ``height`` canvas.

    A source of a different size is scaled to fit while keeping its aspect
    ratio and centred. The offsets then translate it; anything pushed past
    the canvas edge is clipped and uncovered area stays white.
    """

    if width <= 0 or height <= 0:
        raise GeometryError(f"Image dimensions must be positive, got {width}x{height}")

    if img.size == (width, height) and offset_x == 0 and offset_y == 0:
        return img.copy()

    if img.size != (width, height):
        scale = min(width / img.width, height / img.height)
        # A very thin strip may round to zero along its short side.
        size = (max(1, round(img.width * scale)), max(1, round(img.height * scale)))
        img = img.resize(size, Image.Resampling.LANCZOS)

    canvas = Image.new("RGB", (width, height), _WHITE)
    left = (width - img.width) // 2 + offset_x
    top = (height - img.height) // 2 + offset_y
    canvas.paste(img, (left, top))
    return canvas
