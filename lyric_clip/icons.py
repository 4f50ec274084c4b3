"""Default checklist icons, drawn with Pillow when no icon files are configured."""

from __future__ import annotations

import os
from typing import Tuple

from PIL import Image, ImageColor, ImageDraw

from .overlay import StyleConfig

ICON_PX = 128  # drawn large, scaled down in the overlay graph


def _rgba(color: str) -> Tuple[int, int, int, int]:
    rgb = ImageColor.getrgb(color)
    return rgb[:3] + (255,)


def draw_unchecked(color: str, size: int = ICON_PX) -> Image.Image:
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    d = ImageDraw.Draw(img)
    pad = size // 12
    d.ellipse((pad, pad, size - pad, size - pad), outline=_rgba(color), width=max(2, size // 14))
    return img


def draw_checked(color: str, size: int = ICON_PX) -> Image.Image:
    img = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    d = ImageDraw.Draw(img)
    pad = size // 12
    d.ellipse((pad, pad, size - pad, size - pad), fill=_rgba(color))
    # check mark
    pts = [(size * 0.28, size * 0.52), (size * 0.44, size * 0.68), (size * 0.72, size * 0.36)]
    d.line(pts, fill=(0, 0, 0, 255), width=max(3, size // 10), joint="curve")
    return img


def ensure_icons(work_dir: str, style: StyleConfig) -> Tuple[str, str]:
    """Write unchecked/checked PNGs into ``work_dir`` and return their paths."""
    os.makedirs(work_dir, exist_ok=True)
    unchecked = os.path.join(work_dir, "icon_unchecked.png")
    checked = os.path.join(work_dir, "icon_checked.png")
    draw_unchecked(style.checkbox_unselected_color).save(unchecked)
    draw_checked(style.checkbox_selected_color).save(checked)
    return unchecked, checked
