"""Tests for the default checklist icons."""

from PIL import Image

from lyric_clip.icons import ICON_PX, ensure_icons
from lyric_clip.overlay import StyleConfig


class TestEnsureIcons:
    def test_writes_two_pngs(self, tmp_path):
        unchecked, checked = ensure_icons(str(tmp_path / "work"), StyleConfig())
        for path in (unchecked, checked):
            with Image.open(path) as img:
                assert img.size == (ICON_PX, ICON_PX)
                assert img.mode == "RGBA"

    def test_colors_follow_style(self, tmp_path):
        style = StyleConfig(checkbox_selected_color="#FF0000", checkbox_unselected_color="#00FF00")
        unchecked, checked = ensure_icons(str(tmp_path), style)
        with Image.open(checked) as img:
            assert img.getpixel((ICON_PX // 2, ICON_PX // 2)) == (255, 0, 0, 255)
        with Image.open(unchecked) as img:
            # hollow centre, colored ring
            assert img.getpixel((ICON_PX // 2, ICON_PX // 2))[3] == 0
            assert img.getpixel((ICON_PX // 2, ICON_PX // 12 + 2)) == (0, 255, 0, 255)
