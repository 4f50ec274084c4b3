"""Tests for the end-to-end run with ffmpeg replaced by a recorder."""

import os

import pytest

from conftest import SAMPLE_LRC
from lyric_clip import pipeline
from lyric_clip.config import ClipConfig
from lyric_clip.errors import InvalidSelection, RenderFailed, SourceUnavailable


@pytest.fixture
def clip_config(tmp_path, monkeypatch):
    (tmp_path / "song.lrc").write_text(SAMPLE_LRC, encoding="utf-8")
    (tmp_path / "orig.mp3").write_bytes(b"")
    (tmp_path / "back.mp3").write_bytes(b"")
    (tmp_path / "font.ttf").write_bytes(b"")
    monkeypatch.setattr(pipeline, "describe_track", lambda path: ("《X - Y》", "X"))
    return ClipConfig(
        original=str(tmp_path / "orig.mp3"),
        backing=str(tmp_path / "back.mp3"),
        lyrics=str(tmp_path / "song.lrc"),
        font=str(tmp_path / "font.ttf"),
        work_dir=str(tmp_path / "work"),
    )


class TestRunPipeline:
    def test_stage_order(self, clip_config, recorder):
        out = pipeline.run_pipeline(clip_config, (1, 4), renderer=recorder)
        assert out == os.path.join(clip_config.work_dir, "result.mp4")
        background, audio, video, mux = recorder.commands
        assert "lavfi" in background
        assert "color=c=black:s=720x1280:r=30:d=17.000" in background
        assert "[0:a]atrim=start=10.000" in audio[audio.index("-filter_complex") + 1]
        assert "-an" in video
        assert "-shortest" in mux and out in mux

    def test_artifacts_flow_forward(self, clip_config, recorder):
        pipeline.run_pipeline(clip_config, (2, 3), renderer=recorder)
        background, audio, video, mux = recorder.commands
        bg_path = clip_config.artifact("background.mp4")
        assert bg_path in background
        assert video[video.index("-i") + 1] == bg_path
        assert clip_config.artifact("audio_mixed.mp3") == audio[-1]
        assert clip_config.artifact("video_no_audio.mp4") == video[-1]
        assert clip_config.artifact("video_no_audio.mp4") in mux
        assert clip_config.artifact("audio_mixed.mp3") in mux

    def test_default_icons_are_drawn(self, clip_config, recorder):
        pipeline.run_pipeline(clip_config, (1, 2), renderer=recorder)
        video = recorder.commands[2]
        inputs = [video[i + 1] for i, a in enumerate(video) if a == "-i"]
        assert inputs[1:] == [clip_config.artifact("icon_unchecked.png"),
                              clip_config.artifact("icon_checked.png")]
        assert all(os.path.isfile(p) for p in inputs[1:])

    def test_heading_from_metadata(self, clip_config, recorder):
        pipeline.run_pipeline(clip_config, (2, 4), renderer=recorder)
        graph = recorder.commands[2][recorder.commands[2].index("-filter_complex") + 1]
        assert "《X - Y》" in graph
        assert "• second line" in graph

    def test_interactive_selection(self, clip_config, recorder):
        pipeline.run_pipeline(clip_config, renderer=recorder, ask=lambda _: "3 4")
        assert len(recorder.commands) == 4

    def test_bad_range_renders_nothing(self, clip_config, recorder):
        with pytest.raises(InvalidSelection):
            pipeline.run_pipeline(clip_config, (0, 2), renderer=recorder)
        assert recorder.commands == []

    def test_missing_media_renders_nothing(self, clip_config, recorder):
        os.remove(clip_config.backing)
        with pytest.raises(SourceUnavailable):
            pipeline.run_pipeline(clip_config, (1, 2), renderer=recorder)
        assert recorder.commands == []

    def test_missing_font_renders_nothing(self, clip_config, recorder):
        """A missing font is reported before the background and audio are rendered."""
        os.remove(clip_config.font)
        with pytest.raises(SourceUnavailable, match="font"):
            pipeline.run_pipeline(clip_config, (1, 2), renderer=recorder)
        assert recorder.commands == []

    def test_no_font_configured_is_allowed(self, clip_config, recorder):
        clip_config.font = ""
        pipeline.run_pipeline(clip_config, (1, 2), renderer=recorder)
        assert len(recorder.commands) == 4

    def test_ffmpeg_without_drawtext_renders_nothing(self, clip_config, make_recorder):
        """An ffmpeg build lacking drawtext is rejected before the first render call."""
        recorder = make_recorder(missing_filters={"drawtext"})
        with pytest.raises(RenderFailed, match="drawtext"):
            pipeline.run_pipeline(clip_config, (1, 4), renderer=recorder)
        assert recorder.commands == []

    def test_render_failure_stops_run(self, clip_config, make_recorder):
        recorder = make_recorder(fail_on=2)
        with pytest.raises(RenderFailed):
            pipeline.run_pipeline(clip_config, (1, 4), renderer=recorder)
        assert len(recorder.commands) == 2


class TestPlanClip:
    def test_plan(self, clip_config):
        sel = pipeline.choose_lines(clip_config, (2, 4))
        plan = pipeline.plan_clip(clip_config, sel)
        assert plan.offset == 13.0
        assert plan.duration == 25.0 - 13.0 + 2.0
        assert plan.style.bullet == "second line"
        assert plan.style.font_path == clip_config.font
        assert plan.audio_graph.output == "out"
        assert len(plan.overlay_graph) == 3 + 7 * 2
