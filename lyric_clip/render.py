"""
ffmpeg invocation.

Every call blocks until ffmpeg exits. ffmpeg's stderr is echoed live and the
last lines are kept so a failure can be reported with its diagnostic.
"""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

import ffmpeg
import imageio_ffmpeg

from .errors import RenderFailed
from .filtergraph import FilterGraph

FFMPEG_ENV = "LYRIC_CLIP_FFMPEG"
DIAGNOSTIC_LINES = 40

# Prefer software x264, then x265, then broadly-available mpeg4
VIDEO_ENCODER_FALLBACKS = ["libx264", "libx265", "mpeg4"]


@dataclass(frozen=True)
class RenderSettings:
    width: int = 720
    height: int = 1280
    fps: int = 30
    background_color: str = "black"
    audio_codec: str = "libmp3lame"
    video_codec: str = "libx264"
    preset: str = "medium"
    crf: int = 18
    mux_audio_codec: str = "aac"
    loglevel: str = "warning"


def ffmpeg_candidates() -> List[str]:
    """ffmpeg binaries in order of preference: override, PATH, imageio's bundled build.

    The bundled build comes last because it ships without drawtext.
    """
    found = []
    override = os.environ.get(FFMPEG_ENV)
    if override:
        found.append(override)
    on_path = shutil.which("ffmpeg")
    if on_path:
        found.append(on_path)
    try:
        found.append(imageio_ffmpeg.get_ffmpeg_exe())
    except RuntimeError:
        pass
    return list(dict.fromkeys(found)) or ["ffmpeg"]


def get_ffmpeg_bin() -> str:
    return ffmpeg_candidates()[0]


def video_encoder_args(venc: str, settings: RenderSettings) -> List[str]:
    args = ["-c:v", venc]
    if venc == "libx264":
        args += ["-pix_fmt", "yuv420p", "-crf", str(settings.crf), "-preset", settings.preset]
    elif venc == "libx265":
        args += ["-pix_fmt", "yuv420p", "-tag:v", "hvc1", "-crf", str(settings.crf + 4), "-preset", settings.preset]
    elif venc == "mpeg4":
        args += ["-q:v", "5", "-pix_fmt", "yuv420p"]
    return args


class Renderer:
    """Builds ffmpeg command lines and runs them one at a time."""

    def __init__(self, settings: RenderSettings | None = None, ffmpeg_bin: str | None = None,
                 verbose: bool = False):
        self.settings = settings or RenderSettings()
        self.ffmpeg_bin = ffmpeg_bin or get_ffmpeg_bin()
        self._pinned = ffmpeg_bin is not None
        self.verbose = verbose
        self._encoders: Dict[str, bool] = {}
        self._filters: Dict[Tuple[str, str], bool] = {}

    # ---------- process ----------
    def run(self, cmd: List[str]) -> None:
        if self.verbose:
            print(" ".join(cmd))
        tail = deque(maxlen=DIAGNOSTIC_LINES)
        try:
            proc = subprocess.Popen(cmd, stderr=subprocess.PIPE, text=True,
                                    encoding="utf-8", errors="replace")
        except OSError as e:
            raise RenderFailed(f"could not start {cmd[0]}: {e}", command=cmd) from e
        with proc:
            for line in proc.stderr:
                sys.stderr.write(line)
                tail.append(line.rstrip("\n"))
            returncode = proc.wait()
        if returncode != 0:
            raise RenderFailed(f"{os.path.basename(cmd[0])} failed", command=cmd,
                               returncode=returncode, diagnostic="\n".join(tail))

    def has_encoder(self, name: str) -> bool:
        if name not in self._encoders:
            try:
                r = subprocess.run(
                    [self.ffmpeg_bin, "-hide_banner", "-loglevel", "error", "-h", f"encoder={name}"],
                    stdout=subprocess.PIPE, stderr=subprocess.PIPE,
                )
                self._encoders[name] = r.returncode == 0
            except OSError:
                self._encoders[name] = False
        return self._encoders[name]

    def has_filter(self, name: str, binary: str | None = None) -> bool:
        binary = binary or self.ffmpeg_bin
        key = (binary, name)
        if key not in self._filters:
            try:
                r = subprocess.run(
                    [binary, "-hide_banner", "-loglevel", "error", "-h", f"filter={name}"],
                    stdout=subprocess.PIPE, stderr=subprocess.PIPE, text=True, errors="replace",
                )
                # unknown filters exit 0 as well, only the help header tells them apart
                self._filters[key] = r.returncode == 0 and f"Filter {name}" in r.stdout
            except OSError:
                self._filters[key] = False
        return self._filters[key]

    def require_filters(self, names: Sequence[str]) -> str:
        """Switch to the first ffmpeg binary that has every filter in ``names``.

        A binary passed to the constructor is the only candidate. Raises
        RenderFailed when nothing qualifies.
        """
        candidates = [self.ffmpeg_bin] if self._pinned else ffmpeg_candidates()
        for binary in candidates:
            if all(self.has_filter(name, binary) for name in names):
                self.ffmpeg_bin = binary
                return binary
        raise RenderFailed(
            "no ffmpeg with filter(s) {} among {}; install a full ffmpeg build or set {}".format(
                ", ".join(names), ", ".join(candidates), FFMPEG_ENV),
            command=candidates,
        )

    def video_encoder(self) -> str:
        preferred = self.settings.video_codec
        candidates = [preferred] + [v for v in VIDEO_ENCODER_FALLBACKS if v != preferred]
        # ffmpeg will report the error itself if none of them is available
        return next((enc for enc in candidates if self.has_encoder(enc)), preferred)

    # ---------- command builders ----------
    def _common_kwargs(self) -> dict:
        return {"hide_banner": None, "nostdin": None, "loglevel": self.settings.loglevel}

    def background_command(self, output: str, duration: float) -> List[str]:
        s = self.settings
        source = f"color=c={s.background_color}:s={s.width}x{s.height}:r={s.fps}:d={duration:.3f}"
        stream = ffmpeg.input(source, f="lavfi").output(
            str(output), pix_fmt="yuv420p", **self._common_kwargs()
        )
        return ffmpeg.compile(stream, cmd=self.ffmpeg_bin, overwrite_output=True)

    def graph_command(self, inputs: Sequence[str], graph: FilterGraph, output: str,
                      output_args: Sequence[str]) -> List[str]:
        cmd = [self.ffmpeg_bin, "-hide_banner", "-nostdin", "-loglevel", self.settings.loglevel, "-y"]
        for path in inputs:
            cmd += ["-i", str(path)]
        cmd += ["-filter_complex", graph.serialize(), "-map", f"[{graph.output}]"]
        cmd += list(output_args)
        cmd.append(str(output))
        return cmd

    def mux_command(self, video: str, audio: str, output: str) -> List[str]:
        v = ffmpeg.input(str(video)).video
        a = ffmpeg.input(str(audio)).audio
        stream = ffmpeg.output(
            v, a, str(output),
            vcodec="copy",
            acodec=self.settings.mux_audio_codec,
            # Truncate to the length of the shortest input
            shortest=None,
            **self._common_kwargs(),
        )
        return ffmpeg.compile(stream, cmd=self.ffmpeg_bin, overwrite_output=True)

    # ---------- stages ----------
    def background(self, output: str, duration: float) -> str:
        self.run(self.background_command(output, duration))
        return str(output)

    def audio_graph(self, inputs: Sequence[str], graph: FilterGraph, output: str) -> str:
        self.run(self.graph_command(inputs, graph, output, ["-c:a", self.settings.audio_codec]))
        return str(output)

    def video_graph(self, inputs: Sequence[str], graph: FilterGraph, output: str) -> str:
        args = ["-an"] + video_encoder_args(self.video_encoder(), self.settings)
        self.run(self.graph_command(inputs, graph, output, args))
        return str(output)

    def mux(self, video: str, audio: str, output: str) -> str:
        self.run(self.mux_command(video, audio, output))
        return str(output)
