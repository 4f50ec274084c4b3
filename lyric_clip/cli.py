from __future__ import annotations

import argparse
import sys

from . import config as defaults
from .config import ClipConfig
from .errors import LyricClipError, RenderFailed
from .pipeline import choose_lines, plan_clip, run_pipeline
from .render import Renderer
from .selection import parse_range, print_timeline
from .timeline import parse_lrc


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="lyric-clip",
        description="Render a vertical checklist-style lyric clip from an .lrc file and two audio tracks")
    ap.add_argument("--audio", default=defaults.AUDIO_ORIGINAL, help="Original track (vocals)")
    ap.add_argument("--backing", default=defaults.AUDIO_BACKING, help="Instrumental/backing track")
    ap.add_argument("--lyrics", default=defaults.LYRICS_PATH, help="Timed lyrics (.lrc)")
    ap.add_argument("--font", default=defaults.FONT_PATH, help="TTF font used by drawtext")
    ap.add_argument("--work-dir", default=defaults.WORK_DIR, help="Directory for intermediate files")
    ap.add_argument("--output", default=None, help="Final video path (defaults to <work-dir>/result.mp4)")
    ap.add_argument("--range", dest="line_range", default=None,
                    help='Inclusive 1-based line range, e.g. "33 44"; prompts when omitted')
    ap.add_argument("--original-gain", type=float, default=defaults.ORIGINAL_GAIN)
    ap.add_argument("--backing-gain", type=float, default=defaults.BACKING_GAIN)
    ap.add_argument("--icon-unchecked", default=None, help="PNG for an unchecked row")
    ap.add_argument("--icon-checked", default=None, help="PNG for a checked row")
    ap.add_argument("--list", action="store_true", help="Print numbered lyric lines and exit")
    ap.add_argument("--dry-run", action="store_true",
                    help="Print the compiled filter graphs instead of rendering")
    ap.add_argument("-v", "--verbose", action="store_true", help="Echo ffmpeg command lines")
    return ap


def config_from_args(args: argparse.Namespace) -> ClipConfig:
    if bool(args.icon_unchecked) != bool(args.icon_checked):
        raise SystemExit("--icon-unchecked and --icon-checked must be given together")
    icons = (args.icon_unchecked, args.icon_checked) if args.icon_checked else None
    return ClipConfig(
        original=args.audio,
        backing=args.backing,
        lyrics=args.lyrics,
        font=args.font,
        work_dir=args.work_dir,
        output=args.output,
        icons=icons,
        original_gain=args.original_gain,
        backing_gain=args.backing_gain,
    )


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    cfg = config_from_args(args)
    try:
        if args.list:
            print_timeline(parse_lrc(cfg.lyrics))
            return 0
        line_range = parse_range(args.line_range) if args.line_range else None
        if args.dry_run:
            plan = plan_clip(cfg, choose_lines(cfg, line_range))
            print(f"offset={plan.offset:.3f} duration={plan.duration:.3f}")
            print("audio:", plan.audio_graph.serialize())
            print("video:", plan.overlay_graph.serialize())
            return 0
        run_pipeline(cfg, line_range, renderer=Renderer(cfg.render, verbose=args.verbose))
    except RenderFailed as e:
        print(f"error: {e}", file=sys.stderr)
        if e.diagnostic:
            print(e.diagnostic, file=sys.stderr)
        return 1
    except LyricClipError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
