from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Sequence

from perfchart.errors import PlotDataError
from perfchart.events import InputEvent
from perfchart.surface import ChartSurface


LOGGER = logging.getLogger(__name__)


def _zoom_arg(raw: str) -> tuple[float, int]:
    pixel_y, _, steps = raw.partition(":")
    try:
        return float(pixel_y), int(steps or "1")
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected PIXEL_Y[:STEPS], got {raw!r}") from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="perfchart")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a dataset JSON file to a PNG snapshot.")
    render.add_argument("data", type=Path, help='JSON with "traces", "labels" and optional "names"/"units".')
    render.add_argument("--out", type=Path, default=Path("perfchart.png"))
    render.add_argument("--width", type=int, default=800)
    render.add_argument("--height", type=int, default=None, help="Page height; the plot keeps 85px for the legend.")
    render.add_argument("--select", type=int, action="append", default=[], help="Highlight a trace (repeatable).")
    render.add_argument(
        "--zoom",
        type=_zoom_arg,
        action="append",
        default=[],
        metavar="PIXEL_Y[:STEPS]",
        help="Wheel-zoom around a pixel row; negative STEPS zoom out.",
    )
    render.add_argument("--baseline", type=float, default=None, metavar="PIXEL_Y", help="Place a reference baseline.")
    render.add_argument("--inspect", type=float, nargs=2, default=None, metavar=("X", "Y"), help="Hover a pixel.")
    render.add_argument("--units", default=None)
    return parser


def load_chart(path: Path, *, width: int, height: int | None, units: str | None) -> ChartSurface:
    payload = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(payload, dict) or "traces" not in payload or "labels" not in payload:
        raise PlotDataError(f"{path}: expected an object with `traces` and `labels`")
    return ChartSurface(
        payload["traces"],
        payload["labels"],
        payload.get("names"),
        units=units if units is not None else str(payload.get("units", "")),
        width=width,
        height=height if height is not None else 400 + 85,
    )


def run_render(args: argparse.Namespace) -> Path:
    chart = load_chart(args.data, width=args.width, height=args.height, units=args.units)
    for index in args.select:
        chart.handle(InputEvent("legend_toggle", trace_index=index))
    for pixel_y, steps in args.zoom:
        for _ in range(abs(steps)):
            chart.handle(InputEvent("wheel", y=pixel_y, delta_y=1.0 if steps > 0 else -1.0))
    if args.baseline is not None:
        chart.handle(InputEvent("pointer_down", y=args.baseline, modifiers={"shift": True}))
    if args.inspect is not None:
        chart.handle(InputEvent("pointer_move", x=args.inspect[0], y=args.inspect[1]))
    return chart.save_png(args.out)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        out = run_render(args)
    except (OSError, IndexError, ValueError) as exc:
        LOGGER.error("%s", exc)
        return 1
    print(out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
