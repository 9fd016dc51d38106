from __future__ import annotations

import json
from pathlib import Path
import tempfile
import unittest
from unittest import mock

import numpy as np
from PIL import Image
import torch

from perfchart import cli
from perfchart.adapters.normalize import normalize_dataset, normalize_labels
from perfchart.colors import PALETTE, assign_trace_colors, color_category, css_color, make_color
from perfchart.compile import compile_frame_batch
from perfchart.display import resolve_chart_size
from perfchart.errors import NoPlottableDataError, PlotDataError
from perfchart.events import InputEvent
from perfchart.overlays import OverlayLayout
from perfchart.readout import to_fixed
from perfchart.series import CompoundId, SimpleId
from perfchart.surface import ChartSurface, LegendEntry


EXAMPLE = [[[10, 1], [20, 2], [15, 1.5]]]


class ColorTests(unittest.TestCase):
    def test_category_rule(self) -> None:
        self.assertEqual(color_category("load-a"), "load-ref")
        self.assertEqual(color_category("load-ref"), "load")
        self.assertEqual(color_category("paint"), "paint-ref")

    def test_traces_in_one_category_share_a_color(self) -> None:
        colors = assign_trace_colors(["load-a", "load-b", "load-ref"])
        self.assertEqual(colors, [make_color(0), make_color(0), make_color(1)])

    def test_palette_wraps(self) -> None:
        self.assertEqual(make_color(len(PALETTE)), make_color(0))
        self.assertEqual(css_color(make_color(0)), "rgb(0,114,178)")


class SizeTests(unittest.TestCase):
    def test_defaults_come_from_host_viewport(self) -> None:
        self.assertEqual(resolve_chart_size(host_size=(1000, 600)), (984, 400))
        self.assertEqual(resolve_chart_size(host_size=(500, 300)), (484, 199))

    def test_explicit_size_keeps_room_for_legend(self) -> None:
        self.assertEqual(resolve_chart_size(500, 300), (500, 215))
        self.assertEqual(resolve_chart_size(500, 900), (500, 400))

    def test_screen_detection_fallback(self) -> None:
        with mock.patch("perfchart.display._detect_screen_size", return_value=None):
            self.assertEqual(resolve_chart_size(), (1264, 400))

    def test_too_small(self) -> None:
        with self.assertRaises(ValueError):
            resolve_chart_size(500, 80)


class NormalizeTests(unittest.TestCase):
    def test_unparseable_entries_become_missing(self) -> None:
        with self.assertLogs("perfchart.adapters.normalize", level="WARNING") as logs:
            dataset = normalize_dataset([[["12", "0.5"], ["n/a", None]]])
        self.assertIn("coerced 1", logs.output[0])
        self.assertEqual(dataset.sample(0, 0).value, 12.0)
        self.assertTrue(dataset.sample(0, 1).missing)

    def test_ragged_traces_rejected(self) -> None:
        with self.assertRaises(PlotDataError):
            normalize_dataset([[[1, 0], [2, 0]], [[1, 0]]])
        with self.assertRaises(PlotDataError):
            normalize_dataset([[[1, 0, 3]]])
        with self.assertRaises(PlotDataError):
            normalize_dataset([])

    def test_tensor_and_array_inputs(self) -> None:
        tensor = torch.tensor([[[1.0, 0.1], [2.0, 0.2]]])
        dataset = normalize_dataset(tensor)
        self.assertEqual(dataset.values.dtype, np.float64)
        self.assertEqual(dataset.values.tolist(), [[1.0, 2.0]])
        dataset = normalize_dataset(np.asarray([[[3, 1], [4, 1]]], dtype=np.int32))
        self.assertEqual(dataset.values.tolist(), [[3.0, 4.0]])

    def test_dataset_is_read_only(self) -> None:
        dataset = normalize_dataset(EXAMPLE)
        with self.assertRaises(ValueError):
            dataset.values[0, 0] = 1.0

    def test_labels(self) -> None:
        labels = normalize_labels([5, {"a": 1, "b": "x"}], sample_count=2)
        self.assertEqual(labels, (SimpleId(5), CompoundId({"a": 1, "b": "x"})))
        self.assertEqual(labels[1].primary, 1)
        self.assertEqual(labels[1].display(), "r1, b x")
        with self.assertRaises(PlotDataError):
            normalize_labels([1, 2], sample_count=3)


class ReadoutTests(unittest.TestCase):
    def test_to_fixed(self) -> None:
        self.assertEqual(to_fixed(2.5, 0), "3")
        self.assertEqual(to_fixed(1234.5, 2), "1234.50")
        self.assertEqual(to_fixed(float("nan"), 2), "NaN")
        self.assertEqual(to_fixed(float("-inf"), 2), "-Infinity")


class ChartSurfaceTests(unittest.TestCase):
    def _surface(self, **kwargs) -> ChartSurface:
        kwargs.setdefault("width", 30)
        kwargs.setdefault("height", 185)
        return ChartSurface(EXAMPLE, [100, 101, 102], ["load"], units="ms", **kwargs)

    def test_size_and_defaults(self) -> None:
        surface = self._surface()
        self.assertEqual((surface.width, surface.height), (30, 100))
        self.assertEqual(surface.readout, "move mouse over graph")
        self.assertEqual(surface.frame().shape, (100, 30, 4))

    def test_default_names(self) -> None:
        surface = ChartSurface([[[1, 0]], [[2, 0]]], [1], width=20, height=120)
        self.assertEqual(surface.names, ("trace 1", "trace 2"))
        with self.assertRaises(PlotDataError):
            ChartSurface([[[1, 0]], [[2, 0]]], [1], ["only one"], width=20, height=120)

    def test_all_missing_is_rejected(self) -> None:
        with self.assertRaises(NoPlottableDataError):
            ChartSurface([[[None, None], ["NaN", "NaN"]]], [1, 2], width=20, height=120)

    def test_inspect_updates_readout(self) -> None:
        surface = self._surface()
        seen = []
        surface.on_inspect = seen.append
        result = surface.handle(InputEvent("pointer_move", x=15, y=50))
        self.assertEqual(surface.readout, "r101: 20.00 ms +/- 2.00 15.00 ms")
        self.assertEqual(seen, [result.inspect])
        surface.handle(InputEvent("pointer_down", y=50, modifiers={"shift": True}))
        surface.handle(InputEvent("pointer_move", x=15, y=25))
        self.assertEqual(surface.baseline_readout, "+4 ms: +23.333%")

    def test_zoom_clears_baseline_readout(self) -> None:
        surface = self._surface()
        surface.handle(InputEvent("pointer_down", y=50, modifiers={"shift": True}))
        surface.handle(InputEvent("pointer_move", x=15, y=25))
        self.assertTrue(surface.baseline_readout)
        surface.handle(InputEvent("wheel", y=50, delta_y=1))
        self.assertEqual(surface.baseline_readout, "")
        self.assertIsNone(surface.overlays().baseline)

    def test_point_activation_callback(self) -> None:
        surface = self._surface()
        seen = []
        surface.on_point_activated = lambda previous, current: seen.append((previous, current))
        surface.handle(InputEvent("pointer_move", x=25, y=50))
        surface.handle(InputEvent("pointer_down", x=25, y=50))
        self.assertEqual(seen, [(SimpleId(102), SimpleId(102))])

    def test_legend_handlers_toggle_selection(self) -> None:
        surface = ChartSurface([[[1, 0], [2, 0]], [[3, 0], [4, 0]]], [1, 2], ["a", "b-ref"], width=20, height=120)
        self.assertIsInstance(surface.legend[0], LegendEntry)
        self.assertEqual([entry.name for entry in surface.legend], ["a", "b-ref"])
        self.assertEqual(surface.legend[1].color, surface.color_of(1))
        self.assertTrue(surface.legend[1].handler())
        self.assertEqual(surface.controller.selection, (1,))
        self.assertFalse(surface.legend[1].handler())
        self.assertEqual(surface.controller.selection, ())

    def test_frame_batch(self) -> None:
        surface = self._surface()
        batch = surface.frame_batch()
        self.assertEqual(batch.tensor_h_w_4.dtype, torch.uint8)
        self.assertEqual(tuple(batch.tensor_h_w_4.shape), (100, 30, 4))
        self.assertEqual((batch.width, batch.height), (30, 100))
        self.assertIs(batch.overlays, surface.overlays())
        with self.assertRaises(ValueError):
            compile_frame_batch(np.zeros((4, 4, 3), dtype=np.uint8), OverlayLayout())

    def test_frame_follows_zoom(self) -> None:
        surface = self._surface()
        before = surface.frame().copy()
        surface.handle(InputEvent("wheel", y=50, delta_y=1))
        self.assertFalse(np.array_equal(before, surface.frame()))

    def test_snapshot_and_png(self) -> None:
        surface = self._surface(width=120, height=185)
        surface.handle(InputEvent("legend_toggle", trace_index=0))
        surface.handle(InputEvent("pointer_move", x=60, y=40))
        image = surface.snapshot()
        self.assertEqual(image.shape, (132, 120, 4))
        self.assertTrue(np.all(image[:, :, 3] == 255))
        with tempfile.TemporaryDirectory() as tmp:
            out = surface.save_png(Path(tmp) / "chart.png")
            with Image.open(out) as png:
                self.assertEqual(png.size, (120, 132))


class CliTests(unittest.TestCase):
    def test_render_writes_png(self) -> None:
        payload = {"traces": EXAMPLE, "labels": [1, 2, 3], "names": ["load"], "units": "ms"}
        with tempfile.TemporaryDirectory() as tmp:
            data = Path(tmp) / "data.json"
            data.write_text(json.dumps(payload), encoding="utf-8")
            out = Path(tmp) / "out.png"
            code = cli.main(
                ["render", str(data), "--out", str(out), "--width", "60", "--height", "185", "--select", "0", "--zoom", "50:2"]
            )
            self.assertEqual(code, 0)
            with Image.open(out) as png:
                self.assertEqual(png.size, (60, 132))

    def test_bad_arguments_return_error_code(self) -> None:
        payload = {"traces": EXAMPLE, "labels": [1, 2, 3]}
        with tempfile.TemporaryDirectory() as tmp:
            data = Path(tmp) / "data.json"
            data.write_text(json.dumps(payload), encoding="utf-8")
            out = Path(tmp) / "out.png"
            self.assertEqual(cli.main(["render", str(data), "--out", str(out), "--select", "5"]), 1)
            self.assertEqual(cli.main(["render", str(data), "--out", str(out), "--height", "50"]), 1)
            self.assertFalse(out.exists())

    def test_bad_payload_returns_error_code(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            data = Path(tmp) / "data.json"
            data.write_text(json.dumps({"traces": EXAMPLE}), encoding="utf-8")
            self.assertEqual(cli.main(["render", str(data), "--out", str(Path(tmp) / "x.png")]), 1)
            self.assertEqual(cli.main(["render", str(Path(tmp) / "missing.json")]), 1)


if __name__ == "__main__":
    unittest.main()
