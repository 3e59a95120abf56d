from __future__ import annotations

import argparse
import sys
import time
from datetime import datetime
from pathlib import Path

from spatial_hash2d.params import Sim2DParams
from spatial_hash2d.core.sim import PointSim2D, query_ring
from spatial_hash2d.rendering.drawing import format_hud, query_block_rect
from spatial_hash2d.utils.config_groups import (
    PARAM_HINTS,
    RADIUS_KEYS,
    changed_keys,
    classify_changes,
    get_param_hint,
)
from spatial_hash2d.utils.export import export_points_csv, export_summary

AUTORELOAD_INTERVAL_S = 0.5


class SpatialHashApp:
    def __init__(self, params_path: str | Path | None = None, params: Sim2DParams | None = None) -> None:
        self.params_path = (
            Path(params_path) if params_path is not None else Path(__file__).resolve().parent / "params.json"
        )
        self.params = params if params is not None else self._load_initial_params()
        self.sim = PointSim2D(self.params)

        self._running = True
        self._show_hud = True
        self._params_error = ""

        self._last_params_mtime: float | None = self.params_path.stat().st_mtime if self.params_path.exists() else None
        self._last_autoreload = time.monotonic()

        for warning in self.params.validate():
            print(f"[params] {warning}", file=sys.stderr)

    def run(self) -> None:
        from spatial_hash2d.rendering.pyglet_renderer import run_pyglet

        run_pyglet(
            width=self.params.width,
            height=self.params.height,
            background_rgb=tuple(self.params.background),  # type: ignore[arg-type]
            get_point_positions=self._get_point_positions,
            step_simulation=self._step,
            on_key=self._on_key,
            on_mouse=self._on_mouse,
            get_selection=lambda: self.sim.selection,
            get_neighbor_positions=self.sim.neighbor_positions,
            get_radius=lambda: self.sim.radius,
            get_query_block=self._get_query_block,
            get_grid_info=self._get_grid_info,
            get_overlay_text=self._get_overlay_text,
            get_sizes=lambda: (
                float(self.params.point_size),
                float(self.params.selected_size),
                float(self.params.neighbor_size),
            ),
            get_caption=self._get_caption,
            font_size=int(self.params.font_size),
            target_fps=self.params.target_fps,
            title="Spatial Hash Visualization",
        )

    def _load_initial_params(self) -> Sim2DParams:
        try:
            if self.params_path.exists():
                return Sim2DParams.load(self.params_path)
        except Exception as e:
            print(f"[params] ignoring {self.params_path}: {e}", file=sys.stderr)
        return Sim2DParams().clamp()

    def _maybe_autoreload(self) -> None:
        if not self.params_path.exists():
            return
        now = time.monotonic()
        if (now - self._last_autoreload) < AUTORELOAD_INTERVAL_S:
            return
        self._last_autoreload = now

        mtime = self.params_path.stat().st_mtime
        if self._last_params_mtime is None or mtime > self._last_params_mtime:
            self._last_params_mtime = mtime
            self._load_params()

    def _load_params(self) -> None:
        try:
            loaded = Sim2DParams.load(self.params_path)
        except Exception as e:
            self._params_error = f"Params reload failed: {e}"
            print(f"[params] {self._params_error}", file=sys.stderr)
            return

        self._params_error = ""
        keys = changed_keys(self.params, loaded)
        action = classify_changes(keys)
        self.params = loaded
        self.sim.params = loaded
        if action == "reset":
            self.sim.reset()
        else:
            if action == "grid":
                self.sim.apply_grid_params()
            if keys & RADIUS_KEYS:
                # An edited initial_radius replaces the live radius.
                self.sim.set_radius(loaded.initial_radius if "initial_radius" in keys else self.sim.radius)
        for warning in loaded.validate():
            print(f"[params] {warning}", file=sys.stderr)

    def _save_params(self) -> None:
        try:
            self.params.save(self.params_path)
        except OSError as e:
            self._params_error = f"Params save failed: {e}"
            print(f"[params] {self._params_error}", file=sys.stderr)
            return
        self._last_params_mtime = self.params_path.stat().st_mtime
        print(f"[params] Saved to {self.params_path}")

    def _export_csv(self) -> None:
        """Export point data and grid statistics."""
        output_dir = self.params_path.parent / "output"
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        csv_path = output_dir / f"points_{timestamp}.csv"
        summary_path = output_dir / f"summary_{timestamp}.txt"

        state = self.sim.state
        try:
            stats = export_points_csv(
                state.points,
                csv_path,
                grid=state.grid,
                neighbors=state.neighbors,
                tick=state.tick,
            )
            export_summary(
                state.grid,
                summary_path,
                radius=state.radius,
                selection=state.selection,
                neighbor_count=len(state.neighbors),
            )
            print(f"[export] Saved {stats.point_count} points to {csv_path}")
            print(f"[export] Saved summary to {summary_path}")
        except OSError as e:
            print(f"[export] Error: {e}", file=sys.stderr)

    def _on_key(self, k: str) -> None:
        if k == "up":
            self.sim.grow_radius()
            return
        if k == "down":
            self.sim.shrink_radius()
            return
        if k == "space":
            self._running = not self._running
            return
        if k == "r":
            self.sim.reset()
            return
        if k == "c":
            self.sim.clear_selection()
            return
        if k == "g":
            self.params.grid_visible = not bool(self.params.grid_visible)
            return
        if k == "v":
            self._show_hud = not self._show_hud
            return
        if k == "e":
            self._export_csv()
            return
        if k == "s":
            self._save_params()
            return
        if k == "l":
            self._load_params()
            return
        if k == "esc":
            raise SystemExit(0)

    def _on_mouse(self, x: float, y: float, button: str) -> None:
        if button == "left":
            self.sim.select(x, y)
        elif button == "right":
            self.sim.add_point(x, y)
        elif button == "middle":
            self.sim.clear_selection()

    def _step(self, dt: float) -> None:  # noqa: ARG002
        self._maybe_autoreload()
        if not self._running:
            return
        self.sim.step()

    def _get_point_positions(self) -> list[tuple[float, float]]:
        return [(pt.x, pt.y) for pt in self.sim.points]

    def _get_grid_info(self) -> dict[str, float | bool]:
        return {
            "enabled": bool(self.params.grid_visible),
            "step": float(self.params.cell_size),
        }

    def _get_query_block(self) -> tuple[float, float, float, float] | None:
        """Rectangle of the cells the current selection query reads."""
        if self.sim.selection is None:
            return None
        grid = self.sim.state.grid
        cx, cy = grid.cell_of(*self.sim.selection)
        return query_block_rect(
            cx, cy, grid.cell_size, query_ring(self.sim.state, self.params), policy=grid.cell_policy
        )

    def _get_caption(self) -> str:
        state = "PAUSE" if not self._running else "RUN"
        n_points, n_buckets, _n_neighbors = self.sim.counts()
        return (
            f"Spatial Hash | tick={self.sim.state.tick} | {state} | "
            f"points={n_points} buckets={n_buckets} cell={self.params.cell_size:g} ({self.params.key_mode})"
        )

    def _get_overlay_text(self) -> str:
        if not self._show_hud:
            return ""
        n_points, _n_buckets, n_neighbors = self.sim.counts()
        text = format_hud(n_points, self.sim.radius, n_neighbors)
        if self._params_error:
            text += f"\n{self._params_error}"
        return text


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Interactive uniform-grid spatial hash demo")
    parser.add_argument("--params", "-p", type=Path, default=None, help="JSON params file")
    parser.add_argument("--points", "-n", type=int, default=None, help="Override point_count")
    parser.add_argument("--seed", "-s", type=int, default=None, help="Override seed")
    parser.add_argument("--cell-size", "-c", type=float, default=None, help="Override cell_size")
    parser.add_argument("--list-params", action="store_true", help="Print parameter hints and exit")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    if args.list_params:
        for name in PARAM_HINTS:
            print(f"{name:16s} {get_param_hint(name)}")
        return 0

    app = SpatialHashApp(params_path=args.params)
    overrides = {
        "point_count": args.points,
        "seed": args.seed,
        "cell_size": args.cell_size,
    }
    if any(v is not None for v in overrides.values()):
        for name, value in overrides.items():
            if value is not None:
                setattr(app.params, name, value)
        app.params.clamp()
        app.sim.reset()
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
