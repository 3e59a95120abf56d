from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any


@dataclass(slots=True)
class Sim2DParams:
    width: int = 800
    height: int = 600
    background: tuple[int, int, int] = (0, 0, 0)

    init_mode: str = "random"  # random | clusters
    point_count: int = 300
    point_speed: float = 0.5  # units per tick, per axis
    cluster_count: int = 6
    cluster_sigma: float = 40.0

    cell_size: float = 50.0
    cell_policy: str = "floor"  # floor | trunc
    key_mode: str = "hash"  # hash | pair
    query_ring: int = 1
    adaptive_ring: bool = False

    initial_radius: float = 50.0
    radius_step: float = 5.0
    min_radius: float = 5.0

    grid_visible: bool = True
    point_size: float = 3.0
    selected_size: float = 5.0
    neighbor_size: float = 4.0
    font_size: int = 14
    target_fps: int = 60
    seed: int = 1

    def clamp(self) -> "Sim2DParams":
        self.width = max(160, int(self.width))
        self.height = max(120, int(self.height))
        self.background = tuple(max(0, min(255, int(c))) for c in tuple(self.background)[:3])  # type: ignore[assignment]
        if len(self.background) != 3:
            self.background = (0, 0, 0)
        self.init_mode = str(self.init_mode or "random").strip().lower()
        if self.init_mode not in {"random", "clusters"}:
            self.init_mode = "random"
        self.point_count = max(0, int(self.point_count))
        self.point_speed = max(0.0, float(self.point_speed))
        self.cluster_count = max(1, int(self.cluster_count))
        self.cluster_sigma = max(0.0, float(self.cluster_sigma))
        self.cell_size = max(1.0, float(self.cell_size))
        self.cell_policy = str(self.cell_policy or "floor").strip().lower()
        if self.cell_policy not in {"floor", "trunc"}:
            self.cell_policy = "floor"
        self.key_mode = str(self.key_mode or "hash").strip().lower()
        if self.key_mode not in {"hash", "pair"}:
            self.key_mode = "hash"
        self.query_ring = max(1, min(8, int(self.query_ring)))
        self.adaptive_ring = bool(self.adaptive_ring)
        self.min_radius = max(0.0, float(self.min_radius))
        self.radius_step = max(0.5, float(self.radius_step))
        self.initial_radius = max(self.min_radius, float(self.initial_radius))
        self.grid_visible = bool(self.grid_visible)
        self.point_size = max(1.0, float(self.point_size))
        self.selected_size = max(1.0, float(self.selected_size))
        self.neighbor_size = max(1.0, float(self.neighbor_size))
        self.font_size = max(6, min(48, int(self.font_size)))
        self.target_fps = max(10, int(self.target_fps))
        self.seed = int(self.seed)
        return self

    def validate(self) -> list[str]:
        warnings: list[str] = []

        coverage = float(self.query_ring) * float(self.cell_size)
        if not self.adaptive_ring and float(self.initial_radius) > coverage:
            warnings.append(
                f"initial_radius {self.initial_radius:g} exceeds query coverage {coverage:g}; "
                "neighbors beyond it are missed unless adaptive_ring is on."
            )
        if self.key_mode == "pair" and self.cell_policy == "trunc":
            warnings.append("cell_policy=trunc still merges the cells around the origin with key_mode=pair.")
        if self.init_mode != "clusters" and (self.cluster_count != 6 or self.cluster_sigma != 40.0):
            warnings.append("cluster_count/cluster_sigma ignored unless init_mode=clusters.")
        if self.point_count == 0:
            warnings.append("point_count=0: the grid starts empty until points are added.")

        return warnings

    @classmethod
    def load(cls, path: str | Path) -> "Sim2DParams":
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError("Params file must contain a JSON object.")
        # Legacy key names.
        if "grid_size" in data and "cell_size" not in data:
            data["cell_size"] = data["grid_size"]
        if "search_radius" in data and "initial_radius" not in data:
            data["initial_radius"] = data["search_radius"]
        filtered: dict[str, Any] = {k: v for k, v in data.items() if k in {f.name for f in fields(cls)}}
        return cls(**filtered).clamp()

    def save(self, path: str | Path) -> None:
        data = asdict(self)
        Path(path).write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
