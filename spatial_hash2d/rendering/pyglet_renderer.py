from __future__ import annotations

from typing import Any, Callable

from . import drawing as drawing_mod


def run_pyglet(
    *,
    width: int,
    height: int,
    background_rgb: tuple[int, int, int],
    get_point_positions: Callable[[], list[tuple[float, float]]],
    step_simulation: Callable[[float], None],
    on_key: Callable[[str], None],
    on_mouse: Callable[[float, float, str], None],
    get_selection: Callable[[], tuple[float, float] | None] | None = None,
    get_neighbor_positions: Callable[[], list[tuple[float, float]]] | None = None,
    get_radius: Callable[[], float] | None = None,
    get_query_block: Callable[[], tuple[float, float, float, float] | None] | None = None,
    get_grid_info: Callable[[], dict[str, Any]] | None = None,
    get_overlay_text: Callable[[], str] | None = None,
    get_sizes: Callable[[], tuple[float, float, float]] | None = None,
    get_caption: Callable[[], str] | None = None,
    font_size: int = 14,
    target_fps: int,
    title: str,
) -> None:
    try:
        import pyglet  # type: ignore
    except ImportError as e:  # pragma: no cover
        raise RuntimeError("Missing dependency: install pyglet (pip install pyglet).") from e

    from pyglet import gl  # type: ignore
    from pyglet.window import key, mouse  # type: ignore

    window = pyglet.window.Window(width=width, height=height, caption=title, resizable=False, vsync=True)

    bg_r, bg_g, bg_b = background_rgb
    gl.glClearColor(bg_r / 255.0, bg_g / 255.0, bg_b / 255.0, 1.0)

    grid_batch = pyglet.graphics.Batch()
    point_batch = pyglet.graphics.Batch()
    overlay_batch = pyglet.graphics.Batch()

    grid_lines: list[Any] = []
    grid_key: tuple[float, float, float] | None = None
    point_shapes: list[Any] = []
    overlay_shapes: list[Any] = []

    hud_label = pyglet.text.Label(
        "",
        x=10,
        y=window.height - 10,
        anchor_x="left",
        anchor_y="top",
        font_size=font_size,
        color=drawing_mod.HUD_COLOR,
        multiline=True,
        width=max(100, window.width // 2),
    )
    fps_display = pyglet.window.FPSDisplay(window)
    fps_display.label.anchor_x = "right"
    fps_display.label.anchor_y = "top"
    fps_display.label.x = window.width - 10
    fps_display.label.y = window.height - 10

    def sizes() -> tuple[float, float, float]:
        if get_sizes is None:
            return 3.0, 5.0, 4.0
        return get_sizes()

    def clear_grid() -> None:
        for line in grid_lines:
            line.delete()
        grid_lines.clear()

    def sync_grid() -> None:
        nonlocal grid_key
        info = get_grid_info() if get_grid_info is not None else {}
        if not info or not bool(info.get("enabled", False)):
            clear_grid()
            grid_key = None
            return
        step = max(1.0, float(info.get("step", 50.0)))
        k = (float(window.width), float(window.height), step)
        if grid_key == k:
            return
        grid_key = k
        clear_grid()
        verts = drawing_mod.create_grid_vertices(window.width, window.height, step)
        for i in range(0, len(verts), 4):
            x0, y0, x1, y1 = verts[i:i + 4]
            grid_lines.append(
                pyglet.shapes.Line(x0, y0, x1, y1, color=drawing_mod.GRID_COLOR, batch=grid_batch)
            )

    def sync_points(positions: list[tuple[float, float]], radius: float) -> None:
        # Reuse the circle pool; points are only ever appended or fully replaced.
        while len(point_shapes) > len(positions):
            point_shapes.pop().delete()
        for i, (x, y) in enumerate(positions):
            if i < len(point_shapes):
                shape = point_shapes[i]
                shape.x = x
                shape.y = y
                if shape.radius != radius:
                    shape.radius = radius
            else:
                point_shapes.append(
                    pyglet.shapes.Circle(x, y, radius, color=drawing_mod.POINT_COLOR, batch=point_batch)
                )

    def sync_overlay(selected_size: float, neighbor_size: float) -> None:
        for shape in overlay_shapes:
            shape.delete()
        overlay_shapes.clear()
        selection = get_selection() if get_selection is not None else None
        if selection is None:
            return
        sx, sy = selection
        block = get_query_block() if get_query_block is not None else None
        if block is not None:
            bx, by, bw, bh = block
            overlay_shapes.append(
                pyglet.shapes.Rectangle(bx, by, bw, bh, color=drawing_mod.BLOCK_COLOR, batch=overlay_batch)
            )
        if get_radius is not None:
            ring = pyglet.shapes.Arc(
                sx, sy, float(get_radius()), color=drawing_mod.RADIUS_COLOR, batch=overlay_batch
            )
            overlay_shapes.append(ring)
        overlay_shapes.append(
            pyglet.shapes.Circle(sx, sy, selected_size, color=drawing_mod.SELECTED_COLOR, batch=overlay_batch)
        )
        neighbors = get_neighbor_positions() if get_neighbor_positions is not None else []
        segs = drawing_mod.create_neighbor_segments(selection, neighbors)
        for i in range(0, len(segs), 4):
            x0, y0, x1, y1 = segs[i:i + 4]
            overlay_shapes.append(
                pyglet.shapes.Line(x0, y0, x1, y1, color=drawing_mod.SEGMENT_COLOR, batch=overlay_batch)
            )
        for nx, ny in neighbors:
            overlay_shapes.append(
                pyglet.shapes.Circle(nx, ny, neighbor_size, color=drawing_mod.NEIGHBOR_COLOR, batch=overlay_batch)
            )

    @window.event
    def on_draw() -> None:
        window.clear()
        point_size, selected_size, neighbor_size = sizes()
        sync_grid()
        sync_points(get_point_positions(), point_size)
        sync_overlay(selected_size, neighbor_size)
        grid_batch.draw()
        point_batch.draw()
        overlay_batch.draw()
        if get_overlay_text is not None:
            hud_label.text = get_overlay_text()
            hud_label.draw()
        fps_display.draw()

    @window.event
    def on_close() -> None:
        pyglet.app.exit()

    @window.event
    def on_key_press(symbol: int, modifiers: int) -> None:  # noqa: ARG001
        mapping = {
            key.UP: "up",
            key.DOWN: "down",
            key.SPACE: "space",
            key.R: "r",
            key.S: "s",
            key.L: "l",
            key.E: "e",
            key.G: "g",
            key.C: "c",
            key.V: "v",
            key.ESCAPE: "esc",
        }
        k = mapping.get(symbol)
        if k is None:
            return
        try:
            on_key(k)
        except SystemExit:
            pyglet.app.exit()

    @window.event
    def on_mouse_press(x: int, y: int, button: int, modifiers: int) -> None:  # noqa: ARG001
        names = {mouse.LEFT: "left", mouse.RIGHT: "right", mouse.MIDDLE: "middle"}
        name = names.get(button)
        if name is not None:
            on_mouse(float(x), float(y), name)

    def tick(dt: float) -> None:
        step_simulation(dt)
        window.set_caption(get_caption() if get_caption is not None else title)

    pyglet.clock.schedule_interval(tick, 1.0 / max(10, target_fps))
    pyglet.app.run()
