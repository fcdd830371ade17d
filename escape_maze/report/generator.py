from typing import Dict, Iterable, Tuple
import base64
import io
import json
from pathlib import Path
import numpy as np
from PIL import Image, ImageDraw

from escape_maze.pathing.grid import Tile

TEMPLATE_PATH = Path(__file__).parent / 'html_template.j2'

COLORS = {
    'wall': (0, 0, 0),
    'grid': (200, 200, 200),
    'visited': (170, 210, 255),
    'path': (255, 230, 80),
    'removed': (230, 60, 230),
    'obstacle': (255, 140, 0),
    'collectible': (40, 90, 230),
    'start': (0, 255, 0),
    'exit': (255, 0, 0),
}


def _render(template: str, context: Dict[str, str]) -> str:
    out = template
    for k, v in context.items():
        out = out.replace(f"%%{k}%%", v)
    return out


def _fill(draw: ImageDraw.ImageDraw, cells: Iterable[Tuple[int, int]], color, cell_px: int, inset: int = 0):
    for x, y in cells:
        x0, y0 = x*cell_px + inset, y*cell_px + inset
        draw.rectangle([x0, y0, x0+cell_px-1-2*inset, y0+cell_px-1-2*inset], fill=color)


def render_maze_image(maze: Dict, cell_px: int = 24, show_visited: bool = True, show_path: bool = True,
                      show_removed: bool = True) -> Image.Image:
    grid = np.asarray(maze['grid'])
    size = grid.shape[0]
    img = Image.new('RGB', (size*cell_px, size*cell_px), (255, 255, 255))
    draw = ImageDraw.Draw(img)
    for y in range(size):
        for x in range(size):
            x0, y0 = x*cell_px, y*cell_px
            if grid[y, x] == Tile.WALL:
                draw.rectangle([x0, y0, x0+cell_px-1, y0+cell_px-1], fill=COLORS['wall'])
            else:
                draw.rectangle([x0, y0, x0+cell_px-1, y0+cell_px-1], outline=COLORS['grid'])

    diag = maze.get('diagnostics') or {}
    reach = diag.get('reachability')
    fixed = diag.get('repair')
    if reach is not None and show_visited:
        _fill(draw, reach.visited, COLORS['visited'], cell_px, inset=1)
    if show_path:
        path = fixed.path if fixed is not None else (reach.path if reach is not None else [])
        _fill(draw, path, COLORS['path'], cell_px, inset=4)
    if fixed is not None and show_removed:
        _fill(draw, [(r.x, r.y) for r in fixed.removed], COLORS['removed'], cell_px, inset=2)

    _fill(draw, [o.pos for o in maze['obstacles']], COLORS['obstacle'], cell_px, inset=3)
    _fill(draw, [c.pos for c in maze['collectibles']], COLORS['collectible'], cell_px, inset=6)
    _fill(draw, [tuple(maze['start'])], COLORS['start'], cell_px, inset=2)
    _fill(draw, [tuple(maze['exit'])], COLORS['exit'], cell_px, inset=2)
    return img


def image_data_uri(img: Image.Image) -> str:
    buf = io.BytesIO()
    img.save(buf, format='PNG')
    b64 = base64.b64encode(buf.getvalue()).decode('utf-8')
    return f"data:image/png;base64,{b64}"


def generate_report(output_path: str, maze: Dict, cell_px: int = 24):
    html = TEMPLATE_PATH.read_text(encoding='utf-8')
    diag = maze.get('diagnostics') or {}
    reach = diag.get('reachability')
    fixed = diag.get('repair')
    ctx = {
        'SIZE': str(maze['size']),
        'START': json.dumps(list(maze['start'])),
        'EXIT': json.dumps(list(maze['exit'])),
        'OBSTACLES': str(len(maze['obstacles'])),
        'COLLECTIBLES': str(len(maze['collectibles'])),
        'ATTEMPTS': str(maze.get('attempts', 1)),
        'REACHABLE': 'n/a' if reach is None else str(reach.reachable),
        'VISITED': 'n/a' if reach is None else str(len(reach.visited)),
        'REPAIRED': 'not needed' if fixed is None else str(fixed.repaired),
        'REMOVED': json.dumps([r.to_dict() for r in fixed.removed]) if fixed is not None else '[]',
        'IMG_SRC': image_data_uri(render_maze_image(maze, cell_px=cell_px)),
    }
    rendered = _render(html, ctx)
    Path(output_path).write_text(rendered, encoding='utf-8')
