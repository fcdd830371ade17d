import argparse
import json
import logging
from pathlib import Path
from typing import Dict

import numpy as np

from escape_maze.common.config_loader import load_config
from escape_maze.maze_gen.generator import MazeConfig, MazeGenerator, maze_to_dict
from escape_maze.pathing.grid import Tile
from escape_maze.report.generator import generate_report, render_maze_image


def render_ascii(maze: Dict) -> str:
    grid = np.asarray(maze['grid'])
    size = grid.shape[0]
    rows = [['#' if grid[y, x] == Tile.WALL else '.' for x in range(size)] for y in range(size)]
    for c in maze['collectibles']:
        rows[c.y][c.x] = '*'
    for o in maze['obstacles']:
        rows[o.y][o.x] = 'X'
    sx, sy = maze['start']
    ex, ey = maze['exit']
    rows[sy][sx] = 'S'
    rows[ey][ex] = 'E'
    return '\n'.join(''.join(r) for r in rows)


def _engine_cfg(args) -> MazeConfig:
    engine = dict(load_config(args.config_dir).get('engine') or {})
    if args.size is not None:
        engine['size'] = args.size
    if args.seed is not None:
        engine['seed'] = args.seed
    if args.diagonal:
        engine['allow_diagonal'] = True
    if args.diagnostics or args.html:
        engine['diagnostics'] = True
    return MazeConfig.from_dict(engine)


def cmd_generate(args) -> int:
    maze = MazeGenerator(_engine_cfg(args)).generate()
    if args.json:
        print(json.dumps(maze_to_dict(maze), ensure_ascii=False))
    else:
        print(render_ascii(maze))
        print(f"start={maze['start']} exit={maze['exit']} obstacles={len(maze['obstacles'])} "
              f"collectibles={len(maze['collectibles'])} attempts={maze['attempts']}")
    if args.png:
        render_maze_image(maze).save(args.png)
    if args.html:
        generate_report(args.html, maze)
    return 0


def cmd_stress(args) -> int:
    from bench import run_stress

    cfg = load_config(args.config_dir)
    stress = cfg.setdefault('stress', {}) or {}
    cfg['stress'] = stress
    if args.n is not None:
        stress['n'] = args.n
    if args.workers is not None:
        stress['workers'] = args.workers
    outdir = Path(args.outdir or cfg.get('output_dir') or 'outputs')
    summary = run_stress(cfg, outdir)
    print(json.dumps(summary['stats'], ensure_ascii=False))
    return 0 if summary['stats']['failed'] == 0 else 1


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog='escape-maze')
    ap.add_argument('-v', '--verbose', action='store_true')
    ap.add_argument('--config_dir', default='config')
    sub = ap.add_subparsers(dest='command', required=True)

    g = sub.add_parser('generate', help='generate one maze')
    g.add_argument('--size', type=int)
    g.add_argument('--seed', type=int)
    g.add_argument('--diagonal', action='store_true', help='allow diagonal movement')
    g.add_argument('--diagnostics', action='store_true')
    g.add_argument('--json', action='store_true', help='print JSON instead of ASCII')
    g.add_argument('--png')
    g.add_argument('--html')
    g.set_defaults(func=cmd_generate)

    s = sub.add_parser('stress', help='generate many mazes and check every one')
    s.add_argument('--n', type=int)
    s.add_argument('--workers', type=int)
    s.add_argument('--outdir')
    s.set_defaults(func=cmd_stress)
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')
    return args.func(args)


if __name__ == '__main__':
    raise SystemExit(main())
