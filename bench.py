import json
import logging
import os
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path
from typing import Dict, Optional

from tqdm import tqdm

from escape_maze.common.config_loader import load_config
from escape_maze.common.pdf_export import export_summary_pdf
from escape_maze.eval_core.metrics import StressMetrics
from escape_maze.eval_core.validator import MazeValidator
from escape_maze.maze_gen.generator import MazeConfig, MazeGenerator, maze_to_dict
from escape_maze.report.generator import render_maze_image

logger = logging.getLogger(__name__)

MAX_KEPT_FAILURES = 5


def _seed_for(base_seed: Optional[int], i: int) -> Optional[int]:
    return None if base_seed is None else base_seed + i


def _engine_config(cfg: Dict, seed: Optional[int]) -> MazeConfig:
    engine = dict(cfg.get('engine') or {})
    engine['seed'] = seed
    return MazeConfig.from_dict(engine)


def run_stress(cfg: Dict, outdir: Path) -> Dict:
    outdir.mkdir(parents=True, exist_ok=True)
    stress = cfg.get('stress') or {}
    n = int(stress.get('n', 100))
    base_seed = stress.get('seed')
    workers = stress.get('workers')
    if workers is None:
        workers = max(1, min(n, (os.cpu_count() or 4)))
    workers = int(workers)
    sample_png = outdir / 'stress_sample.png'

    def _task(i: int) -> Dict:
        seed = _seed_for(base_seed, i)
        ecfg = _engine_config(cfg, seed)
        gen = MazeGenerator(ecfg)
        t0 = time.perf_counter()
        maze = gen.generate()
        ms = (time.perf_counter() - t0) * 1000.0
        v = MazeValidator(ecfg.allow_diagonal).validate(maze)
        if i == 0:
            render_maze_image(maze).save(sample_png)
        item = {'index': i, 'seed': seed, 'ok': v['ok'], 'errors': v['errors'],
                'repaired': maze['repaired'], 'attempts': maze['attempts'], 'ms': round(ms, 3)}
        if not v['ok']:
            item['maze'] = maze_to_dict(maze)
        return item

    results = []
    with ThreadPoolExecutor(max_workers=workers) as ex:
        futures = {ex.submit(_task, i): i for i in range(n)}
        pbar = tqdm(total=n, desc='Stress')
        for fut in as_completed(futures):
            i = futures[fut]
            try:
                results.append(fut.result())
            except Exception as e:
                logger.error('generation %d crashed: %s', i, e)
                results.append({'index': i, 'seed': _seed_for(base_seed, i), 'ok': False,
                                'errors': ['crashed'], 'error': str(e), 'ms': None})
            pbar.update(1)
        pbar.close()

    results.sort(key=lambda r: r['index'])
    stats = StressMetrics(total=n).score(results)
    failures = [r for r in results if not r['ok']][:MAX_KEPT_FAILURES]
    summary = {'config': cfg.get('engine') or {}, 'stats': stats, 'failures': failures}
    (outdir / 'stress_summary.json').write_text(json.dumps(summary, ensure_ascii=False, indent=2), encoding='utf-8')
    images = [str(sample_png)] if sample_png.exists() else None
    export_summary_pdf(str(outdir / 'stress_summary.pdf'), 'Maze Stress Summary', summary, image_paths=images)
    return summary


def generate_mazes_to_dir(cfg: Dict, outdir: Path, count: int = 5) -> None:
    outdir.mkdir(parents=True, exist_ok=True)
    base_seed = (cfg.get('stress') or {}).get('seed')
    for i in tqdm(range(count), desc='GenOnly'):
        ecfg = _engine_config(cfg, _seed_for(base_seed, i))
        maze = MazeGenerator(ecfg).generate()
        stem = f'maze_{ecfg.size}x{ecfg.size}_{i}'
        render_maze_image(maze).save(outdir / f'{stem}.png')
        (outdir / f'{stem}.json').write_text(json.dumps(maze_to_dict(maze), ensure_ascii=False), encoding='utf-8')


def main():
    logging.basicConfig(level=logging.WARNING, format='%(levelname)s %(name)s: %(message)s')
    cfg = load_config()
    outdir = Path(cfg.get('output_dir') or 'outputs')
    outdir.mkdir(parents=True, exist_ok=True)
    stress = cfg.get('stress') or {}
    if stress.get('generate_only'):
        generate_mazes_to_dir(cfg, outdir / 'mazes', count=int(stress.get('count', 5)))
        print('Generate-only complete at', outdir)
        return
    summary = run_stress(cfg, outdir)
    s = summary['stats']
    print(f"Passed {s['passed']}/{s['total']} ({s['passed_pct']}%), repaired {s['repaired']}, avg {s['avg_ms']} ms")
    print('Done. Summaries saved to', outdir)


if __name__ == '__main__':
    main()
