from pathlib import Path
from typing import Any, Dict
import os
import yaml


def _as_bool(v: str) -> bool:
    return str(v).strip().lower() in ('1', 'true', 'yes', 'on')


# env var -> (engine key, coercion)
ENV_OVERRIDES: Dict[str, tuple] = {
    'MAZE_SIZE': ('size', int),
    'MAZE_SEED': ('seed', int),
    'MAZE_ALLOW_DIAGONAL': ('allow_diagonal', _as_bool),
    'MAZE_OBSTACLE_COST': ('obstacle_cost', int),
    'MAZE_MAX_REPAIR_ITERATIONS': ('max_repair_iterations', int),
    'MAZE_MUTATE_IN_PLACE': ('mutate_in_place', _as_bool),
    'MAZE_DIAGNOSTICS': ('diagnostics', _as_bool),
    'MAZE_MAX_ATTEMPTS': ('max_attempts', int),
}


def _read_yaml(path: Path) -> Dict:
    if not path.exists():
        return {}
    return yaml.safe_load(path.read_text(encoding='utf-8')) or {}


def _merge(base: Dict, extra: Dict) -> Dict:
    out = dict(base)
    for k, v in extra.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


def load_config(base_dir: str = 'config') -> Dict:
    base = Path(base_dir) / 'config.yaml'
    local = Path(base_dir) / 'local.yaml'
    cfg: Dict[str, Any] = _merge(_read_yaml(base), _read_yaml(local))
    apply_env_overrides(cfg)
    return cfg


def apply_env_overrides(cfg: Dict) -> Dict:
    engine = cfg.setdefault('engine', {}) or {}
    cfg['engine'] = engine
    for env_key, (key, conv) in ENV_OVERRIDES.items():
        raw = os.getenv(env_key)
        if raw is not None and raw != '':
            engine[key] = conv(raw)
    if os.getenv('MAZE_OUTPUT_DIR'):
        cfg['output_dir'] = os.getenv('MAZE_OUTPUT_DIR')
    return cfg
