"""Tests for YAML config loading and environment overrides."""

import pytest

from escape_maze.common.config_loader import ENV_OVERRIDES, load_config
from escape_maze.maze_gen import MazeConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in list(ENV_OVERRIDES) + ['MAZE_OUTPUT_DIR']:
        monkeypatch.delenv(key, raising=False)


def test_missing_files_give_empty_engine(tmp_path):
    cfg = load_config(str(tmp_path))
    assert cfg == {'engine': {}}
    assert MazeConfig.from_dict(cfg['engine']) == MazeConfig()


def test_local_yaml_overlays_base(tmp_path):
    (tmp_path / 'config.yaml').write_text(
        'output_dir: out\nengine:\n  size: 14\n  obstacle_cost: 7\nstress:\n  n: 10\n', encoding='utf-8')
    (tmp_path / 'local.yaml').write_text('engine:\n  size: 16\n', encoding='utf-8')

    cfg = load_config(str(tmp_path))
    assert cfg['output_dir'] == 'out'
    assert cfg['engine'] == {'size': 16, 'obstacle_cost': 7}
    assert cfg['stress'] == {'n': 10}


def test_env_overrides_win(tmp_path, monkeypatch):
    (tmp_path / 'config.yaml').write_text('engine:\n  size: 14\n  diagnostics: false\n', encoding='utf-8')
    monkeypatch.setenv('MAZE_SIZE', '20')
    monkeypatch.setenv('MAZE_DIAGNOSTICS', 'yes')
    monkeypatch.setenv('MAZE_ALLOW_DIAGONAL', 'off')
    monkeypatch.setenv('MAZE_OUTPUT_DIR', 'elsewhere')

    cfg = load_config(str(tmp_path))
    assert cfg['engine']['size'] == 20
    assert cfg['engine']['diagnostics'] is True
    assert cfg['engine']['allow_diagonal'] is False
    assert cfg['output_dir'] == 'elsewhere'
    engine = MazeConfig.from_dict(cfg['engine'])
    assert engine.size == 20 and engine.diagnostics is True
