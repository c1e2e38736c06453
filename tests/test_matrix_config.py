from dataclasses import FrozenInstanceError

import pytest

import matrix_config
from matrix_config import MatrixConfig, get_config, set_config


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
	for name in ('FIXED_MATRIX_DELIMITER', 'FIXED_MATRIX_SEED', 'FIXED_MATRIX_NUMPY_STORAGE'):
		monkeypatch.delenv(name, raising=False)
	set_config(None)
	yield
	set_config(None)


def test_defaults():
	assert get_config() == MatrixConfig(' ', None, True)


def test_environment_overrides(monkeypatch):
	monkeypatch.setenv('FIXED_MATRIX_DELIMITER', ',')
	monkeypatch.setenv('FIXED_MATRIX_SEED', '-17')
	monkeypatch.setenv('FIXED_MATRIX_NUMPY_STORAGE', 'off')
	assert get_config() == MatrixConfig(',', -17, False)


@pytest.mark.parametrize("seed, flag", [('abc', 'maybe'), ('', ''), ('1.5', '2')])
def test_malformed_environment_falls_back(monkeypatch, seed, flag):
	monkeypatch.setenv('FIXED_MATRIX_SEED', seed)
	monkeypatch.setenv('FIXED_MATRIX_NUMPY_STORAGE', flag)
	config = get_config()
	assert config.seed is None
	assert config.numpy_storage is True


def test_config_is_cached_until_reset(monkeypatch):
	first = get_config()
	monkeypatch.setenv('FIXED_MATRIX_SEED', '5')
	assert get_config() is first

	set_config(None)
	assert get_config().seed == 5


def test_set_config_and_write_delimiter():
	from io import StringIO
	from fixed_matrix import FixedMatrix

	set_config(MatrixConfig(delimiter=';'))
	m = FixedMatrix[int, 1, 2]([[1, 2]])
	assert m.write(StringIO()).getvalue() == "1;2;\n"


def test_config_is_frozen():
	with pytest.raises(FrozenInstanceError):
		get_config().seed = 3
	assert matrix_config.get_config().seed is None
