#!/usr/bin/python3


"""
Process-wide settings of the matrix library.

Values come from environment variables on first use:
	FIXED_MATRIX_DELIMITER - separator written after every element by `FixedMatrix.write` (default: space),
	FIXED_MATRIX_SEED - seed of default random engines (default: unset, OS entropy),
	FIXED_MATRIX_NUMPY_STORAGE - keep numpy scalar element types in numpy vectors (default: on).

Malformed values fall back to the defaults. Storage is chosen when a matrix type is first specialised, so changing `numpy_storage` later affects only new types.
"""


__all__ = 'MatrixConfig', 'get_config', 'set_config'


import os
from dataclasses import dataclass
from typing import Optional


def _env_flag(name:str, default:bool) -> bool:
	val = os.getenv(name, None)

	if val is None:
		return bool(default)

	v = val.strip().lower()
	if v in ("1", "true", "t", "yes", "y", "on"):
		return True
	elif v in ("0", "false", "f", "no", "n", "off"):
		return False
	else:
		return bool(default)


def _env_int(name:str, default:Optional[int]) -> Optional[int]:
	val = os.getenv(name, None)

	if val is None:
		return default

	s = val.strip()
	if (s.startswith("-") and s[1:].isdigit()) or s.isdigit():
		return int(s)
	else:
		return default


@dataclass(frozen=True)
class MatrixConfig:
	delimiter: str = ' '
	seed: Optional[int] = None
	numpy_storage: bool = True

	@classmethod
	def from_env(cls) -> 'MatrixConfig':
		return cls(
			delimiter=os.getenv('FIXED_MATRIX_DELIMITER', cls.delimiter),
			seed=_env_int('FIXED_MATRIX_SEED', cls.seed),
			numpy_storage=_env_flag('FIXED_MATRIX_NUMPY_STORAGE', cls.numpy_storage)
		)


_config = None


def get_config() -> MatrixConfig:
	global _config
	if _config is None:
		_config = MatrixConfig.from_env()
	return _config


def set_config(config:Optional[MatrixConfig]) -> None:
	"Replace the process-wide settings. `None` makes the next `get_config` read the environment again."
	global _config
	_config = config


if __debug__ and __name__ == '__main__':
	os.environ['FIXED_MATRIX_SEED'] = '42'
	os.environ['FIXED_MATRIX_NUMPY_STORAGE'] = 'off'
	os.environ['FIXED_MATRIX_DELIMITER'] = ','
	set_config(None)
	assert get_config() == MatrixConfig(',', 42, False)

	os.environ['FIXED_MATRIX_SEED'] = 'forty-two'
	set_config(None)
	assert get_config().seed is None

	print("matrix_config: all tests passed")
