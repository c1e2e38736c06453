#!/usr/bin/python3


"Console and file logging for applications and test runs. The library modules only emit DEBUG records through their own loggers; `setup_logging` attaches handlers to them."


__all__ = 'LOGGER_NAMES', 'setup_logging'


import logging
import sys
from typing import Optional


LOGGER_NAMES = ('fixed_matrix', 'matrix_memory', 'randomness')


def setup_logging(level:int=logging.INFO, log_file:Optional[str]=None) -> None:
	"Send records of the library loggers at `level` and above to stdout, and to `log_file` (truncated) if given. Calling again replaces the handlers installed before."

	formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s', datefmt='%H:%M:%S')

	handlers = [logging.StreamHandler(sys.stdout)]
	if log_file:
		handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))

	for handler in handlers:
		handler.setLevel(level)
		handler.setFormatter(formatter)

	for name in LOGGER_NAMES:
		logger = logging.getLogger(name)
		logger.setLevel(level)
		for old in logger.handlers[:]:
			logger.removeHandler(old)
			old.close()
		for handler in handlers:
			logger.addHandler(handler)

	logging.getLogger(LOGGER_NAMES[0]).info("Logging initialized.")


if __debug__ and __name__ == '__main__':
	setup_logging(logging.DEBUG)
	for name in LOGGER_NAMES:
		assert logging.getLogger(name).level == logging.DEBUG
		assert len(logging.getLogger(name).handlers) == 1

	setup_logging(logging.WARNING)
	assert all(len(logging.getLogger(_name).handlers) == 1 for _name in LOGGER_NAMES)

	print("matrix_logging: all tests passed")
