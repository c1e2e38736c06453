#!/usr/bin/python3


__all__ = 'memoize',


from functools import wraps
from threading import RLock


def memoize(function):
	"Cache results of `function` by its positional arguments. Arguments must be hashable. Concurrent first calls with equal arguments run `function` once and all get the same result."

	store = {}
	lock = RLock()

	@wraps(function)
	def memoized(*args):
		try:
			return store[args]
		except KeyError:
			pass

		with lock:
			try:
				return store[args]
			except KeyError:
				value = function(*args)
				store[args] = value
				return value

	def cache_clear():
		with lock:
			store.clear()

	memoized.cache_clear = cache_clear
	return memoized
