#!/usr/bin/python3


"This module provides class `Array`, a fixed-capacity linear store used as the backing storage of matrices, and its numpy-backed variant `NpArray`."


__all__ = 'Array', 'NpArray', 'storage_for'


import logging

import numpy

from matrix_config import get_config


logger = logging.getLogger(__name__)


class Array:
	"One-dimensional array of elements of type `Type`. The length is fixed at construction: elements can be read, replaced, filled and swapped, never inserted or removed. Slices are views sharing the storage of the parent array."

	@classmethod
	def make_storage(cls, values, Type):
		return list(values)

	@classmethod
	def zero(cls, length, Type):
		return cls((Type() for _n in range(length)), Type)

	def __init__(self, values, Type=None, start=None, stop=None):
		try:
			self.__storage = values.__storage

			if Type is not None:
				self.Type = Type
			else:
				self.Type = values.Type

			if start is not None:
				self.__start = start
			else:
				self.__start = values.__start

			if stop is not None:
				self.__stop = stop
			else:
				self.__stop = values.__stop

		except AttributeError:
			if Type is not None:
				self.Type = Type
			else:
				raise TypeError("`Type` argument required.")

			self.__storage = self.make_storage(values, Type)

			if start is not None:
				self.__start = start
			else:
				self.__start = 0

			if stop is not None:
				self.__stop = stop
			else:
				self.__stop = len(self.__storage)

		assert 0 <= self.__start <= self.__stop <= len(self.__storage)

	def __repr__(self):
		return f'{self.__class__.__name__}([{", ".join(repr(_v) for _v in self)}], {self.Type.__name__})'

	def __len__(self):
		return self.__stop - self.__start

	def __iter__(self):
		storage = self.__storage
		for n in range(self.__start, self.__stop):
			yield storage[n]

	def __reversed__(self):
		storage = self.__storage
		for n in reversed(range(self.__start, self.__stop)):
			yield storage[n]

	def __eq__(self, other):
		try:
			return len(self) == len(other) and all(_a == _b for (_a, _b) in zip(self, other))
		except TypeError:
			return NotImplemented

	__hash__ = None

	def __range(self, index):
		if index is Ellipsis:
			return 0, len(self)

		if index.step not in (None, 1):
			raise NotImplementedError("Array views support only unit step.")

		start, stop, _step = index.indices(len(self))
		return start, max(start, stop)

	def __offset(self, index):
		if index < 0:
			index += len(self)
			if index < 0:
				raise IndexError(f"Index too low ({index - len(self)}).")
		if self.__start + index >= self.__stop:
			raise IndexError(f"Index {index} exceeds array length {len(self)}.")
		return self.__start + index

	def __getitem__(self, index):
		if index is Ellipsis or isinstance(index, slice):
			start, stop = self.__range(index)
			return self.__class__(self, start=self.__start + start, stop=self.__start + stop)
		else:
			return self.__storage[self.__offset(index)]

	def __setitem__(self, index, value):
		if index is Ellipsis or isinstance(index, slice):
			start, stop = self.__range(index)
			value = list(value)
			if len(value) != stop - start:
				raise ValueError(f"Fixed-capacity array slice of length {stop - start} cannot take {len(value)} values.")
			for n, v in zip(range(self.__start + start, self.__start + stop), value):
				self.__storage[n] = v
		else:
			self.__storage[self.__offset(index)] = value

	def fill(self, value):
		for n in range(self.__start, self.__stop):
			self.__storage[n] = value

	def swap(self, other):
		if self.__class__ is not other.__class__ or len(self) != len(other):
			raise ValueError(f"Can only swap arrays of the same kind and length ({len(self)} vs. {len(other)}).")

		self.__storage, other.__storage = other.__storage, self.__storage
		self.__start, other.__start = other.__start, self.__start
		self.__stop, other.__stop = other.__stop, self.__stop

	def copy(self):
		"Array with its own storage, holding the same values."
		return self.__class__(iter(self), self.Type)

	def sort(self, key=None, reverse=False):
		self[...] = sorted(self, key=key, reverse=reverse)

	def serialize(self):
		return self.__storage[self.__start:self.__stop]


class NpArray(Array):
	"Array keeping its elements in a numpy vector of dtype `Type`. Used for numpy scalar element types."

	@classmethod
	def make_storage(cls, values, Type):
		return numpy.fromiter(values, dtype=Type)

	def fill(self, value):
		self.serialize()[...] = value


def storage_for(Type):
	"Pick the array class that stores elements of `Type`."

	if get_config().numpy_storage and isinstance(Type, type) and issubclass(Type, (numpy.number, numpy.bool_)):
		Storage = NpArray
	else:
		Storage = Array

	logger.debug("storage for %s: %s", Type.__name__, Storage.__name__)
	return Storage


if __debug__ and __name__ == '__main__':
	a1 = Array([0, 1, 2, 3], int)

	a1s = a1[1:4]
	assert len(a1s) == 3
	assert a1s[0] == 1
	assert a1s[2] == a1[3]
	assert a1[-1] == 3

	a1s[0] = 10
	assert a1[1] == 10

	a1[...] = [4, 5, 6, 7]
	assert list(a1) == [4, 5, 6, 7]
	assert list(reversed(a1)) == [7, 6, 5, 4]

	try:
		a1[4]
	except IndexError:
		pass
	else:
		raise AssertionError("Index past the end accepted.")

	try:
		a1[:] = [1, 2]
	except ValueError:
		pass
	else:
		raise AssertionError("Array length changed.")

	a2 = a1.copy()
	a2[0] = 100
	assert a1[0] == 4

	a1.swap(a2)
	assert a1[0] == 100 and a2[0] == 4

	a3 = Array([3, 1, 2], int)
	a3.sort()
	assert a3 == [1, 2, 3]

	n1 = NpArray([1.5, 2.5, 3.5], numpy.float64)
	assert isinstance(n1.serialize(), numpy.ndarray)
	n1.fill(0.25)
	assert list(n1) == [0.25, 0.25, 0.25]
	assert NpArray.zero(4, numpy.int32) == [0, 0, 0, 0]

	assert storage_for(int) is Array
	assert storage_for(numpy.float64) is NpArray

	print("matrix_memory: all tests passed")
