#!/usr/bin/python3


"""
Dense matrices whose row and column extents are part of the type.

`FixedMatrix[Type, rows, columns]` is a subclass of `FixedMatrix` created once per parameter triple, so two matrices have the same shape exactly when they have the same class. Cells are kept in row-major order in a `matrix_memory.Array` of `rows * columns` elements: cell `(r, c)` lives at linear index `r * columns + c`.

Access comes in two flavours. `at`, `set_at` and `m[r, c]` check the indices and raise `OutOfRange`. `m(r, c)`, `put` and `m[r][c]` do not check anything and are meant for inner loops where the indices are known to be valid.
"""


__all__ = 'FixedMatrix', 'ProxyRow', 'OutOfRange', 'InvalidArgument', 'LogicError', 'DimensionMismatch', 'make_identity', 'to_fixed_matrix'


import logging
from copy import deepcopy
from itertools import product
from numbers import Number
from operator import index as as_index
from typing import TypeVar

import numpy

from matrix_config import get_config
from matrix_memory import storage_for
from matrix_utils import memoize


logger = logging.getLogger(__name__)


Scalar = TypeVar('Scalar')


class OutOfRange(IndexError):
	"Checked element access outside of the matrix extents."


class InvalidArgument(ValueError):
	"Nested initializer whose shape disagrees with the matrix extents."


class LogicError(ArithmeticError):
	"Operation defined only for square matrices applied to a non-square one."


class DimensionMismatch(TypeError):
	"Matrix operands whose types are incompatible for the operation."


class ProxyRow:
	"Transient handle for the double subscript `m[row][col]`. Bound to one matrix and one row, owns nothing, checks nothing."

	__slots__ = '__matrix', '__row'

	def __init__(self, matrix, row:int):
		self.__matrix = matrix
		self.__row = row

	def __getitem__(self, col:int) -> Scalar:
		return self.__matrix(self.__row, col)

	def __setitem__(self, col:int, value:Scalar) -> None:
		self.__matrix.put(self.__row, col, value)


@memoize
def _specialize(element_type, rows, columns):
	class Specialized(FixedMatrix):
		Type = element_type
		matrix_rows = rows
		matrix_columns = columns
		Array = storage_for(element_type)

	Specialized.__name__ = Specialized.__qualname__ = f'FixedMatrix[{element_type.__name__}, {rows}, {columns}]'
	logger.debug("specialized %s", Specialized.__name__)
	return Specialized


class FixedMatrix:
	"Matrix of `matrix_rows` x `matrix_columns` elements of `Type`. Parametrize with `FixedMatrix[Type, rows, columns]` before use."

	Type = None
	matrix_rows = None
	matrix_columns = None
	Array = None

	__array_ufunc__ = None

	def __class_getitem__(cls, params):
		try:
			element_type, rows, columns = params
		except (TypeError, ValueError):
			raise TypeError("Matrix type takes three parameters: `FixedMatrix[Type, rows, columns]`.") from None

		if not isinstance(element_type, type):
			raise TypeError(f"Matrix element type must be a type, not {element_type!r}.")

		rows = as_index(rows)
		columns = as_index(columns)
		if rows < 1 or columns < 1:
			raise ValueError(f"Matrix extents must be positive, got {rows}x{columns}.")

		return _specialize(element_type, rows, columns)

	@classmethod
	def __adopt(cls, values):
		matrix = cls.__new__(cls)
		matrix.__values = values
		return matrix

	@classmethod
	def __check_type(cls, other, action):
		if other.__class__ is not cls:
			raise DimensionMismatch(f"Cannot {action} {other.__class__.__name__} and {cls.__name__}.")

	def __init__(self, values=None):
		"""
		`M()` sets every cell to `Type()`.
		`M(other)` copies a matrix of the same type.
		`M(rows)` copies a nested sequence of exactly `matrix_rows` rows of `matrix_columns` values each, raising `InvalidArgument` otherwise.
		"""

		if self.Type is None:
			raise TypeError("Parametrize the matrix first: `FixedMatrix[Type, rows, columns]`.")

		if values is None:
			self.__values = self.Array.zero(self.size(), self.Type)
		elif isinstance(values, FixedMatrix):
			self.__check_type(values, "copy between")
			self.__values = values.__values.copy()
		else:
			self.__values = self.Array(self.__nested(values), self.Type)

	@classmethod
	def __nested(cls, values):
		try:
			rows = list(values)
		except TypeError as error:
			raise InvalidArgument(f"Matrix initializer must be a sequence of rows, not {values!r}.") from error

		if len(rows) != cls.matrix_rows:
			raise InvalidArgument(f"Initializer has {len(rows)} rows, {cls.__name__} needs {cls.matrix_rows}.")

		cells = []
		for m, row in enumerate(rows):
			try:
				row = list(row)
			except TypeError as error:
				raise InvalidArgument(f"Initializer row {m} is not a sequence: {row!r}.") from error

			if len(row) != cls.matrix_columns:
				raise InvalidArgument(f"Initializer row {m} has {len(row)} elements, {cls.__name__} needs {cls.matrix_columns}.")

			cells.extend(row)

		return cells

	@classmethod
	def from_nested(cls, values):
		"Shape-checked construction from a nested sequence, same as `cls(values)`."
		return cls(values)

	@classmethod
	def from_rows(cls, source):
		"Copy `source[r][c]` for every cell. The shape of `source` is not checked: a short source raises whatever its indexing raises, a long one is truncated."
		return cls.__adopt(cls.Array((source[_m][_n] for (_m, _n) in product(range(cls.matrix_rows), range(cls.matrix_columns))), cls.Type))

	@classmethod
	def filled(cls, value):
		matrix = cls()
		matrix.fill(value)
		return matrix

	@classmethod
	def random(cls, generator):
		"Matrix with every cell drawn from `generator()`, in row-major order."
		return cls.__adopt(cls.Array((generator() for _n in range(cls.size())), cls.Type))

	@classmethod
	def moved_from(cls, other):
		"Take over the storage of `other`. `other` is left holding default values and remains usable."
		cls.__check_type(other, "move between")
		matrix = cls.__adopt(other.__values)
		other.__values = cls.Array.zero(cls.size(), cls.Type)
		return matrix

	def assign(self, other):
		"Replace the contents with a copy of `other` (a matrix of the same type or a nested sequence). The copy is built before anything is replaced, so a failure leaves `self` unchanged."
		if other is not self:
			self.swap(self.__class__(other))
		return self

	def assign_moved(self, other):
		if other is not self:
			self.swap(other)
		return self

	def swap(self, other):
		self.__check_type(other, "swap")
		self.__values, other.__values = other.__values, self.__values

	def copy(self):
		return self.__class__(self)

	__copy__ = copy

	def __deepcopy__(self, memo):
		return self.__adopt(self.Array((deepcopy(_v, memo) for _v in self.__values), self.Type))

	def __reduce__(self):
		return to_fixed_matrix, (self.Type, self.matrix_rows, self.matrix_columns, list(self.rows_view()))

	@classmethod
	def empty(cls) -> bool:
		return cls.size() == 0

	@classmethod
	def rows(cls) -> int:
		return cls.matrix_rows

	@classmethod
	def columns(cls) -> int:
		return cls.matrix_columns

	@classmethod
	def size(cls) -> int:
		return cls.matrix_rows * cls.matrix_columns

	max_size = size

	@classmethod
	def shape(cls) -> tuple[int, int]:
		return cls.matrix_rows, cls.matrix_columns

	def __len__(self) -> int:
		return self.size()

	def __bool__(self) -> bool:
		return any(self.__values)

	def __check_index(self, row, col):
		row = as_index(row)
		col = as_index(col)

		if not 0 <= row < self.matrix_rows:
			raise OutOfRange(f"Matrix vertical index {row} out of bounds [0, {self.matrix_rows}).")

		if not 0 <= col < self.matrix_columns:
			raise OutOfRange(f"Matrix horizontal index {col} out of bounds [0, {self.matrix_columns}).")

		return row * self.matrix_columns + col

	def at(self, row:int, col:int) -> Scalar:
		return self.__values[self.__check_index(row, col)]

	def set_at(self, row:int, col:int, value:Scalar) -> None:
		self.__values[self.__check_index(row, col)] = value

	def __call__(self, row:int, col:int) -> Scalar:
		return self.__values[row * self.matrix_columns + col]

	def put(self, row:int, col:int, value:Scalar) -> None:
		self.__values[row * self.matrix_columns + col] = value

	def __getitem__(self, index):
		if isinstance(index, tuple):
			try:
				row, col = index
			except ValueError:
				raise IndexError("Matrix index must be a 2-tuple.") from None
			return self.at(row, col)
		elif isinstance(index, slice):
			raise TypeError("Matrices cannot be sliced; use `data()` for a view of the cells.")
		else:
			return ProxyRow(self, index)

	def __setitem__(self, index:tuple[int, int], value:Scalar) -> None:
		if not isinstance(index, tuple):
			raise TypeError("Assign matrix cells with `m[row, col] = value` or `m[row][col] = value`.")

		try:
			row, col = index
		except ValueError:
			raise IndexError("Matrix index must be a 2-tuple.") from None
		self.set_at(row, col, value)

	def front(self) -> Scalar:
		return self.__values[0]

	def back(self) -> Scalar:
		return self.__values[-1]

	def data(self):
		"The backing array: random access to all cells in row-major order."
		return self.__values

	def __iter__(self):
		return iter(self.__values)

	def __reversed__(self):
		return reversed(self.__values)

	def keys(self):
		yield from product(range(self.matrix_rows), range(self.matrix_columns))

	def items(self):
		yield from zip(self.keys(), self.__values)

	def rows_view(self):
		for m in range(self.matrix_rows):
			yield tuple(self.__values[m * self.matrix_columns:(m + 1) * self.matrix_columns])

	def __array__(self, dtype=None, copy=None):
		return numpy.array(list(self.__values), dtype=dtype).reshape(self.matrix_rows, self.matrix_columns)

	def fill(self, value:Scalar) -> None:
		self.__values.fill(value)

	def write(self, sink, delimiter=None):
		"Write every element followed by `delimiter`, with a newline after each row. `sink` needs a `write(str)` method and is returned."

		if delimiter is None:
			delimiter = get_config().delimiter

		for count, value in enumerate(self.__values, 1):
			sink.write(f'{value}{delimiter}')
			if not count % self.matrix_columns:
				sink.write('\n')
		return sink

	def __str__(self) -> str:
		return 'FixedMatrix[' + ', '.join('[' + ', '.join(str(_v) for _v in _row) + ']' for _row in self.rows_view()) + ']'

	def __repr__(self) -> str:
		return f'{self.__class__.__name__}([' + ', '.join('[' + ', '.join(repr(_v) for _v in _row) + ']' for _row in self.rows_view()) + '])'

	def trace(self) -> Scalar:
		if self.matrix_rows != self.matrix_columns:
			raise LogicError(f"Cannot compute trace of non-square {self.__class__.__name__}.")

		result = self.Type()
		for n in range(self.matrix_rows):
			result += self.__values[n * (self.matrix_columns + 1)]
		return result

	def submatrix(self, drop_row:int, drop_col:int):
		"Copy of the matrix without row `drop_row` and column `drop_col`. The indices are not checked."

		Sub = FixedMatrix[self.Type, self.matrix_rows - 1, self.matrix_columns - 1]
		sub = Sub()
		row_erased = 0
		for m in range(Sub.matrix_rows):
			if m == drop_row:
				row_erased = 1
			col_erased = 0
			for n in range(Sub.matrix_columns):
				if n == drop_col:
					col_erased = 1
				sub.put(m, n, self(m + row_erased, n + col_erased))
		return sub

	def transpose(self):
		Transposed = FixedMatrix[self.Type, self.matrix_columns, self.matrix_rows]
		return Transposed.__adopt(Transposed.Array((self(_m, _n) for (_n, _m) in product(range(self.matrix_columns), range(self.matrix_rows))), self.Type))

	def __same_shape(self, other, action):
		if not isinstance(other, FixedMatrix):
			return False
		self.__check_type(other, action)
		return True

	def __iadd__(self, other):
		if not self.__same_shape(other, "add"):
			return NotImplemented
		self.__values = self.Array((_a + _b for (_a, _b) in zip(self.__values, other.__values)), self.Type)
		return self

	def __isub__(self, other):
		if not self.__same_shape(other, "subtract"):
			return NotImplemented
		self.__values = self.Array((_a - _b for (_a, _b) in zip(self.__values, other.__values)), self.Type)
		return self

	def __add__(self, other):
		if not self.__same_shape(other, "add"):
			return NotImplemented
		result = self.copy()
		result += other
		return result

	def __sub__(self, other):
		if not self.__same_shape(other, "subtract"):
			return NotImplemented
		result = self.copy()
		result -= other
		return result

	def __pos__(self):
		return self.copy()

	def __neg__(self):
		return self.__adopt(self.Array((-_v for _v in self.__values), self.Type))

	def __matmul__(self, other):
		"Matrix product. The left matrix column count must equal the right matrix row count and the element types must agree."

		if not isinstance(other, FixedMatrix):
			return NotImplemented

		if other.Type is not self.Type or other.matrix_rows != self.matrix_columns:
			raise DimensionMismatch(f"Cannot multiply {self.__class__.__name__} by {other.__class__.__name__}.")

		result = FixedMatrix[self.Type, self.matrix_rows, other.matrix_columns]()
		for m, n in result.keys():
			cell = result(m, n)
			for k in range(self.matrix_columns):
				cell += self(m, k) * other(k, n)
			result.put(m, n, cell)
		return result

	def __mul__(self, other):
		if isinstance(other, FixedMatrix):
			return self @ other

		try:
			return self.__adopt(self.Array((_v * other for _v in self.__values), self.Type))
		except TypeError:
			return NotImplemented

	def __rmul__(self, other):
		try:
			return self.__adopt(self.Array((other * _v for _v in self.__values), self.Type))
		except TypeError:
			return NotImplemented

	def __eq__(self, other) -> bool:
		if self is other:
			return True
		if other.__class__ is not self.__class__:
			return NotImplemented
		return all(_a == _b for (_a, _b) in zip(self.__values, other.__values))

	__hash__ = None


def make_identity(Type, size:int):
	"Square matrix of numeric `Type` with ones on the diagonal and zeros elsewhere."

	if not (isinstance(Type, type) and issubclass(Type, (Number, numpy.number))):
		raise TypeError(f"Identity matrix needs a numeric element type, not {Type!r}.")

	identity = FixedMatrix[Type, size, size]()
	for n in range(size):
		identity[n][n] = Type(1)
	return identity


def to_fixed_matrix(Type, rows:int, columns:int, source):
	"Unchecked conversion of a nested `source` to `FixedMatrix[Type, rows, columns]`, see `FixedMatrix.from_rows`."
	return FixedMatrix[Type, rows, columns].from_rows(source)


if __debug__ and __name__ == '__main__':
	import os
	from io import StringIO
	from fractions import Fraction
	from random import randrange

	from randomness import RandomNumberGenerator, UniformIntDistribution

	print("Element access test.")
	M23 = FixedMatrix[int, 2, 3]
	assert M23 is FixedMatrix[int, 2, 3]
	a = M23([[1, 2, 3], [4, 5, 6]])
	for m, n in a.keys():
		assert a.at(m, n) == a(m, n) == a[m][n] == a[m, n]
	for m, n in [(2, 0), (0, 3), (-1, 0), (5, 5)]:
		try:
			a.at(m, n)
		except OutOfRange:
			pass
		else:
			raise AssertionError(f"Index ({m}, {n}) accepted.")
	assert list(a) == [1, 2, 3, 4, 5, 6]
	assert list(reversed(a)) == [6, 5, 4, 3, 2, 1]
	assert a.front() == 1 and a.back() == 6

	try:
		M23([[1, 2], [3, 4]])
	except InvalidArgument:
		pass
	else:
		raise AssertionError("Wrong initializer shape accepted.")

	print("Square matrix algebra test.")
	for Type in int, float, Fraction, numpy.int64, numpy.float64:
		for w in range(1, 8):
			M = FixedMatrix[Type, w, w]
			_Mid = make_identity(Type, w)
			_M0 = M()

			generator = lambda: Type(randrange(-10, 10))
			x = M.random(generator)
			y = M.random(generator)
			z = M.random(generator)

			assert _Mid.trace() == w
			assert x + _M0 == x
			assert x - x == _M0
			assert x + y == y + x
			assert _Mid @ x == x
			assert x @ _Mid == x
			assert x * y == x @ y
			assert (x @ y) @ z == x @ (y @ z)
			assert x @ (y + z) == x @ y + x @ z
			assert (x + y).trace() == x.trace() + y.trace()
			assert x.transpose().transpose() == x

			if w > 1:
				s = x.submatrix(0, w - 1)
				assert s.shape() == (w - 1, w - 1)
				for m, n in s.keys():
					assert s(m, n) == x(m + 1, n)

	print("Rectangular matrix product test.")
	p = FixedMatrix[int, 2, 2]([[1, 2], [3, 4]]) @ FixedMatrix[int, 2, 2]([[5, 6], [7, 8]])
	assert p == FixedMatrix[int, 2, 2]([[19, 22], [43, 50]])
	q = a @ FixedMatrix[int, 3, 1]([[1], [0], [-1]])
	assert q == FixedMatrix[int, 2, 1]([[-2], [-2]])

	try:
		a.trace()
	except LogicError:
		pass
	else:
		raise AssertionError("Trace of non-square matrix computed.")

	assert a.write(StringIO(), ',').getvalue() == "1,2,3,\n4,5,6,\n"

	if os.getenv('FIXED_MATRIX_CALLGRAPH'):
		from pycallgraph2 import PyCallGraph
		from pycallgraph2.output.graphviz import GraphvizOutput

		M = FixedMatrix[int, 16, 16]
		generator = RandomNumberGenerator(distribution=UniformIntDistribution(-100, 100))
		x = M.random(generator)
		y = M.random(generator)
		with PyCallGraph(output=GraphvizOutput(output_file='fixed_matrix_product.png')):
			x @ y

	print("fixed_matrix: all tests passed")
