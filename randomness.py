#!/usr/bin/python3


"Random value generators. A generator pairs an engine (a `numpy.random.Generator`) with a distribution that shapes the engine output. Generators are callables without arguments, so they can seed matrices through `FixedMatrix.random`."


__all__ = 'default_engine', 'Distribution', 'UniformIntDistribution', 'UniformRealDistribution', 'NormalDistribution', 'DiscreteDistribution', 'DiscreteTriangularDistribution', 'RandomNumberGenerator', 'UniformRandomProbabilityGenerator', 'RandomComplexGenerator'


import logging
from copy import deepcopy
from math import inf, isfinite
from typing import NamedTuple

import numpy

from matrix_config import get_config


logger = logging.getLogger(__name__)


def default_engine(seed=None):
	"Mersenne twister engine seeded with `seed`, the configured seed, or OS entropy, in that order."

	if seed is None:
		seed = get_config().seed
	logger.debug("new engine, seed %s", seed)
	return numpy.random.Generator(numpy.random.MT19937(seed))


class Distribution:
	"Base of distributions. Subclasses define the named tuple `Params`, `validate` and `draw`."

	Params = None

	def __init__(self, *args, **kwargs):
		self.params = self.Params(*args, **kwargs)

	@property
	def params(self):
		return self.__params

	@params.setter
	def params(self, params):
		self.__params = self.validate(self.Params(*params))

	@classmethod
	def validate(cls, params):
		return params

	def __call__(self, engine, params=None):
		if params is None:
			params = self.__params
		else:
			params = self.validate(self.Params(*params))
		return self.draw(engine, params)

	def reset(self):
		"Forget cached state so that following draws do not depend on earlier ones. The distributions here keep no state."

	def __eq__(self, other):
		if other.__class__ is not self.__class__:
			return NotImplemented
		return self.params == other.params

	__hash__ = None

	def __repr__(self):
		return f'{self.__class__.__name__}({", ".join(repr(_p) for _p in self.params)})'


class UniformIntDistribution(Distribution):
	"Integers uniformly distributed on the closed range `[a, b]`."

	class Params(NamedTuple):
		a: int = 0
		b: int = int(numpy.iinfo(numpy.int64).max)

	@classmethod
	def validate(cls, params):
		if not params.a <= params.b:
			raise ValueError(f"Uniform integer distribution needs a <= b, got a={params.a} b={params.b}.")
		return params

	def draw(self, engine, params):
		return int(engine.integers(params.a, params.b, endpoint=True))

	def min(self):
		return self.params.a

	def max(self):
		return self.params.b


class UniformRealDistribution(Distribution):
	"Reals uniformly distributed on the half-open range `[a, b)`."

	class Params(NamedTuple):
		a: float = 0.0
		b: float = 1.0

	@classmethod
	def validate(cls, params):
		if not (params.a <= params.b and isfinite(params.b - params.a)):
			raise ValueError(f"Uniform real distribution needs a finite range a <= b, got a={params.a} b={params.b}.")
		return params

	def draw(self, engine, params):
		return float(engine.uniform(params.a, params.b))

	def min(self):
		return self.params.a

	def max(self):
		return self.params.b


class NormalDistribution(Distribution):
	class Params(NamedTuple):
		mean: float = 0.0
		stddev: float = 1.0

	@classmethod
	def validate(cls, params):
		if not params.stddev > 0:
			raise ValueError(f"Normal distribution needs stddev > 0, got {params.stddev}.")
		return params

	def draw(self, engine, params):
		return float(engine.normal(params.mean, params.stddev))

	def min(self):
		return -inf

	def max(self):
		return inf


class DiscreteDistribution(Distribution):
	"Integers `0 .. len(weights) - 1`, each drawn with probability proportional to its weight. A single non-negative weight always gives 0."

	class Params(NamedTuple):
		weights: tuple = (1.0,)

	@classmethod
	def validate(cls, params):
		weights = tuple(float(_w) for _w in params.weights)
		if not weights:
			raise ValueError("Discrete distribution needs at least one weight.")
		if any(not (_w >= 0 and isfinite(_w)) for _w in weights):
			raise ValueError(f"Discrete distribution weights must be finite and non-negative, got {weights}.")
		if len(weights) == 1:
			weights = (1.0,)
		elif not sum(weights) > 0:
			raise ValueError("Discrete distribution weights sum to zero.")
		return params._replace(weights=weights)

	def probabilities(self):
		total = sum(self.params.weights)
		return [_w / total for _w in self.params.weights]

	def draw(self, engine, params):
		total = sum(params.weights)
		return int(engine.choice(len(params.weights), p=[_w / total for _w in params.weights]))

	def min(self):
		return 0

	def max(self):
		return len(self.params.weights) - 1


class DiscreteTriangularDistribution(DiscreteDistribution):
	"Integers `0 .. maximum - 1` with linearly rising (weights `0, 1, .., maximum - 1`) or falling (weights `maximum, .., 2, 1`) probability."

	def __init__(self, maximum:int, ascending:bool=True):
		if maximum < 1:
			raise ValueError(f"Triangular distribution needs a positive maximum, got {maximum}.")

		if ascending:
			weights = range(maximum)
		else:
			weights = range(maximum, 0, -1)

		super().__init__(tuple(weights))


class RandomNumberGenerator:
	"Callable drawing values from `distribution` using `engine`. Default engine is `default_engine()`, default distribution `default_distribution()`."

	@staticmethod
	def default_distribution():
		return UniformIntDistribution()

	def __init__(self, engine=None, distribution=None):
		if engine is None:
			engine = default_engine()
		if distribution is None:
			distribution = self.default_distribution()

		self.__engine = engine
		self.__distribution = distribution
		logger.debug("%s over %r", self.__class__.__name__, distribution)

	def __call__(self):
		return self.__distribution(self.__engine)

	@property
	def engine(self):
		"Copy of the engine, in its current state."
		return deepcopy(self.__engine)

	@property
	def distribution(self):
		return deepcopy(self.__distribution)

	def min(self):
		return self.__distribution.min()

	def max(self):
		return self.__distribution.max()

	def reset_distribution_state(self):
		self.__distribution.reset()

	def swap(self, other):
		if not isinstance(other, RandomNumberGenerator):
			raise TypeError(f"Cannot swap {self.__class__.__name__} with {other.__class__.__name__}.")

		self.__engine, other.__engine = other.__engine, self.__engine
		self.__distribution, other.__distribution = other.__distribution, self.__distribution

	def copy(self):
		"Independent generator in the same state: it yields the same values as `self` would."

		result = self.__class__.__new__(self.__class__)
		result.__engine = deepcopy(self.__engine)
		result.__distribution = deepcopy(self.__distribution)
		return result

	__copy__ = copy


class UniformRandomProbabilityGenerator(RandomNumberGenerator):
	"Reals uniformly distributed on `[0, 1)`."

	def __init__(self, engine=None):
		super().__init__(engine, UniformRealDistribution(0.0, 1.0))


class RandomComplexGenerator(RandomNumberGenerator):
	"Complex numbers whose real and imaginary parts are drawn independently from the same real distribution."

	@staticmethod
	def default_distribution():
		return UniformRealDistribution()

	def __call__(self, equal_re_im:bool=False):
		re = super().__call__()
		if equal_re_im:
			im = re
		else:
			im = super().__call__()
		return complex(re, im)

	def min(self):
		m = super().min()
		return complex(m, m)

	def max(self):
		m = super().max()
		return complex(m, m)


if __debug__ and __name__ == '__main__':
	from fixed_matrix import FixedMatrix

	d = UniformIntDistribution(-5, 5)
	g = RandomNumberGenerator(default_engine(1234), d)
	h = g.copy()
	draws = [g() for _n in range(100)]
	assert draws == [h() for _n in range(100)]
	assert all(-5 <= _x <= 5 for _x in draws)
	assert g.min() == -5 and g.max() == 5

	t = DiscreteTriangularDistribution(4)
	assert t.probabilities() == [0.0, 1 / 6, 2 / 6, 3 / 6]
	tg = RandomNumberGenerator(default_engine(1), t)
	assert all(1 <= tg() <= 3 for _n in range(100))

	one = RandomNumberGenerator(default_engine(1), DiscreteTriangularDistribution(1))
	assert {one() for _n in range(20)} == {0}

	p = UniformRandomProbabilityGenerator(default_engine(7))
	assert all(0.0 <= p() < 1.0 for _n in range(100))

	c = RandomComplexGenerator(default_engine(7))
	z = c(equal_re_im=True)
	assert z.real == z.imag

	m = FixedMatrix[int, 3, 3].random(g)
	assert all(-5 <= _x <= 5 for _x in m)

	print("randomness: all tests passed")
