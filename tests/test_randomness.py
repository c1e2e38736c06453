import copy
import math

import numpy as np
import pytest

import matrix_config
from matrix_config import MatrixConfig
from fixed_matrix import FixedMatrix
from randomness import (
	default_engine,
	UniformIntDistribution,
	UniformRealDistribution,
	NormalDistribution,
	DiscreteDistribution,
	DiscreteTriangularDistribution,
	RandomNumberGenerator,
	UniformRandomProbabilityGenerator,
	RandomComplexGenerator,
)


def test_default_engine_is_mersenne_twister():
	engine = default_engine(1)
	assert isinstance(engine, np.random.Generator)
	assert isinstance(engine.bit_generator, np.random.MT19937)


def test_configured_seed_makes_engines_reproducible():
	matrix_config.set_config(MatrixConfig(seed=99))
	try:
		a = RandomNumberGenerator()
		b = RandomNumberGenerator()
		assert [a() for _ in range(20)] == [b() for _ in range(20)]
	finally:
		matrix_config.set_config(None)


def test_uniform_int_range_and_limits():
	g = RandomNumberGenerator(default_engine(3), UniformIntDistribution(-2, 2))
	values = [g() for _ in range(500)]
	assert set(values) == {-2, -1, 0, 1, 2}
	assert all(isinstance(v, int) for v in values)
	assert (g.min(), g.max()) == (-2, 2)


def test_uniform_int_default_range():
	d = UniformIntDistribution()
	assert d.min() == 0
	assert d.max() == np.iinfo(np.int64).max


def test_uniform_real_range():
	g = RandomNumberGenerator(default_engine(3), UniformRealDistribution(1.0, 2.0))
	assert all(1.0 <= g() < 2.0 for _ in range(200))
	assert (g.min(), g.max()) == (1.0, 2.0)


def test_normal_distribution_limits():
	d = NormalDistribution(10.0, 0.5)
	assert d.min() == -math.inf and d.max() == math.inf
	g = RandomNumberGenerator(default_engine(5), d)
	mean = sum(g() for _ in range(2000)) / 2000
	assert abs(mean - 10.0) < 0.1


@pytest.mark.parametrize("factory", [
	lambda: UniformIntDistribution(3, 2),
	lambda: UniformRealDistribution(2.0, 1.0),
	lambda: NormalDistribution(0.0, 0.0),
	lambda: DiscreteDistribution(()),
	lambda: DiscreteDistribution((0, 0)),
	lambda: DiscreteDistribution((1, -1)),
	lambda: DiscreteTriangularDistribution(0),
])
def test_bad_parameters_raise_value_error(factory):
	with pytest.raises(ValueError):
		factory()


def test_params_get_and_set():
	d = UniformIntDistribution(0, 5)
	assert d.params == UniformIntDistribution.Params(0, 5)
	assert d.params.b == 5

	d.params = (1, 3)
	assert (d.min(), d.max()) == (1, 3)

	with pytest.raises(ValueError):
		d.params = (4, 3)
	assert (d.min(), d.max()) == (1, 3)


def test_call_with_explicit_params_leaves_stored_params():
	d = UniformIntDistribution(0, 0)
	engine = default_engine(0)
	assert d(engine, (7, 7)) == 7
	assert d(engine) == 0


def test_discrete_distribution():
	d = DiscreteDistribution([1, 0, 3])
	assert d.probabilities() == [0.25, 0.0, 0.75]
	assert (d.min(), d.max()) == (0, 2)
	g = RandomNumberGenerator(default_engine(11), d)
	assert 1 not in {g() for _ in range(200)}


def test_discrete_triangular_weights():
	ascending = DiscreteTriangularDistribution(4)
	assert ascending.params.weights == (0.0, 1.0, 2.0, 3.0)
	assert ascending.probabilities() == pytest.approx([0, 1 / 6, 2 / 6, 3 / 6])

	descending = DiscreteTriangularDistribution(4, ascending=False)
	assert descending.params.weights == (4.0, 3.0, 2.0, 1.0)
	assert descending.probabilities() == pytest.approx([0.4, 0.3, 0.2, 0.1])
	assert (descending.min(), descending.max()) == (0, 3)

	g = RandomNumberGenerator(default_engine(2), ascending)
	assert all(1 <= g() <= 3 for _ in range(200))


def test_single_weight_always_draws_zero():
	single = DiscreteTriangularDistribution(1)
	assert single.params.weights == (1.0,)
	assert single.probabilities() == [1.0]
	assert (single.min(), single.max()) == (0, 0)

	engine = default_engine(3)
	assert {single(engine) for _ in range(50)} == {0}
	assert DiscreteDistribution((0,))(engine) == 0


def test_distribution_equality_and_reset():
	a = UniformRealDistribution(0.0, 2.0)
	assert a == UniformRealDistribution(0.0, 2.0)
	assert a != UniformRealDistribution(0.0, 3.0)
	assert a != UniformIntDistribution(0, 2)
	a.reset()
	assert a == UniformRealDistribution(0.0, 2.0)
	assert repr(a) == 'UniformRealDistribution(0.0, 2.0)'


def test_generator_copy_continues_same_sequence():
	g = RandomNumberGenerator(default_engine(42), UniformIntDistribution(0, 1000))
	g()
	h = g.copy()
	k = copy.copy(g)
	expected = [g() for _ in range(50)]
	assert [h() for _ in range(50)] == expected
	assert [k() for _ in range(50)] == expected


def test_engine_and_distribution_accessors_return_copies():
	g = RandomNumberGenerator(default_engine(8), UniformIntDistribution(0, 1000))
	engine = g.engine
	expected = [int(engine.integers(0, 1000, endpoint=True)) for _ in range(5)]
	assert [g() for _ in range(5)] == expected

	d = g.distribution
	d.params = (0, 1)
	assert g.max() == 1000


def test_swap_and_reset_distribution_state():
	a = RandomNumberGenerator(default_engine(1), UniformIntDistribution(0, 0))
	b = RandomNumberGenerator(default_engine(1), UniformIntDistribution(5, 5))
	a.swap(b)
	assert a() == 5 and b() == 0
	a.reset_distribution_state()
	assert a() == 5

	with pytest.raises(TypeError):
		a.swap(object())


def test_probability_generator():
	p = UniformRandomProbabilityGenerator(default_engine(4))
	assert (p.min(), p.max()) == (0.0, 1.0)
	assert all(0.0 <= p() < 1.0 for _ in range(200))


def test_complex_generator():
	c = RandomComplexGenerator(default_engine(6), UniformRealDistribution(-1.0, 1.0))
	z = c()
	assert isinstance(z, complex)
	assert -1.0 <= z.real < 1.0 and -1.0 <= z.imag < 1.0

	w = c(equal_re_im=True)
	assert w.real == w.imag
	assert c.min() == complex(-1.0, -1.0)
	assert c.max() == complex(1.0, 1.0)


def test_generators_seed_matrix_cells():
	g = RandomNumberGenerator(default_engine(21), UniformIntDistribution(-9, 9))
	h = g.copy()
	m = FixedMatrix[int, 3, 4].random(g)
	assert list(m) == [h() for _ in range(12)]

	c = FixedMatrix[complex, 2, 2].random(RandomComplexGenerator(default_engine(0)))
	assert all(isinstance(v, complex) for v in c)
