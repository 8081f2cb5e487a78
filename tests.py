import itertools
import logging
import math

import pytest
from hypothesis import given, strategies as st

import finite_groups
from finite_groups import *

S3 = SymmetricGroup(3)
S4 = SymmetricGroup(4)
Z2 = CyclicGroup(2)
Z3 = CyclicGroup(3)

def verify_bijection(G: Group):
	assert len(G.elements()) == len(G) == G.ORDER
	for i, a in enumerate(G):
		assert G[i] is a
		assert G.index(a) == i
		assert a in G
	assert len(set(G)) == len(G)
	for a, b in itertools.combinations(G, 2):
		assert a != b and repr(a) != repr(b)


# construction

@pytest.mark.parametrize('n', range(5))
def test_symmetric_group(n):
	G = make_symmetric_group(n)
	assert len(G.elements()) == math.factorial(n)
	verify_bijection(G)
	identity = Permutation(range(n))
	assert G.elements().count(identity) == 1
	assert G.ID == identity and not G.ID

@pytest.mark.parametrize('n', [1, 2, 5, 12])
def test_cyclic_group(n):
	G = make_cyclic_group(n)
	assert len(G.elements()) == n
	verify_bijection(G)
	assert [x.value for x in G] == list(range(n))
	assert all(x.modulus == n for x in G)
	assert G.elements().count(IntegerResidue(0, n)) == 1

def test_symmetric_order():
	assert make_symmetric_group(2).elements() == (Permutation([0, 1]), Permutation([1, 0]))
	assert [x.mapping for x in S3] == [
		(0, 1, 2), (1, 0, 2), (2, 0, 1), (0, 2, 1), (1, 2, 0), (2, 1, 0),
	]

def test_direct_product():
	P = make_product_group([Z2, S3])
	assert len(P.elements()) == 12
	verify_bijection(P)
	for x in P:
		assert isinstance(x, Tuple) and len(x) == 2
		assert isinstance(x[0], IntegerResidue) and x[0].modulus == 2
		assert isinstance(x[1], Permutation) and x[1].size == 3
	# first part is the least significant digit
	assert P[1] == Tuple(IntegerResidue(1, 2), S3[0])
	assert P[2] == Tuple(IntegerResidue(0, 2), S3[1])
	assert P[5][0] is Z2[1] and P[5][1] is S3[2]
	assert P.ID == Tuple(Z2.ID, S3.ID)

def test_nested_product():
	P = DirectProduct(DirectProduct(Z2, Z3), S3, Z2)
	assert len(P) == 6 * 6 * 2
	verify_bijection(P)
	assert P.PARTS[0].PARTS == (Z2, Z3)

@pytest.mark.parametrize('build', [
	lambda: make_symmetric_group(-1),
	lambda: make_symmetric_group(2.0),
	lambda: make_cyclic_group(0),
	lambda: make_cyclic_group(-3),
	lambda: make_product_group([]),
	lambda: make_product_group([Z2, 3]),
	lambda: Permutation([0, 0]),
	lambda: Permutation([1, 2]),
	lambda: Permutation(['a']),
	lambda: IntegerResidue(0, 0),
	lambda: IntegerResidue(1.5, 2),
	lambda: Tuple(),
	lambda: Tuple(Z2[0], 1),
	lambda: Permutation([True, False]),
	lambda: Permutation([1, 0]).extend(1),
	lambda: Permutation([1, 0]).extend(3.0),
])
def test_invalid_argument(build):
	with pytest.raises(InvalidArgument):
		build()

def test_invalid_argument_is_value_error():
	with pytest.raises(ValueError):
		make_product_group([])


# composition

def test_permutation_multiply():
	assert Permutation([1, 0]).multiply(Permutation([1, 0])) == Permutation([0, 1])
	a, b = Permutation([1, 2, 0]), Permutation([1, 0, 2])
	# b is applied first
	assert (a * b).mapping == (2, 1, 0)
	assert (b * a).mapping == (0, 2, 1)
	assert a.mapping == (1, 2, 0) and b.mapping == (1, 0, 2)

def test_residue_multiply():
	assert IntegerResidue(2, 3).multiply(IntegerResidue(2, 3)) == IntegerResidue(1, 3)
	assert Z3[2] * Z3[2] == Z3[1]
	assert IntegerResidue(-1, 3).value == 2

def test_tuple_multiply():
	x = Tuple(IntegerResidue(1, 2), Permutation([1, 0, 2]))
	y = Tuple(IntegerResidue(1, 2), Permutation([0, 2, 1]))
	assert x * y == Tuple(IntegerResidue(0, 2), Permutation([1, 2, 0]))

def test_type_mismatch():
	with pytest.raises(TypeMismatch):
		Permutation([0, 1]).multiply(IntegerResidue(0, 2))
	with pytest.raises(TypeMismatch):
		IntegerResidue(0, 2).multiply(Tuple(IntegerResidue(0, 2)))
	with pytest.raises(TypeMismatch):
		Permutation([0, 1]).multiply([0, 1])
	with pytest.raises(TypeMismatch):
		Tuple(Z2[1]).multiply(Tuple(S3[1]))
	with pytest.raises(TypeError):
		Permutation([0, 1]) * 2

def test_size_mismatch():
	with pytest.raises(SizeMismatch):
		Permutation([0, 1, 2]).multiply(Permutation([0, 1]))
	with pytest.raises(SizeMismatch):
		IntegerResidue(1, 2).multiply(IntegerResidue(1, 3))
	with pytest.raises(SizeMismatch):
		Tuple(Z2[1]).multiply(Tuple(Z2[1], Z2[0]))
	with pytest.raises(SizeMismatch):
		Tuple(Z2[1], S3[1]).multiply(Tuple(Z2[1], S4[1]))

def test_composition_errors():
	assert issubclass(TypeMismatch, CompositionError) and issubclass(TypeMismatch, TypeError)
	assert issubclass(SizeMismatch, CompositionError) and issubclass(SizeMismatch, ValueError)
	assert issubclass(CompositionError, GroupError)

@given(st.sampled_from(S4.elements()), st.sampled_from(S4.elements()), st.sampled_from(S4.elements()))
def test_associativity(a, b, c):
	assert a.multiply(b).multiply(c) == a.multiply(b.multiply(c))

@given(st.sampled_from(make_product_group([Z3, S3]).elements()), st.integers(-10, 10))
def test_tuple_powers(a, k):
	assert a ** k == Tuple(*( c ** k for c in a ))

def test_inverses():
	for p in S3:
		assert sum(p * q == S3.ID for q in S3) == 1
		assert p * p.inv == p.inv * p == S3.ID
		assert p ** -1 == p.inv

def test_multiplication_table():
	assert Z3.multiplication_table() == ((0, 1, 2), (1, 2, 0), (2, 0, 1))
	table = S3.multiplication_table()
	for i, j in itertools.product(range(6), repeat=2):
		assert S3[table[i][j]] == S3[i] * S3[j]


# elements

def test_repr():
	assert repr(Permutation([0, 2, 1])) == 'Permutation[0,2,1]'
	assert repr(IntegerResidue(1, 2)) == 'IntegerResidue(1 mod 2)'
	assert repr(Tuple(IntegerResidue(1, 2), Permutation([0, 2, 1]))) == \
		'Tuple(IntegerResidue(1 mod 2), Permutation[0,2,1])'

def test_equality():
	assert Permutation([0, 1]) != IntegerResidue(0, 2)
	assert IntegerResidue(1, 2) != IntegerResidue(1, 3)
	assert Tuple(Z2[1]) == Tuple(IntegerResidue(1, 2))
	assert len({Permutation((1, 0)), Permutation([1, 0])}) == 1

def test_permutation():
	S5 = make_symmetric_group(5)
	for a in S5:
		assert a ** a.order() == S5.ID
		assert all(a ** k for k in range(1, a.order()))
		x = S5.ID
		for k in range(6):
			assert a ** k == x and a ** -k == x.inv
			x = x * a
	assert Permutation([1, 2, 0, 4, 3, 5]).order() == 6
	assert Permutation([]).order() == 1

def test_permutation_extend():
	p = Permutation([1, 2, 0])
	assert p.extend(5) == Permutation([1, 2, 0, 3, 4])
	assert p.extend(3) == p
	assert Permutation([]).extend(2) == Permutation([0, 1])
	q = Permutation([0, 2, 1])
	assert (p * q).extend(4) == p.extend(4) * q.extend(4)

def generated(gens, identity):
	seen, pending = {identity}, [identity]
	while pending:
		x = pending.pop()
		for g in gens:
			if (y := g * x) not in seen:
				seen.add(y)
				pending.append(y)
	return seen

@pytest.mark.parametrize('n', range(6))
def test_generators(n):
	G = make_symmetric_group(n)
	gens = G.generators
	assert all(g in G for g in gens)
	assert generated(gens, G.ID) == set(G)

def test_generators_shape():
	assert S3.generators == (Permutation([1, 0, 2]), Permutation([2, 0, 1]))
	assert make_symmetric_group(2).generators == (Permutation([1, 0]),)
	assert make_symmetric_group(1).generators == ()

def test_is_abelian():
	assert Z3.is_abelian and make_cyclic_group(12).is_abelian
	assert make_symmetric_group(2).is_abelian and make_symmetric_group(0).is_abelian
	assert not S3.is_abelian
	assert make_product_group([Z2, Z3]).is_abelian
	assert not make_product_group([Z2, S3]).is_abelian

def test_residue():
	Z12 = make_cyclic_group(12)
	assert Z12.G.value == 1
	assert [x.order() for x in Z12][:5] == [1, 12, 6, 4, 3]
	assert Z12[5] ** 3 == Z12[3]
	assert Z12[5].inv == Z12[7]
	for k in range(-13, 14):
		assert Z12[5] ** k == Element._pow(Z12[5], k)
	assert CyclicGroup(1).G == CyclicGroup(1).ID

def test_tuple_order():
	x = Tuple(IntegerResidue(1, 2), Permutation([1, 2, 0]))
	assert x.order() == 6
	assert x.identity() == Tuple(IntegerResidue(0, 2), Permutation([0, 1, 2]))


# groups

def test_group_indexing():
	with pytest.raises(IndexError):
		S3[6]
	with pytest.raises(IndexError):
		S3[-1]
	with pytest.raises(TypeError):
		S3['0']
	with pytest.raises(TypeError):
		S3[True]
	with pytest.raises(InvalidArgument):
		S3.index(Permutation([0, 1]))
	assert Permutation([0, 1]) not in S3
	assert IntegerResidue(0, 3) not in Z2
	assert Tuple(Z2[0], S4[0]) not in make_product_group([Z2, S3])

def test_group_repr():
	assert repr(S3) == 'SymmetricGroup(3)'
	assert repr(make_product_group([Z2, S3])) == 'DirectProduct(CyclicGroup(2), SymmetricGroup(3))'

def test_module_attributes():
	assert not hasattr(finite_groups, 'Z0')
	assert not hasattr(finite_groups, 'S20')
	assert set(finite_groups.__all__) <= set(dir(finite_groups))


# logging

def test_construction_logging(caplog):
	with caplog.at_level(logging.DEBUG, logger='finite_groups'):
		make_cyclic_group(4)
	assert 'constructed CyclicGroup(4) with 4 elements' in caplog.messages

def test_large_carrier_warning(caplog, monkeypatch):
	monkeypatch.setattr(Group, 'WARN_ORDER', 10)
	with caplog.at_level(logging.WARNING, logger='finite_groups'):
		make_symmetric_group(3)
		assert not caplog.records
		G = make_symmetric_group(4)
	assert len(G) == 24
	assert [r.levelname for r in caplog.records] == ['WARNING']
	assert 'SymmetricGroup(4)' in caplog.records[0].getMessage()
