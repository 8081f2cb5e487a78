from typing import Self
from abc import ABC, abstractmethod
from typing import ClassVar, Iterator, Iterable, Any, Sequence
import itertools
import logging
import math

logger = logging.getLogger(__name__)

__all__ = [
	'GroupError', 'InvalidArgument', 'CompositionError', 'TypeMismatch', 'SizeMismatch',
	'Element', 'Permutation', 'IntegerResidue', 'Tuple',
	'Group', 'SymmetricGroup', 'CyclicGroup', 'DirectProduct',
	'make_symmetric_group', 'make_cyclic_group', 'make_product_group',
]


# ERRORS
# ------

class GroupError(Exception):
	''' base class for every error raised by this module '''

class InvalidArgument(GroupError, ValueError):
	''' malformed construction parameters (bad size, modulus, mapping, empty product...) '''

class CompositionError(GroupError):
	''' base class for failures of `Element.multiply()` '''

class TypeMismatch(CompositionError, TypeError):
	''' multiply was invoked across incompatible element variants '''

class SizeMismatch(CompositionError, ValueError):
	''' multiply was invoked on same-variant operands with different size, modulus or arity '''

def _is_int(x: Any) -> bool:
	return isinstance(x, int) and not isinstance(x, bool)

def _check_int(name: str, x: Any, minimum: int):
	if not _is_int(x):
		raise InvalidArgument(f'{name} must be an int, not {type(x).__name__}')
	if x < minimum:
		raise InvalidArgument(f'{name} must be at least {minimum}, got {x}')


# ELEMENT
# -------

class Element(ABC):
	'''
	Base class for group elements.

	the set of variants is closed: `Permutation`, `IntegerResidue` and `Tuple`.
	elements are immutable value objects, they are hashable and compare
	by value. two elements of different variants never compare equal and
	never compose.
	'''

	def __repr__(self):
		'''
		returns `Variant<value repr>`, which is deterministic and tells
		variants apart, e.g. `Permutation[0,2,1]` or `IntegerResidue(1 mod 2)`.
		'''
		return type(self).__name__ + self.value_repr()

	@abstractmethod
	def value_repr(self) -> str:
		''' full representation of the value, appended to the variant name by `__repr__` '''

	# core group operations

	@abstractmethod
	def _id(self) -> Self:
		''' the identity element with the same shape as this one

		internal method; users should use `identity()` '''

	@abstractmethod
	def _check_compatible(self, other: Self):
		''' raise SizeMismatch if `other` (same variant) can't be composed with this element '''

	@abstractmethod
	def _mul(self, other: Self) -> Self:
		''' the group operation

		internal method; users should use `multiply()` or the `*` operator,
		which validate the other operand first. '''

	@property
	@abstractmethod
	def inv(self) -> Self:
		''' inverse element. equivalent to the notation `x ** -1` '''

	@abstractmethod
	def order(self) -> int:
		''' lowest non-zero natural `k` satisfying `self ** k == identity()` '''

	def identity(self) -> Self:
		return self._id()

	def multiply(self, other: 'Element') -> Self:
		'''
		composes this element with `other` and returns a new element.

		raises TypeMismatch if `other` is not an element of the same variant,
		and SizeMismatch if both are of the same variant but have a different
		shape (permutation size, modulus or tuple arity). operands are never
		coerced and never modified.
		'''
		if not isinstance(other, Element):
			raise TypeMismatch(f'cannot multiply {type(self).__name__} by non-element {other!r}')
		if type(other) is not type(self):
			raise TypeMismatch(f'cannot multiply {type(self).__name__} by {type(other).__name__}')
		self._check_compatible(other)
		return self._mul(other)

	def _pow(self, x: int) -> Self:
		'''
		integer power by repeated squaring over the bits of `|x|`, starting
		from the inverse when `x` is negative.

		internal method; users should use `self ** x`.
		'''
		base = self.inv if x < 0 else self
		result = self.identity()
		for bit in reversed(bin(abs(x))[2:]):
			if bit == '1':
				result = result * base
			base = base * base
		return result

	# comparison / equality / hashing

	@abstractmethod
	def _cmpkey(self):
		''' internal method to return the key equality and hashing delegate to '''

	def __hash__(self):
		return hash(self._cmpkey())

	def __eq__(self, other: Self):
		if type(other) is not type(self):
			return NotImplemented
		return self._cmpkey() == other._cmpkey()

	# operators

	def __bool__(self):
		return self != self.identity()

	def __mul__(self, other: 'Element') -> Self:
		if isinstance(other, Element):
			return self.multiply(other)
		return NotImplemented

	def __pow__(self, other: int) -> Self:
		if not _is_int(other):
			return NotImplemented
		return self.inv if other == -1 else self._pow(other)


class Permutation(Element):
	'''
	bijection of N_n onto itself, stored as a lookup table: `mapping[i]` is
	the image of `i`.

	`a * b` is the composition `a ∘ b` of the associated functions
	(b is performed first, then a).
	'''

	_value: tuple[int, ...]

	@property
	def mapping(self) -> tuple[int, ...]:
		return self._value

	@property
	def size(self) -> int:
		return len(self._value)

	def __init__(self, mapping: Iterable[int]):
		value = tuple(mapping)
		if not all(map(_is_int, value)) or sorted(value) != list(range(len(value))):
			raise InvalidArgument(f'{value!r} is not a permutation of range({len(value)})')
		self._value = value

	def extend(self, size: int) -> Self:
		'''
		embeds this permutation into the permutations of N_size, acting
		trivially on the points it doesn't move (`size..` are fixed).
		'''
		_check_int('size', size, self.size)
		return type(self)(self._value + tuple(range(self.size, size)))

	def _cmpkey(self):
		return self._value

	def value_repr(self):
		return '[' + ','.join(map(str, self._value)) + ']'

	# group operations

	def _id(self):
		return type(self)(range(self.size))

	def _check_compatible(self, other: Self):
		if self.size != other.size:
			raise SizeMismatch(f'cannot multiply permutations of size {self.size} and {other.size}')

	def _mul(self, other: Self) -> Self:
		return type(self)( self._value[j] for j in other._value )

	@property
	def inv(self) -> Self:
		result = [0] * self.size
		for i, j in enumerate(self._value):
			result[j] = i
		return type(self)(result)

	def order(self) -> int:
		# lcm of the orbit lengths
		result, seen = 1, set()
		for start in range(self.size):
			length, cursor = 0, start
			while cursor not in seen:
				seen.add(cursor)
				cursor = self._value[cursor]
				length += 1
			if length:
				result = math.lcm(result, length)
		return result


class IntegerResidue(Element):
	''' residue modulo `modulus`, under addition '''

	_value: int
	_modulus: int

	@property
	def value(self) -> int:
		''' canonical representative, in `[0, modulus)` '''
		return self._value

	@property
	def modulus(self) -> int:
		return self._modulus

	def __init__(self, value: int, modulus: int):
		_check_int('modulus', modulus, 1)
		if not _is_int(value):
			raise InvalidArgument(f'object {value!r} is not an int')
		self._modulus = modulus
		self._value = value % modulus

	def _cmpkey(self):
		return (self._value, self._modulus)

	def value_repr(self) -> str:
		return f'({self._value} mod {self._modulus})'

	# group operations

	def _id(self) -> Self:
		return type(self)(0, self._modulus)

	def _check_compatible(self, other: Self):
		if self._modulus != other._modulus:
			raise SizeMismatch(f'cannot multiply residues modulo {self._modulus} and {other._modulus}')

	def _mul(self, other: Self) -> Self:
		return type(self)(self._value + other._value, self._modulus)

	@property
	def inv(self):
		return type(self)(-self._value, self._modulus)

	def _pow(self, x: int):
		return type(self)(self._value * x, self._modulus)

	def order(self) -> int:
		return self._modulus // math.gcd(self._modulus, self._value)


class Tuple(Element):
	'''
	element of a direct product: one element per factor, positionally aligned

	composition is componentwise; errors raised by a component propagate as is.
	'''

	_value: tuple[Element, ...]

	@property
	def components(self) -> tuple[Element, ...]:
		return self._value

	def __init__(self, *components: Element):
		if not components:
			raise InvalidArgument('a tuple needs at least one component')
		for x in components:
			if not isinstance(x, Element):
				raise InvalidArgument(f'component {x!r} is not an element')
		self._value = components

	def _cmpkey(self):
		return self._value

	def value_repr(self):
		return '(' + ', '.join(map(repr, self._value)) + ')'

	def __len__(self):
		return len(self._value)

	def __getitem__(self, j: int) -> Element:
		return self._value[j]

	def __iter__(self) -> Iterator[Element]:
		return iter(self._value)

	# group operations

	def _id(self):
		return type(self)(*( a.identity() for a in self ))

	def _check_compatible(self, other: Self):
		if len(self) != len(other):
			raise SizeMismatch(f'cannot multiply tuples of arity {len(self)} and {len(other)}')

	def _mul(self, other: Self) -> Self:
		return type(self)(*( a.multiply(b) for a, b in zip(self, other) ))

	@property
	def inv(self) -> Self:
		return type(self)(*( a.inv for a in self ))

	def order(self) -> int:
		return math.lcm(*( a.order() for a in self ))


# GROUP
# -----

class Group(ABC):
	'''
	Base class for finite groups.

	a group is fully materialized when constructed: its carrier (the tuple of all
	its elements) is enumerated once, through a bijection between `range(ORDER)`
	and the elements, and never changes afterwards. index 0 is always the identity.

	the group gives sequence syntax to the bijection (`len(G)`, `G[i]`, `iter(G)`,
	`x in G`), and `G.index(x)` is its inverse.
	'''

	WARN_ORDER: ClassVar[int] = 1_000_000
	''' carriers bigger than this are still built, but a warning is logged first '''

	_elements: tuple[Element, ...]

	def __init__(self):
		order = self._order()
		if order > self.WARN_ORDER:
			logger.warning('materializing %d elements for %r, this may take a while', order, self)
		self._elements = tuple(map(self._fromindex, range(order)))
		logger.debug('constructed %r with %d elements', self, order)

	# the bijection with range(ORDER); all of the following methods must
	# expose the same bijection and be consistent with each other:

	@abstractmethod
	def _order(self) -> int:
		''' returns the order of the group (amount of elements it has)

		internal method; users should use `G.ORDER` or `len(G)` instead '''

	@abstractmethod
	def _fromindex(self, x: int) -> Element:
		''' builds the element corresponding to natural `x`, used to enumerate the carrier

		internal method; users should use `G[x]` which validates it's an integer
		representing a valid index and returns the stored element. '''

	@abstractmethod
	def _accepts(self, x: Any) -> bool:
		''' whether `x` is an element of this group '''

	@abstractmethod
	def _index(self, x: Element) -> int:
		''' returns the natural corresponding to element `x`, which is known to be accepted

		internal method; users should use `G.index(x)` instead. '''

	# public interface

	def elements(self) -> tuple[Element, ...]:
		''' the carrier of the group, in index order '''
		return self._elements

	@property
	def ORDER(self) -> int:
		return len(self._elements)

	@property
	def ID(self) -> Element:
		''' the group's identity element '''
		return self._elements[0]

	@property
	def is_abelian(self) -> bool:
		''' whether every pair of elements commutes '''
		return all(a * b == b * a for a, b in itertools.combinations(self._elements, 2))

	def index(self, x: Element) -> int:
		''' position of `x` in the carrier; raises InvalidArgument if it isn't there '''
		if not self._accepts(x):
			raise InvalidArgument(f'{x!r} is not an element of {self!r}')
		return self._index(x)

	def multiplication_table(self) -> tuple[tuple[int, ...], ...]:
		''' indices of all products: `table[i][j] == G.index(G[i] * G[j])` '''
		return tuple( tuple( self._index(a * b) for b in self ) for a in self )

	def __len__(self) -> int:
		return len(self._elements)

	def __getitem__(self, index: int) -> Element:
		if not _is_int(index):
			raise TypeError(f'element indices must be integers, not {type(index)}')
		if not (0 <= index < len(self._elements)):
			raise IndexError(f'element index {index} out of range')
		return self._elements[index]

	def __iter__(self) -> Iterator[Element]:
		return iter(self._elements)

	def __contains__(self, x: Any) -> bool:
		return self._accepts(x)


# CYCLIC GROUP
# ------------

class CyclicGroup(Group):
	''' finite cyclic group (N_n), as residues modulo n under addition '''

	def __init__(self, n: int):
		_check_int('cyclic group order', n, 1)
		self._size = n
		super().__init__()

	@property
	def SIZE(self) -> int:
		''' order of the group (the modulus of its residues) '''
		return self._size

	def __repr__(self):
		return f'{type(self).__name__}({self._size})'

	@property
	def G(self) -> IntegerResidue:
		''' generator of the group (value 1) '''
		return self[1 % self._size]

	# bijection

	def _order(self):
		return self._size

	def _fromindex(self, x: int):
		return IntegerResidue(x, self._size)

	def _accepts(self, x: Any) -> bool:
		return isinstance(x, IntegerResidue) and x.modulus == self._size

	def _index(self, x: IntegerResidue) -> int:
		return x.value


# SYMMETRIC GROUP
# ---------------

class SymmetricGroup(Group):
	'''
	symmetric group (over N_n)

	the implemented bijection is the little-endian factorial number system
	(Lehmer code): the index is split into digits of place values n, n-1, ..., 1,
	least significant first, and each digit picks one of the values not used
	yet, in ascending order. it maps ID to 0:

		0 → (0, 1, 2), 1 → (1, 0, 2), 2 → (2, 0, 1), 3 → (0, 2, 1), ...
	'''

	def __init__(self, n: int):
		_check_int('symmetric group size', n, 0)
		self._size = n
		super().__init__()

	@property
	def SIZE(self) -> int:
		''' size of underlying set '''
		return self._size

	def __repr__(self):
		return f'{type(self).__name__}({self._size})'

	@property
	def generators(self) -> tuple[Permutation, ...]:
		'''
		standard generating set: the transposition of 0 and 1, followed by
		the n-cycle `i → i - 1 (mod n)`. for n = 2 both coincide and only
		one is returned; for n < 2 the group is trivial and this is empty.
		'''
		n = self._size
		if n < 2:
			return ()
		swap = Permutation([1, 0]).extend(n)
		cycle = Permutation( (i - 1) % n for i in range(n) )
		return (swap,) if swap == cycle else (swap, cycle)

	# bijection

	def _order(self):
		return math.factorial(self._size)

	def _fromindex(self, index: int):
		options = list(range(self._size))
		value = []
		for radix in range(self._size, 0, -1):
			index, digit = divmod(index, radix)
			value.append(options.pop(digit))
		return Permutation(value)

	def _accepts(self, x: Any) -> bool:
		return isinstance(x, Permutation) and x.size == self._size

	def _index(self, x: Permutation) -> int:
		index = 0; weight = 1; seen = 0
		for i, j in enumerate(x.mapping):
			digit = j - (seen & ((1 << j) - 1)).bit_count()
			seen |= 1 << j
			index += digit * weight
			weight *= self._size - i
		return index


# DIRECT PRODUCT
# --------------

class DirectProduct(Group):
	'''
	direct product of groups, with `Tuple` elements

	the implemented bijection is a mixed-radix number system where the digit
	for each part is an index into that part, and the first part is the least
	significant digit. components of the elements are the same objects held by
	the parts.

	the empty product is rejected, at least one part must be given.
	'''

	def __init__(self, *parts: Group):
		if not parts:
			raise InvalidArgument('a direct product needs at least one group')
		for g in parts:
			if not isinstance(g, Group):
				raise InvalidArgument(f'{g!r} is not a group')
		self._parts = parts
		super().__init__()

	@property
	def PARTS(self) -> tuple[Group, ...]:
		''' group for each component of the product '''
		return self._parts

	def __repr__(self):
		return f'{type(self).__name__}(' + ', '.join(map(repr, self._parts)) + ')'

	# bijection

	def _order(self):
		return math.prod(map(len, self._parts))

	def _fromindex(self, index: int):
		result = []
		for g in self._parts:
			index, x = divmod(index, len(g))
			result.append(g[x])
		return Tuple(*result)

	def _accepts(self, x: Any) -> bool:
		return isinstance(x, Tuple) and len(x) == len(self._parts) and \
			all(c in g for g, c in zip(self._parts, x))

	def _index(self, x: Tuple) -> int:
		index = 0
		for g, c in zip(reversed(self._parts), reversed(x.components)):
			index = index * len(g) + g._index(c)
		return index


# CONSTRUCTORS
# ------------

def make_symmetric_group(n: int) -> SymmetricGroup:
	''' builds S_n, with all n! permutations of N_n '''
	return SymmetricGroup(n)

def make_cyclic_group(n: int) -> CyclicGroup:
	''' builds the cyclic group of order n, as the residues modulo n '''
	return CyclicGroup(n)

def make_product_group(groups: Sequence[Group]) -> DirectProduct:
	''' builds the direct product of a non-empty sequence of groups '''
	return DirectProduct(*groups)
