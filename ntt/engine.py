import heapq
from numbers import Integral

import galois
import numpy as np

from .constants import FFT_CUTOFF
from .mod_int import ModInt, ModularInt, mod_int_class
from .utils import is_power_of_two, next_power_of_two, get_length, get_two_adicity

U64_MAX = np.iinfo(np.uint64).max
I64_MAX = np.iinfo(np.int64).max


class NTTEngine:
    """
    Number-theoretic transform over the prime modulus of `field`.

    The engine memoizes the root-of-unity table and the last bit-reversal
    permutation, so one instance should be reused across calls. The cache is
    mutated without locking: use one engine per thread.
    """

    @classmethod
    def from_parameters(cls, parameters):
        return cls(
            mod_int_class(parameters.modulus),
            fft_cutoff=parameters.fft_cutoff,
            verbose=parameters.verbose,
        )

    def __init__(self, field=ModInt, fft_cutoff=FFT_CUTOFF, verbose=False):
        self.field = field
        self.fft_cutoff = fft_cutoff
        self.verbose = verbose
        self.reset()

    @property
    def modulus(self):
        return self.field.MODULUS

    def reset(self):
        self.roots = [self.field(0), self.field(1)]
        self.bit_reverse = []
        self.max_size = -1
        self.root = None

    def bit_reorder(self, n, values):
        """Permutes `values` in place into bit-reversed index order; the table is rebuilt when n changes."""
        if len(self.bit_reverse) != n:
            length = get_length(n)
            bit_reverse = [0] * n
            for i in range(1, n):
                bit_reverse[i] = (bit_reverse[i >> 1] >> 1) | ((i & 1) << (length - 1))
            self.bit_reverse = bit_reverse

        for i, j in enumerate(self.bit_reverse):
            if i < j:
                values[i], values[j] = values[j], values[i]

    def find_root(self):
        self.max_size = 1 << get_two_adicity(self.modulus)

        # smallest candidate of exact order max_size
        root = self.field(1 if self.max_size == 1 else 2)
        if self.max_size > 1:
            while not (
                root.pow(self.max_size) == 1 and root.pow(self.max_size // 2) != 1
            ):
                root += 1
        self.root = root

        if self.verbose:
            print(f"max transform size {self.max_size}, primitive root {self.root}")

    def prepare_roots(self, n):
        if self.max_size < 0:
            self.find_root()

        if n <= 0 or not is_power_of_two(n):
            raise ValueError(f"transform size {n} is not a positive power of two")
        if n > self.max_size:
            raise ValueError(
                f"transform size {n} exceeds {self.max_size}, "
                f"the largest supported modulo {self.modulus}"
            )

        if len(self.roots) >= n:
            return

        length = get_length(len(self.roots))
        self.roots.extend([self.field(0)] * (n - len(self.roots)))
        if self.verbose:
            print(f"extending roots table to {n}")

        # roots[n // 2 + k] == w_n ** k for every power of two n and k < n // 2
        while 1 << length < n:
            # generator of the next level, of order 2 ** (length + 1)
            z = self.root.pow(self.max_size >> (length + 1))

            for i in range(1 << (length - 1), 1 << length):
                self.roots[2 * i] = self.roots[i]
                self.roots[2 * i + 1] = self.roots[i] * z

            length += 1

    @staticmethod
    def _check_transform(N, values):
        if N <= 0 or not is_power_of_two(N):
            raise ValueError(f"transform size {N} is not a positive power of two")
        if len(values) != N:
            raise ValueError(f"expected {N} values, got {len(values)}")

    def fft_iterative(self, N, values):
        self._check_transform(N, values)

        self.prepare_roots(N)
        self.bit_reorder(N, values)
        roots = self.roots

        n = 1
        while n < N:
            for start in range(0, N, 2 * n):
                for i in range(n):
                    even = values[start + i]
                    odd = values[start + n + i] * roots[n + i]
                    values[start + n + i] = even - odd
                    values[start + i] = even + odd
            n *= 2

    def invert_fft(self, N, values):
        self._check_transform(N, values)
        self.prepare_roots(N)
        inv_N = self.field(N).inverse()

        for i in range(N):
            values[i] *= inv_N

        values[1:] = values[:0:-1]
        self.fft_iterative(N, values)

    def _lift(self, values):
        if isinstance(values, galois.FieldArray):
            self._check_field_array(values)
            return [self.field(int(x)) for x in values]

        lifted = []
        for x in values:
            if isinstance(x, ModularInt):
                if x.MODULUS != self.modulus:
                    raise TypeError(
                        f"coefficient modulo {x.MODULUS} given to an engine modulo {self.modulus}"
                    )
                lifted.append(x)
            elif isinstance(x, galois.FieldArray):
                self._check_field_array(x)
                lifted.append(self.field(int(x)))
            else:
                lifted.append(self.field(x))
        return lifted

    def _lower(self, values, like):
        """Converts ModularInt coefficients back to the numeric type of `like`."""
        if isinstance(like, galois.FieldArray):
            return type(like)(self._as_array([x.value for x in values]))
        if isinstance(like, np.ndarray):
            return self._as_array([x.value for x in values])
        if len(like) > 0 and isinstance(like[0], ModularInt):
            return list(values)
        return [x.value for x in values]

    def _as_array(self, ints):
        dtype = np.int64 if self.modulus <= I64_MAX else object
        return np.array(ints, dtype=dtype)

    def _check_field_array(self, values):
        order = type(values).order
        if order != self.modulus:
            raise ValueError(
                f"field array over GF({order}) given to an engine modulo {self.modulus}"
            )

    def multiply(self, left, right, circular=False):
        """
        Multiplies two polynomials given as coefficient sequences, constant term first.

        The product keeps all `len(left) + len(right) - 1` coefficients (trailing zeros
        are not trimmed) and comes back in the numeric type of `left`: plain ints,
        ModularInt values, a numpy array or a galois FieldArray.

        With `circular=True` the output has the smallest power-of-two length covering
        both operands and indices wrap modulo that length; the fully overlapping
        coefficients are still exact and the transform is half the size.
        """
        if isinstance(right, galois.FieldArray):
            self._check_field_array(right)
        return self._lower(
            self._multiply(self._lift(left), self._lift(right), circular), left
        )

    def _multiply(self, left, right, circular=False):
        if not left or not right:
            return []

        n = len(left)
        m = len(right)

        output_size = next_power_of_two(max(n, m)) if circular else n + m - 1

        # short operands: the direct convolution is cheaper than three transforms
        if min(n, m) < self.fft_cutoff:
            if self.verbose:
                print(f"brute force multiply {n} x {m}")
            return self._multiply_brute_force(left, right, output_size)

        N = next_power_of_two(output_size)
        if self.verbose:
            print(f"transform multiply {n} x {m}, size {N}")

        zero = self.field(0)
        left = left + [zero] * (N - n)
        right = right + [zero] * (N - m)

        if left == right:
            self.fft_iterative(N, left)
            right = list(left)
        else:
            self.fft_iterative(N, left)
            self.fft_iterative(N, right)

        for i in range(N):
            left[i] *= right[i]

        self.invert_fft(N, left)
        return left[:output_size]

    def _multiply_brute_force(self, left, right, output_size):
        modulus = self.modulus

        # cells stay <= bound between rows, so one more product never overflows
        if modulus * modulus <= U64_MAX:
            dtype = np.uint64
            bound = np.uint64(U64_MAX - modulus * modulus)
            modulus = np.uint64(modulus)
        else:
            dtype = object
            bound = None

        a = np.array([x.value for x in left], dtype=dtype)
        b = np.array([x.value for x in right], dtype=dtype)
        result = np.zeros(output_size, dtype=dtype)

        offsets = np.arange(len(b))
        for i in range(len(a)):
            index = offsets + i
            index[index >= output_size] -= output_size
            result[index] += a[i] * b

            if bound is not None:
                overflow = index[result[index] > bound]
                result[overflow] %= modulus

        result %= modulus
        return [self.field(int(x)) for x in result]

    def power(self, v, exponent):
        """Raises the polynomial `v` to a non-negative integer power by repeated squaring."""
        if not isinstance(exponent, (Integral, np.integer)):
            raise TypeError(f"polynomial exponent must be an integer, got {exponent!r}")
        exponent = int(exponent)
        if exponent < 0:
            raise ValueError(f"polynomial exponent must be non-negative, got {exponent}")

        result = [self.field(1)]
        if exponent == 0:
            return self._lower(result, v)

        base = self._lift(v)
        for k in range(exponent.bit_length() - 1, -1, -1):
            result = self._multiply(result, result)

            if exponent >> k & 1:
                result = self._multiply(result, base)

        return self._lower(result, v)

    def multiply_all(self, polynomials):
        """
        Multiplies a batch of polynomials, always combining the two shortest first.

        Keeping operands balanced this way does less work than folding left to right,
        since each multiplication costs roughly the product of the operand lengths.
        """
        polynomials = list(polynomials)
        if not polynomials:
            return [1]

        heap = [(len(p), i, self._lift(p)) for i, p in enumerate(polynomials)]
        heapq.heapify(heap)
        counter = len(heap)

        while len(heap) > 1:
            _, _, a = heapq.heappop(heap)
            _, _, b = heapq.heappop(heap)
            product = self._multiply(a, b)
            heapq.heappush(heap, (len(product), counter, product))
            counter += 1

        return self._lower(heap[0][2], polynomials[0])
