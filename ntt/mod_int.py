import functools
from numbers import Integral

import galois
import numpy as np

from .constants import MOD


@functools.total_ordering
class ModularInt:
    """
    An integer modulo a fixed prime.

    The modulus is a class attribute, not per-instance state: every modulus gets
    its own subclass from `mod_int_class`, in the same way `galois.GF(p)` hands
    out one FieldArray class per field. Instances are immutable values with
    `0 <= value < MODULUS`.
    """

    MODULUS = None
    __slots__ = ("value",)

    def __init__(self, v=0):
        m = self.MODULUS
        if isinstance(v, ModularInt):
            v = v.value
        elif not isinstance(v, (Integral, np.integer)):
            raise TypeError(f"expected an integer, got {v!r}")
        v = int(v)
        if v < 0:
            v = v % m + m
        if v >= m:
            v %= m
        self.value = v

    @classmethod
    def _canonical(cls, v):
        # v is already in [0, MODULUS)
        element = cls.__new__(cls)
        element.value = v
        return element

    @classmethod
    def reduce(cls, x):
        return x % cls.MODULUS

    @staticmethod
    def mod_inv(a, m):
        g, r, x, y = m, a % m, 0, 1

        while r != 0:
            q = g // r
            g, r = r, g % r
            x, y = y, x - q * y

        if g != 1:
            raise ZeroDivisionError(f"{a} is not invertible modulo {m}")
        return x + m if x < 0 else x

    def _coerce(self, other):
        cls = type(self)
        if isinstance(other, cls):
            return other
        if isinstance(other, ModularInt):
            raise TypeError(
                f"cannot mix modulus {cls.MODULUS} with modulus {other.MODULUS}"
            )
        if isinstance(other, (Integral, np.integer)):
            return cls(other)
        return NotImplemented

    def __add__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        v = self.value - (self.MODULUS - other.value)
        if v < 0:
            v += self.MODULUS
        return self._canonical(v)

    __radd__ = __add__

    def __sub__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        v = self.value - other.value
        if v < 0:
            v += self.MODULUS
        return self._canonical(v)

    def __rsub__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return other - self

    def __mul__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return self._canonical(self.reduce(self.value * other.value))

    __rmul__ = __mul__

    def __truediv__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return self * other.inverse()

    def __rtruediv__(self, other):
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return other * self.inverse()

    def __neg__(self):
        return self._canonical(0 if self.value == 0 else self.MODULUS - self.value)

    def __pow__(self, exponent):
        return self.pow(exponent)

    def inverse(self):
        if self.value == 0:
            raise ZeroDivisionError(f"0 has no inverse modulo {self.MODULUS}")
        return self._canonical(self.mod_inv(self.value, self.MODULUS))

    def pow(self, p):
        if not isinstance(p, (Integral, np.integer)):
            raise TypeError(f"exponent must be an integer, got {p!r}")
        p = int(p)
        if p < 0:
            return self.inverse().pow(-p)

        a, result = self, self._canonical(1 % self.MODULUS)
        while p > 0:
            if p & 1:
                result *= a
            a *= a
            p >>= 1

        return result

    def __eq__(self, other):
        if isinstance(other, ModularInt):
            return self.MODULUS == other.MODULUS and self.value == other.value
        if isinstance(other, (Integral, np.integer)):
            return self.value == int(other)
        return NotImplemented

    def __lt__(self, other):
        if isinstance(other, (Integral, np.integer)):
            return self.value < int(other)
        other = self._coerce(other)
        if other is NotImplemented:
            return other
        return self.value < other.value

    def __hash__(self):
        return hash(self.value)

    def __int__(self):
        return self.value

    def __bool__(self):
        return self.value != 0

    def __str__(self):
        return str(self.value)

    def __repr__(self):
        return f"{type(self).__name__}({self.value})"


@functools.lru_cache(maxsize=None)
def mod_int_class(modulus):
    """Returns the ModularInt subclass for `modulus`, creating it on first use."""
    modulus = int(modulus)
    if modulus < 2 or not galois.is_prime(modulus):
        raise ValueError(f"modulus {modulus} is not prime")
    return type(
        f"ModInt{modulus}", (ModularInt,), {"MODULUS": modulus, "__slots__": ()}
    )


ModInt = mod_int_class(MOD)
