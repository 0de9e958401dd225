"""
A hash table for large numbers of floating point values.

Holding hundreds of thousands of floats in a ``dict`` means hundreds of
thousands of boxed keys and values. :class:`Float64Table` instead keeps
unsigned 32-bit keys and double values in two flat arrays and resolves
collisions with linear probing. It has a configurable maximum size. Once the
table would need to grow beyond that size, it evicts about half of its entries
at random instead. That makes it suitable as a bounded cache of values that are
equally expensive to recompute.
"""
from array import array
from collections.abc import Iterator, MutableMapping
import logging
import random


logger = logging.getLogger(__name__)

_PHI32 = int(0.61803398874989484820458683436563811772030917980575 * 2**32) | 1
_MASK32 = 0xFFFF_FFFF

# Resize above 83% load for tables with 16k or more slots
_LOAD_SIZE = 16 * 1024
_LOAD_FACTOR = 0.83

_runtime_seed: None | int = None


def init_runtime_seed(seed: None | int = None) -> int:
    """
    Initialize the process-wide hash seed. Without argument, this function
    draws a random seed. It must be called before the first table is created
    to fix the seed, e.g., for reproducible tests. Calling it again returns the
    existing seed and fails if a different seed is requested.
    """
    global _runtime_seed

    if _runtime_seed is None:
        _runtime_seed = random.getrandbits(32) if seed is None else seed & _MASK32
    elif seed is not None and seed & _MASK32 != _runtime_seed:
        raise RuntimeError(f'hash seed is already initialized to {_runtime_seed:#010x}')
    return _runtime_seed


def runtime_seed() -> int:
    """Get the process-wide hash seed, drawing a random one on first use."""
    return _runtime_seed if _runtime_seed is not None else init_runtime_seed()


def pack_key(hue: float, lightness: float) -> int:
    """
    Pack hue and lightness into a 32-bit key. The hue is taken modulo 360 and
    quantized to 16 bits, the lightness is clamped to 0–100 and quantized to
    16 bits.
    """
    h = round((hue % 360) / 360 * 0x10000) & 0xFFFF
    j = round(min(max(lightness, 0.0), 100.0) / 100 * 0xFFFF)
    return h << 16 | j


def _check_key(key: int) -> int:
    if not isinstance(key, int) or not 0 <= key <= _MASK32:
        raise ValueError(f'key {key!r} is not an unsigned 32-bit integer')
    return key


class Float64Table(MutableMapping[int, float]):
    """
    A hash table mapping unsigned 32-bit integer keys to floats.

    Args:
        size: is the initial number of slots, rounded up to a power of two
        maxsize: is the maximum number of slots, rounded down to a power of two
        seed: is the hash seed, which defaults to the process-wide seed

    Slot value 0 marks empty slots. Hence an entry for key 0 is kept in an
    extra slot past the end of the table. Deletion shifts subsequent entries
    of the same cluster backwards and does not leave tombstones.
    """

    def __init__(
        self,
        size: int = 128,
        maxsize: int = 1 << 31,
        *,
        seed: None | int = None,
    ) -> None:
        self._maxsize = 1 << (max(maxsize, 32).bit_length() - 1)
        self._seed = (runtime_seed() if seed is None else seed) & _MASK32
        self._coin = self._seed
        self._slots = array('I')
        self._values = array('d')
        self._length = 0
        self._rehash(min(size, self._maxsize))

    # ----------------------------------------------------------------------------------
    # Table management

    @property
    def maxsize(self) -> int:
        return self._maxsize

    @property
    def tablesize(self) -> int:
        """The number of slots, not counting the slot for key 0."""
        return self._tablesize

    def clear(self, size: int = 128) -> None:
        """Remove all entries and shrink the table to ``size`` slots."""
        self._slots = array('I')
        self._values = array('d')
        self._rehash(min(size, self._maxsize))

    def _rehash(self, size: int, purge: bool = False) -> None:
        bits = (max(2, size) - 1).bit_length()
        self._ushift = 32 - bits
        self._tablesize = 1 << bits
        self._mask = self._tablesize - 1

        load = 1 - (1 - _LOAD_FACTOR) * min(self._tablesize / _LOAD_SIZE, 1)
        self._highmark = int(min(self._tablesize - 1, self._tablesize * load))

        old_slots, old_values = self._slots, self._values
        self._slots = array('I', [0]) * (self._tablesize + 1)
        self._values = array('d', [0.0]) * (self._tablesize + 1)
        self._length = 0
        if not old_slots:
            return

        end = len(old_slots) - 1
        if not purge:
            for i in range(end):
                if old_slots[i]:
                    self._insert(old_slots[i], old_values[i])
        else:
            # A linear congruential sequence mixed with the keys decides what
            # survives. Its low bits have short periods, so use the top bit.
            coin = self._coin
            for i in range(end):
                key = old_slots[i]
                if key:
                    coin = (key + coin * 1664525 + 1013904223) & _MASK32
                    if coin >> 31:
                        self._insert(key, old_values[i])
            self._coin = coin

        if old_slots[end]:
            self._slots[-1] = 1
            self._values[-1] = old_values[end]

    def _resize_or_purge(self) -> None:
        if 2 * self._tablesize <= self._maxsize:
            logger.debug('growing table to %d slots', 2 * self._tablesize)
            self._rehash(2 * self._tablesize)
            return

        before = self._length
        while self._length >= self._highmark:
            self._rehash(self._tablesize, purge=True)
        logger.debug(
            'purged table with %d slots from %d to %d entries',
            self._tablesize, before, self._length,
        )

    # ----------------------------------------------------------------------------------
    # Slots

    def _bucket(self, key: int) -> int:
        # https://probablydance.com/2018/06/16/fibonacci-hashing-the-optimization-that-the-world-forgot-or-a-better-alternative-to-integer-modulo
        return ((key * _PHI32 + self._seed) & _MASK32) >> self._ushift

    def _find_slot(self, key: int) -> int:
        slots, mask = self._slots, self._mask
        i = self._bucket(key)
        while slots[i] and slots[i] != key:
            i = (i + 1) & mask
        return i

    def _insert(self, key: int, value: float) -> None:
        """Insert a key known to be absent without checking the load."""
        i = self._find_slot(key)
        self._slots[i] = key
        self._values[i] = value
        self._length += 1

    # ----------------------------------------------------------------------------------
    # Public API

    @property
    def size(self) -> int:
        """The number of entries."""
        return len(self)

    def __len__(self) -> int:
        return self._length + (1 if self._slots[-1] else 0)

    def get(self, key: int, default: None | float = None) -> None | float:  # type: ignore[override]
        _check_key(key)
        if not key:
            return self._values[-1] if self._slots[-1] else default

        i = self._find_slot(key)
        return self._values[i] if self._slots[i] else default

    def set(self, key: int, value: float) -> float:
        """Set the value for the key, possibly evicting other entries."""
        _check_key(key)
        if not key:
            self._slots[-1] = 1
            self._values[-1] = value
            return value

        i = self._find_slot(key)
        if not self._slots[i]:
            if self._length >= self._highmark:
                self._resize_or_purge()
                i = self._find_slot(key)
            # Insert only after purging, so the new entry survives
            self._length += 1
            self._slots[i] = key
        self._values[i] = value
        return value

    def delete(self, key: int) -> bool:
        """Delete the entry for the key and return whether it existed."""
        _check_key(key)
        slots, values, mask = self._slots, self._values, self._mask
        if not key:
            existed = bool(slots[-1])
            slots[-1] = 0
            return existed

        g = self._find_slot(key)
        if not slots[g]:
            return False
        self._length -= 1
        slots[g] = 0

        # Move successors up into the gap at g
        n = (g + 1) & mask
        while slots[n]:
            h = self._bucket(slots[n])
            # The entry at n must stay if its bucket h lies within the cyclic
            # interval (g, n], since probing from h reaches n without passing
            # the gap. Otherwise, it belongs into the gap.
            if (h <= g) ^ (h <= n) ^ (g < n):
                slots[g] = slots[n]
                values[g] = values[n]
                g = n
                slots[g] = 0
            n = (n + 1) & mask
        return True

    def __getitem__(self, key: int) -> float:
        value = self.get(key)
        if value is None:
            raise KeyError(key)
        return value

    def __setitem__(self, key: int, value: float) -> None:
        self.set(key, value)

    def __delitem__(self, key: int) -> None:
        if not self.delete(key):
            raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, int) and 0 <= key <= _MASK32 and self.get(key) is not None

    def items(self) -> Iterator[tuple[int, float]]:  # type: ignore[override]
        """Produce all key, value pairs in no particular order."""
        slots, values = self._slots, self._values
        if slots[-1]:
            yield 0, values[-1]
        for i in range(len(slots) - 1):
            if slots[i]:
                yield slots[i], values[i]

    def __iter__(self) -> Iterator[int]:
        for key, _ in self.items():
            yield key

    def __repr__(self) -> str:
        return f'Float64Table({len(self)} entries, {self._tablesize} slots)'
