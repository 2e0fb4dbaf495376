"""Host-side staging arrays."""

from dataclasses import dataclass

import numpy as np

from opencl_vecadd.errors import AllocationError

HOST_DTYPE = np.int32


@dataclass
class HostBuffers:
    """Inputs ``a`` and ``b`` and output ``c``, all of the same length."""

    a: np.ndarray
    b: np.ndarray
    c: np.ndarray

    @property
    def elements(self):
        return self.a.size

    @property
    def nbytes(self):
        return self.a.nbytes


def allocate_host_buffers(elements, fill=1):
    """Allocate the three host arrays; ``a`` and ``b`` are filled, ``c`` is not."""
    try:
        a = np.full(elements, fill, dtype=HOST_DTYPE)
        b = np.full(elements, fill, dtype=HOST_DTYPE)
        # Written by the read-back
        c = np.empty(elements, dtype=HOST_DTYPE)
    except (MemoryError, ValueError) as e:
        raise AllocationError(f"host allocation of {elements} elements failed: {e}") from e

    return HostBuffers(a, b, c)
