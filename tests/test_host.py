import numpy as np
import pytest

from opencl_vecadd.errors import AllocationError
from opencl_vecadd.host import HOST_DTYPE, allocate_host_buffers


def test_inputs_filled_with_ones():
    host = allocate_host_buffers(2048)
    assert host.elements == 2048
    assert np.all(host.a == 1)
    assert np.all(host.b == 1)


def test_arrays_share_length_and_dtype():
    host = allocate_host_buffers(64, fill=3)
    for arr in (host.a, host.b, host.c):
        assert arr.dtype == HOST_DTYPE
        assert arr.size == 64
        assert arr.flags.c_contiguous
    assert host.nbytes == 64 * np.dtype(HOST_DTYPE).itemsize
    assert np.all(host.a == 3)


def test_negative_size_is_fatal():
    with pytest.raises(AllocationError):
        allocate_host_buffers(-1)
