"""Device-resident buffers paired with the host arrays."""

import enum
import logging
from collections import namedtuple

import pyopencl as cl

from opencl_vecadd.errors import AllocationError, DispatchError

logger = logging.getLogger(__name__)


class AccessMode(enum.Enum):
    """Access from the kernel's point of view."""

    READ_ONLY = "read-only"
    WRITE_ONLY = "write-only"

    @property
    def flags(self):
        mf = cl.mem_flags
        if self is AccessMode.READ_ONLY:
            return mf.READ_ONLY
        return mf.WRITE_ONLY


class DeviceBuffer:
    def __init__(self, name, mem, access, host_array):
        self.name = name
        self.mem = mem
        self.access = access
        self.host_array = host_array

    def __repr__(self):
        return f"DeviceBuffer({self.name!r}, {self.access.value}, {self.nbytes} bytes)"

    @property
    def nbytes(self):
        return self.host_array.nbytes

    @property
    def released(self):
        return self.mem is None

    def check_upload_target(self):
        if self.access is not AccessMode.READ_ONLY:
            raise DispatchError(
                f"{self.name} is {self.access.value} and cannot receive an upload")

    def check_read_source(self):
        if self.access is not AccessMode.WRITE_ONLY:
            raise DispatchError(
                f"{self.name} is {self.access.value} and cannot be read back")

    def release(self):
        if self.mem is None:
            return
        mem, self.mem = self.mem, None
        mem.release()


DeviceBuffers = namedtuple("DeviceBuffers", ["a", "b", "c"])


def allocate_buffer(context, name, access, host_array):
    """Create a buffer of exactly ``host_array.nbytes``; no host pointer is attached."""
    try:
        mem = cl.Buffer(context, access.flags, size=host_array.nbytes)
    except cl.Error as e:
        raise AllocationError.from_cl(f"buffer {name}", e) from e
    logger.debug("allocated %s buffer %s (%d bytes)",
                 access.value, name, host_array.nbytes)
    return DeviceBuffer(name, mem, access, host_array)


def allocate_device_buffers(context, host, on_allocate=None):
    """Allocate bufA and bufB read-only and bufC write-only.

    *on_allocate* is called with each buffer as soon as it exists, so an
    owner can release the earlier ones if a later allocation fails.
    """
    buffers = []
    for name, access, host_array in [
            ("A", AccessMode.READ_ONLY, host.a),
            ("B", AccessMode.READ_ONLY, host.b),
            ("C", AccessMode.WRITE_ONLY, host.c)]:
        buf = allocate_buffer(context, name, access, host_array)
        if on_allocate is not None:
            on_allocate(buf)
        buffers.append(buf)

    return DeviceBuffers(*buffers)
