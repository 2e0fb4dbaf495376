"""Uploads, argument binding, kernel launch and read-back."""

import logging
from dataclasses import dataclass

import pyopencl as cl

from opencl_vecadd.errors import ConfigError, DispatchError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexSpace:
    """1-D range of ``global_size`` work-items in groups of ``local_size``."""

    global_size: int
    local_size: int

    def __post_init__(self):
        if self.global_size <= 0 or self.local_size <= 0:
            raise ConfigError(f"invalid index space {self}")
        if self.global_size % self.local_size:
            raise ConfigError(
                f"global size {self.global_size} is not a multiple of "
                f"work-group size {self.local_size}")

    @classmethod
    def for_config(cls, config):
        return cls(config.elements, config.work_group_size)

    @property
    def work_groups(self):
        return self.global_size // self.local_size


def upload_inputs(queue, buffers):
    """Enqueue non-blocking uploads of A and B.

    Completion is not waited for here; the in-order queue runs them before
    anything submitted later.
    """
    events = []
    for buf in (buffers.a, buffers.b):
        buf.check_upload_target()
        events.append(queue.upload(buf, buf.host_array))
    return events


def bind_arguments(kernel, buffers):
    # The kernel reads its arguments positionally: A, B, then C
    for index, buf in enumerate((buffers.a, buffers.b, buffers.c)):
        kernel.bind(index, buf)


def launch(queue, kernel, index_space, device):
    kernel.require_bound()

    try:
        max_group = device.max_work_group_size
    except cl.Error as e:
        raise DispatchError.from_cl("querying the maximum work-group size", e) from e
    if index_space.local_size > max_group:
        raise DispatchError(
            f"work-group size {index_space.local_size} exceeds the device "
            f"maximum of {max_group}")

    logger.debug("launching %s over %d work-items in %d groups",
                 kernel.name, index_space.global_size, index_space.work_groups)
    return queue.launch(kernel.kernel, index_space.global_size,
                        index_space.local_size)


def read_back(queue, buffers):
    """Blocking read of C; returns after the uploads and the kernel are done."""
    buffers.c.check_read_source()
    queue.read(buffers.c.host_array, buffers.c)
    return buffers.c.host_array
