"""The host-orchestrated run, from host allocation to teardown."""

import logging
import time
from collections import namedtuple

import numpy as np

from opencl_vecadd.config import PipelineConfig
from opencl_vecadd.device import create_execution_context, resolve_device
from opencl_vecadd.dispatch import (
    IndexSpace,
    bind_arguments,
    launch,
    read_back,
    upload_inputs,
)
from opencl_vecadd.host import allocate_host_buffers
from opencl_vecadd.kernel import build_kernel
from opencl_vecadd.memory import allocate_device_buffers
from opencl_vecadd.resources import DeviceResources

logger = logging.getLogger(__name__)

PipelineResult = namedtuple("PipelineResult", ["output", "elapsed", "matches_host"])


def _silent(message):
    pass


def run_pipeline(config=None, report=print):
    """Add A and B on the first OpenCL device and return C.

    Every stage has to succeed before the next one starts; a failure raises
    a :class:`~opencl_vecadd.errors.PipelineError` after all device handles
    acquired so far have been released.
    """
    if config is None:
        config = PipelineConfig()
    if report is None:
        report = _silent

    index_space = IndexSpace.for_config(config)
    host = allocate_host_buffers(config.elements)

    start = time.perf_counter()
    with DeviceResources() as resources:
        resolved = resolve_device()
        # The context is reached through resources only, so it goes last
        queue = create_execution_context(resolved, resources)

        buffers = allocate_device_buffers(
            resources.context, host, on_allocate=resources.adopt_buffer)

        # Write data from the input arrays to the buffers
        upload_inputs(queue, buffers)

        kernel = resources.adopt_kernel(build_kernel(
            resources.context, resolved.device, config.kernel_source,
            config.entry_point, on_program=resources.adopt_program,
            report=report))

        report("Set the kernel arguments")
        bind_arguments(kernel, buffers)

        report("Execute the kernel")
        launch(queue, kernel, index_space, resolved.device)

        report("The kernel has finished execution on the device")
        report("Read the device output buffer to the host output array")
        output = read_back(queue, buffers)

    elapsed = time.perf_counter() - start
    logger.info("device section took %.6f seconds", elapsed)

    matches_host = bool(np.array_equal(output, host.a + host.b))
    return PipelineResult(output, elapsed, matches_host)
