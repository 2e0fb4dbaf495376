"""Platform/device resolution and the execution context."""

import logging
from collections import namedtuple

import pyopencl as cl

from opencl_vecadd.errors import AllocationError, ResolutionError
from opencl_vecadd.queue import OrderedQueue

logger = logging.getLogger(__name__)

ResolvedDevice = namedtuple("ResolvedDevice", ["platform", "device"])


def resolve_device():
    """Return the first device of any type on the first platform."""
    try:
        platforms = cl.get_platforms()
    except cl.Error as e:
        # The ICD loader raises when it knows no platform at all
        raise ResolutionError.from_cl("platform lookup", e) from e
    if not platforms:
        raise ResolutionError("No OpenCL platforms found")

    platform = platforms[0]
    try:
        devices = platform.get_devices(cl.device_type.ALL)
    except cl.Error as e:
        raise ResolutionError.from_cl(f"device lookup on {platform.name}", e) from e
    if not devices:
        raise ResolutionError(f"No OpenCL devices found on {platform.name}")

    device = devices[0]
    logger.info("using platform %s, device %s", platform.name, device.name)
    return ResolvedDevice(platform, device)


def create_context(device):
    try:
        return cl.Context([device])
    except cl.Error as e:
        raise AllocationError.from_cl("context creation", e) from e


def create_queue(context, device):
    """Command queue with default properties, i.e. in-order."""
    try:
        return OrderedQueue(cl.CommandQueue(context, device))
    except cl.Error as e:
        raise AllocationError.from_cl("command queue creation", e) from e


def create_execution_context(resolved, resources):
    """Create the context and its queue, handing each to *resources* as it exists.

    Only *resources* keeps the context, so it is freed when *resources*
    releases it. Returns the queue.
    """
    context = resources.adopt_context(create_context(resolved.device))
    return resources.adopt_queue(create_queue(context, resolved.device))
