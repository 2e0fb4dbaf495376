"""Ownership and release of every device-side handle of a run."""

import logging

import pyopencl as cl

logger = logging.getLogger(__name__)


class DeviceResources:
    """Holds device handles as they are acquired and releases them on exit.

    Release order is kernel, program, command queue, buffers, context, so
    the context always goes last. Releasing twice is a no-op, and handles
    that were never acquired are skipped.
    """

    def __init__(self):
        self.context = None
        self.queue = None
        self.buffers = []
        self.program = None
        self.kernel = None
        self.released = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()

    def adopt_context(self, context):
        self.context = context
        return context

    def adopt_queue(self, queue):
        self.queue = queue
        return queue

    def adopt_buffer(self, buffer):
        self.buffers.append(buffer)
        return buffer

    def adopt_program(self, program):
        self.program = program
        return program

    def adopt_kernel(self, kernel):
        self.kernel = kernel
        return kernel

    def _release(self, what, func):
        try:
            func()
        except cl.Error as e:
            logger.warning("releasing %s failed: %s", what, e)
        self.released.append(what)

    def release(self):
        if self.kernel is not None:
            kernel, self.kernel = self.kernel, None
            self._release("kernel", kernel.release)

        if self.program is not None:
            self.program = None
            self.released.append("program")

        if self.queue is not None:
            queue, self.queue = self.queue, None
            self._release("queue", queue.release)

        buffers, self.buffers = self.buffers, []
        for buf in buffers:
            self._release(f"buffer {buf.name}", buf.release)

        if self.context is not None:
            self.context = None
            self.released.append("context")
