"""In-order submission channel.

All device work of a run goes through one :class:`OrderedQueue`. It wraps
a default (in-order) ``pyopencl.CommandQueue`` and refuses submissions that
would break the upload, launch, read sequence, so the ordering the device
relies on is also checked on the host side.
"""

import logging
from collections import namedtuple

import pyopencl as cl

from opencl_vecadd.errors import DispatchError

logger = logging.getLogger(__name__)

UPLOAD = "upload"
LAUNCH = "launch"
READ = "read"

Submission = namedtuple("Submission", ["kind", "target", "blocking"])

# Kinds that may precede each kind of submission
_ALLOWED_AFTER = {
    UPLOAD: {None, UPLOAD},
    LAUNCH: {UPLOAD},
    READ: {LAUNCH},
}


class OrderedQueue:
    def __init__(self, queue):
        self.queue = queue
        self.submissions = []

    @property
    def last_kind(self):
        if not self.submissions:
            return None
        return self.submissions[-1].kind

    def _check(self, kind, target):
        if self.queue is None:
            raise DispatchError(f"cannot submit {kind} of {target}: queue released")
        if self.last_kind not in _ALLOWED_AFTER[kind]:
            raise DispatchError(
                f"cannot submit {kind} of {target} after {self.last_kind}")

    def _record(self, kind, target, blocking):
        self.submissions.append(Submission(kind, target, blocking))
        logger.debug("submitted %s %s (blocking=%s)", kind, target, blocking)

    def upload(self, buffer, host_array):
        """Non-blocking host to device copy."""
        self._check(UPLOAD, buffer.name)
        try:
            event = cl.enqueue_copy(self.queue, buffer.mem, host_array,
                                    is_blocking=False)
        except cl.Error as e:
            raise DispatchError.from_cl(f"upload of {buffer.name}", e) from e
        self._record(UPLOAD, buffer.name, False)
        return event

    def launch(self, kernel, global_size, local_size):
        """Non-blocking kernel launch over a 1-D range."""
        self._check(LAUNCH, kernel.function_name)
        try:
            event = cl.enqueue_nd_range_kernel(
                self.queue, kernel, (global_size,), (local_size,))
        except cl.Error as e:
            raise DispatchError.from_cl("kernel launch", e) from e
        self._record(LAUNCH, kernel.function_name, False)
        return event

    def read(self, host_array, buffer):
        """Blocking device to host copy; returns once all prior work is done."""
        self._check(READ, buffer.name)
        try:
            event = cl.enqueue_copy(self.queue, host_array, buffer.mem,
                                    is_blocking=True)
        except cl.Error as e:
            raise DispatchError.from_cl(f"read-back of {buffer.name}", e) from e
        self._record(READ, buffer.name, True)
        return event

    @property
    def released(self):
        return self.queue is None

    def release(self):
        """Drain and free the command queue; later calls do nothing."""
        if self.queue is None:
            return
        queue, self.queue = self.queue, None
        # CommandQueue.__exit__ waits for pending work, then frees the handle
        queue.__exit__(None, None, None)
