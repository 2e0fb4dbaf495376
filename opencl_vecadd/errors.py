"""Failures of the host/device pipeline.

Every class maps to one step of the run: finding a device, acquiring
device memory or queues, compiling the kernel, and submitting work.
"""


class PipelineError(Exception):
    """Base class; ``status`` is the OpenCL status code when one is known."""

    def __init__(self, message, status=None):
        super().__init__(message)
        self.status = status

    @classmethod
    def from_cl(cls, what, err):
        """Wrap a ``pyopencl.Error`` raised while doing *what*."""
        status = getattr(err, "code", None)
        return cls(f"{what} failed: {err}", status=status)


class ConfigError(PipelineError):
    pass


class ResolutionError(PipelineError):
    pass


class AllocationError(PipelineError):
    pass


class CompilationError(PipelineError):
    """Program creation, build or kernel extraction failed."""

    def __init__(self, message, status=None, stage=None, build_log=None):
        super().__init__(message, status=status)
        self.stage = stage
        self.build_log = build_log


class DispatchError(PipelineError):
    pass
