"""Compiling the ``vecadd`` kernel.

A build goes through :class:`BuildStage` in order; the first step that fails
stops the build with a :class:`CompilationError` naming that step.
"""

import enum
import logging
import time
from pathlib import Path

import pyopencl as cl

from opencl_vecadd.errors import CompilationError, DispatchError

logger = logging.getLogger(__name__)

KERNEL_DIR = Path(__file__).resolve().parent / "kernels"

# vecadd(A, B, C)
NUM_ARGS = 3


class BuildStage(enum.Enum):
    SOURCE = "source"
    COMPILED = "compiled"
    VALIDATED = "validated"
    EXTRACTED = "extracted"


def load_kernel_source(name="vecadd.cl"):
    return (KERNEL_DIR / name).read_text()


class BuiltKernel:
    """A built program and one kernel taken from it."""

    def __init__(self, program, kernel, num_args=NUM_ARGS):
        self.program = program
        self.kernel = kernel
        self.num_args = num_args
        self.bound = {}

    @property
    def name(self):
        return self.kernel.function_name

    def bind(self, index, buffer):
        if not 0 <= index < self.num_args:
            raise DispatchError(f"{self.name} has no argument slot {index}")
        try:
            self.kernel.set_arg(index, buffer.mem)
        except cl.Error as e:
            raise DispatchError.from_cl(
                f"binding {buffer.name} to argument {index}", e) from e
        self.bound[index] = buffer

    def require_bound(self):
        missing = [i for i in range(self.num_args) if i not in self.bound]
        if missing:
            raise DispatchError(
                f"kernel {self.name} has unbound argument slots {missing}")

    def release(self):
        # Kernel before program; PyOpenCL frees each with its last reference
        self.kernel = None
        self.bound = {}
        self.program = None


def _build_log(program, device):
    try:
        return program.get_build_info(device, cl.program_build_info.LOG)
    except cl.Error:
        return None


def build_kernel(context, device, source, entry_point="vecadd", on_program=None,
                 report=None):
    """Compile *source* for *device* and extract *entry_point*.

    *on_program* receives the program object as soon as it exists; *report*
    is called with a progress message before each step.
    """
    if report is None:
        report = logger.debug

    stage = BuildStage.SOURCE
    report("Create a program with source code")
    try:
        program = cl.Program(context, source)
    except cl.Error as e:
        raise CompilationError(
            f"program creation failed: {e}", status=getattr(e, "code", None),
            stage=stage) from e
    if on_program is not None:
        on_program(program)

    report("Build (compile) the program for the device")
    start = time.perf_counter()
    try:
        program.build(devices=[device])
    except cl.Error as e:
        raise CompilationError(
            f"program build failed: {e}", status=getattr(e, "code", None),
            stage=stage, build_log=_build_log(program, device)) from e
    stage = BuildStage.COMPILED
    logger.debug("built program in %.3f s", time.perf_counter() - start)

    try:
        names = program.get_info(cl.program_info.KERNEL_NAMES)
    except cl.Error as e:
        raise CompilationError(
            f"querying kernel names failed: {e}",
            status=getattr(e, "code", None), stage=stage) from e
    if entry_point not in names.split(";"):
        raise CompilationError(
            f"program has no kernel named {entry_point!r} (found {names!r})",
            stage=stage)
    stage = BuildStage.VALIDATED

    report("Create the vector addition kernel")
    try:
        kernel = cl.Kernel(program, entry_point)
    except cl.Error as e:
        raise CompilationError(
            f"kernel creation failed: {e}", status=getattr(e, "code", None),
            stage=stage) from e

    logger.debug("extracted kernel %s", entry_point)
    return BuiltKernel(program, kernel)
