"""Host-orchestrated OpenCL vector addition."""

from opencl_vecadd.config import ELEMENTS, WORK_GROUP_SIZE, PipelineConfig
from opencl_vecadd.errors import (
    AllocationError,
    CompilationError,
    ConfigError,
    DispatchError,
    PipelineError,
    ResolutionError,
)
from opencl_vecadd.pipeline import PipelineResult, run_pipeline

__version__ = "0.1.0"

__all__ = [
    "ELEMENTS",
    "WORK_GROUP_SIZE",
    "PipelineConfig",
    "PipelineResult",
    "run_pipeline",
    "PipelineError",
    "ConfigError",
    "ResolutionError",
    "AllocationError",
    "CompilationError",
    "DispatchError",
]
