from dataclasses import dataclass, field

from opencl_vecadd.errors import ConfigError

# Elements in each array
ELEMENTS = 2048

# Work-items per work-group; must divide ELEMENTS
WORK_GROUP_SIZE = 256

ENTRY_POINT = "vecadd"


def _default_source():
    from opencl_vecadd.kernel import load_kernel_source
    return load_kernel_source()


@dataclass(frozen=True)
class PipelineConfig:
    """Sizes and kernel source for one run. The program only uses the defaults."""

    elements: int = ELEMENTS
    work_group_size: int = WORK_GROUP_SIZE
    kernel_source: str = field(default_factory=_default_source, repr=False)
    entry_point: str = ENTRY_POINT

    def __post_init__(self):
        if self.elements <= 0:
            raise ConfigError(f"elements must be positive, got {self.elements}")
        if self.work_group_size <= 0:
            raise ConfigError(
                f"work-group size must be positive, got {self.work_group_size}")
        if self.elements % self.work_group_size:
            raise ConfigError(
                f"{self.elements} elements are not divisible into "
                f"work-groups of {self.work_group_size}")
