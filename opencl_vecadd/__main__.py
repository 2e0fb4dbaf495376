import logging
import sys

from opencl_vecadd.errors import PipelineError
from opencl_vecadd.pipeline import run_pipeline

logger = logging.getLogger("opencl_vecadd")

# What exit(-1) amounts to for the parent process
EXIT_FAILURE = 255


def main():
    try:
        result = run_pipeline()
    except PipelineError as e:
        logger.error("%s", e)
        print("ERROR. Exiting...")
        return EXIT_FAILURE

    for value in result.output:
        print(value)

    return 0


if __name__ == "__main__":
    sys.exit(main())
