import pyopencl as cl
import pytest

from opencl_vecadd.device import create_context, create_queue, resolve_device
from opencl_vecadd.dispatch import bind_arguments, read_back, upload_inputs
from opencl_vecadd.errors import DispatchError
from opencl_vecadd.host import allocate_host_buffers
from opencl_vecadd.kernel import build_kernel, load_kernel_source
from opencl_vecadd.memory import allocate_device_buffers
from opencl_vecadd.queue import LAUNCH, READ, UPLOAD, Submission


@pytest.fixture
def setup(fake_cl):
    resolved = resolve_device()
    context = create_context(resolved.device)
    queue = create_queue(context, resolved.device)
    host = allocate_host_buffers(2048)
    buffers = allocate_device_buffers(context, host)
    kernel = build_kernel(context, resolved.device, load_kernel_source())
    bind_arguments(kernel, buffers)
    return queue, buffers, kernel


def test_submission_order_is_recorded(setup):
    queue, buffers, kernel = setup
    upload_inputs(queue, buffers)
    queue.launch(kernel.kernel, 2048, 256)
    read_back(queue, buffers)
    assert queue.submissions == [
        Submission(UPLOAD, "A", False),
        Submission(UPLOAD, "B", False),
        Submission(LAUNCH, "vecadd", False),
        Submission(READ, "C", True),
    ]


def test_uploads_run_before_the_launch(setup, fake_cl):
    queue, buffers, kernel = setup
    upload_inputs(queue, buffers)
    queue.launch(kernel.kernel, 2048, 256)
    # Nothing has been waited for yet
    assert fake_cl.executed == []
    read_back(queue, buffers)
    assert fake_cl.executed == ["upload", "upload", "launch", "read"]
    assert (buffers.c.host_array == 2).all()


def test_launch_without_uploads_refused(setup):
    queue, _, kernel = setup
    with pytest.raises(DispatchError):
        queue.launch(kernel.kernel, 2048, 256)


def test_read_before_launch_refused(setup):
    queue, buffers, _ = setup
    upload_inputs(queue, buffers)
    with pytest.raises(DispatchError):
        read_back(queue, buffers)


def test_upload_after_launch_refused(setup):
    queue, buffers, kernel = setup
    upload_inputs(queue, buffers)
    queue.launch(kernel.kernel, 2048, 256)
    with pytest.raises(DispatchError):
        queue.upload(buffers.a, buffers.a.host_array)


def test_enqueue_failure_is_fatal(setup, fake_cl):
    queue, buffers, _ = setup
    fake_cl.fail_on.add("upload")
    with pytest.raises(DispatchError) as excinfo:
        upload_inputs(queue, buffers)
    assert isinstance(excinfo.value.__cause__, cl.Error)


def test_failed_submission_is_not_recorded(setup, fake_cl):
    queue, buffers, kernel = setup
    upload_inputs(queue, buffers)
    fake_cl.fail_on.add("launch")
    with pytest.raises(DispatchError):
        queue.launch(kernel.kernel, 2048, 256)
    assert [s.kind for s in queue.submissions] == [UPLOAD, UPLOAD]


def test_release_finalizes_the_command_queue(setup, fake_cl):
    queue, buffers, kernel = setup
    command_queue = queue.queue
    upload_inputs(queue, buffers)
    queue.release()
    assert queue.released
    assert command_queue.finalized
    # Pending uploads ran before the queue was freed
    assert fake_cl.executed == ["upload", "upload"]
    assert fake_cl.calls[-2:] == ["finish", "finalize"]

    queue.release()
    assert fake_cl.count("finalize") == 1
    with pytest.raises(DispatchError, match="released"):
        queue.launch(kernel.kernel, 2048, 256)
