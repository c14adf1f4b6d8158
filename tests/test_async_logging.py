import threading
import time

import pytest

from rapidlog.async_logging import AsyncLogger, OverflowPolicy, ThreadPool
from rapidlog.common import LogMessage, SpdlogError
from rapidlog.sinks import BasicFileSink, Sink


class CountingSink(Sink):
    def __init__(self, delay=0.0):
        super().__init__()
        self.delay = delay
        self.msg_counter = 0
        self.flush_counter = 0
        self.payloads = []

    def _sink_it(self, msg):
        self.payloads.append(msg.payload)
        self.msg_counter += 1
        if self.delay:
            time.sleep(self.delay)

    def _flush(self):
        self.flush_counter += 1


class FailingSink(Sink):
    def _sink_it(self, msg):
        raise RuntimeError("some error happened during log")

    def _flush(self):
        raise RuntimeError("some error happened during flush")


def _count_lines(path):
    return path.read_text().count("\n")


def test_basic_async():
    sink = CountingSink()
    tp = ThreadPool(128, 1)
    logger = AsyncLogger("as", sink, tp, OverflowPolicy.BLOCK)
    for i in range(256):
        logger.info("Hello message #{}", i)
    logger.flush()
    overrun = tp.overrun_counter()
    tp.shutdown()
    assert sink.msg_counter == 256
    assert sink.flush_counter == 1
    assert overrun == 0


def test_discard_policy():
    sink = CountingSink(delay=0.001)
    tp = ThreadPool(4, 1)
    logger = AsyncLogger("as", sink, tp, OverflowPolicy.OVERRUN_OLDEST)
    for _ in range(1024):
        logger.info("Hello message")
    assert sink.msg_counter < 1024
    assert tp.overrun_counter() > 0
    tp.shutdown()


def test_flush():
    sink = CountingSink()
    with ThreadPool(256, 1) as tp:
        logger = AsyncLogger("as", sink, tp, OverflowPolicy.BLOCK)
        for i in range(256):
            logger.info("Hello message #{}", i)
        logger.flush()
    assert sink.msg_counter == 256
    assert sink.flush_counter == 1


def test_wait_empty_with_two_workers():
    sink = CountingSink(delay=0.005)
    tp = ThreadPool(100, 2)
    logger = AsyncLogger("as", sink, tp, OverflowPolicy.BLOCK)
    for i in range(100):
        logger.info("Hello message #{}", i)
    logger.flush()
    tp.shutdown()
    assert sink.msg_counter == 100
    assert sink.flush_counter == 1


def test_multi_threads():
    sink = CountingSink()
    tp = ThreadPool(128, 1)
    logger = AsyncLogger("as", sink, tp, OverflowPolicy.BLOCK)

    def produce():
        for j in range(256):
            logger.info("Hello message #{}", j)

    threads = []
    for _ in range(10):
        thread = threading.Thread(target=produce)
        thread.start()
        threads.append(thread)
        logger.flush()
    for thread in threads:
        thread.join()
    tp.shutdown()
    assert sink.msg_counter == 256 * 10
    assert sink.flush_counter == 10


def test_messages_keep_order_with_one_worker():
    sink = CountingSink()
    with ThreadPool(16, 1) as tp:
        logger = AsyncLogger("as", sink, tp)
        for i in range(50):
            logger.info("m{}", i)
    assert sink.payloads == [f"m{i}" for i in range(50)]


def test_to_file(tmp_path):
    filename = tmp_path / "async_test.log"
    file_sink = BasicFileSink(filename, True)
    tp = ThreadPool(1024, 1)
    logger = AsyncLogger("as", file_sink, tp)
    for j in range(1024):
        logger.info("Hello message #{}", j)
    tp.shutdown()
    file_sink.flush()
    assert _count_lines(filename) == 1024
    assert filename.read_text().endswith("Hello message #1023\n")


def test_to_file_multi_workers(tmp_path):
    filename = tmp_path / "async_test.log"
    file_sink = BasicFileSink(filename, True)
    tp = ThreadPool(10240, 10)
    logger = AsyncLogger("as", file_sink, tp)
    for j in range(10240):
        logger.info("Hello message #{}", j)
    tp.shutdown()
    file_sink.flush()
    assert _count_lines(filename) == 10240


@pytest.mark.parametrize("threads_n", [0, 1001])
def test_invalid_thread_count(threads_n):
    with pytest.raises(SpdlogError, match="invalid threads_n"):
        ThreadPool(10, threads_n)


def test_on_thread_start_runs_in_every_worker():
    started = []
    lock = threading.Lock()

    def on_start():
        with lock:
            started.append(threading.get_ident())

    sink = CountingSink()
    tp = ThreadPool(10, 3, on_start)
    logger = AsyncLogger("as", sink, tp)
    logger.info("after start")
    tp.shutdown()
    assert sink.payloads == ["after start"]
    assert len(started) == 3
    assert len(set(started)) == 3


def test_post_after_shutdown_raises():
    tp = ThreadPool(10, 1)
    tp.shutdown()
    logger = AsyncLogger("as", CountingSink(), tp)
    with pytest.raises(SpdlogError, match="thread pool doesn't exist anymore"):
        tp.post_log(logger, LogMessage("as", logger.level(), "x"))


def test_logging_after_shutdown_reaches_error_handler():
    tp = ThreadPool(10, 1)
    tp.shutdown()
    logger = AsyncLogger("as", CountingSink(), tp)
    errors = []
    logger.set_error_handler(errors.append)
    logger.info("lost")
    assert errors == ["async log: thread pool doesn't exist anymore"]


def test_backend_errors_go_to_handler():
    tp = ThreadPool(16, 1)
    logger = AsyncLogger("failed_logger", FailingSink(), tp)
    errors = []
    logger.set_error_handler(errors.append)
    logger.info("Hello failure")
    logger.flush()
    tp.shutdown()
    assert errors == [
        "some error happened during log",
        "some error happened during flush",
    ]


def test_clone_shares_pool_and_sinks():
    sink = CountingSink()
    tp = ThreadPool(16, 1)
    logger = AsyncLogger("orig", sink, tp)
    cloned = logger.clone("clone")
    assert isinstance(cloned, AsyncLogger)
    assert cloned.name() == "clone"
    assert cloned.sinks() == logger.sinks()
    logger.info("Some message 1")
    cloned.info("Some message 2")
    tp.shutdown()
    assert sink.payloads == ["Some message 1", "Some message 2"]