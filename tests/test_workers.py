from artifacteditor.controller.workers import GatewayWorker
from artifacteditor.errors import TransportError


def test_worker_reports_result():
    received = []
    worker = GatewayWorker("ticket-1", lambda a, b: a + b, 2, 3)
    worker.succeeded.connect(lambda ticket, result: received.append((ticket, result)))

    # run() directly: same thread, so the signal is delivered immediately
    worker.run()

    assert received == [("ticket-1", 5)]


def test_worker_reports_error():
    errors = []

    def boom():
        raise TransportError("Cannot reach backend")

    worker = GatewayWorker("ticket-2", boom)
    worker.failed.connect(lambda ticket, error: errors.append((ticket, error)))
    worker.run()

    assert len(errors) == 1
    assert errors[0][0] == "ticket-2"
    assert isinstance(errors[0][1], TransportError)
