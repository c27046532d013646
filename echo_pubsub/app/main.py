import signal
import threading

from loguru import logger

from echo_pubsub.app.composition import create_subscriber_dependencies
from echo_pubsub.app.core import SERVICE_NAME


def _log(event: str, **kwargs) -> None:
    logger.bind(service_name=SERVICE_NAME, event=event, **kwargs).info("")


def run_subscriber(shutdown: threading.Event | None = None) -> None:
    shutdown = shutdown or threading.Event()
    deps = create_subscriber_dependencies()
    deps.build()

    def request_shutdown(signum, frame) -> None:
        if not shutdown.is_set():
            _log("shutdown_signal", signal=signum)
            shutdown.set()

    if threading.current_thread() is threading.main_thread():
        for sig in (signal.SIGINT, signal.SIGTERM):
            signal.signal(sig, request_shutdown)

    try:
        deps.start()
        _log("subscriber_started")
        shutdown.wait()
    finally:
        deps.close()
        _log("subscriber_stopped")


def main() -> None:
    try:
        run_subscriber()
    except KeyboardInterrupt:
        _log("subscriber_interrupted")
    except Exception as e:
        logger.exception("subscriber failed: {}", e)
        raise


if __name__ == "__main__":
    main()
