import json
import logging
import logging.handlers
import queue
import threading

# Thread-safe queue for log records
_log_queue: queue.SimpleQueue = queue.SimpleQueue()

# QueueHandler enqueues log records without blocking the request thread
queue_handler = logging.handlers.QueueHandler(_log_queue)

# Console handler to actually emit the logs
console_handler = logging.StreamHandler()

# Listener draining the queue; restarted by configure_logging after a stop
listener = logging.handlers.QueueListener(_log_queue, console_handler)
_listener_lock = threading.Lock()
_listening = False

# Dedicated logger name so we don't clobber the root or uvicorn
logger = logging.getLogger("jsonprovider")
logger.setLevel(logging.DEBUG)
logger.addHandler(queue_handler)


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def start_listener() -> None:
    global _listening
    with _listener_lock:
        if not _listening:
            listener.start()
            _listening = True


def stop_listener() -> None:
    """Flush queued records to the console and join the listener thread."""
    global _listening
    with _listener_lock:
        if _listening:
            listener.stop()
            _listening = False


def is_listening() -> bool:
    return _listening


def configure_logging(
    json_logging: bool = False, level: str = "DEBUG"
) -> None:
    """
    Call this at application startup: picks JSON vs text output and the
    level of the "jsonprovider" logger, and (re)starts the queue listener.
    """
    logger.setLevel(level.upper())
    if json_logging:
        console_handler.setFormatter(JSONFormatter())
    else:
        console_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s %(levelname)s [%(name)s] %(message)s"
            )
        )
    start_listener()


start_listener()
