import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stdout handler to the root logger. Safe to call more than once."""
    root = logging.getLogger()
    root.setLevel(level.upper())
    if any(getattr(h, "_coordination_handler", False) for h in root.handlers):
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._coordination_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    # SQL echo is controlled by the engine, keep the driver quiet
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
