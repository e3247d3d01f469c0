import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: str | None) -> int:
    name = (level or "info").strip().upper()
    if name == "WARN":
        name = "WARNING"
    resolved = logging.getLevelName(name)
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger once at process start."""
    logging.basicConfig(level=resolve_level(level), format=LOG_FORMAT, datefmt=DATE_FORMAT)
    logging.getLogger().setLevel(resolve_level(level))
