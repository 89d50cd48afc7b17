import logging

from rich.logging import RichHandler


def setup_logging(level: str | int = logging.INFO) -> None:
    """Install a rich console handler on the root logger."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )
