from .logger import (
    bind_batch_id,
    clear_batch_id,
    get_batch_id,
    get_logger,
    setup_logging,
)

__all__ = [
    "bind_batch_id",
    "clear_batch_id",
    "get_batch_id",
    "get_logger",
    "setup_logging",
]
