# ===--------------------------------------------------------------------------------------===#
#
# Part of the CableBundle Project, under the Apache License v2.0.
# See LICENSE for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#
#
# This file implements logging setup for CableBundle runs.
#
# ===--------------------------------------------------------------------------------------===#

from typing import Optional

import logging
import logging.handlers
import pathlib
import queue


class SizeLimitedFormatter(logging.Formatter):
    """Logging formatter that enforces a maximum message size.

    Messages longer than the limit are cut off and marked with a truncation
    indicator. The limit applies to the message content only, before the
    timestamp and level are added.

    Attributes:
        max_msg_sz: Maximum allowed length for log message content in characters.
    """

    def __init__(
        self, fmt: Optional[str] = None, datefmt: Optional[str] = None, max_msg_sz: int = 256
    ) -> None:
        """Initialize the size-limited formatter.

        Args:
            fmt: Format string for log messages. If None, uses the default format.
            datefmt: Format string for the date/time portion of log messages.
            max_msg_sz: Maximum allowed length for the message content. Longer
                messages are truncated with a "... [TRUNCATED]" suffix.

        Raises:
            ValueError: If max_msg_sz is less than 15 characters.
        """
        if max_msg_sz < 15:
            raise ValueError(
                "max_msg_sz must be at least 15 characters to accommodate truncation indicator"
            )

        super().__init__(fmt, datefmt)
        self.max_msg_sz: int = max_msg_sz

    def format(self, record: logging.LogRecord) -> str:
        """Formats the record, truncating the message if it exceeds the size limit.

        The record's message and arguments are restored after formatting so the
        record can still be used by other handlers.

        Args:
            record: The LogRecord to be formatted.

        Returns:
            The formatted log message.
        """
        message_content: str = record.getMessage()

        if len(message_content) > self.max_msg_sz:
            original_msg = record.msg
            original_args = record.args

            truncate_length: int = self.max_msg_sz - 15
            record.msg = message_content[:truncate_length] + "... [TRUNCATED]"
            record.args = None

            formatted: str = super().format(record)

            record.msg = original_msg
            record.args = original_args
            return formatted

        return super().format(record)


def get_logger(
    run_id: int = 0,
    results_dir: Optional[pathlib.Path] = None,
    append_mode: bool = False,
    max_msg_sz: int = 256,
    level: int = logging.INFO,
) -> logging.Logger:
    """Creates a logger for a packing run with stream and optional file handlers.

    Each message is prefixed with the run id. If no results_dir is provided the
    logger only writes to stderr, otherwise it also writes ``results.log`` in
    that directory.

    Args:
        run_id: Identifier of the run, usually the random seed.
        results_dir: Directory where the log file will be created.
        append_mode: If True, append to an existing log file; if False, overwrite.
        max_msg_sz: Maximum size for log messages in characters.
        level: Logging level of the logger.

    Returns:
        Configured Logger instance.
    """
    if results_dir:
        sanitized_dir: str = str(results_dir).replace("/", "_").replace("\\", "_")
        logger_name: str = f"cablebundle_{sanitized_dir}_{run_id}"
    else:
        logger_name = f"cablebundle_stdout_{run_id}"

    logger: logging.Logger = logging.getLogger(logger_name)
    if not logger.handlers:
        logger.setLevel(level)
        log_formatter = SizeLimitedFormatter(
            f"[run {run_id}] %(asctime)s | %(levelname)s | %(message)s",
            max_msg_sz=max_msg_sz,
        )
        logger.propagate = False

        stream_handler: logging.StreamHandler = logging.StreamHandler()
        stream_handler.setFormatter(log_formatter)
        logger.addHandler(stream_handler)

        if results_dir:
            fh: logging.FileHandler = logging.FileHandler(
                pathlib.Path(results_dir).joinpath("results.log"), mode="a" if append_mode else "w"
            )
            fh.setLevel(level)
            fh.setFormatter(log_formatter)
            logger.addHandler(fh)

    return logger


class ReplayHandler(logging.Handler):
    """Handler that passes records on to another logger.

    Records received from worker processes are handed to ``logger`` so they end
    up in the same handlers, and therefore the same ``results.log``, as the
    records of the calling process.
    """

    def __init__(self, logger: logging.Logger):
        super().__init__()
        self.logger: logging.Logger = logger

    def emit(self, record: logging.LogRecord) -> None:
        self.logger.handle(record)


def get_worker_logger(
    run_id: int, log_queue: queue.Queue, level: int = logging.INFO
) -> logging.Logger:
    """Creates a logger for a run executing in a worker process.

    The logger puts its records on ``log_queue`` instead of writing them, each
    message prefixed with the run id. Handlers from an earlier call in the same
    process are replaced, since pool workers are reused across runs.

    Args:
        run_id: Identifier of the run, usually the random seed.
        log_queue: Queue shared with the process that owns the output handlers.
        level: Logging level of the logger.

    Returns:
        Configured Logger instance.
    """
    logger: logging.Logger = logging.getLogger(f"cablebundle_worker_{run_id}")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    logger.setLevel(level)
    logger.propagate = False
    queue_handler = logging.handlers.QueueHandler(log_queue)
    queue_handler.setFormatter(logging.Formatter(f"[seed {run_id}] %(message)s"))
    logger.addHandler(queue_handler)

    return logger


def listen(log_queue: queue.Queue, logger: logging.Logger) -> logging.handlers.QueueListener:
    """Starts replaying the records put on ``log_queue`` on ``logger``.

    Args:
        log_queue: Queue the worker loggers write to.
        logger: Logger of the calling process.

    Returns:
        The started listener. Calling ``stop`` on it flushes the queue.
    """
    listener = logging.handlers.QueueListener(log_queue, ReplayHandler(logger))
    listener.start()
    return listener
