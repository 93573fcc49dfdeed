import logging
from logging import StreamHandler, FileHandler, Logger
from pathlib import Path


class ModuleLogger:
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR

    FORMATTER = logging.Formatter(
        '[%(name)s | %(levelname)s] %(message)s'
    )

    @classmethod
    def create_console_handler(cls, log_level: int | None = None) -> StreamHandler:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(cls.FORMATTER)
        console_handler.setLevel(log_level or cls.DEBUG)
        return console_handler

    @classmethod
    def create_file_handler(cls, file_path: Path | str, log_level: int | None = None) -> FileHandler:
        file_handler = logging.FileHandler(file_path, mode='a', encoding='utf-8')
        file_handler.setFormatter(cls.FORMATTER)
        file_handler.setLevel(log_level or cls.DEBUG)
        return file_handler

    @classmethod
    def get_logger(
        cls,
        logger_name: str,
        file_path: Path | str | None = None,
        log_level: int = logging.DEBUG
    ) -> Logger:
        """Returns the logger named `logger_name`.

        Handlers are only attached the first time a logger is requested, so
        that importing a module twice doesn't duplicate its log records. If
        `file_path` is given, records are also appended to that file.
        """
        logger = logging.getLogger(logger_name)
        if not logger.handlers:
            logger.addHandler(cls.create_console_handler(log_level))
            if file_path is not None:
                logger.addHandler(cls.create_file_handler(file_path, log_level))
            logger.setLevel(log_level)
        return logger

    @classmethod
    def set_level(cls, log_level: int, prefix: str = 'cooling_tower') -> None:
        """Sets `log_level` on every logger of the package that has already
        been created (e.g. to trace the solver iterations with `DEBUG`).
        """
        for name, obj in logging.Logger.manager.loggerDict.items():
            if name.startswith(prefix) and isinstance(obj, logging.Logger):
                obj.setLevel(log_level)
