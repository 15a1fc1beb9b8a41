"""
Recycler logging.

Console loggers print ``[module] LEVEL: message`` lines. Structured records
(the end-of-session summary) go to per-module sinks, written as JSONL.

Usage:
    from recycler.logging import get_logger, emit_record

    log = get_logger('spawner')
    log.debug("Spawned %s", item.id)
    emit_record('session', {'type': 'summary', 'score': 120})

Environment:
    RECYCLER_LOG_LEVEL=DEBUG                 default console level
    RECYCLER_LOG_<MODULE>=TRACE              level for one module
    RECYCLER_LOG_DIR=/tmp/recycler           directory for JSONL files
    RECYCLER_LOGGING_<MODULE>_ENABLED=true   write records for a module
"""

import json
import os
import time
import traceback
from abc import ABC, abstractmethod
from enum import IntEnum
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional, TextIO


class LogLevel(IntEnum):
    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    OFF = 100


_LABELS = {
    LogLevel.TRACE: 'TRACE',
    LogLevel.DEBUG: 'DEBUG',
    LogLevel.INFO: 'INFO',
    LogLevel.WARNING: 'WARN',
    LogLevel.ERROR: 'ERROR',
}

_config: Dict[str, Any] = {
    'default_level': LogLevel.INFO,
    'module_levels': {},
    'log_dir': None,
    'modules': {},
}


def _parse_level(name: str) -> LogLevel:
    name = name.strip().upper()
    if name == 'WARN':
        return LogLevel.WARNING
    try:
        return LogLevel[name]
    except KeyError:
        return LogLevel.INFO


def configure_logging(level: str = 'INFO', modules: Optional[Dict[str, str]] = None) -> None:
    """Set the default console level and optional per-module levels."""
    _config['default_level'] = _parse_level(level)
    for module, module_level in (modules or {}).items():
        _config['module_levels'][module.lower()] = _parse_level(module_level)


def get_module_config(module: str) -> Dict[str, Any]:
    """Structured-record settings for ``module`` (e.g. ``{'enabled': True}``)."""
    return _config['modules'].get(module.lower(), {})


def _load_env_config() -> None:
    env = os.environ
    if 'RECYCLER_LOG_LEVEL' in env:
        _config['default_level'] = _parse_level(env['RECYCLER_LOG_LEVEL'])
    if 'RECYCLER_LOG_DIR' in env:
        _config['log_dir'] = env['RECYCLER_LOG_DIR']

    for key, value in env.items():
        if key.startswith('RECYCLER_LOGGING_') and key.endswith('_ENABLED'):
            module = key[len('RECYCLER_LOGGING_'):-len('_ENABLED')].lower()
            enabled = value.strip().lower() in ('1', 'true', 'yes', 'on')
            _config['modules'].setdefault(module, {})['enabled'] = enabled
        elif key.startswith('RECYCLER_LOG_') and key not in ('RECYCLER_LOG_LEVEL', 'RECYCLER_LOG_DIR'):
            _config['module_levels'][key[len('RECYCLER_LOG_'):].lower()] = _parse_level(value)


_load_env_config()


# =============================================================================
# Console loggers
# =============================================================================

class RecyclerLogger:
    """Console logger for one module.

    The level is resolved on every call, so configure_logging() also
    applies to loggers created earlier.
    """

    def __init__(self, module: str):
        self.module = module

    @property
    def level(self) -> LogLevel:
        return _config['module_levels'].get(self.module.lower(), _config['default_level'])

    def is_enabled_for(self, level: LogLevel) -> bool:
        return level >= self.level

    def _log(self, level: LogLevel, msg: str, args: tuple, label: Optional[str] = None) -> None:
        if not self.is_enabled_for(level):
            return
        if args:
            try:
                msg = msg % args
            except (TypeError, ValueError):
                msg = f"{msg} {args}"
        print(f"[{self.module}] {label or _LABELS[level]}: {msg}")

    def trace(self, msg: str, *args) -> None:
        self._log(LogLevel.TRACE, msg, args)

    def debug(self, msg: str, *args) -> None:
        self._log(LogLevel.DEBUG, msg, args)

    def info(self, msg: str, *args) -> None:
        self._log(LogLevel.INFO, msg, args)

    def warning(self, msg: str, *args) -> None:
        self._log(LogLevel.WARNING, msg, args)

    def error(self, msg: str, *args) -> None:
        self._log(LogLevel.ERROR, msg, args)

    def exception(self, msg: str, *args) -> None:
        """Log at ERROR followed by the traceback being handled."""
        self._log(LogLevel.ERROR, msg, args)
        tb = traceback.format_exc().rstrip()
        if tb == 'NoneType: None':
            return
        for line in tb.splitlines():
            self._log(LogLevel.ERROR, line, (), label='TRACE')


@lru_cache(maxsize=64)
def get_logger(module: str) -> RecyclerLogger:
    """Cached logger for ``module``."""
    return RecyclerLogger(module)


# =============================================================================
# Structured record sinks
# =============================================================================

def get_log_dir() -> Path:
    """Configured log dir, else ``$XDG_DATA_HOME/recycler/logs``."""
    if _config['log_dir']:
        return Path(_config['log_dir']).expanduser()
    data_home = os.environ.get('XDG_DATA_HOME') or str(Path.home() / '.local' / 'share')
    return Path(data_home) / 'recycler' / 'logs'


class LogSink(ABC):
    """Destination for structured records."""

    @abstractmethod
    def emit(self, module: str, record: Dict[str, Any]) -> None:
        """Write one JSON-serializable record for ``module``."""

    @abstractmethod
    def close(self) -> None:
        """Release resources."""


class NullSink(LogSink):
    """Drops every record."""

    def emit(self, module: str, record: Dict[str, Any]) -> None:
        pass

    def close(self) -> None:
        pass


class FileSink(LogSink):
    """One ``<session>_<module>.jsonl`` file per module.

    The first line of each file is a header record and close() appends a
    footer record.
    """

    def __init__(self, log_dir: Optional[str] = None, session_name: Optional[str] = None):
        self.log_dir = Path(log_dir) if log_dir else None
        self.session_name = session_name or time.strftime("%Y%m%d_%H%M%S")
        self._files: Dict[str, TextIO] = {}

    def _open(self, module: str) -> TextIO:
        if module not in self._files:
            log_dir = self.log_dir or get_log_dir()
            log_dir.mkdir(parents=True, exist_ok=True)
            handle = open(log_dir / f"{self.session_name}_{module}.jsonl", 'a', encoding='utf-8')
            self._files[module] = handle
            self._write(handle, {'type': 'header', 'module': module,
                                 'session_name': self.session_name, 'start_time': time.time()})
        return self._files[module]

    @staticmethod
    def _write(handle: TextIO, record: Dict[str, Any]) -> None:
        handle.write(json.dumps(record) + "\n")

    def emit(self, module: str, record: Dict[str, Any]) -> None:
        self._write(self._open(module), {'wall_time': time.time(), **record})

    def close(self) -> None:
        for module, handle in self._files.items():
            self._write(handle, {'type': 'footer', 'module': module, 'end_time': time.time()})
            handle.close()
        self._files.clear()


_sinks: Dict[str, LogSink] = {}


def register_sink(module: str, sink: LogSink) -> None:
    _sinks[module] = sink


def emit_record(module: str, record: Dict[str, Any]) -> bool:
    """Send ``record`` to the sink registered for ``module``.

    Returns:
        False if no sink is registered
    """
    sink = _sinks.get(module)
    if sink is None:
        return False
    sink.emit(module, record)
    return True


def close_all_sinks() -> None:
    for sink in _sinks.values():
        sink.close()
    _sinks.clear()


def create_sink_for_module(module: str, session_name: Optional[str] = None) -> LogSink:
    """FileSink when RECYCLER_LOGGING_<MODULE>_ENABLED is set, else NullSink."""
    if not get_module_config(module).get('enabled', False):
        return NullSink()
    return FileSink(session_name=session_name)
