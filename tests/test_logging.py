"""
Logging Tests

Console loggers, level configuration and structured record sinks.

Run with: pytest tests/test_logging.py -v
"""
import json

import pytest

from recycler import logging as rlog
from recycler.logging import (
    FileSink,
    LogLevel,
    NullSink,
    configure_logging,
    create_sink_for_module,
    emit_record,
    get_logger,
    register_sink,
)


@pytest.fixture(autouse=True)
def restore_config():
    """Put global logging config back after each test."""
    saved = {
        'default_level': rlog._config['default_level'],
        'module_levels': dict(rlog._config['module_levels']),
        'modules': dict(rlog._config['modules']),
        'log_dir': rlog._config['log_dir'],
    }
    yield
    rlog._config.update(saved)


class TestLogger:

    def test_cached(self):
        assert get_logger('spawner') is get_logger('spawner')

    def test_format(self, capsys):
        configure_logging('INFO')
        get_logger('engine').info("Score %d", 40)
        assert capsys.readouterr().out.strip() == "[engine] INFO: Score 40"

    def test_level_filtering(self, capsys):
        configure_logging('WARNING')
        log = get_logger('engine')
        log.info("hidden")
        log.warning("shown")
        out = capsys.readouterr().out
        assert "hidden" not in out
        assert "[engine] WARN: shown" in out

    def test_module_override(self, capsys):
        configure_logging('ERROR', modules={'spawner': 'DEBUG'})
        get_logger('spawner').debug("visible")
        get_logger('session').info("quiet")
        out = capsys.readouterr().out
        assert "visible" in out
        assert "quiet" not in out

    def test_is_enabled_for(self):
        configure_logging('INFO')
        log = get_logger('levels')
        assert log.is_enabled_for(LogLevel.WARNING)
        assert not log.is_enabled_for(LogLevel.TRACE)

    def test_bad_format_args_do_not_raise(self, capsys):
        configure_logging('INFO')
        get_logger('engine').info("no placeholders", 1, 2)
        assert "no placeholders" in capsys.readouterr().out

    def test_exception_includes_traceback(self, capsys):
        configure_logging('INFO')
        try:
            raise KeyError("lost")
        except KeyError:
            get_logger('events').exception("Handler failed")
        out = capsys.readouterr().out
        assert "[events] ERROR: Handler failed" in out
        assert "KeyError" in out


class TestSinks:

    def test_no_sink_returns_false(self):
        assert emit_record('nobody', {'type': 'x'}) is False

    def test_file_sink_writes_jsonl(self, tmp_path):
        sink = FileSink(log_dir=str(tmp_path), session_name='run')
        register_sink('session', sink)
        assert emit_record('session', {'type': 'summary', 'score': 70}) is True
        sink.close()

        lines = (tmp_path / 'run_session.jsonl').read_text().splitlines()
        records = [json.loads(line) for line in lines]
        assert [r['type'] for r in records] == ['header', 'summary', 'footer']
        assert records[1]['score'] == 70
        assert 'wall_time' in records[1]

    def test_configured_log_dir(self, tmp_path):
        """Without an explicit directory the configured log dir is used."""
        rlog._config['log_dir'] = str(tmp_path)
        sink = FileSink(session_name='cfg')
        sink.emit('session', {'type': 'summary'})
        sink.close()
        assert (tmp_path / 'cfg_session.jsonl').exists()

    def test_disabled_module_gets_null_sink(self):
        rlog._config['modules'] = {}
        assert isinstance(create_sink_for_module('session'), NullSink)

    def test_enabled_module_gets_file_sink(self):
        rlog._config['modules'] = {'session': {'enabled': True}}
        assert isinstance(create_sink_for_module('session'), FileSink)

    def test_env_parsing(self, monkeypatch):
        monkeypatch.setenv('RECYCLER_LOGGING_SESSION_ENABLED', 'true')
        monkeypatch.setenv('RECYCLER_LOG_SPAWNER', 'DEBUG')
        rlog._load_env_config()
        assert rlog.get_module_config('session') == {'enabled': True}
        assert rlog._config['module_levels']['spawner'] == LogLevel.DEBUG
