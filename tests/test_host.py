"""
Host CLI Tests

Only the argument and settings plumbing; the pygame window is not opened.

Run with: pytest tests/test_host.py -v
"""
from recycler.host import ARGUMENTS, build_parser, build_settings, main


class TestArguments:

    def test_every_argument_declared_once(self):
        names = [arg['name'] for arg in ARGUMENTS]
        assert len(names) == len(set(names))

    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.ladder == 'default'
        assert args.pacing is None
        assert args.seed is None

    def test_overrides_applied(self, monkeypatch):
        monkeypatch.delenv('RECYCLER_PACING', raising=False)
        args = build_parser().parse_args(['--pacing', 'relaxed', '--session', '30', '--seed', '9'])
        settings = build_settings(args)
        assert settings.pacing.name == 'relaxed'
        assert settings.session_duration == 30.0

    def test_list_ladders(self, capsys):
        assert main(['--list-ladders']) == 0
        out = capsys.readouterr().out
        assert 'default' in out
        assert 'marathon' in out

    def test_missing_ladder(self, capsys):
        assert main(['--ladder', 'does-not-exist']) == 1
        assert "Failed to load ladder" in capsys.readouterr().out
