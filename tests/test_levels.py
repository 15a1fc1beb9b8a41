"""
Level Ladder Tests

Run with: pytest tests/test_levels.py -v
"""
import pytest

from recycler.levels import DEFAULT_LADDER, LevelLadder, LevelLoader

VALID_LADDER_YAML = """
name: "Test Ladder"
description: "Two rungs"
levels:
  - score_to_beat: 10
    speed: 1
  - name: "Final"
    score_to_beat: 40
    speed: 3.5
"""


@pytest.fixture
def levels_dir(tmp_path):
    (tmp_path / 'test.yaml').write_text(VALID_LADDER_YAML)
    return tmp_path


class TestLevelLoader:

    def test_bundled_default_matches_builtin(self):
        """The packaged default.yaml describes the built-in ladder."""
        ladder = LevelLoader().load_ladder('default')
        assert [(l.score_to_beat, l.speed) for l in ladder.levels] == \
            [(l.score_to_beat, l.speed) for l in DEFAULT_LADDER.levels]

    def test_list_ladders(self, levels_dir):
        (levels_dir / '_hidden.yaml').write_text(VALID_LADDER_YAML)
        assert LevelLoader(levels_dir).list_ladders() == ['test']

    def test_list_missing_dir(self, tmp_path):
        assert LevelLoader(tmp_path / 'nope').list_ladders() == []

    def test_load_ladder(self, levels_dir):
        ladder = LevelLoader(levels_dir).load_ladder('test')
        assert ladder.name == "Test Ladder"
        assert ladder.slug == 'test'
        assert [l.number for l in ladder.levels] == [1, 2]
        assert ladder.levels[0].name == "Level 1"
        assert ladder.levels[1].name == "Final"
        assert ladder.levels[1].speed == 3.5

    def test_load_by_path(self, levels_dir):
        ladder = LevelLoader().load_ladder(str(levels_dir / 'test.yaml'))
        assert ladder.name == "Test Ladder"

    def test_missing_ladder(self, levels_dir):
        with pytest.raises(FileNotFoundError):
            LevelLoader(levels_dir).load_ladder('missing')

    def test_empty_file(self, levels_dir):
        (levels_dir / 'empty.yaml').write_text("")
        with pytest.raises(ValueError):
            LevelLoader(levels_dir).load_ladder('empty')

    @pytest.mark.parametrize("body", [
        "levels: []",
        "levels:\n  - speed: 1",
        "levels:\n  - score_to_beat: 10\n    speed: 0",
        "levels:\n  - score_to_beat: ten\n    speed: 1",
        "levels:\n  - score_to_beat: 20\n    speed: 1\n  - score_to_beat: 10\n    speed: 2",
        "levels:\n  - just a string",
    ])
    def test_invalid_ladders(self, levels_dir, body):
        (levels_dir / 'bad.yaml').write_text(body)
        with pytest.raises(ValueError):
            LevelLoader(levels_dir).load_ladder('bad')


class TestLevelLadder:

    def test_starts_at_level_one(self):
        ladder = LevelLadder()
        assert ladder.level == 1
        assert ladder.speed == 0.5

    def test_below_threshold(self):
        ladder = LevelLadder()
        assert ladder.check(19) == []
        assert ladder.level == 1

    def test_advances_through_several_levels(self):
        ladder = LevelLadder()
        entered = ladder.check(55)
        assert [l.number for l in entered] == [2, 3]
        assert ladder.speed == 4.0

    def test_last_level_never_advances(self):
        ladder = LevelLadder()
        ladder.check(1000)
        assert ladder.level == 3
        assert ladder.is_last
        assert ladder.check(5000) == []

    def test_reset(self):
        ladder = LevelLadder()
        ladder.check(60)
        ladder.reset()
        assert ladder.level == 1
