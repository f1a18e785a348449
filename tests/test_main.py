import pytest

from ai_copter.__main__ import load_config, main, train
from ai_copter.config import GameConfig

SMALL_CONFIG = """
[GeneticAlgorithm]
population_size = 6
retained_fraction = 0.5

[Training]
max_ticks = 100
fitness_threshold = none
"""


def test_headless_training_prints_summary(tmp_path, capsys):
    path = tmp_path / "config.txt"
    path.write_text(SMALL_CONFIG)

    main(["--config", str(path), "train", "--headless", "--generations", "2", "--seed", "1"])

    out = capsys.readouterr().out
    assert "Running generation 1" in out
    assert "TRAINING SUMMARY" in out
    assert "Generations run      : 2" in out


def test_default_config_is_found():
    assert load_config(None) == GameConfig()


def test_command_is_required():
    with pytest.raises(SystemExit):
        main([])


@pytest.mark.parametrize("generations", ["0", "-3", "many"])
def test_generations_must_be_positive(generations):
    with pytest.raises(SystemExit):
        main(["train", "--headless", "--generations", generations])


def test_train_without_generations_has_no_winner(capsys):
    config = GameConfig.from_string(SMALL_CONFIG)
    assert train(config, 0, 1, headless=True, watch=False) is None
    assert "No generation was run" in capsys.readouterr().out
