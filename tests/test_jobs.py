"""Tests for the deck simulation job."""

import json
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from decktester.jobs.simulate_deck import load_deck_file, main, simulate_deck_file
from decktester.models.card import CardCategory


@pytest.fixture
def deck_file(tmp_path: Path) -> Path:
    path = tmp_path / "lightning_box.json"
    path.write_text(
        json.dumps(
            {
                "name": "Lightning Box",
                "cards": [
                    {
                        "card_id": "sv1-81",
                        "category": "basic_unit",
                        "quantity": 12,
                        "name": "Pikachu",
                    },
                    {"card_id": "sv2-13", "category": "evolution_unit", "quantity": 8},
                    {"card_id": "sv1-170", "category": "trainer", "quantity": 28},
                    {"card_id": "energy-l", "category": "basic_energy", "quantity": 12},
                ],
            }
        )
    )
    return path


class TestLoadDeckFile:
    def test_load(self, deck_file: Path) -> None:
        deck = load_deck_file(deck_file)

        assert deck.name == "Lightning Box"
        assert deck.deck_id == "lightning_box"
        assert deck.total_cards() == 60
        assert deck.entries[0].name == "Pikachu"
        assert deck.entries[1].category == CardCategory.EVOLUTION_UNIT

    def test_unknown_category(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(
            json.dumps({"cards": [{"card_id": "x", "category": "stadium", "quantity": 60}]})
        )

        with pytest.raises(ValueError, match="Invalid deck file"):
            load_deck_file(path)

    def test_missing_cards(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.json"
        path.write_text(json.dumps({"name": "Nothing"}))

        with pytest.raises(ValueError):
            load_deck_file(path)


class TestSimulateDeckFile:
    def test_returns_session_dict(self, deck_file: Path) -> None:
        result = simulate_deck_file(deck_file, number_of_hands=5, turn_horizon=2, seed=3)

        assert len(result["trials"]) == 5
        assert result["config"]["random_seed_base"] == 3
        assert result["aggregate_stats"]["successful_trials"] == 5

    def test_seeded_runs_match(self, deck_file: Path) -> None:
        first = simulate_deck_file(deck_file, number_of_hands=20, seed=9, workers=1)
        second = simulate_deck_file(deck_file, number_of_hands=20, seed=9, workers=4)

        assert first == second


class TestMain:
    def test_prints_session(self, deck_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with patch.object(sys, "argv", ["decktester-simulate", str(deck_file), "--hands", "4"]):
            main()

        output = json.loads(capsys.readouterr().out)
        assert len(output["trials"]) == 4

    def test_stats_only(self, deck_file: Path, capsys: pytest.CaptureFixture[str]) -> None:
        argv = ["decktester-simulate", str(deck_file), "--hands", "4", "--stats-only"]
        with patch.object(sys, "argv", argv):
            main()

        output = json.loads(capsys.readouterr().out)
        assert output["requested_trials"] == 4
        assert "trials" not in output

    def test_missing_file_exits_non_zero(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        with patch.object(sys, "argv", ["decktester-simulate", str(tmp_path / "nope.json")]):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 1
        assert "Deck file not found" in caplog.text

    def test_rejected_settings_exit_non_zero(self, deck_file: Path) -> None:
        with patch.object(sys, "argv", ["decktester-simulate", str(deck_file), "--hands", "0"]):
            with pytest.raises(SystemExit) as exc_info:
                main()

        assert exc_info.value.code == 1
