from __future__ import annotations

import json
import os
import tempfile

from typer.testing import CliRunner

from longweekend.cli import app

runner = CliRunner()


def _write_config(data: dict[str, object]) -> str:
    """Write a JSON config to a temp file and return its path."""
    fd, path = tempfile.mkstemp(suffix=".json")
    with os.fdopen(fd, "w") as f:
        json.dump(data, f)
    return path


class TestHolidaysCommand:
    def test_lists_holidays(self) -> None:
        result = runner.invoke(app, ["holidays", "--year", "2025"])
        assert result.exit_code == 0
        assert "2025-12-24  Wigilia Bożego Narodzenia" in result.output
        assert "2025-04-20  Wielkanoc" in result.output

    def test_unknown_country(self) -> None:
        result = runner.invoke(app, ["holidays", "--year", "2025", "--country", "xx"])
        assert result.exit_code == 1

    def test_config_moves_christmas_eve_cutover(self) -> None:
        path = _write_config({"christmas_eve_first_year": 2020})
        try:
            result = runner.invoke(app, ["holidays", "--year", "2021", "--config", path])
        finally:
            os.unlink(path)
        assert result.exit_code == 0
        assert "2021-12-24  Wigilia Bożego Narodzenia" in result.output


class TestCalendarCommand:
    def test_single_month(self) -> None:
        result = runner.invoke(app, ["calendar", "--year", "2029", "--month", "5"])
        assert result.exit_code == 0
        assert "Maj 2029" in result.output
        assert " 2m" in result.output
        assert "Kwiecień" not in result.output

    def test_plan_overlay(self) -> None:
        result = runner.invoke(app, ["calendar", "--year", "2025", "--month", "12", "--plan", "1"])
        assert result.exit_code == 0
        assert "Weź wolne:" in result.output

    def test_out_of_range(self) -> None:
        result = runner.invoke(app, ["calendar", "--year", "1980"])
        assert result.exit_code == 1


class TestStatsCommand:
    def test_text(self) -> None:
        result = runner.invoke(app, ["stats", "--year", "2024"])
        assert result.exit_code == 0
        assert "ROK 2024: klasa A" in result.output

    def test_json(self) -> None:
        result = runner.invoke(app, ["stats", "--year", "2024", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["year"] == 2024
        assert data["total_holidays"] == 13
        assert data["bridge_days_count"] == 4

    def test_redeem_saturdays(self) -> None:
        plain = json.loads(runner.invoke(app, ["stats", "--year", "2024", "--json"]).output)
        redeemed = json.loads(
            runner.invoke(app, ["stats", "--year", "2024", "--json", "--redeem-saturdays"]).output
        )
        assert redeemed["efficiency_score"] == plain["efficiency_score"] + 1

    def test_global_with_config(self) -> None:
        path = _write_config({"min_year": 2024, "max_year": 2025})
        try:
            result = runner.invoke(
                app, ["stats", "--year", "2024", "--global", "--json", "--config", path]
            )
        finally:
            os.unlink(path)
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["global"]["total_holidays"] == {"min": 13, "max": 14, "avg": 13.5}

    def test_missing_config(self) -> None:
        result = runner.invoke(app, ["stats", "--config", "/nonexistent/config.json"])
        assert result.exit_code == 1

    def test_config_with_wrong_value_type(self) -> None:
        path = _write_config({"max_cost": "8"})
        try:
            result = runner.invoke(app, ["strategies", "--year", "2025", "--config", path])
        finally:
            os.unlink(path)
        assert result.exit_code == 1
        assert "max_cost" in result.output


class TestStrategiesCommand:
    def test_text(self) -> None:
        result = runner.invoke(app, ["strategies", "--year", "2029", "--limit", "3"])
        assert result.exit_code == 0
        assert "Strategie urlopowe na rok 2029" in result.output
        assert " 3. " in result.output
        assert " 4. " not in result.output

    def test_json_with_history(self) -> None:
        table = {
            "Majówka": {
                "samples": 2,
                "efficiencies": [2.0, 3.0],
                "maxEfficiency": 3.0,
                "combinations": {"3.00_9": {"count": 1, "years": [2029]}},
            }
        }
        path = _write_config(table)
        try:
            result = runner.invoke(
                app, ["strategies", "--year", "2029", "--json", "--history", path]
            )
        finally:
            os.unlink(path)
        assert result.exit_code == 0
        data = json.loads(result.output)
        majowka = [s for s in data["strategies"] if s["period_name"] == "Majówka"]
        assert majowka
        assert all("rating" in s for s in majowka)
        assert all(s["text"] for s in data["strategies"])

    def test_bad_history(self) -> None:
        path = _write_config({"Majówka": {"samples": 1}})
        try:
            result = runner.invoke(app, ["strategies", "--year", "2029", "--history", path])
        finally:
            os.unlink(path)
        assert result.exit_code == 1


class TestHistoryCommand:
    def test_writes_table(self) -> None:
        fd, path = tempfile.mkstemp(suffix=".json")
        os.close(fd)
        try:
            result = runner.invoke(app, ["history", "--from", "2025", "--to", "2025", "-o", path])
            assert result.exit_code == 0
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        finally:
            os.unlink(path)
        assert "Majówka" in data


class TestQualityCommand:
    def test_scored_holiday(self) -> None:
        result = runner.invoke(app, ["quality", "--holiday", "Nowy Rok", "--year", "2024"])
        assert result.exit_code == 0
        assert "Nowy Rok 2024: Pon" in result.output
        assert "Najlepszy" in result.output

    def test_unknown_holiday(self) -> None:
        result = runner.invoke(app, ["quality", "--holiday", "Dzień Dziecka", "--year", "2024"])
        assert result.exit_code == 1
