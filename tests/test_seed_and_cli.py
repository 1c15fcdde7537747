"""Tests for quote seeding and the command line."""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest
from click.testing import CliRunner
from sqlalchemy import select

from dailyspark import cli as cli_module
from dailyspark.models.orm.quote import QuoteORM
from dailyspark.models.schemas.quote import QuoteSeedModel
from dailyspark.seed import DEFAULT_QUOTES, load_quotes_file, seed_quotes


class TestSeed:
    def test_default_quotes(self, db):
        assert seed_quotes(db) == len(DEFAULT_QUOTES)
        assert len(db.scalars(select(QuoteORM)).all()) == len(DEFAULT_QUOTES)

    def test_idempotent(self, db):
        seed_quotes(db)
        assert seed_quotes(db) == 0
        assert len(db.scalars(select(QuoteORM)).all()) == len(DEFAULT_QUOTES)

    def test_skips_duplicates_within_batch(self, db):
        quotes = [QuoteSeedModel(text="Keep going."), QuoteSeedModel(text="Keep going.", author="Someone")]
        assert seed_quotes(db, quotes) == 1

    def test_load_quotes_file(self, tmp_path):
        path = tmp_path / "quotes.json"
        path.write_text(json.dumps([{"text": "Onward.", "author": None}, {"text": "Upward."}]))

        quotes = load_quotes_file(path)

        assert [q.text for q in quotes] == ["Onward.", "Upward."]
        assert quotes[1].author is None

    def test_load_quotes_file_rejects_non_list(self, tmp_path):
        path = tmp_path / "quotes.json"
        path.write_text(json.dumps({"text": "Onward."}))
        with pytest.raises(ValueError):
            load_quotes_file(path)


class TestQuoteCommand:
    @pytest.fixture(autouse=True)
    def use_test_client(self, client, clock, monkeypatch):
        # the CLI controller runs on the real clock
        clock.now = datetime.now(timezone.utc).replace(tzinfo=None)
        monkeypatch.setattr(cli_module.DailyQuoteClient, "close", lambda self: None)
        monkeypatch.setattr(
            cli_module.DailyQuoteClient,
            "from_url",
            classmethod(lambda cls, api_url, timeout=10.0: cls(client)),
        )

    def test_fetches_and_renders(self, tmp_path, add_quotes):
        add_quotes("Q1")
        state_file = tmp_path / "state.json"

        result = CliRunner().invoke(cli_module.cli, ["quote", "--state-file", str(state_file)])

        assert result.exit_code == 0, result.output
        assert "Here is your quote!" in result.output
        assert '"Quote Q1"' in result.output
        assert "dailyspark_quote" in state_file.read_text()

    def test_second_run_uses_cache(self, tmp_path, add_quotes):
        add_quotes("Q1")
        state_file = tmp_path / "state.json"
        runner = CliRunner()
        runner.invoke(cli_module.cli, ["quote", "--state-file", str(state_file)])

        result = runner.invoke(cli_module.cli, ["quote", "--state-file", str(state_file)])

        assert result.exit_code == 0, result.output
        assert "Here is your quote!" not in result.output
        assert '"Quote Q1"' in result.output

    def test_server_error_exits_non_zero(self, tmp_path):
        result = CliRunner().invoke(cli_module.cli, ["quote", "--state-file", str(tmp_path / "s.json")])
        assert result.exit_code == 1


class TestInitDbCommand:
    @pytest.fixture(autouse=True)
    def use_test_engine(self, engine, session_factory, monkeypatch):
        monkeypatch.setattr("dailyspark.core.db.engine", engine)
        monkeypatch.setattr("dailyspark.core.db.SessionLocal", session_factory)

    def _quote_count(self, db):
        return len(db.scalars(select(QuoteORM)).all())

    def test_seeds_default_quotes(self, db):
        result = CliRunner().invoke(cli_module.cli, ["init-db"])

        assert result.exit_code == 0, result.output
        assert f"Seeded {len(DEFAULT_QUOTES)} quotes." in result.output
        assert self._quote_count(db) == len(DEFAULT_QUOTES)

    def test_no_seed_only_creates_tables(self, db):
        result = CliRunner().invoke(cli_module.cli, ["init-db", "--no-seed"])

        assert result.exit_code == 0, result.output
        assert "Seeded" not in result.output
        assert self._quote_count(db) == 0

    def test_seeds_from_file(self, db, tmp_path):
        path = tmp_path / "quotes.json"
        path.write_text(json.dumps([{"text": "Onward.", "author": "Someone"}, {"text": "Upward."}]))

        result = CliRunner().invoke(cli_module.cli, ["init-db", "--file", str(path)])

        assert result.exit_code == 0, result.output
        assert "Seeded 2 quotes." in result.output
        assert sorted(db.scalars(select(QuoteORM.text)).all()) == ["Onward.", "Upward."]

    def test_invalid_file_is_reported(self, db, tmp_path):
        path = tmp_path / "quotes.json"
        path.write_text(json.dumps({"text": "Onward."}))

        result = CliRunner().invoke(cli_module.cli, ["init-db", "--file", str(path)])

        assert result.exit_code != 0
        assert "must contain a JSON list of quotes" in result.output
        assert self._quote_count(db) == 0
