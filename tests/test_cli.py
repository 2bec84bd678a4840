"""
CLI smoke tests.
"""

import json

import pytest

import cli


def run_cli(monkeypatch, *argv):
    monkeypatch.setattr("sys.argv", ["cli.py", *argv])
    return cli.main()


class TestCommands:

    def test_no_command(self, monkeypatch, capsys):
        assert run_cli(monkeypatch) == 1

    def test_catalog_json(self, monkeypatch, capsys):
        assert run_cli(monkeypatch, "catalog", "--json") == 0
        data = json.loads(capsys.readouterr().out)
        assert data["gems"]["red-attack"]["value"] == 10
        assert "powerful" in data["augmentations"]

    def test_bag(self, monkeypatch, capsys):
        assert run_cli(monkeypatch, "bag", "--seed", "GEMS1", "--class", "rogue", "--json") == 0
        bag = json.loads(capsys.readouterr().out)
        assert len(bag) == 20

    def test_upgrades(self, monkeypatch, capsys):
        assert run_cli(monkeypatch, "upgrades", "--seed", "GEMS1", "--class", "knight", "--unlock-all") == 0
        assert "[augmentation]" in capsys.readouterr().out

    def test_simulate(self, monkeypatch, capsys):
        assert run_cli(monkeypatch, "simulate", "--seed", "GEMS1", "--class", "mage", "--days", "2", "-v") == 0
        out = capsys.readouterr().out
        assert "Day 2 battle 2" in out
        assert "played" in out

    def test_rng(self, monkeypatch, capsys):
        assert run_cli(monkeypatch, "rng", "--seed", "GEMS1", "--count", "3") == 0
        assert "counter after 3 calls: 3" in capsys.readouterr().out
