"""Tests for the typer command line."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest
from typer.testing import CliRunner

from quickmart.entrypoints.cli import app
from tests.consts import SAMPLE_INVENTORY

runner = CliRunner()


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    shutil.copyfile(SAMPLE_INVENTORY, tmp_path / "inventory.txt")
    path = tmp_path / "register.yaml"
    path.write_text(
        "inventory_file: inventory.txt\n"
        "counter_file: transaction_counter.txt\n"
        "receipts_dir: receipts\n"
        "journal_dir: journal\n",
        encoding="utf-8",
    )
    return path


def test_inventory_lists_positions(config_file: Path) -> None:
    result = runner.invoke(app, ["--config", str(config_file), "inventory"])

    assert result.exit_code == 0, result.output
    assert "1. Soda: 10, $5.99, $5.49, Taxable" in result.output
    assert "2. Milk: 5, $3.50, $3.25, Tax-Exempt" in result.output


def test_checkout_prints_receipt_and_updates_files(config_file: Path) -> None:
    result = runner.invoke(
        app,
        [
            "--config",
            str(config_file),
            "checkout",
            "--member",
            "--item",
            "Soda=2",
            "--item",
            "#2=1",
            "--cash",
            "$20",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "TRANSACTION: 000001" in result.output
    assert "YOU SAVED: $1.25!" in result.output

    base = config_file.parent
    assert (base / "transaction_counter.txt").read_text(encoding="utf-8").strip() == "2"
    assert "Soda: 8," in (base / "inventory.txt").read_text(encoding="utf-8")
    assert len(list((base / "receipts").glob("transaction_000001_*.txt"))) == 1
    assert len(list((base / "journal").glob("transaction_000001_*.yaml"))) == 1


def test_checkout_with_insufficient_cash_fails(config_file: Path) -> None:
    result = runner.invoke(
        app, ["--config", str(config_file), "checkout", "-i", "Soda=2", "--cash", "5"]
    )

    assert result.exit_code == 1
    assert "Insufficient payment" in result.output
    assert not (config_file.parent / "transaction_counter.txt").exists()


def test_checkout_with_unknown_item_fails(config_file: Path) -> None:
    result = runner.invoke(
        app, ["--config", str(config_file), "checkout", "-i", "Unicorn=1", "--cash", "5"]
    )

    assert result.exit_code == 1
    assert "Item not found" in result.output


@pytest.mark.parametrize("item", ["Soda", "Soda=0", "Soda=x", "#x=1"])
def test_checkout_rejects_malformed_item(config_file: Path, item: str) -> None:
    result = runner.invoke(
        app, ["--config", str(config_file), "checkout", "-i", item, "--cash", "5"]
    )

    assert result.exit_code == 2


def test_next_number_does_not_consume(config_file: Path) -> None:
    (config_file.parent / "transaction_counter.txt").write_text("17\n", encoding="utf-8")

    first = runner.invoke(app, ["--config", str(config_file), "next-number"])
    second = runner.invoke(app, ["--config", str(config_file), "next-number"])

    assert first.output.strip() == second.output.strip() == "000017"


def test_checkout_prints_receipt_when_it_cannot_be_saved(config_file: Path) -> None:
    base = config_file.parent
    (base / "blocker").write_text("", encoding="utf-8")
    config_file.write_text(
        "inventory_file: inventory.txt\n"
        "counter_file: transaction_counter.txt\n"
        "receipts_dir: blocker/receipts\n"
        "journal_dir: journal\n",
        encoding="utf-8",
    )

    result = runner.invoke(
        app, ["--config", str(config_file), "checkout", "-i", "Soda=1", "--cash", "10"]
    )

    assert result.exit_code == 0, result.output
    assert "TRANSACTION: 000001" in result.output
    assert "Warning: Failed to write receipt" in result.output
    assert (base / "transaction_counter.txt").read_text(encoding="utf-8").strip() == "2"
    assert "Soda: 9," in (base / "inventory.txt").read_text(encoding="utf-8")
