from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Annotated, Optional

import typer

from quickmart.config import StoreConfig
from quickmart.exceptions import QuickMartError
from quickmart.models.catalog import CustomerClass
from quickmart.repositories.catalog import format_catalog_line
from quickmart.services.receipt import ReceiptRenderer, format_transaction_number
from .base import build_catalog, build_ledger, build_session

app = typer.Typer(
    name="quickmart",
    add_completion=False,
    no_args_is_help=True,
    help="Jerry's Quick Mart register: inventory listing and checkout.",
)

POSITION_PREFIX = "#"


def _parse_item(raw: str) -> tuple[str | int, int]:
    """Split ``NAME=QTY`` (or ``#POSITION=QTY``) into product and quantity.

    Args:
        raw: Item argument as typed on the command line.

    Returns:
        Tuple of product name or 1-based catalog position, and quantity.

    Raises:
        typer.BadParameter: When the argument is malformed.
    """
    product, sep, quantity_text = raw.rpartition("=")
    product = product.strip()
    if not sep or not product:
        raise typer.BadParameter(f"expected NAME=QTY, got {raw!r}")
    try:
        quantity = int(quantity_text)
    except ValueError as exc:
        raise typer.BadParameter(f"quantity must be an integer in {raw!r}") from exc
    if quantity <= 0:
        raise typer.BadParameter(f"quantity must be greater than 0 in {raw!r}")

    if product.startswith(POSITION_PREFIX):
        try:
            return int(product[len(POSITION_PREFIX) :]), quantity
        except ValueError as exc:
            raise typer.BadParameter(f"invalid product position in {raw!r}") from exc
    return product, quantity


def _parse_cash(value: str) -> Decimal:
    try:
        cash = Decimal(value.replace("$", "").strip())
    except InvalidOperation as exc:
        raise typer.BadParameter(f"invalid amount {value!r}") from exc
    if not cash.is_finite() or cash < 0:
        raise typer.BadParameter(f"invalid amount {value!r}")
    return cash


@app.callback()
def configure(
    ctx: typer.Context,
    config_path: Annotated[
        Optional[Path],
        typer.Option(
            "--config",
            "-c",
            help="YAML file with register file locations.",
            exists=True,
            file_okay=True,
            dir_okay=False,
            readable=True,
            resolve_path=True,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log debug output."),
    ] = False,
) -> None:
    """Load configuration shared by every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = StoreConfig.from_yaml(config_path) if config_path else StoreConfig()


@app.command("inventory")
def inventory(ctx: typer.Context) -> None:
    """List the catalog with the positions accepted by ``checkout --item #N=QTY``."""
    catalog = build_catalog(ctx.obj)
    if not len(catalog):
        typer.secho("The inventory is empty.", fg=typer.colors.YELLOW)
        return
    for position, record in enumerate(catalog.all(), start=1):
        typer.echo(f"{position}. {format_catalog_line(record)}")


@app.command("checkout")
def checkout(
    ctx: typer.Context,
    items: Annotated[
        list[str],
        typer.Option(
            "--item",
            "-i",
            help="Product and quantity as NAME=QTY or #POSITION=QTY; repeatable.",
        ),
    ],
    cash: Annotated[
        str,
        typer.Option("--cash", help="Cash tendered, e.g. 20.00."),
    ],
    member: Annotated[
        bool,
        typer.Option("--member/--regular", help="Price the basket for a rewards member."),
    ] = False,
) -> None:
    """Sell a basket, save the receipt and print it."""
    parsed_items = [_parse_item(raw) for raw in items]
    cash_tendered = _parse_cash(cash)

    session = build_session(ctx.obj)
    session.new_customer(CustomerClass.MEMBER if member else CustomerClass.REGULAR)
    try:
        for product, quantity in parsed_items:
            session.add(product, quantity)
        result = session.checkout(cash_tendered)
    except QuickMartError as exc:
        typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1) from exc

    typer.echo(ReceiptRenderer().render(result.transaction))
    if result.receipt_path is not None:
        typer.secho(f"Receipt saved as: {result.receipt_path}", fg=typer.colors.GREEN)
    for error in result.artifact_errors:
        typer.secho(f"Warning: {error}", fg=typer.colors.YELLOW, err=True)


@app.command("next-number")
def next_number(ctx: typer.Context) -> None:
    """Show the next transaction number without consuming it."""
    ledger = build_ledger(ctx.obj)
    typer.echo(format_transaction_number(ledger.peek))


def main() -> None:
    """Entry point for executing the Typer application."""
    app()


if __name__ == "__main__":
    main()
