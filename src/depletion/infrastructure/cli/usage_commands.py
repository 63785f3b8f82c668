"""CLI commands for recording and listing usage."""

from __future__ import annotations

import click

from depletion.application.commands import RecordUsage
from depletion.application.list_usage_history import ListUsageHistoryHandler
from depletion.application.record_usage import RecordUsageHandler
from depletion.domain.exceptions import DomainException
from depletion.domain.model.value_objects import StoreScope
from depletion.infrastructure.bootstrap import build_container


@click.command("record")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--note", default=None, help="Optional note for this usage.")
@click.pass_obj
def usage_record(store_id: str, product_id: str, note: str | None) -> None:
    """Record that one unit of a product was used."""
    handler = RecordUsageHandler(build_container().tracker())

    try:
        dto = handler.handle(StoreScope(store_id), RecordUsage(product_id=product_id, note=note))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    product = dto.product
    click.echo(f"Usage {dto.event.id} recorded at {dto.event.date}")
    click.echo(f"  Remaining:  {product.quantity}")
    click.echo(f"  Used:       {product.usage_count} times")
    click.echo(f"  Rate:       {product.average_uses_per_month:.2f} uses/month")
    click.echo(f"  Days left:  {dto.alert_status.estimated_days_left}")
    if dto.alert_status.is_low_stock:
        click.echo(
            f"  ** LOW STOCK ** (threshold {dto.alert_status.low_stock_threshold})"
        )


@click.command("history")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.pass_obj
def usage_history(store_id: str, product_id: str) -> None:
    """List a product's usage events, newest first."""
    handler = ListUsageHistoryHandler(build_container().uow_factory)

    try:
        events = handler.handle(StoreScope(store_id), product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not events:
        click.echo("No usage recorded.")
        return

    click.echo(f"{'Date':<34} {'Note'}")
    click.echo("-" * 60)
    for event in events:
        click.echo(f"{event.date:<34} {event.note or ''}")
