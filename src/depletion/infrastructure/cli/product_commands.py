"""CLI commands for the product catalog."""

from __future__ import annotations

import click

from depletion.application.add_product import AddProductHandler
from depletion.application.commands import EditProductDetails, ProvisionProduct
from depletion.application.dto import ProductDTO
from depletion.application.edit_product import EditProductHandler
from depletion.application.remove_product import RemoveProductHandler
from depletion.application.show_product import ShowProductHandler
from depletion.application.show_stock import ShowStockHandler
from depletion.domain.exceptions import DomainException
from depletion.domain.model.value_objects import StoreScope
from depletion.infrastructure.bootstrap import build_container


def _display_product(dto: ProductDTO) -> None:
    """Shared formatting for a single product."""
    click.echo(f"Product {dto.id}")
    click.echo(f"  Name:       {dto.brand} {dto.name}".rstrip())
    if dto.color_name or dto.color_code:
        click.echo(f"  Color:      {dto.color_name} {dto.color_code}".rstrip())
    if dto.category:
        click.echo(f"  Category:   {dto.category}")
    click.echo(f"  Price:      {dto.price} {dto.currency}")
    click.echo(f"  Quantity:   {dto.quantity} (alert at {dto.min_stock_alert})")
    click.echo(f"  Used:       {dto.usage_count} times, last {dto.last_used or 'never'}")
    click.echo(f"  Rate:       {dto.average_uses_per_month:.2f} uses/month")
    click.echo(f"  Days left:  {dto.estimated_days_left}")
    if dto.alert_status.is_low_stock:
        click.echo("  ** LOW STOCK **")


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--quantity", required=True, type=int, help="Units in stock.")
@click.option("--brand", default="", help="Brand.")
@click.option("--color-code", default="", help="Color code, e.g. #ff0000.")
@click.option("--color-name", default="", help="Color name.")
@click.option("--category", default="", help="Category, e.g. POLISH or GEL.")
@click.option("--price", default="0", help="Price (e.g. 1200).")
@click.option("--min-stock-alert", default=5, type=int, help="Low-stock threshold.")
@click.pass_obj
def product_add(
    store_id: str,
    name: str,
    quantity: int,
    brand: str,
    color_code: str,
    color_name: str,
    category: str,
    price: str,
    min_stock_alert: int,
) -> None:
    """Add a new product to the store's catalog."""
    handler = AddProductHandler(build_container().uow_factory)
    command = ProvisionProduct(
        name=name,
        quantity=quantity,
        brand=brand,
        color_code=color_code,
        color_name=color_name,
        category=category,
        price=price,
        min_stock_alert=min_stock_alert,
    )

    try:
        dto = handler.handle(StoreScope(store_id), command)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {dto.id} '{dto.name}' added with {dto.quantity} in stock")


@click.command("list")
@click.option("--low-stock", is_flag=True, default=False, help="Only products at or below their alert threshold.")
@click.pass_obj
def product_list(store_id: str, low_stock: bool) -> None:
    """List the store's products."""
    handler = ShowStockHandler(build_container().uow_factory)

    try:
        lines = handler.handle(StoreScope(store_id), low_stock_only=low_stock)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not lines:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<34} {'Product':<28} {'Qty':>5} {'Alert':>6} {'Days':>6}")
    click.echo("-" * 83)
    for line in lines:
        label = f"{line.brand} {line.name}".strip()
        flag = "LOW" if line.alert_status.is_low_stock else ""
        click.echo(
            f"{line.id:<34} {label[:28]:<28} {line.quantity:>5} {flag:>6} {line.estimated_days_left:>6}"
        )


@click.command("show")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.pass_obj
def product_show(store_id: str, product_id: str) -> None:
    """Show one product with its depletion estimate."""
    handler = ShowProductHandler(build_container().uow_factory)

    try:
        dto = handler.handle(StoreScope(store_id), product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_product(dto)


@click.command("edit")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--name", default=None, help="New name.")
@click.option("--brand", default=None, help="New brand.")
@click.option("--color-code", default=None, help="New color code.")
@click.option("--color-name", default=None, help="New color name.")
@click.option("--category", default=None, help="New category.")
@click.option("--price", default=None, help="New price.")
@click.option("--quantity", default=None, type=int, help="Set units in stock (restock).")
@click.option("--min-stock-alert", default=None, type=int, help="New low-stock threshold.")
@click.pass_obj
def product_edit(
    store_id: str,
    product_id: str,
    name: str | None,
    brand: str | None,
    color_code: str | None,
    color_name: str | None,
    category: str | None,
    price: str | None,
    quantity: int | None,
    min_stock_alert: int | None,
) -> None:
    """Edit catalog fields of a product."""
    container = build_container()
    handler = EditProductHandler(container.uow_factory, container.locks)
    command = EditProductDetails(
        product_id=product_id,
        name=name,
        brand=brand,
        color_code=color_code,
        color_name=color_name,
        category=category,
        price=price,
        quantity=quantity,
        min_stock_alert=min_stock_alert,
    )

    try:
        dto = handler.handle(StoreScope(store_id), command)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_product(dto)


@click.command("remove")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.confirmation_option(prompt="Remove the product and its usage history?")
@click.pass_obj
def product_remove(store_id: str, product_id: str) -> None:
    """Remove a product together with its usage history."""
    container = build_container()
    handler = RemoveProductHandler(container.uow_factory, container.locks)

    try:
        handler.handle(StoreScope(store_id), product_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product {product_id} removed.")
