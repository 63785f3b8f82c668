import click

from depletion.infrastructure.cli.product_commands import (
    product_add,
    product_edit,
    product_list,
    product_remove,
    product_show,
)
from depletion.infrastructure.cli.usage_commands import usage_history, usage_record
from depletion.infrastructure.logging import configure_logging


@click.group()
@click.option(
    "--store",
    "store_id",
    envvar="DEPLETION_STORE_ID",
    required=True,
    help="Store (tenant) the command acts for.",
)
@click.pass_context
def cli(ctx: click.Context, store_id: str) -> None:
    """Depletion: consumable stock and run-out estimates"""
    configure_logging()
    ctx.obj = store_id


@cli.group()
def product() -> None:
    """Manage the product catalog."""


@cli.group()
def usage() -> None:
    """Record and inspect product usage."""


# Register subcommands
product.add_command(product_add)
product.add_command(product_edit)
product.add_command(product_list)
product.add_command(product_remove)
product.add_command(product_show)
usage.add_command(usage_history)
usage.add_command(usage_record)
