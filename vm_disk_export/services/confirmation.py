"""
Operator confirmation gate.

The export service takes any ``Callable[[ExportPlan], bool]``; this module
provides the interactive implementation used by the CLI.
"""

from typing import Callable, Optional

from rich.console import Console
from rich.table import Table

from ..models import ExportPlan

PLAN_LABELS = {
    "subscription_id": "Subscription",
    "resource_group": "Resource group",
    "region": "Region",
    "vm_name": "Virtual machine",
    "os_disk_name": "OS disk",
    "storage_account": "Storage account",
    "storage_resource_group": "Storage resource group",
    "container": "Container",
    "destination_file_name": "Destination file",
    "sas_expiry_seconds": "SAS expiry (seconds)",
}


def is_affirmative(answer: str) -> bool:
    """Only a single 'y' (any case) confirms."""
    return answer.strip().lower() == "y"


def render_plan(plan: ExportPlan) -> Table:
    table = Table(title="OS disk export plan", show_header=False)
    table.add_column("Setting", style="bold")
    table.add_column("Value")
    for key, value in plan.to_dict().items():
        table.add_row(PLAN_LABELS.get(key, key), str(value))
    return table


class ConsoleConfirmation:
    """
    Shows the plan and blocks on a terminal read.

    There is no timeout. Anything other than 'y'/'Y' declines.
    """

    def __init__(
        self,
        console: Optional[Console] = None,
        input_func: Callable[[str], str] = input,
    ) -> None:
        self.console = console or Console()
        self.input_func = input_func

    def __call__(self, plan: ExportPlan) -> bool:
        self.console.print(render_plan(plan))
        answer = self.input_func("Proceed with the export? [y/N]: ")
        return is_affirmative(answer)
