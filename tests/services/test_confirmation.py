"""Tests for the interactive confirmation gate."""

import pytest

from vm_disk_export.models import ExportPlan
from vm_disk_export.services.confirmation import ConsoleConfirmation, is_affirmative


@pytest.fixture
def plan(export_request):
    return ExportPlan(
        request=export_request,
        subscription_id="sub-1234",
        region="eastus",
        os_disk_name="vm1_OsDisk",
    )


@pytest.mark.parametrize("answer", ["y", "Y", " y ", "Y\n"])
def test_affirmative_answers(answer):
    assert is_affirmative(answer) is True


@pytest.mark.parametrize("answer", ["", "n", "N", "yes", "YES", "no", "q", "yy"])
def test_other_answers_decline(answer):
    assert is_affirmative(answer) is False


def test_shows_plan_and_accepts_y(plan, test_console, console_output):
    prompts = []

    def fake_input(prompt):
        prompts.append(prompt)
        return "Y"

    confirmation = ConsoleConfirmation(console=test_console, input_func=fake_input)

    assert confirmation(plan) is True
    assert len(prompts) == 1
    output = console_output.getvalue()
    for expected in ("vm1", "vm1_OsDisk", "acct1", "c1", "disk.vhd", "eastus"):
        assert expected in output


def test_declines_on_empty_answer(plan, test_console):
    confirmation = ConsoleConfirmation(console=test_console, input_func=lambda _: "")

    assert confirmation(plan) is False
