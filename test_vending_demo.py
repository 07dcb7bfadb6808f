"""
PyTest for  testing vending_demo.py
Runs the five scenarios end to end and checks where both machines end up.
"""

from decimal import Decimal

import pytest
from vending_demo import main


@pytest.fixture
def messages():
    return []

@pytest.fixture
def machines(messages):
    return main(display=messages.append, dispense_delay=0)


def test_first_machine(machines):
    machine, _ = machines
    status = machine.get_status()
    assert status["state"] == "OutOfOrder"
    assert status["balance"] == Decimal("0")
    assert status["selected_item"] is None
    assert status["inventory"] == {"SODA": 9, "CHIPS": 14, "CANDY": 20}


def test_second_machine(machines):
    _, machine2 = machines
    status = machine2.get_status()
    assert status["state"] == "Idle"
    assert status["inventory"] == {"COFFEE": 7, "WATER": 24}


def test_scenario_narration(machines, messages):
    headers = [m for m in messages if m.startswith("=== Scenario")]
    assert len(headers) == 5
    assert "Insufficient funds. Need $0.25 more to dispense CHIPS" in messages
    assert "Cannot dispense in Idle state. Please select an item first." in messages
    assert messages.count("Machine is out of order.") == 2
    assert not any("Change:" in m for m in messages)


def test_timed_run():
    machine, machine2 = main(display=lambda message: None, dispense_delay=0.01)
    assert machine.inventory["SODA"] == 9
    assert machine2.get_status()["state"] == "Idle"
