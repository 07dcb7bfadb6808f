"""
PyTest for  testing vending_gui.py
Window is mocked so tests run without a display.
"""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

pytest.importorskip("FreeSimpleGUI")

from vending_gui import COINS, LOG_EVENT, gui_log, handle_event, status_text
from vending_machine import VendingMachine


@pytest.fixture
def window():
    return MagicMock()

@pytest.fixture
def machine():
    vm = VendingMachine(display=lambda message: None, dispense_delay=0)
    vm.restock("SODA", 3, "1.50")
    return vm


def test_gui_log(window):
    gui_log(window, "hello")
    window["-OUTPUT-"].update.assert_called_with("hello\n", append=True)


def test_log_event_goes_to_console(machine, window):
    handle_event(machine, window, LOG_EVENT, {LOG_EVENT: "Dispensing SODA..."})
    window["-OUTPUT-"].update.assert_any_call("Dispensing SODA...\n", append=True)


def test_purchase_through_buttons(machine, window):
    handle_event(machine, window, "SODA", {})
    for key in ("1.00", "0.25", "0.25"):
        handle_event(machine, window, key, {})
    assert machine.balance == Decimal("1.50")

    handle_event(machine, window, "DISPENSE", {})
    assert machine.inventory["SODA"] == 2
    window["-STATUS-"].update.assert_called_with(status_text(machine))


def test_out_of_order_button(machine, window):
    handle_event(machine, window, "OUT OF ORDER", {})
    assert machine.state.name == "OutOfOrder"
    assert status_text(machine).startswith("State: OutOfOrder")


def test_timeout_event_only_refreshes_status(machine, window):
    before = machine.get_status()
    handle_event(machine, window, "__TIMEOUT__", {})
    assert machine.get_status() == before


def test_coin_values():
    assert sum(value for _label, value in COINS.values()) == Decimal("3.40")
