#
# Front panel for vending_machine.py using the FreeSimpleGUI lib.
#
# PySimpleGUI recipes used:
#
# Persistent GUI example
# https://pysimplegui.readthedocs.io/en/latest/cookbook/#recipe-pattern-2a-persistent-window-multiple-reads-using-an-event-loop
#
# Asynchronous Window With Periodic Update
# https://pysimplegui.readthedocs.io/en/latest/cookbook/#asynchronous-window-with-periodic-update

from decimal import Decimal

import FreeSimpleGUI as sg

from vending_demo import DEMO_STOCK, load
from vending_machine import VendingMachine, fmt, money

COINS = {
    "0.05": ("5¢", Decimal("0.05")),
    "0.10": ("10¢", Decimal("0.10")),
    "0.25": ("25¢", Decimal("0.25")),
    "1.00": ("$1", Decimal("1.00")),
    "2.00": ("$2", Decimal("2.00")),
}

LOG_EVENT = "-LOG-"

def gui_log(window, message):
    """Send output text into the GUI Multiline display."""
    window["-OUTPUT-"].update(message + "\n", append=True)

def status_text(machine):
    status = machine.get_status()
    return (f"State: {status['state']}   Balance: {fmt(status['balance'])}"
            f"   Selected: {status['selected_item'] or 'None'}")

def make_window(stock):
    # Coin buttons
    coin_col = [[sg.Text("ENTER COINS", font=("Helvetica", 24))]]
    for key, (label, _value) in COINS.items():
        coin_col.append([sg.Button(label, key=key, font=("Helvetica", 18))])

    # Item buttons with price beside them
    prod_col = [[sg.Text("SELECT ITEM", font=("Helvetica", 24))]]
    for item_id, (_quantity, price) in stock.items():
        prod_col.append([
            sg.Button(item_id, font=("Helvetica", 18), size=(10, 1)),
            sg.Text(fmt(money(price)), font=("Helvetica", 18), pad=((20, 0), (5, 5)))
        ])

    layout = [
        [sg.Column(coin_col), sg.VSeparator(), sg.Column(prod_col)],
        [sg.Button("DISPENSE", font=("Helvetica", 14)),
         sg.Button("OUT OF ORDER", font=("Helvetica", 14)),
         sg.Button("STATUS", font=("Helvetica", 14))],
        [sg.Text("State: Idle", key="-STATUS-", size=(60, 1))],
        [sg.Multiline(key="-OUTPUT-", autoscroll=True, size=(60, 10), disabled=True)]
    ]
    return sg.Window("Vending Machine", layout)

def handle_event(machine, window, event, values):
    """Route one window event to the machine."""
    if event == LOG_EVENT:
        gui_log(window, values[event])
    elif event in COINS:
        machine.insert_coin(COINS[event][1])
    elif event in machine.inventory:
        machine.select_item(event)
    elif event == "DISPENSE":
        machine.dispense_item()
    elif event == "OUT OF ORDER":
        machine.set_out_of_order()
    elif event == "STATUS":
        machine.display_status()
    window["-STATUS-"].update(status_text(machine))


def main():
    sg.theme("BluePurple")

    window = make_window(DEMO_STOCK)
    window.finalize()

    # The dispense timer narrates from its own thread, so messages go
    # through the window event queue instead of touching widgets directly
    vending = VendingMachine(display=lambda message: window.write_event_value(LOG_EVENT, message))
    load(vending, DEMO_STOCK)

    # Main event loop
    while True:
        event, values = window.read(timeout=100)
        if event in (sg.WIN_CLOSED, "Exit"):	# Closes window and ends program
            break
        handle_event(vending, window, event, values)

    vending.finish_dispense()
    window.close()
    print("Normal exit")


if __name__ == "__main__":
    main()
