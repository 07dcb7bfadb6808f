#
# Demo script for vending_machine.py
# Runs five scenarios on two independent machines and narrates each step.
#

from vending_machine import VendingMachine, log

# Stock loaded into the first machine: item id -> (quantity, price)
DEMO_STOCK = {
    "SODA": (10, "1.50"),
    "CHIPS": (15, "0.75"),
    "CANDY": (20, "1.00"),
}

# Stock loaded into the second machine
FRESH_STOCK = {
    "COFFEE": (8, "2.00"),
    "WATER": (25, "0.50"),
}

def load(machine, stock):
    for item_id, (quantity, price) in stock.items():
        machine.restock(item_id, quantity, price)

def buy(machine):
    """Dispense and wait for the item to drop."""
    accepted = machine.dispense_item()
    machine.wait_for_dispense()
    return accepted

def main(display=log, dispense_delay=None):
    """Run all scenarios. Returns both machines for inspection."""
    machine = VendingMachine(display=display, dispense_delay=dispense_delay)

    display("=== Setting up Vending Machine ===")
    load(machine, DEMO_STOCK)
    machine.display_status()

    display("=== Scenario 1: Successful Purchase ===")
    machine.select_item("SODA")
    machine.insert_coin("1.50")
    machine.display_status()
    buy(machine)
    machine.display_status()

    display("=== Scenario 2: Insufficient Funds ===")
    machine.select_item("CHIPS")
    machine.insert_coin("0.50")
    machine.display_status()
    buy(machine)				# Should fail
    machine.insert_coin("0.25")
    machine.display_status()
    buy(machine)				# Should succeed
    machine.display_status()

    display("=== Scenario 3: Invalid Operations ===")
    buy(machine)				# No item selected
    machine.insert_coin("1.00")

    display("=== Scenario 4: Machine Out of Order ===")
    machine.set_out_of_order()
    machine.display_status()
    machine.select_item("CANDY")
    machine.insert_coin("1.00")

    display("=== Scenario 5: Fresh Machine Ready ===")
    machine2 = VendingMachine(display=display, dispense_delay=dispense_delay)
    load(machine2, FRESH_STOCK)

    machine2.select_item("WATER")
    machine2.insert_coin("0.50")
    machine2.display_status()
    buy(machine2)

    machine2.select_item("COFFEE")
    machine2.insert_coin("1.00")
    machine2.insert_coin("1.00")
    machine2.display_status()
    buy(machine2)

    return machine, machine2


if __name__ == "__main__":
    main()
    print("Normal exit")
