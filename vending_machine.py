#
# Vending machine state machine.
#
# The machine (context) owns inventory, prices, balance and the selected
# item. Every request is forwarded to the current state, which validates
# it, mutates the machine and picks the next state.
#
# States: Idle -> ItemSelected -> Dispensing -> Idle, any of the first two
# can go to OutOfOrder, which has no way back.
#

import threading
from decimal import Decimal, InvalidOperation

# Testing flag
TESTING = True

# Seconds it takes to physically drop an item
DISPENSE_DELAY = 2.0

def log(s):
    """Print debugging messages when TESTING=True."""
    if TESTING:
        print(s)

def money(amount):
    """Convert a coin or price amount to Decimal."""
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise ValueError(f"Not a money amount: {amount!r}") from None
    if not value.is_finite():
        raise ValueError(f"Not a money amount: {amount!r}")
    return value

def fmt(amount):
    return f"${amount:.2f}"


class VendingMachineError(Exception):
    """Base class for vending machine errors."""

class InvalidStateError(VendingMachineError):
    """Internal invariant violated, the machine cannot continue."""


#   VENDING MACHINE CLASS
class VendingMachine(object):
    """Machine context. Holds the data shared by all states."""

    def __init__(self, display=None, dispense_delay=None):
        self.display = display if display is not None else log	# Narration sink
        self.dispense_delay = DISPENSE_DELAY if dispense_delay is None else dispense_delay
        self.inventory = {}		# Item id -> quantity
        self.item_prices = {}	# Item id -> Decimal price
        self.balance = Decimal("0")
        self.selected_item = None
        self.state = None

        self._lock = threading.RLock()
        self._dispense_timer = None
        self._dispense_seq = 0		# Bumped per dispense, stale timers are ignored
        self._dispense_done = threading.Event()
        self._dispense_done.set()

        self.go_to_state("Idle")

    # State machine utilities
    def go_to_state(self, state_name):
        try:
            state_class = STATES[state_name]
        except KeyError:
            raise InvalidStateError(f"Unknown state {state_name!r}") from None

        new_state = state_class()
        new_state.check_entry(self)

        old_state = self.state
        if old_state:
            log(f"Exiting {old_state.name}")
            old_state.on_exit(self)

        self.state = new_state
        if old_state:
            self.display(f"State changed to: {state_name}")
        log(f"Entering {new_state.name}")
        new_state.on_entry(self)

    def get_item_price(self, item_id):
        return self.item_prices.get(item_id, Decimal("0"))

    def restock(self, item_id, quantity, price):
        """
        Add quantity of an item and set its unit price.

        Refused while an item is dispensing, the purchase in progress
        is charged at the price it was selected for.
        """
        price = money(price)
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise ValueError(f"Quantity for {item_id} must be a whole number: {quantity!r}")
        if quantity < 0:
            raise ValueError(f"Negative quantity for {item_id}: {quantity}")
        if price < 0:
            raise ValueError(f"Negative price for {item_id}: {price}")
        with self._lock:
            if isinstance(self.state, DispensingState):
                self.display("Cannot restock while dispensing. Please wait.")
                return False
            self.inventory[item_id] = self.inventory.get(item_id, 0) + quantity
            self.item_prices[item_id] = price
            self.display(f"Added {quantity} of item {item_id} at {fmt(price)}")
            return True

    # Customer requests, all forwarded to the current state
    def select_item(self, item_id):
        with self._lock:
            return self.state.select_item(self, item_id)

    def insert_coin(self, amount):
        amount = money(amount)
        with self._lock:
            return self.state.insert_coin(self, amount)

    def dispense_item(self):
        with self._lock:
            return self.state.dispense_item(self)

    def set_out_of_order(self):
        with self._lock:
            return self.state.set_out_of_order(self)

    # Timed dispensing
    def _start_dispense_timer(self):
        self._dispense_seq += 1
        self._dispense_done.clear()
        if self.dispense_delay <= 0:
            self._complete_dispense()
            return
        self._dispense_timer = threading.Timer(
            self.dispense_delay, self._complete_dispense, args=(self._dispense_seq,))
        self._dispense_timer.daemon = True
        self._dispense_timer.start()

    def _complete_dispense(self, seq=None):
        with self._lock:
            if seq is not None and seq != self._dispense_seq:
                return
            self._dispense_timer = None
            if isinstance(self.state, DispensingState):
                try:
                    self.state.complete(self)
                finally:
                    self._dispense_done.set()

    def finish_dispense(self):
        """Cancel the dispense timer and drop the item right now."""
        with self._lock:
            if not isinstance(self.state, DispensingState):
                return False
            if self._dispense_timer is not None:
                self._dispense_timer.cancel()
            self._complete_dispense()
            return True

    def wait_for_dispense(self, timeout=None):
        """Block until no dispense is pending. False on timeout."""
        return self._dispense_done.wait(timeout)

    # Status
    def get_status(self):
        with self._lock:
            return {
                "state": self.state.name,
                "balance": self.balance,
                "selected_item": self.selected_item,
                "inventory": dict(self.inventory),
            }

    def display_status(self):
        status = self.get_status()
        self.display("=== Vending Machine Status ===")
        self.display(f"Current State: {status['state']}")
        self.display(f"Current Balance: {fmt(status['balance'])}")
        self.display(f"Selected Item: {status['selected_item'] or 'None'}")
        self.display(f"Inventory: {status['inventory']}")
        self.display("==============================")


#   STATE CLASSES
class State(object):
    """Base state class. Every request is rejected unless overridden."""
    _NAME = ""
    _REJECT = ""
    @property
    def name(self): return self._NAME
    def check_entry(self, machine): pass
    def on_entry(self, machine): pass
    def on_exit(self, machine): pass

    def reject(self, machine, message=None):
        machine.display(message or self._REJECT)
        return False

    def select_item(self, machine, item_id): return self.reject(machine)
    def insert_coin(self, machine, amount): return self.reject(machine)
    def dispense_item(self, machine): return self.reject(machine)
    def set_out_of_order(self, machine): return self.reject(machine)

#	IDLE STATE - waiting for an item selection
class IdleState(State):
    _NAME = "Idle"
    _REJECT = "Cannot do that in Idle state. Please select an item first."

    def select_item(self, machine, item_id):
        if item_id not in machine.inventory:
            return self.reject(machine, f"Item {item_id} does not exist.")
        if machine.inventory[item_id] <= 0:
            return self.reject(machine, f"Item {item_id} is out of stock.")

        machine.selected_item = item_id
        machine.display(f"Item {item_id} selected. Price: {fmt(machine.get_item_price(item_id))}."
                        f" Current balance: {fmt(machine.balance)}")
        machine.go_to_state("ItemSelected")
        return True

    def insert_coin(self, machine, amount):
        return self.reject(machine, "Cannot insert coins in Idle state. Please select an item first.")

    def dispense_item(self, machine):
        return self.reject(machine, "Cannot dispense in Idle state. Please select an item first.")

    def set_out_of_order(self, machine):
        machine.display("Setting machine to Out of Order state.")
        machine.go_to_state("OutOfOrder")
        return True

#	ITEM SELECTED STATE - accepts coins until the item is paid for
class ItemSelectedState(State):
    _NAME = "ItemSelected"

    def select_item(self, machine, item_id):
        return self.reject(machine, "Cannot select another item. An item is already selected."
                                    " Please proceed with payment.")

    def insert_coin(self, machine, amount):
        if amount <= 0:
            return self.reject(machine, "Invalid coin amount. Please insert a valid amount.")

        machine.balance += amount
        machine.display(f"Coin of {fmt(amount)} inserted. Current balance: {fmt(machine.balance)}")

        price = machine.get_item_price(machine.selected_item)
        if machine.balance >= price:
            machine.display(f"Sufficient funds. Ready to dispense {machine.selected_item}")
        else:
            machine.display(f"Need {fmt(price - machine.balance)} more to dispense {machine.selected_item}")
        return True

    def dispense_item(self, machine):
        price = machine.get_item_price(machine.selected_item)
        if machine.balance < price:
            return self.reject(machine, f"Insufficient funds. Need {fmt(price - machine.balance)}"
                                        f" more to dispense {machine.selected_item}")
        # Entering Dispensing starts the drop
        machine.go_to_state("Dispensing")
        return True

    def set_out_of_order(self, machine):
        # Balance and selection are kept, inserted money is not refunded
        machine.display("Setting machine to Out of Order state.")
        machine.go_to_state("OutOfOrder")
        return True

#  DISPENSING STATE - item drop in progress, everything else must wait
class DispensingState(State):
    _NAME = "Dispensing"
    _REJECT = "Cannot do that while dispensing. Please wait."

    def check_entry(self, machine):
        if machine.selected_item is None:
            raise InvalidStateError("Dispensing with no item selected")

    def on_entry(self, machine):
        machine.display(f"Dispensing {machine.selected_item}...")
        machine._start_dispense_timer()

    def complete(self, machine):
        item = machine.selected_item
        if item is None:
            raise InvalidStateError("Dispensing with no item selected")
        if machine.inventory.get(item, 0) <= 0:
            raise InvalidStateError(f"Dispensing {item} with empty inventory")

        change = machine.balance - machine.get_item_price(item)
        machine.inventory[item] -= 1
        machine.balance = Decimal("0")
        machine.selected_item = None
        machine.go_to_state("Idle")

        # Narrate only once the machine is back in Idle
        if change > 0:
            machine.display(f"{item} dispensed successfully! Change: {fmt(change)}")
        else:
            machine.display(f"{item} dispensed successfully!")

#  OUT OF ORDER STATE - terminal, nothing is accepted
class OutOfOrderState(State):
    _NAME = "OutOfOrder"
    _REJECT = "Machine is out of order."


STATES = {
    "Idle": IdleState,
    "ItemSelected": ItemSelectedState,
    "Dispensing": DispensingState,
    "OutOfOrder": OutOfOrderState,
}
