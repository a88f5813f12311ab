"""Session-held borrow cart.

The cart lives under ``session["borrow_cart"]`` as an ordered list of
``{"book_id": int, "quantity": int}`` dicts, one per book.
"""
from contextlib import contextmanager

from flask import session

from library_app.errors import ValidationError

SESSION_KEY = "borrow_cart"


class BorrowCart:
    def __init__(self, store=None):
        self.store = session if store is None else store

    def entries(self):
        return [dict(entry) for entry in (self.store.get(SESSION_KEY) or [])]

    def _save(self, entries):
        # assign a fresh list so the session notices the change
        self.store[SESSION_KEY] = entries

    @staticmethod
    def _quantity(quantity) -> int:
        # JSON true or 2.7 must not slip through as 1 or 2
        if isinstance(quantity, bool) or (isinstance(quantity, float) and not quantity.is_integer()):
            raise ValidationError({"quantity": ["must be an integer"]})
        try:
            quantity = int(quantity)
        except (TypeError, ValueError):
            raise ValidationError({"quantity": ["is not a number"]})
        if quantity < 1:
            raise ValidationError({"quantity": ["must be greater than 0"]})
        return quantity

    def add(self, book_id: int, quantity=1):
        """Put ``quantity`` copies in the cart, summing into an existing line.

        Availability is not checked here; checkout does that.
        """
        quantity = self._quantity(quantity)
        entries = self.entries()
        for entry in entries:
            if entry["book_id"] == book_id:
                entry["quantity"] += quantity
                break
        else:
            entries.append({"book_id": book_id, "quantity": quantity})
        self._save(entries)
        return entries

    def remove(self, book_id: int) -> bool:
        entries = self.entries()
        kept = [entry for entry in entries if entry["book_id"] != book_id]
        self._save(kept)
        return len(kept) != len(entries)

    def clear(self):
        self.store.pop(SESSION_KEY, None)

    def total_quantity(self) -> int:
        return sum(entry["quantity"] for entry in self.entries())

    def __len__(self):
        return len(self.entries())


@contextmanager
def carry_borrow_cart(keep_empty: bool = True):
    """Keep the borrow cart across a block that resets the session.

    Sign in and sign out clear the session; the cart is put back afterwards.
    With ``keep_empty=False`` an empty cart is not written back.
    """
    cart = session.get(SESSION_KEY)
    yield
    if cart or (keep_empty and cart is not None):
        session[SESSION_KEY] = cart
