"""Domain events for the Cart aggregate."""

from protean.fields import DateTime, Float, Identifier, Integer, String, Text

from commerce.domain import commerce


@commerce.event(part_of="Cart")
class CartItemAdded:
    """A product was added to the cart, or an existing line was topped up."""

    __version__ = 1

    cart_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    user_id = Identifier(required=True)
    product_id = String(required=True)
    quantity = Integer(required=True)
    line_quantity = Integer(required=True)
    line_total = Float(required=True)


@commerce.event(part_of="Cart")
class CartItemQuantityUpdated:
    """The quantity of a cart line was replaced and the line repriced."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = String(required=True)
    previous_quantity = Integer(required=True)
    new_quantity = Integer(required=True)
    line_total = Float(required=True)


@commerce.event(part_of="Cart")
class CartItemRemoved:
    __version__ = 1

    cart_id = Identifier(required=True)
    product_id = String(required=True)


@commerce.event(part_of="Cart")
class CartCleared:
    __version__ = 1

    cart_id = Identifier(required=True)
    items_removed = Integer(required=True)


@commerce.event(part_of="Cart")
class CartRepriced:
    """Stored prices drifted from the catalogue and were refreshed."""

    __version__ = 1

    cart_id = Identifier(required=True)
    product_ids = Text(required=True)  # JSON list of drifted product ids
    total = Float(required=True)


@commerce.event(part_of="Cart")
class CartCheckedOut:
    __version__ = 1

    cart_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    user_id = Identifier(required=True)
    checked_out_at = DateTime(required=True)


@commerce.event(part_of="Cart")
class CartReclaimed:
    """A checked-out cart was emptied and reopened for a new purchase."""

    __version__ = 1

    cart_id = Identifier(required=True)
    tenant_id = Identifier(required=True)
    user_id = Identifier(required=True)
