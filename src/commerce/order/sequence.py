"""Tenant-scoped order numbering.

Each tenant owns one ``OrderSequence`` row holding the last issued number.
The row is incremented inside the same unit of work that inserts the order,
so a rolled-back checkout never burns a number and two committed orders never
share one.
"""

from datetime import UTC, datetime

from protean.fields import Identifier, Integer

from commerce.domain import commerce

ORDER_NUMBER_PREFIX = "ORD"
SEQUENCE_WIDTH = 6


@commerce.aggregate
class OrderSequence:
    tenant_id = Identifier(identifier=True, required=True)
    last_value = Integer(default=0, min_value=0)

    def advance(self) -> int:
        self.last_value = (self.last_value or 0) + 1
        return self.last_value


def format_order_number(value, now=None) -> str:
    """``ORD-YYMM-NNNNNN`` for the given sequence value."""
    now = now or datetime.now(UTC)
    return f"{ORDER_NUMBER_PREFIX}-{now:%y%m}-{value:0{SEQUENCE_WIDTH}d}"


@commerce.repository(part_of=OrderSequence)
class OrderSequenceRepository:
    def claim_next(self, tenant_id) -> int:
        """Advance the tenant's sequence and stage the write. Returns the new value."""
        found = self._dao.query.filter(tenant_id=str(tenant_id)).all().items
        sequence = found[0] if found else OrderSequence(tenant_id=str(tenant_id))
        value = sequence.advance()
        self.add(sequence)
        return value
