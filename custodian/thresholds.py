"""
Low-stock thresholds — isolated, testable, reusable.

Maps an item's on-hand quantity and its min_quantity to an alert level.

Examples (min_quantity=10):
    - 11 → None (healthy)
    - 10 → LOW
    - 5  → CRITICAL (5 <= 10 * 0.5)
    - 0  → OUT_OF_STOCK

The CRITICAL band uses ``quantity <= min_quantity * 0.5`` without rounding:
min_quantity=5 is critical at 2 or less. With min_quantity=0 the band is
empty, so only OUT_OF_STOCK or None apply.
"""

from custodian.models.enums import AlertLevel

CRITICAL_RATIO = 0.5


def classify(quantity: int, min_quantity: int) -> AlertLevel | None:
    """
    Alert level for a quantity against its threshold.

    Args:
        quantity: On-hand quantity (>= 0)
        min_quantity: Configured minimum (>= 0)

    Returns:
        AlertLevel, or None when quantity is above min_quantity
    """
    if quantity == 0:
        return AlertLevel.OUT_OF_STOCK
    if quantity > min_quantity:
        return None
    if quantity <= min_quantity * CRITICAL_RATIO:
        return AlertLevel.CRITICAL
    return AlertLevel.LOW


def is_low(quantity: int, min_quantity: int) -> bool:
    """Whether an alert should be open for this quantity."""
    return classify(quantity, min_quantity) is not None
