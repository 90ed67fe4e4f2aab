"""Pure functions for payment methods, speed dial presets and amount input.

All functions return new values; nothing is mutated in place. Fallible
operations return ``(result, error)`` where error is None on success.
"""

import uuid
from decimal import Decimal, InvalidOperation

from tally.domain.models import (
    DEFAULT_CASH,
    PRESET_COLORS,
    MethodId,
    Money,
    PaymentMethod,
    PaymentType,
    SpeedDialPreset,
)

SPEED_DIAL_KEYS = range(1, 10)


def validate_amount(text: str) -> tuple[Money | None, str | None]:
    """Parse keypad input into a spend amount.

    Args:
        text: Raw amount text, e.g. "4.50".

    Returns:
        Tuple of (amount, error). Amount is None when error is set.
    """
    try:
        amount = Decimal(text.strip())
    except InvalidOperation:
        return None, f"Invalid amount: {text!r}"

    if not amount.is_finite():
        return None, f"Invalid amount: {text!r}"
    if amount <= 0:
        return None, "Amount must be positive"
    # Exponent input like 1e2 is stored and shown as 100
    return Money(Decimal(f"{amount:f}")), None


def ensure_default_method(methods: list[PaymentMethod]) -> list[PaymentMethod]:
    """Make sure the built-in Cash method is always present, first."""
    if any(method.id == DEFAULT_CASH.id for method in methods):
        return methods
    return [DEFAULT_CASH, *methods]


def find_method(methods: list[PaymentMethod], method_id: str | None) -> PaymentMethod | None:
    """Look up a method by id."""
    return next((method for method in methods if method.id == method_id), None)


def resolve_method(methods: list[PaymentMethod], method_id: str | None) -> PaymentMethod:
    """Method an entry was paid with; a missing reference means Cash."""
    return find_method(methods, method_id) or find_method(methods, DEFAULT_CASH.id) or DEFAULT_CASH


def new_method(
    methods: list[PaymentMethod],
    name: str,
    type: PaymentType,
    color_hex: str | None = None,
) -> tuple[list[PaymentMethod], PaymentMethod | None, str | None]:
    """Create a payment method.

    Args:
        methods: Current methods.
        name: Display name, must be unique (case-insensitive).
        type: Cash or card.
        color_hex: Colour; defaults to the next unused preset colour.

    Returns:
        Tuple of (new_methods, created_method, error).
    """
    name = name.strip()
    if not name:
        return methods, None, "Name must not be empty"
    if any(method.name.lower() == name.lower() for method in methods):
        return methods, None, f"Payment method '{name}' already exists"

    if color_hex is None:
        used = {method.color_hex.upper() for method in methods}
        color_hex = next((c for c in PRESET_COLORS if c.upper() not in used), PRESET_COLORS[0])

    method = PaymentMethod(
        id=MethodId(str(uuid.uuid4())),
        name=name,
        color_hex=color_hex,
        type=type,
    )
    return [*methods, method], method, None


def remove_method(
    methods: list[PaymentMethod],
    selected_id: MethodId,
    method_id: str,
) -> tuple[list[PaymentMethod], MethodId, str | None]:
    """Delete a payment method.

    Deleting the selected method moves the selection to the default one.
    The default method itself cannot be deleted.

    Returns:
        Tuple of (new_methods, new_selected_id, error).
    """
    method = find_method(methods, method_id)
    if method is None:
        return methods, selected_id, f"Payment method {method_id} not found"
    if method.is_default:
        return methods, selected_id, "The default payment method can't be removed"

    remaining = [m for m in methods if m.id != method.id]
    if selected_id == method.id:
        selected_id = default_method(remaining).id
    return remaining, selected_id, None


def default_method(methods: list[PaymentMethod]) -> PaymentMethod:
    """The flagged default method, or Cash."""
    return next((method for method in methods if method.is_default), DEFAULT_CASH)


def select_method(
    methods: list[PaymentMethod], selected_id: MethodId, method_id: str
) -> tuple[MethodId, str | None]:
    """Change the currently selected method."""
    method = find_method(methods, method_id)
    if method is None:
        return selected_id, f"Payment method {method_id} not found"
    return method.id, None


def resolve_selected(methods: list[PaymentMethod], selected_id: str | None) -> MethodId:
    """Selection to use, falling back to the default when it dangles."""
    method = find_method(methods, selected_id)
    if method is None:
        return default_method(methods).id
    return method.id


def set_preset(
    presets: dict[int, SpeedDialPreset], key: int, amount_text: str, label: str = ""
) -> tuple[dict[int, SpeedDialPreset], str | None]:
    """Bind an amount to a keypad digit (1-9)."""
    if key not in SPEED_DIAL_KEYS:
        return presets, "Speed dial keys are 1-9"
    amount, error = validate_amount(amount_text)
    if amount is None:
        return presets, error
    return {**presets, key: SpeedDialPreset(amount=amount, label=label.strip())}, None


def clear_preset(presets: dict[int, SpeedDialPreset], key: int) -> dict[int, SpeedDialPreset]:
    """Remove a digit binding; unknown digits are ignored."""
    return {k: v for k, v in presets.items() if k != key}
