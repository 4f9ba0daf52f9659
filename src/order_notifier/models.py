from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional

from order_notifier.errors import DecodeError

# JSON key -> attribute name
FIELD_NAMES = {
    'orderId': 'order_id',
    'productId': 'product_id',
    'quantity': 'quantity',
    'totalPrice': 'total_price',
    'customerName': 'customer_name',
    'createdAt': 'created_at',
}


@dataclass(frozen=True)
class Order:
    """
    One purchase event as received from the queue.

    Nothing is validated beyond types; any field may be None.
    """
    order_id: Optional[str] = None
    product_id: Optional[str] = None
    quantity: Optional[int] = None
    total_price: Optional[Decimal] = None
    customer_name: Optional[str] = None
    created_at: Optional[str] = None

    @classmethod
    def from_dict(cls, data):
        if not isinstance(data, dict):
            raise DecodeError(f"Order must be a JSON object, got {type(data).__name__}")

        unknown = sorted(set(data) - set(FIELD_NAMES))
        if unknown:
            raise DecodeError(f"Unrecognized order field(s): {', '.join(unknown)}")

        return cls(
            order_id=_as_text(data.get('orderId')),
            product_id=_as_text(data.get('productId')),
            quantity=_as_quantity(data.get('quantity')),
            total_price=_as_decimal(data.get('totalPrice')),
            customer_name=_as_text(data.get('customerName')),
            created_at=_as_text(data.get('createdAt')),
        )


def _as_text(value):
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        raise DecodeError(f"Expected a scalar value, got {type(value).__name__}")
    if isinstance(value, bool):
        return 'true' if value else 'false'
    return str(value)


def _as_quantity(value):
    if value is None:
        return None
    if isinstance(value, bool):
        raise DecodeError("quantity must be an integer, got a boolean")
    if isinstance(value, int):
        return value
    if isinstance(value, Decimal) and value == value.to_integral_value():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as e:
            raise DecodeError(f"quantity must be an integer, got {value!r}") from e
    raise DecodeError(f"quantity must be an integer, got {value!r}")


def _as_decimal(value):
    if value is None:
        return None
    if isinstance(value, bool):
        raise DecodeError("totalPrice must be a number, got a boolean")
    if isinstance(value, Decimal):
        return value
    if isinstance(value, (int, float, str)):
        try:
            result = Decimal(str(value).strip())
        except InvalidOperation as e:
            raise DecodeError(f"totalPrice must be a number, got {value!r}") from e
        if not result.is_finite():
            raise DecodeError(f"totalPrice must be finite, got {value!r}")
        return result
    raise DecodeError(f"totalPrice must be a number, got {type(value).__name__}")
