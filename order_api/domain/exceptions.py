from decimal import Decimal
from typing import Dict, List


class DomainException(Exception):
    pass


class NotFoundError(DomainException):
    pass


class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found.")


class OrderItemNotFoundError(NotFoundError):
    def __init__(self, order_id: str, item_id: str):
        self.order_id = order_id
        self.item_id = item_id
        super().__init__(f"Order item {item_id} not found in order {order_id}.")


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product with ID {product_id} not found.")


class CustomerNotFoundError(NotFoundError):
    def __init__(self, customer_id: str):
        self.customer_id = customer_id
        super().__init__(f"Customer with ID {customer_id} not found.")


class BusinessRuleViolation(DomainException):
    pass


class InsufficientStockError(BusinessRuleViolation):
    def __init__(self, product_id: int, available: int, required: int, additional: bool = False):
        self.product_id = product_id
        self.available = available
        self.required = required
        requested = "Additional Requested" if additional else "Requested"
        super().__init__(
            f"Not enough stock for Product ID {product_id}. Available: {available}, {requested}: {required}."
        )


class MissingProductInfoError(BusinessRuleViolation):
    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product information for this item is missing (product {product_id}).")


class LineDiscountTooLargeError(BusinessRuleViolation):
    def __init__(self, product_id: int, line_amount: Decimal, discount: Decimal):
        self.product_id = product_id
        super().__init__(
            f"Discount {discount} exceeds the line amount {line_amount} for Product ID {product_id}."
        )


class OrderDiscountTooLargeError(BusinessRuleViolation):
    def __init__(self, subtotal: Decimal, discount: Decimal):
        super().__init__(f"Order discount {discount} exceeds the order subtotal {subtotal}.")


class OrderItemChangedError(BusinessRuleViolation):
    """The line was changed by another request between read and write"""

    def __init__(self, order_id: str, item_id: str):
        self.order_id = order_id
        self.item_id = item_id
        super().__init__(
            f"Order item {item_id} in order {order_id} was changed by another request. Please retry."
        )


class ProductInUseError(BusinessRuleViolation):
    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(
            "This product cannot be deleted as it is part of one or more existing orders."
        )


class CustomerHasOrdersError(BusinessRuleViolation):
    def __init__(self, customer_id: str):
        self.customer_id = customer_id
        super().__init__("This customer cannot be deleted as they have existing orders.")


class InvalidCredentialsError(BusinessRuleViolation):
    def __init__(self):
        super().__init__("Invalid credentials.")


class ValidationFailure(DomainException):
    def __init__(self, errors: Dict[str, List[str]]):
        self.errors = errors
        super().__init__("One or more validation failures have occurred.")


class EmailAlreadyRegisteredError(ValidationFailure):
    def __init__(self, email: str):
        self.email = email
        super().__init__({"email": [f"Email '{email}' is already registered."]})
