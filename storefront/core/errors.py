# storefront/core/errors.py
# Доменные ошибки магазина. Сервисы бросают их, main.py превращает в HTTP-ответы.


class StoreError(Exception):
    """Базовая ошибка: сообщение для клиента плюс HTTP-статус."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ResourceNotFound(StoreError):
    status_code = 404

    def __init__(self, resource: str, field: str, value):
        super().__init__(f"{resource} not found with {field} : '{value}'")
        self.resource = resource
        self.field = field
        self.value = value


class InsufficientStock(StoreError):
    """Запрошено больше, чем есть на складе. Всегда несёт имя товара и оба количества."""

    status_code = 409

    def __init__(self, product_name: str, available: int, requested: int):
        super().__init__(
            f"Not enough stock for product: {product_name}. "
            f"Available: {available}. Requested: {requested}"
        )
        self.product_name = product_name
        self.available = available
        self.requested = requested


class InvalidArgument(StoreError):
    status_code = 400


class Forbidden(StoreError):
    status_code = 403


class Unauthenticated(StoreError):
    status_code = 401

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message)
