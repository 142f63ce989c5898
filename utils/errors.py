class InventoryError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(InventoryError):
    status_code = 400


class AuthError(InventoryError):
    status_code = 401


class ConfigError(InventoryError):
    status_code = 500


class NotFoundError(InventoryError):
    status_code = 404


class StoreError(InventoryError):
    """Persistence failure; the original error is logged, never returned."""
    status_code = 500
