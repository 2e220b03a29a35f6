class SweetShopError(Exception):
    """Base class for failures the API maps to client-visible responses."""

class SweetNotFoundError(SweetShopError):
    def __init__(self, sweet_id: str):
        self.sweet_id = sweet_id
        super().__init__(f"Sweet not found with id: {sweet_id}")

class NotEnoughStockError(SweetShopError):
    def __init__(self, available: int):
        self.available = available
        super().__init__(f"Sweet Has Not Enough Quantity We Can Provide Only {available} Quantities !")

class UserAlreadyExistsError(SweetShopError):
    def __init__(self, username: str):
        self.username = username
        super().__init__("User already exists")

class InvalidCredentialsError(SweetShopError):
    def __init__(self):
        super().__init__("Invalid username or password")
