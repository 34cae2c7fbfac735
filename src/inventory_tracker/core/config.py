import os

# In a real deployment, load these from environment variables or a secrets store
SECRET_KEY: str = os.getenv(
    "SECRET_KEY", "your-secret-key-for-jwt-!ChangeMe!"
)
ALGORITHM: str = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "30"))

DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite://./inventory_tracker.sqlite3")

# Items with a quantity strictly below this value are reported as low stock
LOW_STOCK_THRESHOLD: int = 10

DEFAULT_PAGE_SIZE: int = 10
MAX_PAGE_SIZE: int = 100

MODEL_MODULES = [
    "inventory_tracker.features.auth.models",
    "inventory_tracker.features.inventory.models",
    "inventory_tracker.features.sales.models",
    "aerich.models",  # For Aerich migrations
]


def build_tortoise_config(db_url: str = DATABASE_URL) -> dict:
    """Builds the Tortoise ORM configuration for the given connection URL.

    The same layout is used by the application lifespan, the CLI, aerich
    and the test suite (with an in-memory SQLite URL).
    """
    return {
        "connections": {"default": db_url},
        "apps": {
            "models": {  # This is an app label, can be anything
                "models": MODEL_MODULES,
                "default_connection": "default",
            }
        },
        "use_tz": True,
        "timezone": "UTC",
    }


TORTOISE_ORM_CONFIG = build_tortoise_config()
