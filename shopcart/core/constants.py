"""Cart-wide constants and default configuration values.

Centralizes magic numbers so the engine, persistence layer and
configuration loader agree on the same defaults.
"""
from decimal import Decimal

# ============== CART LIMITS ==============
MIN_QUANTITY = 1
MAX_QUANTITY = 99

# ============== MONEY ==============
TAX_RATE = Decimal("0.16")  # 16% IVA
MONEY_PLACES = Decimal("0.01")

# ============== PERSISTENCE ==============
CART_STORAGE_KEY = "shopping_cart"
DEFAULT_STORAGE_DIR = ".cart_storage"

# ============== TIMERS (seconds) ==============
SAVE_DEBOUNCE_SECONDS = 0.3
ERROR_CLEAR_SECONDS = 5.0
CLEAR_CONFIRM_SECONDS = 3.0
CHECKOUT_DELAY_SECONDS = 2.0

# ============== CATALOG ==============
DEFAULT_CATALOG_URL = "https://fakestoreapi.com"
CATALOG_TIMEOUT_SECONDS = 10.0

# ============== PRESENTATION ==============
MAX_TITLE_LENGTH = 30
