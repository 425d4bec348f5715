import os
import sys

from dotenv import load_dotenv

from enums.payment_method import PaymentMethod
from enums.runtime_environment import RuntimeEnvironment

# Load .env but don't override existing environment variables
# This allows test scripts to set RUNTIME_ENVIRONMENT=TEST before import
load_dotenv(".env", override=False)


def _exit_with_config_error(name: str, reason: str, expected: str):
    print(f"\n ERROR: Invalid {name} configuration\n", file=sys.stderr)
    print(f"Reason: {reason}", file=sys.stderr)
    print(f"Expected: {expected}", file=sys.stderr)
    print(f"Current value: {os.environ.get(name, '(not set)')}\n", file=sys.stderr)
    sys.exit(1)


def _int_env(name: str, default: str, minimum: int = 0) -> int:
    try:
        value = int(os.environ.get(name, default))
        if value < minimum:
            raise ValueError(f"{name} must be >= {minimum}")
        return value
    except ValueError as e:
        _exit_with_config_error(name, str(e), f"integer >= {minimum}")


# Parse RUNTIME_ENVIRONMENT with clear error message on misconfiguration
try:
    RUNTIME_ENVIRONMENT = RuntimeEnvironment(os.environ.get("RUNTIME_ENVIRONMENT", RuntimeEnvironment.DEV.value))
except ValueError as e:
    _exit_with_config_error(
        "RUNTIME_ENVIRONMENT", str(e), ", ".join(env.value for env in RuntimeEnvironment)
    )

# Database
DB_NAME = os.environ.get("DB_NAME", "storefront.db")
DB_URL = os.environ.get("DB_URL") or f"sqlite+aiosqlite:///data/{DB_NAME}"

# Checkout
# Amounts are whole Taka, no minor units anywhere
DELIVERY_FEE = _int_env("DELIVERY_FEE", "50")
CURRENCY_SYMBOL = os.environ.get("CURRENCY_SYMBOL", "৳")

try:
    DEFAULT_PAYMENT_METHOD = PaymentMethod(os.environ.get("DEFAULT_PAYMENT_METHOD", PaymentMethod.COD.value))
except ValueError as e:
    _exit_with_config_error(
        "DEFAULT_PAYMENT_METHOD", str(e), ", ".join(method.value for method in PaymentMethod)
    )

# Admin verdict for the built-in authorizer (comma-separated identity provider user ids)
_admin_id_list_str = os.environ.get("ADMIN_ID_LIST", "")
ADMIN_ID_LIST = [admin_id.strip() for admin_id in _admin_id_list_str.split(',') if admin_id.strip()]

# Order status policy
# false: any status may be set at any time (last write wins), off-path transitions are only logged
ORDER_STATUS_STRICT_TRANSITIONS = os.environ.get("ORDER_STATUS_STRICT_TRANSITIONS", "false") == "true"

# Customer order view: periodic full re-fetch on top of push updates (0 = disabled)
ORDER_VIEW_RECONCILE_SECONDS = _int_env("ORDER_VIEW_RECONCILE_SECONDS", "60")

# Logging Configuration
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")  # DEBUG, INFO, WARNING, ERROR, CRITICAL
LOG_MASK_SECRETS = os.environ.get("LOG_MASK_SECRETS", "true") == "true"  # Mask credentials and customer PII in logs

# Log Retention: Environment-specific defaults
if RUNTIME_ENVIRONMENT == RuntimeEnvironment.DEV:
    LOG_RETENTION_DAYS = _int_env("LOG_RETENTION_DAYS", "30")
else:
    LOG_RETENTION_DAYS = _int_env("LOG_RETENTION_DAYS", "5")
