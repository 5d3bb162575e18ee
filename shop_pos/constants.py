# shop_pos/constants.py

APP_NAME = "Shop POS"
STYLE_FILE = "resources/style.qss"

# ---- storage ----
DATA_DIR = "data"
DB_FILE_NAME = "shop.db"
LOGS_DIR = "logs"
AUDIT_LOG_FILE_NAME = "sales_audit.log"

TABLE_SCHEMA_VERSION = "schema_version"
SCHEMA_VERSION = "2"

# sqlite busy timeout; a locked DB surfaces as a store/ledger error after this
DB_TIMEOUT_SECONDS = 5.0

# ---- session ----
DEFAULT_OWNER_ID = "local-shop"
DEFAULT_SHOP_NAME = "My Shop"

# ---- receipts ----
RECEIPT_TEMPLATE_PATH = "resources/templates/receipts/sale_receipt.html"
RECEIPT_TITLE = "Sales Receipt"
RECEIPT_SHORT_ID_LENGTH = 8
DATE_DISPLAY_FORMAT = "%d/%m/%Y"
DATETIME_DISPLAY_FORMAT = "%d/%m/%Y %H:%M"

# ---- shop logo ----
LOGO_MAX_BYTES = 2 * 1024 * 1024
LOGO_EXTENSIONS = (".png", ".jpg", ".jpeg", ".gif", ".webp", ".svg")
LOGOS_DIR = "logos"
