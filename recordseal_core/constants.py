# recordseal_core/constants.py

SCHEMA_VERSION = 1
SCHEMA_FILE = f"records_v{SCHEMA_VERSION}.proto"
SCHEMA_PACKAGE = f"recordseal.v{SCHEMA_VERSION}"

EXPORT_CONTENT_TYPE = "application/x-protobuf"
SCHEMA_HEADER = "X-Record-Schema"

DEFAULT_KEY_SIZE = 2048
DEFAULT_PUBLIC_EXPONENT = 65537
DEFAULT_DIGEST_ALG = "sha384"
DEFAULT_SIGNATURE_HASH = "sha256"

ROLES = ("admin", "user")
STATUSES = ("active", "inactive")
DEFAULT_ROLE = "user"
DEFAULT_STATUS = "active"
