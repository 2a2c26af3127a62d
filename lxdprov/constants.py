TIMEOUT_ENV = "LXDPROV_TIMEOUT"
CONNECT_TIMEOUT_ENV = "LXDPROV_CONNECT_TIMEOUT"
VERIFY_TLS_ENV = "LXDPROV_VERIFY_TLS"
ROUTES_FILE_ENV = "LXDPROV_ROUTES_FILE"
CLIENT_CERT_ENV = "LXDPROV_CLIENT_CERT"
CLIENT_KEY_ENV = "LXDPROV_CLIENT_KEY"
TOKEN_ENV = "LXDPROV_TOKEN"
TOKEN_FILE_ENV = "LXDPROV_TOKEN_FILE"
LOG_LEVEL_ENV = "LXDPROV_LOG_LEVEL"
POOL_MAXSIZE_ENV = "LXDPROV_POOL_MAXSIZE"

DEFAULT_TIMEOUT = 30.0  # seconds
DEFAULT_CONNECT_TIMEOUT = 10.0  # seconds
DEFAULT_POOL_MAXSIZE = 10
DEFAULT_LOG_LEVEL = "INFO"

DEFAULT_PORT = 1111
DEFAULT_SSL_PORT = 1112

MODULE_NAME = "lxd"

# Plan sizes offered to customers
CPU_CORE_OPTIONS = (1, 2, 4, 8, 16)
MEMORY_GB_OPTIONS = (1, 2, 3, 4, 8)
STORAGE_GB_OPTIONS = (10, 20, 30, 40, 80)

DEFAULT_HOSTNAME = "cloud"
MAX_HOSTNAME_LENGTH = 63
MAX_REMOTE_MESSAGE_LENGTH = 300
