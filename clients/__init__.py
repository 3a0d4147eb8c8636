# Infrastructure clients
from clients.exceptions import (
    ApiError,
    AuthExpiredError,
    ConflictError,
    NetworkError,
    NotFoundError,
    ServerError,
    ValidationError,
)
from clients.api_client import ApiClient
from clients.memory_storage import MemoryStorage
from clients.valkey_client import ValkeyClient
