"""Security utilities - credential vault and validators.

Re-exports all security-related functions for convenience.
"""

from src.provisioner.core.security.crypto import (
    CredentialVault,
    decrypt,
    encrypt,
    generate_secure_password,
    get_vault,
)
from src.provisioner.core.security.validators import (
    MAX_TENANT_SLUG_LENGTH,
    has_placeholder,
    is_socket_url,
    is_usable_migration_url,
    is_usable_storage_url,
    validate_tenant_slug_format,
)

__all__ = [
    # Crypto
    "CredentialVault",
    "decrypt",
    "encrypt",
    "generate_secure_password",
    "get_vault",
    # Validators
    "MAX_TENANT_SLUG_LENGTH",
    "has_placeholder",
    "is_socket_url",
    "is_usable_migration_url",
    "is_usable_storage_url",
    "validate_tenant_slug_format",
]
