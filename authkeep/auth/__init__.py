from authkeep.auth.codec import BufferJSON
from authkeep.auth.creds import init_auth_creds
from authkeep.auth.state import (
    AuthState,
    AuthStateHandle,
    DocumentKeyStore,
    use_document_auth_state,
)
from authkeep.auth.types import AppStateSyncKeyData, KeyCategory

__all__ = [
    "BufferJSON",
    "init_auth_creds",
    "AuthState",
    "AuthStateHandle",
    "DocumentKeyStore",
    "use_document_auth_state",
    "AppStateSyncKeyData",
    "KeyCategory",
]
