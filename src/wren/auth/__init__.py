"""Authentication — access tokens, verification, and the controller gate."""

from wren.auth.tokens import AccessToken, ContextIdentity, IdentityService, MemoryTokenStore, TokenStore

__all__ = ["AccessToken", "ContextIdentity", "IdentityService", "MemoryTokenStore", "TokenStore"]
