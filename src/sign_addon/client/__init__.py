from .auth import issue_token
from .http import AmoHttpClient
from .signing import SigningClient

__all__ = ["AmoHttpClient", "SigningClient", "issue_token"]
