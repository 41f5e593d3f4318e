from typing import Any, Dict, Optional


class AptosScriptError(Exception):
    """Base exception class for the Aptos Move scripts"""

    def __init__(self, message: str, code: Optional[int] = None, **details: Any):
        self.message = message
        self.code = code
        self.details: Dict[str, Any] = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.code is not None:
            return f"[{self.code}] {self.message}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization"""
        return {
            "error": type(self).__name__,
            "message": self.message,
            "code": self.code,
            "details": self.details,
        }


class ConfigurationError(AptosScriptError):
    """Missing or invalid configuration"""
    pass


class NodeConnectionError(AptosScriptError):
    """Fullnode could not be reached"""
    pass


class AptosApiError(AptosScriptError):
    """Fullnode API call error (code is the HTTP status when there is one)"""
    pass


class AbiNotFoundError(AptosApiError):
    """Fullnode response carries no ABI"""
    pass


class MoveCliError(AptosScriptError):
    """Aptos CLI invocation failed"""

    def __init__(self, message: str, action: str, returncode: Optional[int] = None):
        super().__init__(message, action=action, returncode=returncode)
        self.action = action
        self.returncode = returncode
