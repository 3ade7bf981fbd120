"""Domain-specific errors for bt-mac-spoof."""


class BtSpoofError(Exception):
    """Base error for bt-mac-spoof."""


class InvalidAddressError(BtSpoofError):
    """Raised when a value is not six colon-separated hex octets."""


class ConfigError(BtSpoofError):
    """Raised when the spoof configuration is missing or malformed."""


class NoCapabilityProviderError(BtSpoofError):
    """Raised when none of bdaddr, btmgmt or bluemoon is installed."""


class ConcurrentOperationError(BtSpoofError):
    """Raised when another controller invocation holds the install lock."""


class NoBackupError(BtSpoofError):
    """Raised when restore is requested but no original address was saved."""


class PermissionDeniedError(BtSpoofError):
    """Raised when a privileged operation is attempted without root."""


class VerificationMismatchError(BtSpoofError):
    """Raised in strict mode when the adapter does not report the target address."""


class AdapterToolMissingError(BtSpoofError):
    """Raised when hciconfig (BlueZ) is not available."""


class InstallError(BtSpoofError):
    """Raised when installed files cannot be written or removed."""
