class StoreReadError(RuntimeError):
    """Raised when a store cannot be read (network errors, bad responses, corrupt files)."""
    pass


class DisplacementUnavailableError(RuntimeError):
    """Raised when a travel estimate cannot be resolved for an address."""
    pass
