# Audit engine exceptions.
# Created: 2026-10-18


class AuditError(Exception):
    """Base class for audit engine errors."""


class RegistryError(AuditError):
    """The module catalog could not be built or enumerated. Fatal to a run."""


class AuditInProgressError(AuditError):
    """Raised when a run is requested while another one is still active."""


class UnknownModuleError(AuditError, LookupError):
    """No item with the requested id in the latest audit result."""


class NotRepairableError(AuditError):
    """The item is not an auto-fixable broken or partially working module."""
