"""Exceptions raised while binding uploads to handler parameters."""


class UploadBindingError(Exception):
    """Base exception for upload binding issues."""


class MissingContextError(UploadBindingError):
    """The current request's upload set is not available."""


class RegistryFrozenError(UploadBindingError):
    """A binder was registered after the registry was frozen."""
