"""Registry mapping parameter annotations to upload binders."""

from collections.abc import Callable, Sequence
from typing import Any

from upload_binder.binding.errors import RegistryFrozenError
from upload_binder.binding.selector import select_upload, select_uploads
from upload_binder.core.logger import LogIcon, logger
from upload_binder.models.core import Upload

Binder = Callable[[str, Sequence[Upload] | None], Any]


class BinderRegistry:
    """Explicit annotation -> binder table, resolved when routes are declared."""

    def __init__(self) -> None:
        self._binders: dict[Any, Binder] = {}
        self._frozen = False

    def __contains__(self, annotation: Any) -> bool:
        return self.resolve(annotation) is not None

    def __len__(self) -> int:
        return len(self._binders)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, annotation: Any, binder: Binder) -> "BinderRegistry":
        """Register a binder for an annotation. Returns self for chaining."""
        if self._frozen:
            raise RegistryFrozenError(f"Cannot register {annotation!r}: registry is frozen")
        if annotation in self._binders:
            logger.warning(f"Replacing binder for {annotation!r}", icon=LogIcon.WARNING)
        self._binders[annotation] = binder
        binder_name = getattr(binder, "__name__", repr(binder))
        logger.debug(f"Registered binder for {annotation!r}", icon=LogIcon.ADAPTER, binder=binder_name)
        return self

    def resolve(self, annotation: Any) -> Binder | None:
        try:
            return self._binders.get(annotation)
        except TypeError:
            # unhashable annotations are never registered
            return None

    def annotations(self) -> list[Any]:
        return list(self._binders)

    def freeze(self) -> "BinderRegistry":
        self._frozen = True
        return self


def default_registry() -> BinderRegistry:
    """Registry with the upload binders: arrays of uploads and single uploads."""
    return (
        BinderRegistry()
        .register(list[Upload], select_uploads)
        .register(tuple[Upload, ...], select_uploads)
        .register(Upload, select_upload)
    )
