"""Post-transfer ticket annotation."""

from .updater import AnnotationUpdater

__all__ = ["AnnotationUpdater"]
