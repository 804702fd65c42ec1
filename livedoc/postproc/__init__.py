"""Document post-processing: marker region patching."""

from .markers import DocumentPatcher, MarkerManager, PatchResult, PatchStatus

__all__ = ["DocumentPatcher", "MarkerManager", "PatchResult", "PatchStatus"]
