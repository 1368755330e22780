"""Map adapters."""

from oba_stop_cache.adapters.map.stop_annotation_mirror import StopAnnotationMirror

__all__ = ["StopAnnotationMirror"]
