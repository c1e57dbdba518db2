"""
Module: builder.errors

Purpose:
    Exception hierarchy for the compositing and assembly pipeline.
    Every failure reaches the caller as one descriptive AssemblyError
    subclass; nothing is retried and no partial document is returned.

Key Classes:
    - AssemblyError: Base class for all pipeline failures
    - EmptySelection: No selected pages
    - RasterizationFailure: Source page could not be rendered
    - SurfaceUnavailable: Drawing surface could not be allocated
    - EmbedFailure: Encoder rejected a composited image
    - AnnotationDecodeFailure: Annotation overlay could not be decoded
    - UnknownSourceFile: PageItem references a missing SourceFile

Used By:
    - builder.images: Rasterizer, codec, compositor
    - builder.output.encoder: Embedding
    - builder.controller: Assembly
"""


class AssemblyError(Exception):
    """Error during page compositing or document assembly."""
    pass


class EmptySelection(AssemblyError):
    """No selected pages; assembly aborts before any work."""
    pass


class RasterizationFailure(AssemblyError):
    """Source document or page could not be rendered."""
    pass


class SurfaceUnavailable(AssemblyError):
    """Drawing surface could not be acquired."""
    pass


class EmbedFailure(AssemblyError):
    """Document encoder rejected a composited image."""
    pass


class AnnotationDecodeFailure(AssemblyError):
    """Annotation overlay bytes could not be decoded."""
    pass


class UnknownSourceFile(AssemblyError):
    """PageItem references a SourceFile id missing from the file map."""
    pass
