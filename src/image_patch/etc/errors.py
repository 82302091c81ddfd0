"""
Exceptions raised by the image patch library.
"""

from typing import Optional


class ImagePatchError(Exception):
    """
    Base class for all errors raised by this library.
    """


class MalformedOperationError(ImagePatchError, ValueError):
    """
    A patch operation, or the patch body containing it, cannot be parsed.

    When raised while parsing a patch array, `index` is the position of the
    offending element.
    """

    def __init__(self,
                 message: str,
                 index: Optional[int] = None,
                 ):
        if index is not None:
            message = f'Operation at index {index}: {message}'
        super().__init__(message)
        self.index = index


class PatchApplyError(ImagePatchError):
    """
    A patch could not be applied to a local document.
    """


class UnsupportedOperationError(PatchApplyError):
    """
    A patch contains an operation kind that cannot be applied locally.
    """
