"""
Client side model of image registry update requests, expressed as ordered patch operations.
"""

__version__ = '0.1.0'

from image_patch.etc.enums import OperationKind, ImageStatus
from image_patch.etc.errors import ImagePatchError, MalformedOperationError, PatchApplyError, \
    UnsupportedOperationError
from image_patch.model.operation import Operation
from image_patch.model.image_update import ImageUpdate, ImageUpdateBuilder
from image_patch.model.image import Image
