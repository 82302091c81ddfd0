from datetime import datetime
from typing import Optional
from pydantic import Field, ConfigDict, JsonValue, field_validator

from image_patch.etc.enums import ImageStatus
from .base import JsonModel


class Image(JsonModel):
    """
    A snapshot of an image as reported by the image service.

    Only read here, as the source of current values when deriving an update.
    Keys outside the documented attributes are custom image properties, and are
    kept as extra fields.
    """

    model_config = ConfigDict(
        frozen=True,
        extra='allow',
        populate_by_name=True,
        serialize_by_alias=True,
    )

    id: str = Field(
        ...,
        description='The unique ID of the image',
    )
    name: Optional[str] = Field(
        default=None,
        description='The name of the image',
    )
    status: ImageStatus = Field(
        default=ImageStatus.UNRECOGNIZED,
        description='The status of the image',
    )
    tags: list[str] = Field(
        default_factory=list,
        description='Tags attached to the image',
    )
    container_format: Optional[str] = Field(
        default=None,
        description='Format of the container, e.g. bare, ovf',
    )
    disk_format: Optional[str] = Field(
        default=None,
        description='Format of the disk, e.g. qcow2, raw',
    )
    min_disk: Optional[int] = Field(
        default=None,
        description='Amount of disk space in GB required to boot the image',
    )
    min_ram: Optional[int] = Field(
        default=None,
        description='Amount of RAM in MB required to boot the image',
    )
    protected: Optional[bool] = Field(
        default=None,
        description='Whether the image is protected from deletion',
    )
    visibility: Optional[str] = Field(
        default=None,
        description='Image visibility, e.g. public, private, shared, community',
    )
    size: Optional[int] = Field(
        default=None,
        description='Size of the image data in bytes',
    )
    virtual_size: Optional[int] = Field(
        default=None,
        description='Virtual size of the image in bytes',
    )
    checksum: Optional[str] = Field(
        default=None,
        description='Hash of the image data, used for integrity checks',
    )
    owner: Optional[str] = Field(
        default=None,
        description='ID of the project owning the image',
    )
    created_at: Optional[datetime] = Field(
        default=None,
        description='When the image was created',
    )
    updated_at: Optional[datetime] = Field(
        default=None,
        description='When the image was last updated',
    )
    locations: list[JsonValue] = Field(
        default_factory=list,
        description='Locations of the image data in external stores, if exposed by the service',
    )
    direct_url: Optional[str] = Field(
        default=None,
        description='URL of the image data in the backing store, if exposed by the service',
    )
    self_url: Optional[str] = Field(
        default=None,
        alias='self',
        description='URL of the image resource',
    )
    file: Optional[str] = Field(
        default=None,
        description='URL of the image data',
    )
    schema_url: Optional[str] = Field(
        default=None,
        alias='schema',
        description='URL of the image schema',
    )

    @field_validator('status', mode='before')
    @classmethod
    def _parse_status(cls, value):
        if isinstance(value, ImageStatus):
            return value

        return ImageStatus.parse(value)

    @property
    def properties(self) -> dict[str, JsonValue]:
        """
        Custom properties of the image, i.e. all attributes outside the documented ones.
        """
        return dict(self.model_extra or {})
