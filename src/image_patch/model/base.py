from typing import Any
from pydantic import BaseModel, ConfigDict


class JsonModel(BaseModel):
    """
    Base class for models exchanged with the image service as JSON.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        serialize_by_alias=True,
    )

    def to_json(self) -> Any:
        """
        Dump the model into JSON compatible Python objects, using wire names.
        :return: The JSON representation of the model.
        """
        return self.model_dump(mode='json', by_alias=True, exclude_unset=True)

    @classmethod
    def from_json(cls, data: Any):
        """
        Validate JSON compatible Python objects into a model instance.
        :param data: The decoded JSON data.
        :return: The model instance.
        """
        return cls.model_validate(data)
