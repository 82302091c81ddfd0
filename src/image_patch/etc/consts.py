import os
import logging
from typing import Literal
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configurations for the image patch client library.
    """
    model_config = SettingsConfigDict(
        env_prefix='IP_',
        env_file_encoding='utf-8',
    )

    preserve_unrecognized_ops: bool = Field(
        True,
        description='Re-emit the original verb of unrecognised patch operations instead of '
                    'the "unrecognized" placeholder',
    )
    patch_media_type: str = Field(
        'application/openstack-images-v2.1-json-patch',
        description='Content type the image service expects for a patch request body',
    )

    logging_level: Literal['CRITICAL', 'ERROR', 'WARNING', 'INFO', 'DEBUG', 'NOTSET'] = Field(
        'INFO',
        description='Logging level for the library'
    )


CONFIG = Settings(_env_file=os.getenv('IP_ENV_FILE', 'conf/.env'))      # type: ignore
LOGGER = logging.getLogger('Image Patch')
LOGGER.setLevel(CONFIG.logging_level.upper())   # pylint: disable=no-member

if not LOGGER.hasHandlers():
    console_handler = logging.StreamHandler()
    console_handler.setLevel(CONFIG.logging_level.upper())      # pylint: disable=no-member

    formatter = logging.Formatter(
        fmt='[%(asctime)s] [%(process)d] [%(levelname)s]: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S %z'
    )
    console_handler.setFormatter(formatter)

    LOGGER.addHandler(console_handler)


LOGGER.debug('Library configuration loaded: %s', CONFIG.model_dump_json())
