"""Thin Scaleway API client: one class per product, pydantic payloads."""

from .applesilicon import AppleSiliconAPI
from .client import ApiModel, ScalewayClient
from .container import ContainerAPI
from .documentdb import DocumentDBAPI
from .inference import InferenceAPI

__all__ = [
    "ApiModel",
    "AppleSiliconAPI",
    "ContainerAPI",
    "DocumentDBAPI",
    "InferenceAPI",
    "ScalewayClient",
]
