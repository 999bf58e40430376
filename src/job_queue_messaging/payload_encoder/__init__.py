"""Job payload encoders."""

from .json_payload_encoder import JSONPayloadEncoder

__all__ = ["JSONPayloadEncoder"]
