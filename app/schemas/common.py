"""Shared schema types."""
from typing import Dict, List

from pydantic import BaseModel, JsonValue

# Free-form JSON document: string keys, JSON-compatible values
# (string, number, boolean, null, list or nested document).
JSONDocument = Dict[str, JsonValue]
JSONDocumentList = List[JSONDocument]


class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    message: str
