"""
Constrained integer aliases for schema fields.
"""
from typing import Annotated

from pydantic import Field

UInt8 = Annotated[int, Field(ge=0, le=0xFF)]
UInt16 = Annotated[int, Field(ge=0, le=0xFFFF)]
UInt32 = Annotated[int, Field(ge=0, le=0xFFFF_FFFF)]
UInt64 = Annotated[int, Field(ge=0, le=0xFFFF_FFFF_FFFF_FFFF)]
Int8 = Annotated[int, Field(ge=-0x80, le=0x7F)]
Int16 = Annotated[int, Field(ge=-0x8000, le=0x7FFF)]
Int32 = Annotated[int, Field(ge=-0x8000_0000, le=0x7FFF_FFFF)]
Int64 = Annotated[int, Field(ge=-0x8000_0000_0000_0000, le=0x7FFF_FFFF_FFFF_FFFF)]
