"""
Result Models
=============

Outputs of the compiler pipeline.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class GeneratedModule(BaseModel):
    """Python source generated for one specification."""
    name: str = Field(..., description="Specification name, also the root class name")
    source: str = Field(..., description="Python module source")
    text_constant: str = Field(..., description="Name of the canonical text constant")
    canonical_text: str = Field(..., description="Plain A2ML rendering of the specification")


class CompileResult(BaseModel):
    """Result of a compile operation."""
    success: bool = Field(..., description="Whether compilation succeeded")
    module: Optional[GeneratedModule] = Field(None, description="Generated module")
    errors: List[str] = Field(default_factory=list, description="Compilation errors")
    processing_time: Optional[float] = Field(None, description="Compilation time in seconds")
