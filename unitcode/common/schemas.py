"""Pydantic schemas for API requests and responses"""
from datetime import datetime, timezone
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


# Request Schemas

class ParseRequest(BaseModel):
    """Parse request schema"""
    text: str = Field(..., max_length=4096)
    legacy_exponents: Optional[bool] = None


class GenerateOptionsSchema(BaseModel):
    """Generator options schema; unset fields fall back to settings"""
    use_caret_for_exponents: Optional[bool] = None
    preferred_number_format: Optional[str] = None
    spacing: Optional[str] = None

    @field_validator("preferred_number_format")
    @classmethod
    def validate_number_format(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in ("plain", "scientific"):
            raise ValueError("preferred_number_format must be 'plain' or 'scientific'")
        return v

    @field_validator("spacing")
    @classmethod
    def validate_spacing(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in ("minimal", "canonical"):
            raise ValueError("spacing must be 'minimal' or 'canonical'")
        return v


class GenerateRequest(BaseModel):
    """Generate request schema: text is parsed, then rendered again"""
    text: str = Field(..., max_length=4096)
    options: GenerateOptionsSchema = Field(default_factory=GenerateOptionsSchema)


class EquivalenceRequest(BaseModel):
    """Equivalence request schema"""
    left: str = Field(..., max_length=4096)
    right: str = Field(..., max_length=4096)


# Response Schemas

class AtomSchema(BaseModel):
    """Atom of a canonical form"""
    kind: str
    name: str
    exponent: str


class CanonicalFormSchema(BaseModel):
    """Canonical form schema"""
    coefficient: str
    atoms: List[AtomSchema]


class ParseResponse(BaseModel):
    """Parse response schema"""
    text: str
    ast: str
    canonical: CanonicalFormSchema
    generated: str


class GenerateResponse(BaseModel):
    """Generate response schema"""
    text: str
    output: str


class EquivalenceResponse(BaseModel):
    """Equivalence response schema"""
    equivalent: bool
    left: CanonicalFormSchema
    right: CanonicalFormSchema


class DefinitionsResponse(BaseModel):
    """Definitions listing in priority order"""
    prefixes: List[Dict]
    units: List[str]
    currency_codes: List[str]


class ErrorResponse(BaseModel):
    """Standard error response"""
    error: str
    detail: Optional[str] = None
    offset: Optional[int] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
