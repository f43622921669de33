"""Unit expression API endpoints"""
import logging
from functools import lru_cache

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from unitcode.common.config import settings
from unitcode.common.exceptions import UnitCodeError
from unitcode.common.schemas import (
    DefinitionsResponse,
    EquivalenceRequest,
    EquivalenceResponse,
    ErrorResponse,
    GenerateOptionsSchema,
    GenerateRequest,
    GenerateResponse,
    ParseRequest,
    ParseResponse,
)
from unitcode.definitions.table import DefinitionsTable, load_definitions
from unitcode.generation.generator import GeneratorOptions, generate
from unitcode.model.canonical import canonicalize
from unitcode.model.polish import to_polish
from unitcode.parsing.parser import parse
from unitcode.parsing.tokenizer import TokenizerOptions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/units", tags=["units"])


@lru_cache(maxsize=1)
def get_definitions() -> DefinitionsTable:
    """Get cached definitions table, with the local extension if configured"""
    table = load_definitions(settings.definitions.path)
    if settings.definitions.extension_path is not None:
        table = table.extended(load_definitions(settings.definitions.extension_path))
    return table


def _tokenizer_options(legacy_exponents=None) -> TokenizerOptions:
    if legacy_exponents is None:
        legacy_exponents = settings.parser.legacy_exponents
    return TokenizerOptions(legacy_exponents=legacy_exponents)


def _generator_options(schema: GenerateOptionsSchema) -> GeneratorOptions:
    defaults = settings.generator
    return GeneratorOptions(
        use_caret_for_exponents=(
            defaults.use_caret_for_exponents
            if schema.use_caret_for_exponents is None
            else schema.use_caret_for_exponents
        ),
        preferred_number_format=schema.preferred_number_format or defaults.number_format,
        spacing=schema.spacing or defaults.spacing,
    )


async def unit_code_error_handler(request: Request, exc: UnitCodeError) -> JSONResponse:
    """Render a rejected unit expression as an ErrorResponse with status 400"""
    logger.warning(f"Rejected unit expression on {request.url.path}: {exc}")
    body = ErrorResponse(error=type(exc).__name__, detail=exc.message, offset=exc.offset)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=body.model_dump(mode="json")
    )


@router.post(
    "/parse",
    response_model=ParseResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid unit expression"}},
    summary="Parse a unit expression",
    description="Parse text into a tree, its canonical form and regenerated text"
)
def parse_expression(
    request: ParseRequest,
    definitions: DefinitionsTable = Depends(get_definitions)
):
    """Parse a unit expression"""
    expression = parse(request.text, definitions, _tokenizer_options(request.legacy_exponents))
    form = canonicalize(expression)

    return {
        "text": request.text,
        "ast": to_polish(expression),
        "canonical": form.to_dict(),
        "generated": generate(expression, definitions),
    }


@router.post(
    "/generate",
    response_model=GenerateResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid unit expression"}},
    summary="Regenerate a unit expression",
    description="Parse text and render it again with the given generator options"
)
def generate_expression(
    request: GenerateRequest,
    definitions: DefinitionsTable = Depends(get_definitions)
):
    """Regenerate a unit expression"""
    expression = parse(request.text, definitions, _tokenizer_options())

    options = _generator_options(request.options)
    return {"text": request.text, "output": generate(expression, definitions, options)}


@router.post(
    "/equivalence",
    response_model=EquivalenceResponse,
    responses={400: {"model": ErrorResponse, "description": "Invalid unit expression"}},
    summary="Compare two unit expressions",
    description="Check whether two expressions reduce to the same canonical form"
)
def check_equivalence(
    request: EquivalenceRequest,
    definitions: DefinitionsTable = Depends(get_definitions)
):
    """Compare two unit expressions"""
    options = _tokenizer_options()
    left = canonicalize(parse(request.left, definitions, options))
    right = canonicalize(parse(request.right, definitions, options))

    return {
        "equivalent": left == right,
        "left": left.to_dict(),
        "right": right.to_dict(),
    }


@router.get(
    "/definitions",
    response_model=DefinitionsResponse,
    summary="List definitions",
    description="List prefixes, units and currency codes in priority order"
)
def list_definitions(definitions: DefinitionsTable = Depends(get_definitions)):
    """List definitions in priority order"""
    return {
        "prefixes": [{"symbol": p.symbol, "scale": p.scale} for p in definitions.prefixes],
        "units": [u.symbol for u in definitions.units],
        "currency_codes": list(definitions.currency_codes),
    }
