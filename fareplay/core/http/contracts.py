"""
Response Contracts

A contract is an explicit description of the shape a response body must
have before it is handed back to the caller. Any type pydantic can build a
TypeAdapter for works as a contract:

    CasinoMetadata                  a BaseModel subclass
    ApiResponse[CasinoMetadata]     the standard envelope around a model
    List[CasinoMetadata]            a bare list of models
    Dict[str, Any]                  any JSON object

A mismatch raises ResponseValidationError carrying one {loc, msg, type}
entry per problem, rather than a generic parse exception.
"""

from functools import lru_cache
from typing import Any, Dict, List, Optional, get_origin

from pydantic import TypeAdapter, ValidationError

from fareplay.core.errors import ResponseValidationError

# Contract type alias for readability in signatures
Contract = Any


@lru_cache(maxsize=128)
def _adapter_for(contract: Contract) -> TypeAdapter:
    return TypeAdapter(contract)


def contract_name(contract: Contract) -> str:
    """Human-readable name of a contract, for error messages."""
    if get_origin(contract) is not None:
        # typing aliases such as List[Model] report only their origin name
        return repr(contract)
    return getattr(contract, "__name__", None) or repr(contract)


def describe_issues(error: ValidationError) -> List[Dict[str, Any]]:
    """
    Convert a pydantic ValidationError into a list of structural issues.

    Returns:
        List of {"loc": tuple, "msg": str, "type": str, "input": Any}
    """
    return [
        {
            "loc": tuple(issue.get("loc", ())),
            "msg": issue.get("msg", ""),
            "type": issue.get("type", ""),
            "input": issue.get("input"),
        }
        for issue in error.errors(include_url=False)
    ]


def validate_response(data: Any, contract: Optional[Contract] = None) -> Any:
    """
    Check a parsed response body against a contract.

    Args:
        data: Parsed JSON body
        contract: Expected shape, or None to skip validation

    Returns:
        The validated value (model instances for model contracts), or `data`
        unchanged when no contract is given

    Raises:
        ResponseValidationError: If the body does not match the contract
    """
    if contract is None:
        return data

    try:
        adapter = _adapter_for(contract)
    except TypeError:
        # Unhashable contract descriptors skip the cache
        adapter = TypeAdapter(contract)

    try:
        return adapter.validate_python(data)
    except ValidationError as e:
        raise ResponseValidationError(contract_name(contract), describe_issues(e)) from e
