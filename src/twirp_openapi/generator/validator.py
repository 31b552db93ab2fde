"""Validates built API documents for structural correctness."""

from typing import Any

from twirp_openapi.generator.schema import SCHEMA_REF_PREFIX


def find_dangling_refs(api: dict[str, Any]) -> dict[str, str]:
    """Check every ``$ref`` in the document against ``components.schemas``.

    Returns dict of {json_pointer: error_message} for refs with no target.
    """
    known = set(api.get("components", {}).get("schemas", {}))
    errors: dict[str, str] = {}
    _walk(api, "", known, errors)
    return errors


def _walk(node: Any, pointer: str, known: set[str], errors: dict[str, str]) -> None:
    if isinstance(node, dict):
        ref = node.get("$ref")
        if isinstance(ref, str):
            if not ref.startswith(SCHEMA_REF_PREFIX):
                errors[pointer] = f"unsupported reference {ref!r}"
            elif ref[len(SCHEMA_REF_PREFIX):] not in known:
                errors[pointer] = f"reference to undeclared schema {ref!r}"
        for key, value in node.items():
            _walk(value, f"{pointer}/{_escape(str(key))}", known, errors)
    elif isinstance(node, list):
        for i, value in enumerate(node):
            _walk(value, f"{pointer}/{i}", known, errors)


def _escape(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")
