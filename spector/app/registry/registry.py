"""
Document type registry.

Maps document type identifiers (e.g. ``in-toto-v1``) to their compiled
JSON Schema and typed model. A registry is populated once, frozen, and
read-only for the rest of the process.
"""

from __future__ import annotations

import json
import logging
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Type

from jsonschema import Draft7Validator
from jsonschema.exceptions import SchemaError as JSONSchemaError
from pydantic import BaseModel, ConfigDict

from spector.app.errors import DuplicateIdentifierError, MalformedSchemaError

logger = logging.getLogger(__name__)


class SchemaEntry(BaseModel):
    """
    A registered document type.

    The compiled validator is built once at registration and reused by
    every validation call.
    """

    identifier: str
    schema_document: Any
    validator: Draft7Validator
    predicate_type_uri: Optional[str] = None
    decoder: Optional[Type[BaseModel]] = None
    description: str = ""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class SchemaRegistry:
    """
    Write-once mapping from document type identifier to ``SchemaEntry``.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, SchemaEntry] = {}
        self._unavailable: Dict[str, str] = {}
        self._frozen = False

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------

    def register(
        self,
        identifier: str,
        schema_text: str,
        *,
        predicate_type_uri: Optional[str] = None,
        decoder: Optional[Type[BaseModel]] = None,
        description: str = "",
    ) -> SchemaEntry:
        if self._frozen:
            raise RuntimeError(
                f"Cannot register '{identifier}': registry is frozen"
            )

        if identifier in self._entries:
            raise DuplicateIdentifierError(
                identifier, "document type identifier is already registered"
            )

        try:
            schema_document = json.loads(schema_text)
        except json.JSONDecodeError as exc:
            raise MalformedSchemaError(
                identifier, f"schema is not valid JSON: {exc}"
            ) from exc

        if not isinstance(schema_document, (dict, bool)):
            raise MalformedSchemaError(
                identifier, "schema must be a JSON object or boolean"
            )

        try:
            Draft7Validator.check_schema(schema_document)
        except JSONSchemaError as exc:
            raise MalformedSchemaError(
                identifier, f"invalid JSON Schema: {exc.message}"
            ) from exc

        entry = SchemaEntry(
            identifier=identifier,
            schema_document=schema_document,
            validator=Draft7Validator(
                schema_document,
                format_checker=Draft7Validator.FORMAT_CHECKER,
            ),
            predicate_type_uri=predicate_type_uri,
            decoder=decoder,
            description=description,
        )
        self._entries[identifier] = entry
        self._unavailable.pop(identifier, None)

        logger.debug("Registered document type %s", identifier)
        return entry

    def mark_unavailable(self, identifier: str, reason: str) -> None:
        """Record a document type whose schema could not be registered."""
        if self._frozen:
            raise RuntimeError("Cannot modify a frozen registry")
        self._unavailable[identifier] = reason

    def freeze(self) -> None:
        if not self._frozen:
            self._entries = MappingProxyType(dict(self._entries))
            self._unavailable = MappingProxyType(dict(self._unavailable))
            self._frozen = True

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @property
    def frozen(self) -> bool:
        return self._frozen

    @property
    def entries(self) -> Mapping[str, SchemaEntry]:
        return MappingProxyType(self._entries)

    def resolve(self, identifier: str) -> Optional[SchemaEntry]:
        return self._entries.get(identifier)

    def find_by_predicate_type(self, uri: str) -> Optional[SchemaEntry]:
        for entry in self._entries.values():
            if entry.predicate_type_uri == uri:
                return entry
        return None

    def unavailable_reason(self, identifier: str) -> Optional[str]:
        return self._unavailable.get(identifier)

    def identifiers(self) -> List[str]:
        return list(self._entries)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._entries

    def __len__(self) -> int:
        return len(self._entries)
