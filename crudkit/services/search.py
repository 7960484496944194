"""
Search-term to SQL predicate compiler.

Turns caller supplied field/operator/value triples into the
QueryFilterOptions consumed by BaseRepository.find_many_with_query_builder:

    get_search_filter(10, [{"field": "age", "operator": ">", "value": "18"}])
    # QueryFilterOptions(where="age > '18'", and_where=[], limit=10)

The first term becomes the primary `where` clause and every following term
is appended to `and_where`, in input order.

Values are quoted with single quotes unless wrapped in parentheses, which
marks them as a raw sub-expression. Nothing is escaped: field names and
parenthesized values are interpolated verbatim, so callers must only pass
terms built from trusted input or an allow-listed set of fields.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from crudkit.config.constants import Messages, Search
from crudkit.config.logging import get_logger
from crudkit.repositories.filters import QueryFilterOptions
from crudkit.utils.exceptions import InvalidArgumentError
from crudkit.utils.metadata import Metadata

logger = get_logger(__name__)


class SearchTerm(BaseModel):
    """A single predicate fragment: `<field> <operator> <value>`."""

    model_config = ConfigDict(frozen=True)

    field: str
    operator: str | None = None
    value: str

    @classmethod
    def new_search_term(cls, data: Union["SearchTerm", Mapping[str, Any]]) -> "SearchTerm":
        """Build a term from another term or a plain mapping."""
        if isinstance(data, cls):
            return cls(field=data.field, operator=data.operator, value=data.value)
        return cls.model_validate(data)

    @property
    def is_raw(self) -> bool:
        """True when the value is a parenthesized expression left unquoted."""
        return self.value.startswith(Search.RAW_VALUE_PREFIX) and self.value.endswith(
            Search.RAW_VALUE_SUFFIX
        )

    def sql_value(self) -> str:
        if self.is_raw:
            return self.value
        return f"{Search.QUOTE}{self.value}{Search.QUOTE}"

    def to_clause(self) -> str:
        operator = self.operator or Search.DEFAULT_OPERATOR
        return f"{self.field} {operator} {self.sql_value()}"


SearchTermInput = Union[SearchTerm, Mapping[str, Any]]


def _parse_terms(search_terms: Sequence[SearchTermInput]) -> list[SearchTerm]:
    terms = []
    metadata = Metadata()
    for index, raw in enumerate(search_terms):
        try:
            terms.append(SearchTerm.new_search_term(raw))
        except ValidationError as e:
            for error in e.errors():
                location = ".".join(str(part) for part in error["loc"]) or "term"
                metadata.add(f"search_terms[{index}].{location}", error["msg"])
    if metadata:
        raise InvalidArgumentError(Messages.INVALID_PARAMETERS, metadata)
    return terms


def get_search_filter(limit: int, search_terms: Sequence[SearchTermInput] | None) -> QueryFilterOptions:
    """
    Compile search terms into query-builder options.

    Args:
        limit: Maximum number of results, must be >= 0 (0 means no bound).
        search_terms: Non-empty sequence of SearchTerm or mappings with
            `field`, `value` and optional `operator`.

    Returns:
        QueryFilterOptions with the first clause as `where`.

    Raises:
        InvalidArgumentError: If limit is negative, the terms are empty,
            or a term is malformed.
    """
    if not isinstance(limit, int) or isinstance(limit, bool) or limit < 0 or not search_terms:
        raise InvalidArgumentError(Messages.INVALID_PARAMETERS, limit=limit)

    terms = _parse_terms(search_terms)

    where = ""
    and_where: list[str] = []
    for term in terms:
        clause = term.to_clause()
        if not where:
            where = clause
        else:
            and_where.append(clause)

    logger.debug("Compiled search filter", where=where, and_where=and_where, limit=limit)
    return QueryFilterOptions(where=where, and_where=and_where, limit=limit)
