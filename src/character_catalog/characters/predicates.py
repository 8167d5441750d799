"""
Composable query predicates for character searches.

A predicate is a small immutable expression tree. The same tree can be
evaluated against an in-memory Character or compiled to a parameterised SQL
fragment, so both stores share one definition of "matches". Values never
end up inside SQL text.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, FrozenSet, List, Optional, Tuple

from .enums import CharacterClassification, CharacterType
from .models import Character, FilterSpec

SqlFragment = Tuple[str, List[Any]]

CHARACTER_COLUMNS: FrozenSet[str] = frozenset(f.name for f in fields(Character))


def _column(field_name: str) -> str:
    if field_name not in CHARACTER_COLUMNS:
        raise ValueError(f"Unknown character column: {field_name}")
    return field_name


def to_db_value(value: Any) -> Any:
    """Convert a Python value to its stored representation."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, bool):
        return int(value)
    return value


def _comparable(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class Predicate(ABC):
    """Boolean condition over a character."""

    @abstractmethod
    def matches(self, character: Character) -> bool:
        """Evaluate against an in-memory character."""

    @abstractmethod
    def to_sql(self) -> SqlFragment:
        """Compile to a ``(where_clause, params)`` pair."""

    def __and__(self, other: "Predicate") -> "And":
        left = self.terms if isinstance(self, And) else (self,)
        right = other.terms if isinstance(other, And) else (other,)
        return And(left + right)


@dataclass(frozen=True)
class Eq(Predicate):
    field: str
    value: Any

    def matches(self, character: Character) -> bool:
        return _comparable(getattr(character, self.field)) == _comparable(self.value)

    def to_sql(self) -> SqlFragment:
        return f"{_column(self.field)} = ?", [to_db_value(self.value)]


@dataclass(frozen=True)
class Ge(Predicate):
    field: str
    value: int

    def matches(self, character: Character) -> bool:
        actual = getattr(character, self.field)
        return actual is not None and actual >= self.value

    def to_sql(self) -> SqlFragment:
        return f"{_column(self.field)} >= ?", [self.value]


@dataclass(frozen=True)
class Le(Predicate):
    field: str
    value: int

    def matches(self, character: Character) -> bool:
        actual = getattr(character, self.field)
        return actual is not None and actual <= self.value

    def to_sql(self) -> SqlFragment:
        return f"{_column(self.field)} <= ?", [self.value]


@dataclass(frozen=True)
class ContainsIgnoreCase(Predicate):
    """Case-insensitive substring match, using Unicode case folding.

    The SQL form needs the CASEFOLD function the connection pool registers.
    """

    field: str
    term: str

    def matches(self, character: Character) -> bool:
        actual = getattr(character, self.field)
        return actual is not None and self.term.casefold() in actual.casefold()

    def to_sql(self) -> SqlFragment:
        escaped = (
            self.term.casefold()
            .replace("\\", "\\\\")
            .replace("%", "\\%")
            .replace("_", "\\_")
        )
        return f"casefold({_column(self.field)}) LIKE ? ESCAPE '\\'", [f"%{escaped}%"]


@dataclass(frozen=True)
class And(Predicate):
    """Conjunction; an empty conjunction matches everything."""

    terms: Tuple[Predicate, ...] = ()

    def matches(self, character: Character) -> bool:
        return all(term.matches(character) for term in self.terms)

    def to_sql(self) -> SqlFragment:
        if not self.terms:
            return "1 = 1", []

        clauses = []
        params: List[Any] = []
        for term in self.terms:
            clause, term_params = term.to_sql()
            clauses.append(f"({clause})")
            params.extend(term_params)
        return " AND ".join(clauses), params


def visible() -> And:
    """Predicate selecting every character that is not soft-deleted."""
    return And((Eq("is_deleted", False),))


def build_character_predicate(
    filter_spec: Optional[FilterSpec] = None, search_term: Optional[str] = None
) -> And:
    """Compose a search term and filter criteria into one predicate.

    The result always excludes soft-deleted characters. Every unset
    criterion is skipped, and enum criteria that do not name a known
    type/classification are ignored rather than rejected. A minimum above
    its maximum is kept as-is and simply matches nothing.
    """
    filter_spec = filter_spec or FilterSpec()
    terms: List[Predicate] = [Eq("is_deleted", False)]

    for text in (search_term, filter_spec.name):
        if isinstance(text, str) and text.strip():
            terms.append(ContainsIgnoreCase("name", text.strip()))

    character_type = CharacterType.parse(filter_spec.type)
    if character_type is not None:
        terms.append(Eq("type", character_type))

    classification = CharacterClassification.parse(filter_spec.classification)
    if classification is not None:
        terms.append(Eq("classification", classification))

    for stat, minimum, maximum in filter_spec.stat_bounds():
        if minimum is not None:
            terms.append(Ge(stat, minimum))
        if maximum is not None:
            terms.append(Le(stat, maximum))

    return And(tuple(terms))
