"""
Sentence Filter - pure parsing of sentence search criteria.

No database access: turns a query-string mapping into a ``SentenceQuery``
that the service layer applies to SQLAlchemy.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional

from vivatrain_app.core.error_handlers import ValidationError

# Query-string key -> Sentence column
FILTER_FIELDS = {
    'level': 'level',
    'tense': 'tense',
    'grammar': 'grammar',
    'vivaRef': 'viva_ref',
}

DEFAULT_LIMIT = 50


@dataclass
class SentenceQuery:
    """Normalized search criteria for sentences."""

    filters: Dict[str, List[str]] = field(default_factory=dict)
    search: Optional[str] = None
    exclude_ids: List[int] = field(default_factory=list)
    limit: int = DEFAULT_LIMIT
    random: bool = False

    def is_empty(self) -> bool:
        return not self.filters and not self.search


def _split_values(raw: str) -> List[str]:
    return [value.strip() for value in raw.split(',') if value.strip()]


def _parse_bool(raw) -> bool:
    return str(raw).strip().lower() in ('1', 'true', 'yes', 'on')


def parse_sentence_query(args: Mapping[str, str], max_limit: int = 200) -> SentenceQuery:
    """
    Build a SentenceQuery from request arguments.

    Comma separated values match any of the listed values. ``limit`` is
    clamped to ``max_limit``.

    Raises:
        ValidationError: when ``limit`` or ``exclude`` are not integers.
    """
    query = SentenceQuery()

    for arg_name, column in FILTER_FIELDS.items():
        raw = args.get(arg_name)
        if raw:
            values = _split_values(raw)
            if values:
                query.filters[column] = values

    search = (args.get('search') or '').strip()
    query.search = search or None

    raw_limit = args.get('limit')
    if raw_limit not in (None, ''):
        try:
            limit = int(raw_limit)
        except (TypeError, ValueError):
            raise ValidationError('limit must be a whole number', errors={'limit': raw_limit})
        if limit < 1:
            raise ValidationError('limit must be positive', errors={'limit': raw_limit})
        query.limit = min(limit, max_limit)

    raw_exclude = args.get('exclude')
    if raw_exclude:
        try:
            query.exclude_ids = [int(value) for value in _split_values(raw_exclude)]
        except ValueError:
            raise ValidationError('exclude must be a list of sentence ids', errors={'exclude': raw_exclude})

    query.random = _parse_bool(args.get('random', ''))
    return query
