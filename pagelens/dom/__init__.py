from pagelens.dom.disambiguator import disambiguate
from pagelens.dom.extractor import ELEMENT_QUERIES, ElementExtractor, LiveMatchIndex
from pagelens.dom.selectors import is_garbage_id, is_meaningful_class, resolve_selector
from pagelens.dom.views import (
	CollapsedSection,
	ElementAttributes,
	ElementRecord,
	ElementType,
	LocatedElement,
	PageState,
	SelectField,
)

__all__ = [
	'ELEMENT_QUERIES',
	'CollapsedSection',
	'ElementAttributes',
	'ElementExtractor',
	'ElementRecord',
	'ElementType',
	'LiveMatchIndex',
	'LocatedElement',
	'PageState',
	'SelectField',
	'disambiguate',
	'is_garbage_id',
	'is_meaningful_class',
	'resolve_selector',
]
