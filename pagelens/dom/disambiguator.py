from collections import defaultdict
from collections.abc import Hashable, Iterable
from typing import TypeVar

from pagelens.dom.views import LocatedElement

NTH_QUALIFIER = ' >> nth='

LocatedT = TypeVar('LocatedT', bound=LocatedElement)


def qualify(selector: str, index: int) -> str:
	"""Append a zero-based positional qualifier (Playwright's nth selector engine)."""
	return f'{selector}{NTH_QUALIFIER}{index}'


def _element_key(position: int, element: LocatedElement) -> Hashable:
	# Records with the same live position are one element listed under several sections
	if element.match_index is not None:
		return element.match_index
	return ('unlocated', position)


def disambiguate(elements: Iterable[LocatedT]) -> list[LocatedT]:
	"""Rewrite colliding selectors so each shown selector addresses one element.

	Collisions are counted across everything passed in, so callers pass all
	elements of one page together (element records, collapsed toggles, select
	fields). A selector is ambiguous when it is shared by more than one distinct
	element, or when the page reported more than one live match for it. One
	element listed twice (same selector, same live position) counts once and
	gets the same qualifier in both places.

	The positional index is the live match position when every element that
	shares the selector has one, otherwise the extraction order among those
	elements. Unambiguous elements are returned unchanged.
	"""
	elements = list(elements)

	distinct: dict[str, list[Hashable]] = defaultdict(list)
	has_live_positions: dict[str, bool] = defaultdict(lambda: True)
	keys: list[Hashable] = []
	for position, element in enumerate(elements):
		key = _element_key(position, element)
		keys.append(key)
		if key not in distinct[element.selector]:
			distinct[element.selector].append(key)
		if element.match_index is None:
			has_live_positions[element.selector] = False

	result: list[LocatedT] = []
	for element, key in zip(elements, keys):
		selector = element.selector
		ambiguous = len(distinct[selector]) > 1 or (element.match_count or 0) > 1
		if not ambiguous:
			result.append(element)
			continue

		if has_live_positions[selector] and element.match_index is not None:
			index = element.match_index
		else:
			index = distinct[selector].index(key)
		result.append(element.model_copy(update={'display_selector': qualify(selector, index)}))

	return result
