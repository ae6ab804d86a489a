import asyncio
import logging
from typing import TYPE_CHECKING, Any, TypeVar

from pagelens.config import CONFIG
from pagelens.dom.selectors import resolve_selector
from pagelens.dom.views import ElementAttributes, ElementRecord, ElementType, LocatedElement
from pagelens.utils import collapse_whitespace, time_execution_async

if TYPE_CHECKING:
	from playwright.async_api import ElementHandle, Page

logger = logging.getLogger(__name__)

LocatedT = TypeVar('LocatedT', bound=LocatedElement)

# Lookup expression per category. Order of the dict is the display order.
ELEMENT_QUERIES: dict[ElementType, str] = {
	ElementType.INPUT: (
		"input:not([type='button']):not([type='submit']):not([type='hidden'])"
		":not([type='checkbox']):not([type='radio'])"
	),
	ElementType.BUTTON: "button, input[type='button'], input[type='submit'], [role='button']",
	ElementType.LINK: 'a[href]',
	ElementType.SELECT: 'select',
	ElementType.TEXTAREA: 'textarea',
	ElementType.MENUITEM: "[role='option'], [role='menuitem'], [role='listbox'] li, [role='menu'] li",
	# Native checkboxes/radios, labels wrapping them, and ARIA checkboxes/switches
	ElementType.CHECKBOX: (
		"input[type='checkbox'], input[type='radio'], label:has(input[type='checkbox']), "
		"label:has(input[type='radio']), [role='checkbox'], [role='switch']"
	),
}

READ_ATTRIBUTES_JS = """
(el, testIdAttribute) => ({
	tag: el.tagName.toLowerCase(),
	id: el.getAttribute('id'),
	name: el.getAttribute('name'),
	class_name: el.getAttribute('class'),
	test_id: el.getAttribute(testIdAttribute),
	aria_label: el.getAttribute('aria-label'),
	placeholder: el.getAttribute('placeholder'),
	href: el.getAttribute('href'),
	role: el.getAttribute('role'),
	input_type: el.getAttribute('type'),
	text: el.textContent,
})
"""

def display_text(text: str | None, aria_label: str | None, placeholder: str | None) -> str:
	"""Text content first, then [aria-label], then [placeholder]."""
	normalized = collapse_whitespace(text)
	if normalized:
		return normalized
	if aria_label and aria_label.strip():
		return f'[{aria_label.strip()}]'
	if placeholder and placeholder.strip():
		return f'[{placeholder.strip()}]'
	return ''


def attributes_from_raw(raw: dict[str, Any], element_type: ElementType) -> ElementAttributes:
	"""Keep only the attributes the resolver may use for this category."""
	return ElementAttributes(
		tag=raw.get('tag') or element_type.value,
		id=raw.get('id'),
		name=raw.get('name'),
		class_name=raw.get('class_name'),
		test_id=raw.get('test_id'),
		aria_label=raw.get('aria_label'),
		placeholder=raw.get('placeholder'),
		href=raw.get('href') if element_type == ElementType.LINK else None,
		role=raw.get('role'),
		input_type=raw.get('input_type') if element_type == ElementType.INPUT else None,
		text=raw.get('text'),
	)


def build_record(attributes: ElementAttributes, element_type: ElementType) -> ElementRecord:
	return ElementRecord(
		type=element_type,
		selector=resolve_selector(attributes, element_type),
		text=display_text(attributes.text, attributes.aria_label, attributes.placeholder),
		input_type=attributes.input_type or None,
		placeholder=attributes.placeholder or None,
		href=attributes.href or None,
	)


class LiveMatchIndex:
	"""Locates elements among the live matches of their selector.

	Matches come from ``page.query_selector_all``, i.e. the same css engine that
	later resolves ``selector >> nth=i``, so the index agrees with Playwright even
	for elements inside open shadow roots. Each distinct selector is queried once
	per index; call ``dispose()`` when the scan is over.
	"""

	def __init__(self, page: 'Page'):
		self.page = page
		self._matches: dict[str, asyncio.Task[list['ElementHandle']]] = {}

	async def position(self, handle: 'ElementHandle', selector: str) -> tuple[int | None, int | None]:
		task = self._matches.get(selector)
		if task is None:
			task = asyncio.create_task(self.page.query_selector_all(selector))
			self._matches[selector] = task

		try:
			matches = await task
			index = await handle.evaluate('(el, matches) => matches.indexOf(el)', matches)
		except Exception as e:
			logger.debug(f'Could not locate {selector!r} among live matches: {type(e).__name__}: {e}')
			return None, None

		if index < 0:
			# Detached between the two reads
			return None, len(matches)
		return index, len(matches)

	async def dispose(self) -> None:
		tasks = list(self._matches.values())
		self._matches.clear()
		for task in tasks:
			if not task.done():
				task.cancel()
		results = await asyncio.gather(*tasks, return_exceptions=True)
		handles = [handle for result in results if isinstance(result, list) for handle in result]
		await asyncio.gather(*(handle.dispose() for handle in handles), return_exceptions=True)


class ElementExtractor:
	"""Enumerates visible interactive elements of a page, one category at a time."""

	def __init__(
		self,
		page: 'Page',
		queries: dict[ElementType, str] | None = None,
		match_index: LiveMatchIndex | None = None,
	):
		self.page = page
		self.queries = queries or ELEMENT_QUERIES
		self.match_index = match_index

	@time_execution_async('--extract_category')
	async def extract_category(self, element_type: ElementType) -> list[ElementRecord]:
		"""Return records for every visible element of one category.

		A failing query propagates; a failing element is dropped.
		"""
		owns_index = self.match_index is None
		match_index = LiveMatchIndex(self.page) if owns_index else self.match_index

		handles = await self.page.query_selector_all(self.queries[element_type])
		try:
			results = await asyncio.gather(*(self._extract_element(handle, element_type, match_index) for handle in handles))
		finally:
			await asyncio.gather(*(handle.dispose() for handle in handles), return_exceptions=True)
			if owns_index:
				await match_index.dispose()

		records = [record for record in results if record is not None]
		logger.debug(f'Extracted {len(records)}/{len(handles)} visible {element_type.value} elements')
		return records

	async def _extract_element(
		self, handle: 'ElementHandle', element_type: ElementType, match_index: LiveMatchIndex
	) -> ElementRecord | None:
		try:
			if not await handle.is_visible():
				return None
			raw = await handle.evaluate(READ_ATTRIBUTES_JS, CONFIG.PAGELENS_TEST_ID_ATTRIBUTE)
			record = build_record(attributes_from_raw(raw, element_type), element_type)
		except Exception as e:
			# Element detached or navigated away mid-scan
			logger.debug(f'Skipping {element_type.value} element: {type(e).__name__}: {e}')
			return None

		return await locate(record, handle, match_index)


async def locate(element: LocatedT, handle: 'ElementHandle', match_index: LiveMatchIndex) -> LocatedT:
	"""Attach the live match position of `handle` under `element.selector`."""
	index, count = await match_index.position(handle, element.selector)
	if index is None and count is None:
		return element
	return element.model_copy(update={'match_index': index, 'match_count': count})
