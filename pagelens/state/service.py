import asyncio
import logging
from collections.abc import Awaitable
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar

from pagelens.config import DEFAULT_FORMAT_CONFIG, FormatConfig
from pagelens.dom.content import (
	get_collapsed_sections,
	get_content,
	get_data_attributes,
	get_select_fields,
	get_structure,
)
from pagelens.dom.disambiguator import disambiguate
from pagelens.dom.extractor import ElementExtractor, LiveMatchIndex
from pagelens.dom.views import (
	ELEMENT_SECTIONS,
	CollapsedSection,
	ElementRecord,
	ElementType,
	LocatedElement,
	PageState,
	SelectField,
)
from pagelens.session.views import PageInfo, PageRegistry
from pagelens.state.formatter import (
	NO_BROWSER_OPEN,
	NO_PAGES_OPEN,
	format_open_pages_header,
	format_page_error,
	format_page_state,
	wrap_browser_state,
)
from pagelens.utils import get_error_message, time_execution_async

if TYPE_CHECKING:
	from playwright.async_api import Page

logger = logging.getLogger(__name__)

T = TypeVar('T')


class ScannerStatus(str, Enum):
	IDLE = 'idle'
	SCANNING = 'scanning'


class PageStateScanner:
	"""
	Scans every open page and keeps the formatted result for synchronous reads.

	refresh_state() is single-flight: while a scan is in flight, further callers
	wait on that same scan instead of starting another one. Callers that stop
	waiting (e.g. are cancelled) do not cancel the scan; it still completes and
	replaces the cache in a single assignment.
	"""

	def __init__(self, registry: PageRegistry, config: FormatConfig | None = None):
		self.registry = registry
		self.config = config or DEFAULT_FORMAT_CONFIG

		self._cached_state: str = NO_BROWSER_OPEN
		self._scan_task: asyncio.Task[str] | None = None

	@property
	def status(self) -> ScannerStatus:
		return ScannerStatus.SCANNING if self._scan_task is not None else ScannerStatus.IDLE

	def get_cached_state(self) -> str:
		"""Last completed snapshot. Call refresh_state() to update it."""
		return self._cached_state

	async def refresh_state(self) -> str:
		"""Rescan all pages (or join the scan already in flight) and return the new state."""
		task = self._scan_task
		if task is None:
			task = asyncio.create_task(self._do_refresh())
			self._scan_task = task
			task.add_done_callback(self._on_scan_done)
		else:
			logger.debug('Page state scan already in flight, waiting for it')

		return await asyncio.shield(task)

	async def _do_refresh(self) -> str:
		state = await self.scan_all_pages()
		self._cached_state = state
		return state

	def _on_scan_done(self, task: 'asyncio.Task[str]') -> None:
		# Runs whether the scan succeeded, failed or was cancelled
		if self._scan_task is task:
			self._scan_task = None
		if task.cancelled():
			return
		error = task.exception()
		if error is not None:
			logger.warning(f'❌ Page state refresh failed: {type(error).__name__}: {error}')

	@time_execution_async('--scan_all_pages')
	async def scan_all_pages(self) -> str:
		"""Scan all open pages and format them as one <CurrentBrowserState> block."""
		pages = self.registry.list_pages()
		if not pages:
			return wrap_browser_state(NO_PAGES_OPEN)

		header = format_open_pages_header([page_info.id for page_info in pages])
		blocks = await asyncio.gather(*(self._scan_and_format(page_info) for page_info in pages))

		body = '\n\n'.join(block for block in blocks if block is not None)
		return wrap_browser_state(f'{header}\n{body}')

	async def _scan_and_format(self, page_info: PageInfo) -> str | None:
		page = self.registry.get_page(page_info.id)
		if page is None:
			logger.debug(f'Page {page_info.id} disappeared before it could be scanned')
			return None

		try:
			state = await self.scan_page(page_info.id, page)
		except Exception as e:
			logger.warning(f'❌ Failed to scan page {page_info.id}: {type(e).__name__}: {e}')
			return format_page_error(page_info.id, get_error_message(e))
		return format_page_state(state, self.config)

	@time_execution_async('--scan_page')
	async def scan_page(self, page_id: str, page: 'Page') -> PageState:
		"""Scan one page. Each sub-scan fails on its own; only the title read can fail the page."""
		# One index per scan so every listed element is located against the same matches
		match_index = LiveMatchIndex(page)
		extractor = ElementExtractor(page, match_index=match_index)
		element_types = list(ELEMENT_SECTIONS)

		sub_scans: list[tuple[str, Awaitable[Any], Any]] = []
		if self.config.include_summary:
			sub_scans.append(('content', get_content(page, self.config.max_content_length), ''))
		if self.config.include_structure:
			sub_scans.append(('structure', get_structure(page), ''))
		for element_type in element_types:
			sub_scans.append((ELEMENT_SECTIONS[element_type], extractor.extract_category(element_type), []))
		sub_scans.append(('data_attributes', get_data_attributes(page), []))
		sub_scans.append(('collapsed_sections', get_collapsed_sections(page, match_index), []))
		sub_scans.append(('select_options', get_select_fields(page, match_index), []))

		try:
			title, *outcomes = await asyncio.gather(
				page.title(),
				*(self._run_sub_scan(page_id, name, coro, fallback) for name, coro, fallback in sub_scans),
			)
		finally:
			await match_index.dispose()

		results: dict[str, Any] = {}
		scan_errors: list[str] = []
		for (name, _, _), (value, error) in zip(sub_scans, outcomes):
			results[name] = value
			if error is not None:
				scan_errors.append(error)

		located: list[LocatedElement] = []
		for element_type in element_types:
			located.extend(results[ELEMENT_SECTIONS[element_type]])
		located.extend(results['collapsed_sections'])
		located.extend(results['select_options'])

		by_type: dict[ElementType, list[ElementRecord]] = {element_type: [] for element_type in element_types}
		collapsed_sections: list[CollapsedSection] = []
		select_fields: list[SelectField] = []
		for element in disambiguate(located):
			if isinstance(element, ElementRecord):
				by_type[element.type].append(element)
			elif isinstance(element, CollapsedSection):
				collapsed_sections.append(element)
			elif isinstance(element, SelectField):
				select_fields.append(element)

		return PageState(
			page_id=page_id,
			url=page.url,
			title=title,
			content=results.get('content', ''),
			structure=results.get('structure', ''),
			**{ELEMENT_SECTIONS[element_type]: tuple(by_type[element_type]) for element_type in element_types},
			data_attributes=tuple(results['data_attributes']),
			collapsed_sections=tuple(collapsed_sections),
			select_fields=tuple(select_fields),
			scan_errors=tuple(scan_errors),
		)

	async def _run_sub_scan(self, page_id: str, name: str, coro: Awaitable[T], fallback: T) -> tuple[T, str | None]:
		try:
			return await coro, None
		except Exception as e:
			logger.warning(f'⚠️ {name} scan failed on page {page_id}: {type(e).__name__}: {e}')
			return fallback, f'{name}: {type(e).__name__}: {get_error_message(e)}'
