"""
Page-level summaries: visible text, a compact structural outline, marker
attribute values, collapsed sections and native select options.

These functions raise when the page itself cannot be queried; the page state
scanner decides how a failed summary is reported. Elements that detach while
being read are skipped.
"""

import asyncio
import logging
import re
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, TypeVar

from pagelens.config import CONFIG
from pagelens.dom.extractor import LiveMatchIndex, attributes_from_raw, display_text, locate
from pagelens.dom.selectors import resolve_selector
from pagelens.dom.views import CollapsedSection, ElementType, SelectField
from pagelens.utils import collapse_whitespace, time_execution_async

if TYPE_CHECKING:
	from playwright.async_api import ElementHandle, Page

logger = logging.getLogger(__name__)

T = TypeVar('T')

MAIN_CONTENT_SELECTORS: tuple[str, ...] = ('main', 'article', "[role='main']", '#content', '.content')

MAX_COLLAPSED_ITEMS = 15
MAX_SELECT_OPTIONS = 25

PLACEHOLDER_OPTION_PATTERN = re.compile(r'^\s*(--|select\b|choose\b|please\s+(select|choose)\b)', re.IGNORECASE)


def truncation_marker() -> str:
	return f'... [truncated - use {CONFIG.PAGELENS_FULL_CONTENT_ACTION} for full text]'


def truncate_content(text: str, max_length: int) -> str:
	"""Collapse whitespace and cut to `max_length` characters (0 = unlimited)."""
	text = collapse_whitespace(text)
	if max_length > 0 and len(text) > max_length:
		return text[:max_length] + truncation_marker()
	return text


@time_execution_async('--get_content')
async def get_content(page: 'Page', max_length: int = 0) -> str:
	text = await page.inner_text('body')
	return truncate_content(text, max_length)


STRUCTURE_JS = """
(mainSelectors) => {
	const result = [];
	const indent = (level) => '  '.repeat(level);
	const isRendered = (el) => {
		if (typeof el.checkVisibility === 'function') return el.checkVisibility();
		return el.getClientRects().length > 0;
	};

	document.querySelectorAll('form').forEach((form) => {
		const id = form.id ? `#${form.id}` : '';
		const name = form.getAttribute('name') ? `[name="${form.getAttribute('name')}"]` : '';
		result.push(`${indent(0)}<form${id}${name}>`);

		form.querySelectorAll('input, select, textarea, button').forEach((field) => {
			const tag = field.tagName.toLowerCase();
			const fieldId = field.id ? `#${field.id}` : '';
			const fieldName = field.getAttribute('name') ? `[name="${field.getAttribute('name')}"]` : '';
			const type = field.getAttribute('type') && tag === 'input' ? `[type="${field.getAttribute('type')}"]` : '';
			const hidden = isRendered(field) ? '' : ' (hidden)';
			result.push(`${indent(1)}<${tag}${fieldId}${fieldName}${type}>${hidden}`);
		});

		result.push(`${indent(0)}</form>`);
	});

	for (const selector of mainSelectors) {
		const main = document.querySelector(selector);
		if (main) {
			const id = main.id ? `#${main.id}` : '';
			result.push(`<${main.tagName.toLowerCase()}${id}> (main content area)`);
			break;
		}
	}

	document.querySelectorAll('table').forEach((table) => {
		const id = table.id ? `#${table.id}` : '';
		const classAttr = table.getAttribute('class') || '';
		const firstClass = classAttr.trim().split(/\\s+/)[0];
		const className = firstClass ? `.${firstClass}` : '';
		const rows = table.querySelectorAll('tr').length;
		result.push(`<table${id}${className}> (${rows} rows)`);
	});

	return result.join('\\n');
}
"""


@time_execution_async('--get_structure')
async def get_structure(page: 'Page') -> str:
	return await page.evaluate(STRUCTURE_JS, list(MAIN_CONTENT_SELECTORS))


DATA_ATTRIBUTES_JS = """
(attribute) => {
	const values = new Set();
	document.querySelectorAll(`[${attribute}]`).forEach((el) => {
		const value = el.getAttribute(attribute);
		if (value) values.add(value);
	});
	return [...values];
}
"""


async def get_data_attributes(page: 'Page', attribute: str | None = None) -> list[str]:
	"""Distinct values of the marker attribute across the page, sorted."""
	values = await page.evaluate(DATA_ATTRIBUTES_JS, attribute or CONFIG.PAGELENS_DATA_ATTRIBUTE)
	return sorted(set(values))


async def _scan_handles(
	page: 'Page',
	query: str,
	read_one: Callable[['ElementHandle', LiveMatchIndex], Awaitable[T | None]],
	match_index: LiveMatchIndex | None,
) -> list[T]:
	owns_index = match_index is None
	index = LiveMatchIndex(page) if match_index is None else match_index

	handles = await page.query_selector_all(query)
	try:
		results = await asyncio.gather(*(read_one(handle, index) for handle in handles))
	finally:
		await asyncio.gather(*(handle.dispose() for handle in handles), return_exceptions=True)
		if owns_index:
			await index.dispose()
	return [result for result in results if result is not None]


# Same shape as extractor.READ_ATTRIBUTES_JS, inlined so one evaluate reads the whole element
_READ_ATTRIBUTES_FN = """
	const readAttributes = (el) => ({
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
	});
"""

COLLAPSED_TOGGLE_QUERY = '[aria-expanded="false"]'

COLLAPSED_SECTION_JS = (
	"""
(toggle, [testIdAttribute, maxItems]) => {
"""
	+ _READ_ATTRIBUTES_FN
	+ """
	if (!toggle.getClientRects().length) return null;

	const normalize = (text) => (text || '').replace(/\\s+/g, ' ').trim();
	const root = toggle.getRootNode();

	let panel = null;
	const controls = toggle.getAttribute('aria-controls');
	if (controls) {
		for (const id of controls.split(/\\s+/)) {
			panel = (root.getElementById && root.getElementById(id)) || document.getElementById(id);
			if (panel) break;
		}
	}
	if (!panel) panel = toggle.nextElementSibling;

	const items = [];
	let total = 0;
	if (panel) {
		panel.querySelectorAll('label, option, [role="option"], [role="menuitem"], li, a, button').forEach((item) => {
			const text = normalize(item.textContent);
			if (!text || items.includes(text)) return;
			total += 1;
			if (items.length < maxItems) items.push(text);
		});
	}

	return { attributes: readAttributes(toggle), items, total };
}
"""
)


async def _read_collapsed_section(handle: 'ElementHandle', match_index: LiveMatchIndex) -> CollapsedSection | None:
	try:
		raw = await handle.evaluate(COLLAPSED_SECTION_JS, [CONFIG.PAGELENS_TEST_ID_ATTRIBUTE, MAX_COLLAPSED_ITEMS])
	except Exception as e:
		logger.debug(f'Skipping collapsed toggle: {type(e).__name__}: {e}')
		return None
	if raw is None:
		return None

	attributes = attributes_from_raw(raw['attributes'], ElementType.BUTTON)
	items = list(raw.get('items') or [])
	hidden = int(raw.get('total') or 0) - len(items)
	if hidden > 0:
		items.append(f'+{hidden} more')

	section = CollapsedSection(
		selector=resolve_selector(attributes, ElementType.BUTTON),
		label=display_text(attributes.text, attributes.aria_label, None),
		items=tuple(items),
	)
	return await locate(section, handle, match_index)


@time_execution_async('--get_collapsed_sections')
async def get_collapsed_sections(page: 'Page', match_index: LiveMatchIndex | None = None) -> list[CollapsedSection]:
	"""Visible toggles with aria-expanded=false and the items hidden behind them."""
	return await _scan_handles(page, COLLAPSED_TOGGLE_QUERY, _read_collapsed_section, match_index)


SELECT_FIELD_JS = (
	"""
(select, [testIdAttribute]) => {
"""
	+ _READ_ATTRIBUTES_FN
	+ """
	const root = select.getRootNode();
	const labelFor = () => {
		if (select.id) {
			const label = root.querySelector(`label[for="${CSS.escape(select.id)}"]`);
			if (label) return label.textContent;
		}
		const wrapping = select.closest('label');
		if (wrapping) {
			const clone = wrapping.cloneNode(true);
			clone.querySelectorAll('select').forEach((el) => el.remove());
			return clone.textContent;
		}
		return select.getAttribute('aria-label') || '';
	};

	return {
		attributes: { ...readAttributes(select), text: '' },
		label: labelFor(),
		options: Array.from(select.options).map((option) => option.textContent),
	};
}
"""
)


def is_placeholder_option(text: str) -> bool:
	return not text or bool(PLACEHOLDER_OPTION_PATTERN.match(text))


async def _read_select_field(handle: 'ElementHandle', match_index: LiveMatchIndex) -> SelectField | None:
	try:
		raw = await handle.evaluate(SELECT_FIELD_JS, [CONFIG.PAGELENS_TEST_ID_ATTRIBUTE])
	except Exception as e:
		logger.debug(f'Skipping select: {type(e).__name__}: {e}')
		return None

	attributes = attributes_from_raw(raw['attributes'], ElementType.SELECT)
	options = [collapse_whitespace(option) for option in raw.get('options') or []]
	options = [option for option in options if not is_placeholder_option(option)]
	if len(options) > MAX_SELECT_OPTIONS:
		hidden = len(options) - MAX_SELECT_OPTIONS
		options = options[:MAX_SELECT_OPTIONS] + [f'+{hidden} more']

	field = SelectField(
		selector=resolve_selector(attributes, ElementType.SELECT),
		label=collapse_whitespace(raw.get('label')) or (attributes.aria_label or ''),
		options=tuple(options),
	)
	return await locate(field, handle, match_index)


@time_execution_async('--get_select_fields')
async def get_select_fields(page: 'Page', match_index: LiveMatchIndex | None = None) -> list[SelectField]:
	"""Every native <select> with its label and its real options."""
	fields = await _scan_handles(page, 'select', _read_select_field, match_index)
	logger.debug(f'Found {len(fields)} select fields')
	return fields
