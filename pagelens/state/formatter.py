# @file purpose: Renders PageState snapshots into the line-oriented text block read by the LLM

from collections.abc import Sequence

from pagelens.config import CONFIG, FormatConfig
from pagelens.dom.views import CollapsedSection, ElementRecord, PageState, SelectField
from pagelens.utils import cap_text_length

BROWSER_STATE_OPEN = '<CurrentBrowserState>'
BROWSER_STATE_CLOSE = '</CurrentBrowserState>'

NO_BROWSER_OPEN = '[No browser open]'
NO_PAGES_OPEN = '[No pages open]'

ELEMENT_TEXT_DISPLAY_LENGTH = 60
MAX_DATA_ATTRIBUTES = 30


def wrap_browser_state(body: str) -> str:
	return f'{BROWSER_STATE_OPEN}\n{body}\n{BROWSER_STATE_CLOSE}'


def format_open_pages_header(page_ids: Sequence[str]) -> str:
	return f'OPEN PAGES: {", ".join(page_ids)}\nUse these pageId values for all browser actions.\n'


def format_page_error(page_id: str, error: BaseException | str) -> str:
	return f'=== PAGE: {page_id} ===\n[Error scanning: {error}]'


def format_elements(elements: Sequence[ElementRecord], max_items: int = 0) -> list[str]:
	"""One line per element, optionally limited to `max_items` (0 = all)."""
	if not elements:
		return []

	limit = min(max_items, len(elements)) if max_items > 0 else len(elements)
	lines = []
	for element in elements[:limit]:
		type_str = f' [{element.input_type}]' if element.input_type else ''
		text_str = f' "{cap_text_length(element.text, ELEMENT_TEXT_DISPLAY_LENGTH)}"' if element.text else ''
		lines.append(f'  {element.shown_selector}{type_str}{text_str}')

	if len(elements) > limit:
		lines.append(
			f'  [{len(elements) - limit} more hidden - use {CONFIG.PAGELENS_FULL_CONTENT_ACTION} for complete data]'
		)
	return lines


def format_collapsed_sections(sections: Sequence[CollapsedSection]) -> list[str]:
	lines = []
	for section in sections:
		label = f' "{cap_text_length(section.label, ELEMENT_TEXT_DISPLAY_LENGTH)}"' if section.label else ''
		items = f' -> {", ".join(section.items)}' if section.items else ''
		lines.append(f'  {section.shown_selector}{label}{items}')
	return lines


def format_select_fields(fields: Sequence[SelectField]) -> list[str]:
	lines = []
	for field in fields:
		label = f' "{cap_text_length(field.label, ELEMENT_TEXT_DISPLAY_LENGTH)}"' if field.label else ''
		lines.append(f'  {field.shown_selector}{label}')
		lines.append(f'    Options: {", ".join(field.options) if field.options else "(none)"}')
	return lines


def format_data_attributes(values: Sequence[str]) -> list[str]:
	shown = values[:MAX_DATA_ATTRIBUTES]
	lines = [f'DATA_ATTRIBUTES ({len(values)}):', f'  {", ".join(shown)}']
	hidden = len(values) - len(shown)
	if hidden > 0:
		lines.append(f'  [{hidden} more - use {CONFIG.PAGELENS_FULL_CONTENT_ACTION} with structure=true]')
	return lines


def format_page_state(state: PageState, config: FormatConfig) -> str:
	"""Format one page as a compact block with fixed section headers."""
	lines = [
		f'=== PAGE: {state.page_id} ===',
		f'URL: {state.url}',
		f'Title: {state.title}',
	]

	if state.scan_errors:
		lines.append('')
		lines.append('⚠️ SCAN WARNINGS (partial results):')
		lines.extend(f'  - {error}' for error in state.scan_errors)

	if config.include_summary and state.content:
		lines.extend(['', 'CONTENT:', state.content])

	if config.include_structure and state.structure:
		lines.extend(['', 'STRUCTURE:', state.structure])

	sections: list[tuple[str, Sequence[ElementRecord], int]] = [
		('INPUTS:', state.inputs, 0),
		('BUTTONS:', state.buttons, 0),
		(f'LINKS ({len(state.links)}):', state.links, config.max_links),
		('SELECTS:', state.selects, 0),
		('TEXTAREAS:', state.textareas, 0),
		('MENUITEMS:', state.menuitems, 0),
		('CHECKBOXES:', state.checkboxes, 0),
	]
	for header, elements, max_items in sections:
		if elements:
			lines.extend(['', header])
			lines.extend(format_elements(elements, max_items))

	if state.collapsed_sections:
		lines.extend(['', 'COLLAPSED SECTIONS (click to expand):'])
		lines.extend(format_collapsed_sections(state.collapsed_sections))

	if state.select_fields:
		lines.extend(['', 'SELECT OPTIONS:'])
		lines.extend(format_select_fields(state.select_fields))

	if state.data_attributes:
		lines.append('')
		lines.extend(format_data_attributes(state.data_attributes))

	return '\n'.join(lines)
