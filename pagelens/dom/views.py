from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ElementType(str, Enum):
	INPUT = 'input'
	BUTTON = 'button'
	LINK = 'link'
	SELECT = 'select'
	TEXTAREA = 'textarea'
	MENUITEM = 'menuitem'
	CHECKBOX = 'checkbox'


class ElementAttributes(BaseModel):
	"""Raw attributes read from one live element, the input of the selector resolver."""

	model_config = ConfigDict(frozen=True)

	tag: str
	id: str | None = None
	name: str | None = None
	class_name: str | None = None
	test_id: str | None = None
	aria_label: str | None = None
	placeholder: str | None = None
	href: str | None = None
	role: str | None = None
	input_type: str | None = None
	text: str | None = None


class LocatedElement(BaseModel):
	"""Anything listed under a selector the agent can act on"""

	model_config = ConfigDict(frozen=True)

	selector: str

	# Position of the element among all live matches of `selector` at extraction time,
	# in the order Playwright's own css engine returns them
	match_index: int | None = None
	match_count: int | None = None

	# Set by the disambiguator when `selector` alone is ambiguous
	display_selector: str | None = None

	@property
	def shown_selector(self) -> str:
		return self.display_selector or self.selector


class ElementRecord(LocatedElement):
	"""One interactive element snapshot"""

	type: ElementType
	text: str = ''
	input_type: str | None = None
	placeholder: str | None = None
	href: str | None = None


class CollapsedSection(LocatedElement):
	"""A collapsed toggle (aria-expanded=false) and the items hidden behind it"""

	label: str = ''
	items: tuple[str, ...] = ()


class SelectField(LocatedElement):
	"""A native <select> and its real (non-placeholder) options"""

	label: str = ''
	options: tuple[str, ...] = ()


class PageState(BaseModel):
	"""Snapshot of one page, built fresh on every scan"""

	model_config = ConfigDict(frozen=True)

	page_id: str
	url: str
	title: str
	content: str = ''
	structure: str = ''

	inputs: tuple[ElementRecord, ...] = ()
	buttons: tuple[ElementRecord, ...] = ()
	links: tuple[ElementRecord, ...] = ()
	selects: tuple[ElementRecord, ...] = ()
	textareas: tuple[ElementRecord, ...] = ()
	menuitems: tuple[ElementRecord, ...] = ()
	checkboxes: tuple[ElementRecord, ...] = ()

	data_attributes: tuple[str, ...] = ()
	collapsed_sections: tuple[CollapsedSection, ...] = ()
	select_fields: tuple[SelectField, ...] = ()

	scan_errors: tuple[str, ...] = Field(default=(), description='Human-readable sub-scan failures')


# ElementType -> PageState field holding that category, in display order
ELEMENT_SECTIONS: dict[ElementType, str] = {
	ElementType.INPUT: 'inputs',
	ElementType.BUTTON: 'buttons',
	ElementType.LINK: 'links',
	ElementType.SELECT: 'selects',
	ElementType.TEXTAREA: 'textareas',
	ElementType.MENUITEM: 'menuitems',
	ElementType.CHECKBOX: 'checkboxes',
}
