# @file purpose: Picks the CSS selector an agent should use to re-find one element
"""
Selector resolution for interactive elements.

The resolver walks a fixed priority chain (test id, id, name, placeholder,
aria-label, href, meaningful class, tag/role fallback) and returns the first
applicable selector. Auto-generated ids and utility classes are filtered out
through the ordered tables below so they can be extended without touching the
chain itself.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass

from pagelens.config import CONFIG
from pagelens.dom.views import ElementAttributes, ElementType
from pagelens.utils import escape_css_identifier, escape_css_string


@dataclass(frozen=True)
class GarbageIdRule:
	name: str
	matches: Callable[[str], bool]


_BRACKET_PUNCTUATION_RE = re.compile(r'[«»]')
_OPAQUE_TOKEN_RE = re.compile(r'^[a-zA-Z0-9_-]{20,}$')
_CASE_TRANSITION_RE = re.compile(r'[A-Z][a-z]|[a-z][A-Z]')
_FRAMEWORK_PREFIX_RE = re.compile(r'^(rc-|mui-|react-|:r[a-z0-9]+:)')

# Ordered: the first matching rule classifies an id as garbage
GARBAGE_ID_RULES: tuple[GarbageIdRule, ...] = (
	GarbageIdRule('bracket-punctuation', lambda value: bool(_BRACKET_PUNCTUATION_RE.search(value))),
	GarbageIdRule(
		'opaque-token',
		lambda value: bool(_OPAQUE_TOKEN_RE.match(value)) and not _CASE_TRANSITION_RE.search(value),
	),
	GarbageIdRule('framework-prefix', lambda value: bool(_FRAMEWORK_PREFIX_RE.match(value))),
)

AUTO_CLASS_PREFIXES: tuple[str, ...] = ('Mui', 'css-', 'sc-')

CRYPTIC_CLASS_PATTERNS: tuple[re.Pattern[str], ...] = (re.compile(r'^[a-z]{1,3}-[a-z0-9]+$'),)

# Roles that get a role selector instead of a bare tag when nothing else applies
ROLE_FALLBACK_TYPES: frozenset[ElementType] = frozenset({ElementType.CHECKBOX, ElementType.MENUITEM})

SCRIPT_HREF_PREFIXES: tuple[str, ...] = ('javascript:',)
MAX_HREF_SELECTOR_LENGTH = 100


def garbage_id_rule(element_id: str) -> str | None:
	"""Return the name of the rule that flags `element_id` as garbage, if any."""
	for rule in GARBAGE_ID_RULES:
		if rule.matches(element_id):
			return rule.name
	return None


def is_garbage_id(element_id: str) -> bool:
	return garbage_id_rule(element_id) is not None


def is_meaningful_class(class_name: str) -> bool:
	if len(class_name) <= 2:
		return False
	if class_name.startswith(AUTO_CLASS_PREFIXES):
		return False
	return not any(pattern.match(class_name) for pattern in CRYPTIC_CLASS_PATTERNS)


def first_meaningful_class(class_attribute: str | None) -> str | None:
	if not class_attribute:
		return None
	for class_name in class_attribute.split():
		if is_meaningful_class(class_name):
			return class_name
	return None


def attribute_selector(attribute: str, value: str, tag: str = '') -> str:
	return f'{tag}[{attribute}="{escape_css_string(value)}"]'


def _fallback_selector(attributes: ElementAttributes, element_type: ElementType) -> str:
	tag = (attributes.tag or '').lower()
	role = (attributes.role or '').strip().lower()

	# ARIA-only widgets (e.g. <div role="checkbox">) are better addressed by role than by tag
	if element_type in ROLE_FALLBACK_TYPES and role and tag not in ('input', 'label'):
		return attribute_selector('role', role)

	if tag:
		return tag
	return 'a' if element_type == ElementType.LINK else element_type.value


def resolve_selector(attributes: ElementAttributes, element_type: ElementType) -> str:
	"""Return the best CSS selector for one element, following the fixed priority chain."""
	if attributes.test_id:
		return attribute_selector(CONFIG.PAGELENS_TEST_ID_ATTRIBUTE, attributes.test_id)

	if attributes.id and not is_garbage_id(attributes.id):
		return f'#{escape_css_identifier(attributes.id)}'

	if attributes.name:
		return attribute_selector('name', attributes.name)

	if attributes.placeholder and element_type in (ElementType.INPUT, ElementType.TEXTAREA):
		tag = (attributes.tag or element_type.value).lower()
		return attribute_selector('placeholder', attributes.placeholder, tag=tag)

	if attributes.aria_label:
		return attribute_selector('aria-label', attributes.aria_label)

	href = attributes.href
	if (
		href
		and element_type == ElementType.LINK
		and not href.strip().lower().startswith(SCRIPT_HREF_PREFIXES)
		and len(href) < MAX_HREF_SELECTOR_LENGTH
	):
		return attribute_selector('href', href, tag='a')

	class_name = first_meaningful_class(attributes.class_name)
	if class_name:
		return f'.{escape_css_identifier(class_name)}'

	return _fallback_selector(attributes, element_type)
