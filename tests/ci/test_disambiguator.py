from pagelens.dom.disambiguator import NTH_QUALIFIER, disambiguate, qualify
from pagelens.dom.views import CollapsedSection, ElementRecord, ElementType, SelectField


def record(selector: str, element_type: ElementType = ElementType.BUTTON, **kwargs) -> ElementRecord:
	return ElementRecord(type=element_type, selector=selector, **kwargs)


class TestDisambiguate:
	def test_unique_selectors_are_untouched(self):
		records = [record('#a'), record('#b'), record('a[href="/x"]', ElementType.LINK)]
		result = disambiguate(records)

		assert result == records
		assert all(r.display_selector is None for r in result)
		assert [r.shown_selector for r in result] == ['#a', '#b', 'a[href="/x"]']

	def test_duplicates_get_distinct_positional_qualifiers(self):
		result = disambiguate([record('button', text=f'Button {i}') for i in range(4)])

		shown = [r.shown_selector for r in result]
		assert shown == [qualify('button', i) for i in range(4)]
		assert len(set(shown)) == 4
		assert all(NTH_QUALIFIER in s for s in shown)
		# The raw selector stays available for callers that want it
		assert all(r.selector == 'button' for r in result)

	def test_live_match_positions_are_preferred(self):
		# Hidden buttons between the visible ones shift the live positions
		result = disambiguate(
			[
				record('button', match_index=1, match_count=5),
				record('button', match_index=4, match_count=5),
			]
		)
		assert [r.shown_selector for r in result] == ['button >> nth=1', 'button >> nth=4']

	def test_extraction_order_when_live_position_missing(self):
		result = disambiguate(
			[
				record('.card', match_index=3, match_count=4),
				record('.card'),
			]
		)
		assert [r.shown_selector for r in result] == ['.card >> nth=0', '.card >> nth=1']

	def test_single_record_with_several_live_matches_is_qualified(self):
		# Only one visible element, but the selector also matches a hidden one
		result = disambiguate([record('button', match_index=1, match_count=2)])
		assert result[0].shown_selector == 'button >> nth=1'

	def test_single_live_match_is_untouched(self):
		result = disambiguate([record('#only', match_index=0, match_count=1)])
		assert result[0].display_selector is None

	def test_collisions_are_counted_across_categories(self):
		records = [
			record('[role="menuitem"]', ElementType.MENUITEM),
			record('#save', ElementType.BUTTON),
			record('[role="menuitem"]', ElementType.LINK),
		]
		result = disambiguate(records)

		assert [r.type for r in result] == [ElementType.MENUITEM, ElementType.BUTTON, ElementType.LINK]
		assert result[0].shown_selector == '[role="menuitem"] >> nth=0'
		assert result[1].shown_selector == '#save'
		assert result[2].shown_selector == '[role="menuitem"] >> nth=1'

	def test_preserves_order_and_other_fields(self):
		records = [
			record('input', ElementType.INPUT, input_type='text', placeholder='First'),
			record('#go', text='Go'),
			record('input', ElementType.INPUT, input_type='email', placeholder='Second'),
		]
		result = disambiguate(records)

		assert [r.placeholder for r in result if r.type == ElementType.INPUT] == ['First', 'Second']
		assert [r.input_type for r in result if r.type == ElementType.INPUT] == ['text', 'email']
		assert result[1] == records[1]

	def test_empty(self):
		assert disambiguate([]) == []

	def test_element_listed_in_two_sections_stays_unique(self):
		# <a href="/x" id="x" role="button"> is both a link and a button
		result = disambiguate(
			[
				record('#x', ElementType.BUTTON, match_index=0, match_count=1),
				record('#x', ElementType.LINK, match_index=0, match_count=1),
			]
		)
		assert [r.shown_selector for r in result] == ['#x', '#x']

	def test_shared_element_gets_the_same_qualifier_everywhere(self):
		result = disambiguate(
			[
				record('button', ElementType.BUTTON, match_index=0, match_count=2),
				record('button', ElementType.BUTTON, match_index=1, match_count=2),
				CollapsedSection(selector='button', label='More', match_index=1, match_count=2),
			]
		)
		assert [r.shown_selector for r in result] == ['button >> nth=0', 'button >> nth=1', 'button >> nth=1']
		assert isinstance(result[2], CollapsedSection)

	def test_collapsed_toggles_and_selects_are_qualified(self):
		result = disambiguate(
			[
				CollapsedSection(selector='button', label='Alpha', items=('One',), match_index=0, match_count=2),
				CollapsedSection(selector='button', label='Beta', items=('Two',), match_index=1, match_count=2),
				SelectField(selector='select', options=('Red',), match_index=0, match_count=2),
				SelectField(selector='select', options=('Small',), match_index=1, match_count=2),
			]
		)
		assert [r.shown_selector for r in result] == [
			'button >> nth=0',
			'button >> nth=1',
			'select >> nth=0',
			'select >> nth=1',
		]
		assert [r.label for r in result[:2]] == ['Alpha', 'Beta']

	def test_unlocated_duplicates_fall_back_to_distinct_order(self):
		result = disambiguate([SelectField(selector='select'), SelectField(selector='select')])
		assert [r.shown_selector for r in result] == ['select >> nth=0', 'select >> nth=1']
