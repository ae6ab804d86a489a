# @file purpose: Best-effort dismissal of cookie/consent banners and blocking overlays
"""
Overlay dismissal runs three tiers, stopping the click tiers at the first success:

1. Known CMP accept selectors (ordered, first visible one wins).
2. A visual-prominence heuristic over buttons inside positioned consent containers.
3. Unconditional hiding of leftover fixed/absolute overlay chrome.

Nothing here raises: a failing tier simply has no effect.
"""

import asyncio
import logging
from typing import TYPE_CHECKING

from pagelens.config import CONFIG
from pagelens.overlays.cmp_selectors import CMP_ACCEPT_SELECTORS, CONSENT_CONTAINER_PATTERN, OVERLAY_SELECTORS
from pagelens.overlays.views import ButtonScoring, DismissalTier, OverlayDismissalResult

if TYPE_CHECKING:
	from playwright.async_api import Page

logger = logging.getLogger(__name__)

DEFAULT_BUTTON_SCORING = ButtonScoring()

PROMINENT_BUTTON_JS = """
([scoring, consentPattern]) => {
	const pattern = new RegExp(consentPattern, 'i');
	const containers = [];

	document.querySelectorAll('*').forEach((el) => {
		const style = getComputedStyle(el);
		const zIndex = Number.parseInt(style.zIndex, 10) || 0;
		const isPositioned = style.position === 'fixed' || style.position === 'absolute';
		const classId = `${el.getAttribute('class') || ''} ${el.id || ''}`;
		if (isPositioned && zIndex > scoring.min_container_z_index && pattern.test(classId) && el.offsetWidth > 0) {
			containers.push(el);
		}
	});

	for (const container of containers) {
		const buttons = Array.from(container.querySelectorAll('button, [role="button"], a.btn, a[class*="btn"]'));
		if (buttons.length === 0) continue;

		let best = null;
		let bestScore = -1;

		buttons.forEach((btn, index) => {
			if (!btn.offsetWidth) return;

			const bgColor = getComputedStyle(btn).backgroundColor;
			let score = 0;

			if (bgColor && bgColor !== 'transparent' && bgColor !== 'rgba(0, 0, 0, 0)') {
				const rgb = bgColor.match(/\\d+/g);
				if (rgb) {
					const [r, g, b] = rgb.slice(0, 3).map(Number);
					const max = Math.max(r, g, b);
					const min = Math.min(r, g, b);
					const saturation = max === 0 ? 0 : (max - min) / max;
					score += saturation * scoring.saturation_weight;
					if (max > scoring.brightness_threshold) score += scoring.position_weight;
				}
			}

			const area = btn.offsetWidth * btn.offsetHeight;
			score += Math.min(area / scoring.area_divisor, scoring.max_area_score);

			// Earlier buttons are more likely to be "accept"
			score += Math.max(0, scoring.position_weight - index * scoring.index_decay);

			if (score > bestScore) {
				bestScore = score;
				best = btn;
			}
		});

		if (best !== null && bestScore > 0) {
			best.click();
			return { clicked: true, text: (best.textContent || '').trim().substring(0, 50), score: bestScore };
		}
	}
	return { clicked: false };
}
"""

HIDE_OVERLAYS_JS = """
([selectors, minZIndex]) => {
	let hidden = 0;
	for (const selector of selectors) {
		let elements;
		try {
			elements = document.querySelectorAll(selector);
		} catch (e) {
			continue;
		}
		elements.forEach((el) => {
			const style = getComputedStyle(el);
			if (style.display === 'none') return;
			if (style.position !== 'fixed' && style.position !== 'absolute') return;
			const zIndex = Number.parseInt(style.zIndex, 10);
			if (zIndex > minZIndex || style.zIndex === 'auto') {
				el.style.setProperty('display', 'none', 'important');
				hidden += 1;
			}
		});
	}
	return hidden;
}
"""


async def _click_known_cmp_button(page: 'Page', settle_delay: float) -> str | None:
	"""Tier 1: force-click the first visible known CMP accept button."""
	for selector in CMP_ACCEPT_SELECTORS:
		try:
			button = await page.query_selector(selector)
			if button is None or not await button.is_visible():
				continue
			logger.debug(f'Found CMP selector: {selector}')
			await button.click(force=True, timeout=CONFIG.PAGELENS_CLICK_TIMEOUT)
		except Exception as e:
			logger.debug(f'CMP selector {selector} failed: {type(e).__name__}: {e}')
			continue

		await asyncio.sleep(settle_delay)
		return selector
	return None


async def _click_most_prominent_button(page: 'Page', scoring: ButtonScoring, settle_delay: float) -> bool:
	"""Tier 2: click the highest-scoring button inside a positioned consent container."""
	try:
		result = await page.evaluate(PROMINENT_BUTTON_JS, [scoring.model_dump(), CONSENT_CONTAINER_PATTERN])
	except Exception as e:
		logger.debug(f'Overlay heuristic failed: {type(e).__name__}: {e}')
		return False

	if not result or not result.get('clicked'):
		return False

	logger.debug(f'Heuristic clicked "{result.get("text", "")}" (score {result.get("score", 0):.2f})')
	await asyncio.sleep(settle_delay)
	return True


async def _hide_remaining_overlays(page: 'Page', scoring: ButtonScoring) -> int:
	"""Tier 3: hide positioned overlay elements that are still in the way."""
	try:
		return int(await page.evaluate(HIDE_OVERLAYS_JS, [list(OVERLAY_SELECTORS), scoring.min_hide_z_index]))
	except Exception as e:
		logger.debug(f'Hiding overlays failed: {type(e).__name__}: {e}')
		return 0


async def dismiss_overlays(
	page: 'Page',
	scoring: ButtonScoring | None = None,
	settle_delay: float | None = None,
) -> OverlayDismissalResult:
	"""Dismiss cookie banners and overlays on one page, reporting what was done."""
	scoring = scoring or DEFAULT_BUTTON_SCORING
	delay = CONFIG.PAGELENS_OVERLAY_SETTLE_DELAY if settle_delay is None else settle_delay
	result = OverlayDismissalResult()

	logger.debug('Starting overlay dismissal')

	matched_selector = await _click_known_cmp_button(page, delay)
	if matched_selector is not None:
		result.dismissed = 1
		result.tier = DismissalTier.CMP_SELECTOR
		result.matched_selector = matched_selector
	else:
		logger.debug('No CMP selector matched, trying heuristic')
		if await _click_most_prominent_button(page, scoring, delay):
			result.dismissed = 1
			result.tier = DismissalTier.HEURISTIC

	# Even a successful click can leave overlay chrome behind
	result.hidden = await _hide_remaining_overlays(page, scoring)

	if result.dismissed or result.hidden:
		logger.info(f'✅ Dismissed {result.dismissed} overlay(s) via {result.tier.value}, hid {result.hidden} element(s)')
	else:
		logger.debug('No overlays detected')
	return result


async def dismiss_overlays_on_page(page: 'Page') -> int:
	"""Dismiss overlays and return the number of controls clicked. Never raises."""
	try:
		result = await dismiss_overlays(page)
	except Exception as e:
		logger.warning(f'❌ Overlay dismissal failed: {type(e).__name__}: {e}')
		return 0
	return result.dismissed
