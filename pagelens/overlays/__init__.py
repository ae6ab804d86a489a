from pagelens.overlays.cmp_selectors import CMP_ACCEPT_SELECTORS, OVERLAY_SELECTORS
from pagelens.overlays.service import dismiss_overlays, dismiss_overlays_on_page
from pagelens.overlays.views import ButtonScoring, DismissalTier, OverlayDismissalResult

__all__ = [
	'CMP_ACCEPT_SELECTORS',
	'OVERLAY_SELECTORS',
	'ButtonScoring',
	'DismissalTier',
	'OverlayDismissalResult',
	'dismiss_overlays',
	'dismiss_overlays_on_page',
]
