from pagelens.config import CONFIG, DEFAULT_FORMAT_CONFIG, FormatConfig
from pagelens.dom.views import ElementRecord, ElementType, PageState
from pagelens.logging_config import setup_logging
from pagelens.overlays.service import dismiss_overlays, dismiss_overlays_on_page
from pagelens.session.service import PlaywrightPageRegistry
from pagelens.session.views import PageInfo, PageRegistry
from pagelens.state.service import PageStateScanner

__all__ = [
	'CONFIG',
	'DEFAULT_FORMAT_CONFIG',
	'ElementRecord',
	'ElementType',
	'FormatConfig',
	'PageInfo',
	'PageRegistry',
	'PageState',
	'PageStateScanner',
	'PlaywrightPageRegistry',
	'dismiss_overlays',
	'dismiss_overlays_on_page',
	'setup_logging',
]
