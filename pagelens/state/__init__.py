from pagelens.state.formatter import format_page_state
from pagelens.state.service import PageStateScanner, ScannerStatus

__all__ = ['PageStateScanner', 'ScannerStatus', 'format_page_state']
