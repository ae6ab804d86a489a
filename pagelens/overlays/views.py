from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ButtonScoring(BaseModel):
	"""Weights for picking the most prominent button inside an overlay"""

	model_config = ConfigDict(frozen=True)

	saturation_weight: float = 5.0
	brightness_threshold: int = 100
	position_weight: float = 2.0
	index_decay: float = 0.5
	area_divisor: float = 5000.0
	max_area_score: float = 3.0
	min_container_z_index: int = 10
	min_hide_z_index: int = 100


class DismissalTier(str, Enum):
	CMP_SELECTOR = 'cmp_selector'
	HEURISTIC = 'heuristic'
	NONE = 'none'


class OverlayDismissalResult(BaseModel):
	"""What the overlay heuristic did on one page"""

	dismissed: int = Field(default=0, description='Number of accept/close controls clicked')
	hidden: int = Field(default=0, description='Number of overlay elements hidden as a last resort')
	tier: DismissalTier = DismissalTier.NONE
	matched_selector: str | None = None
