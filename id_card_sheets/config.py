"""
Shared configuration, constants, and data types.
"""

# Standard Library
import dataclasses
import enum


POINTS_PER_INCH = 72.0
MM_PER_INCH = 25.4
POINTS_PER_MM = POINTS_PER_INCH / MM_PER_INCH

PRINT_MARGIN_MM = 8.0
CARD_GAP_MM = 4.0

DEFAULT_CARD_WIDTH_MM = 85.6
DEFAULT_CARD_HEIGHT_MM = 54.0
DEFAULT_START_ID = "010701"
DEFAULT_GLOBAL_DATE = "02/03/2025"
DEFAULT_LOGO_SIZE_PX = 50

ID_PREFIX = "UT"
ID_DIGITS = 6
UNKNOWN_NAME = "Unknown"

CARD_PADDING_MM = 4.0
CARD_FRAME_PX = 2.0
SIGNATURE_BOX_WIDTH_MM = 35.0
SIGNATURE_BOX_HEIGHT_MM = 12.0
CROP_MARK_LENGTH_MM = 5.0
CROP_MARK_WIDTH_PX = 1.0
BORDER_LINE_WIDTH = 0.3

DEFAULT_FONT_REGULAR = "Helvetica"
DEFAULT_FONT_BOLD = "Helvetica-Bold"
DEFAULT_NAME_FONT_SIZE = 16.0
DEFAULT_ID_FONT_SIZE = 24.0
DEFAULT_DATE_FONT_SIZE = 14.0
PROGRESS_BAR_WIDTH = 20

# millimeters per display unit
UNIT_CONVERSION = {
	"mm": 1.0,
	"cm": 10.0,
	"px": 0.264583,
}


class PaperSizeId(str, enum.Enum):
	A4 = "A4"
	A3 = "A3"
	A2 = "A2"
	CR80 = "CR80"


class CutMarkType(str, enum.Enum):
	NONE = "none"
	BORDER = "border"
	CROP = "crop"


@dataclasses.dataclass(frozen=True)
class PaperSize:
	width: float
	height: float
	name: str


PAPER_SIZES = {
	PaperSizeId.A4: PaperSize(width=210.0, height=297.0, name="A4"),
	PaperSizeId.A3: PaperSize(width=297.0, height=420.0, name="A3"),
	PaperSizeId.A2: PaperSize(width=420.0, height=594.0, name="A2"),
	PaperSizeId.CR80: PaperSize(width=85.6, height=54.0, name="Single CR80"),
}
SINGLE_CARD_PAPER = PaperSizeId.CR80


@dataclasses.dataclass(frozen=True)
class ManualGridConfig:
	enabled: bool = False
	cols: int = 2
	rows: int = 5


@dataclasses.dataclass(frozen=True)
class LayoutConfig:
	width: float
	height: float
	name: str
	cols: int
	rows: int
	cards_per_page: int
	margin: float
	gap: float
	paper_id: PaperSizeId | None


@dataclasses.dataclass(frozen=True)
class Record:
	name: str
	id: str | None = None
	date: str | None = None


@dataclasses.dataclass(frozen=True)
class FontSizes:
	name: float = DEFAULT_NAME_FONT_SIZE
	id: float = DEFAULT_ID_FONT_SIZE
	date: float = DEFAULT_DATE_FONT_SIZE


@dataclasses.dataclass(frozen=True)
class GlobalCardSettings:
	card_width_mm: float = DEFAULT_CARD_WIDTH_MM
	card_height_mm: float = DEFAULT_CARD_HEIGHT_MM
	start_id: str = DEFAULT_START_ID
	global_date: str = DEFAULT_GLOBAL_DATE
	font_sizes: FontSizes = dataclasses.field(default_factory=FontSizes)
	cut_mark_type: CutMarkType = CutMarkType.NONE
	logo_size_px: float = DEFAULT_LOGO_SIZE_PX
	name_offset_px: float = 0.0
	font_path: str | None = None
	font_bold_path: str | None = None


@dataclasses.dataclass
class SheetResult:
	total_cards: int
	pages: int
	cards_per_page: int
	cols: int
	rows: int


#============================================
def get_paper_size(value: PaperSizeId | str) -> tuple[PaperSizeId, PaperSize]:
	"""
	Look up a paper size by identifier.

	Args:
		value: PaperSizeId member or its string form, any case.

	Returns:
		Tuple of (PaperSizeId, PaperSize).
	"""
	if isinstance(value, PaperSizeId):
		return (value, PAPER_SIZES[value])
	key = str(value).strip().upper()
	try:
		paper_id = PaperSizeId(key)
	except ValueError:
		known = ", ".join(member.value for member in PaperSizeId)
		raise ValueError(f"Unknown paper size {value!r}; expected one of {known}") from None
	return (paper_id, PAPER_SIZES[paper_id])


#============================================
def parse_cut_mark_type(value: CutMarkType | str | bool | None) -> CutMarkType:
	"""
	Parse a cut mark mode, accepting the older boolean form.

	Args:
		value: CutMarkType, its string value, or a show-cut-marks boolean.

	Returns:
		CutMarkType.
	"""
	if isinstance(value, CutMarkType):
		return value
	if value is None:
		return CutMarkType.NONE
	if isinstance(value, bool):
		if value:
			return CutMarkType.BORDER
		return CutMarkType.NONE
	key = str(value).strip().lower()
	try:
		return CutMarkType(key)
	except ValueError:
		known = ", ".join(member.value for member in CutMarkType)
		raise ValueError(f"Unknown cut mark type {value!r}; expected one of {known}") from None


#============================================
def _unit_factor(unit: str) -> float:
	factor = UNIT_CONVERSION.get(unit.lower())
	if factor is None:
		known = ", ".join(UNIT_CONVERSION)
		raise ValueError(f"Unknown dimension unit {unit!r}; expected one of {known}")
	return factor


#============================================
def to_display_unit(value_mm: float, unit: str) -> float:
	"""
	Convert millimeters to a display unit, rounded to 2 decimals.

	Args:
		value_mm: Millimeters value.
		unit: One of mm, cm, px.

	Returns:
		Value in the display unit.
	"""
	return round(value_mm / _unit_factor(unit), 2)


#============================================
def from_display_unit(value: float, unit: str) -> float:
	"""
	Convert a display unit value back to millimeters.

	Args:
		value: Value in the display unit.
		unit: One of mm, cm, px.

	Returns:
		Millimeters value.
	"""
	return float(value) * _unit_factor(unit)


#============================================
def mm_to_points(value: float) -> float:
	"""
	Convert millimeters to points.

	Args:
		value: Millimeters value.

	Returns:
		Points value.
	"""
	return value * POINTS_PER_MM


#============================================
def px_to_mm(value: float) -> float:
	return value * UNIT_CONVERSION["px"]
