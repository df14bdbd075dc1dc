"""
Sheet layout: grid resolution, pagination, and card slot geometry.
"""

# Standard Library
import dataclasses
import math
import typing

# local repo modules
import id_card_sheets as ics
import id_card_sheets.config


PaperSize = ics.config.PaperSize
PaperSizeId = ics.config.PaperSizeId
ManualGridConfig = ics.config.ManualGridConfig
LayoutConfig = ics.config.LayoutConfig

PAPER_SIZES = ics.config.PAPER_SIZES
SINGLE_CARD_PAPER = ics.config.SINGLE_CARD_PAPER
PRINT_MARGIN_MM = ics.config.PRINT_MARGIN_MM
CARD_GAP_MM = ics.config.CARD_GAP_MM
CROP_MARK_LENGTH_MM = ics.config.CROP_MARK_LENGTH_MM

T = typing.TypeVar("T")


@dataclasses.dataclass(frozen=True)
class CardSlot:
	index: int
	row: int
	col: int
	x_mm: float
	y_mm: float
	width_mm: float
	height_mm: float


#============================================
def _paper_id_for(paper: PaperSize) -> PaperSizeId | None:
	for paper_id, entry in PAPER_SIZES.items():
		if entry == paper:
			return paper_id
	return None


#============================================
def fit_count(available: float, item_size: float, gap: float) -> int:
	"""
	Count how many items of a size fit in a span with gaps between them.

	N items need N * size + (N - 1) * gap, so N <= (available + gap) / (size + gap).

	Args:
		available: Span length.
		item_size: Item length.
		gap: Gap between adjacent items.

	Returns:
		Item count, at least 1. Non-positive item sizes give 1.
	"""
	if not item_size > 0.0:
		return 1
	step = item_size + gap
	ratio = (available + gap) / step
	if math.isnan(ratio) or math.isinf(ratio):
		return 1
	return max(1, math.floor(ratio))


#============================================
def grid_count(value: typing.Any) -> int:
	"""
	Normalize a manual column or row count.

	Non-numeric, non-finite, and values below 1 give 1.
	"""
	try:
		number = float(value)
	except (TypeError, ValueError):
		return 1
	if not math.isfinite(number):
		return 1
	return max(1, int(number))


#============================================
def resolve_layout(
	paper: PaperSize | PaperSizeId | str,
	card_width_mm: float,
	card_height_mm: float,
	manual_grid: ManualGridConfig | None = None,
) -> LayoutConfig:
	"""
	Resolve the grid of cards for one sheet.

	Single-card paper wins over everything, then a manual grid, then auto-fit.
	Degenerate inputs resolve to a 1x1 grid rather than failing.

	Args:
		paper: PaperSize entry, or a paper size identifier.
		card_width_mm: Card width in millimeters.
		card_height_mm: Card height in millimeters.
		manual_grid: Optional manual column and row override.

	Returns:
		LayoutConfig.
	"""
	if isinstance(paper, PaperSize):
		paper_id = _paper_id_for(paper)
	else:
		paper_id, paper = ics.config.get_paper_size(paper)
	if manual_grid is None:
		manual_grid = ManualGridConfig()

	if paper_id == SINGLE_CARD_PAPER:
		return LayoutConfig(
			width=paper.width,
			height=paper.height,
			name=paper.name,
			cols=1,
			rows=1,
			cards_per_page=1,
			margin=0.0,
			gap=0.0,
			paper_id=paper_id,
		)

	margin = PRINT_MARGIN_MM
	gap = CARD_GAP_MM

	if manual_grid.enabled:
		# no bounds check against the paper size
		cols = grid_count(manual_grid.cols)
		rows = grid_count(manual_grid.rows)
	else:
		available_width = paper.width - 2.0 * margin
		available_height = paper.height - 2.0 * margin
		cols = fit_count(available_width, card_width_mm, gap)
		rows = fit_count(available_height, card_height_mm, gap)

	return LayoutConfig(
		width=paper.width,
		height=paper.height,
		name=paper.name,
		cols=cols,
		rows=rows,
		cards_per_page=cols * rows,
		margin=margin,
		gap=gap,
		paper_id=paper_id,
	)


#============================================
def count_pages(total_records: int, cards_per_page: int) -> int:
	"""
	Count the sheets needed for a number of records.

	Args:
		total_records: Number of records.
		cards_per_page: Cards per sheet.

	Returns:
		Page count, 0 when there are no records.
	"""
	if total_records <= 0:
		return 0
	per_page = max(1, cards_per_page)
	return (total_records + per_page - 1) // per_page


#============================================
def paginate(records: typing.Sequence[T], cards_per_page: int) -> list[list[T]]:
	"""
	Split records into ordered sheets.

	Args:
		records: Records in print order.
		cards_per_page: Cards per sheet.

	Returns:
		List of pages; the last page may be short and is never padded.
	"""
	per_page = max(1, cards_per_page)
	pages: list[list[T]] = []
	for start in range(0, len(records), per_page):
		pages.append(list(records[start:start + per_page]))
	return pages


#============================================
def page_record_offset(page_index: int, cards_per_page: int) -> int:
	"""
	Sequence index of the first record on a page.
	"""
	return page_index * max(1, cards_per_page)


#============================================
def compute_card_slots(
	layout: LayoutConfig,
	card_width_mm: float,
	card_height_mm: float,
) -> list[CardSlot]:
	"""
	Compute the card cells of one sheet.

	Coordinates are millimeters from the top-left paper corner. Cells fill
	row by row. The grid block is centered across the printable width and
	starts at the top margin; a grid wider than the paper overflows evenly.

	Args:
		layout: Resolved layout.
		card_width_mm: Card width in millimeters.
		card_height_mm: Card height in millimeters.

	Returns:
		List of CardSlot entries, cols * rows long.
	"""
	grid_width = layout.cols * card_width_mm + (layout.cols - 1) * layout.gap
	available_width = layout.width - 2.0 * layout.margin
	origin_x = layout.margin + (available_width - grid_width) / 2.0
	origin_y = layout.margin

	slots: list[CardSlot] = []
	for row in range(layout.rows):
		for col in range(layout.cols):
			slots.append(
				CardSlot(
					index=row * layout.cols + col,
					row=row,
					col=col,
					x_mm=origin_x + col * (card_width_mm + layout.gap),
					y_mm=origin_y + row * (card_height_mm + layout.gap),
					width_mm=card_width_mm,
					height_mm=card_height_mm,
				)
			)
	return slots


#============================================
def compute_crop_marks(
	slot: CardSlot,
	length: float = CROP_MARK_LENGTH_MM,
) -> list[tuple[float, float, float, float]]:
	"""
	Compute crop mark segments around a card.

	Two segments per corner, extending outward from the card edges.

	Args:
		slot: Card cell.
		length: Mark length in millimeters.

	Returns:
		List of (x0, y0, x1, y1) segments in millimeters, top-left origin.
	"""
	left = slot.x_mm
	top = slot.y_mm
	right = slot.x_mm + slot.width_mm
	bottom = slot.y_mm + slot.height_mm
	return [
		(left - length, top, left, top),
		(left, top - length, left, top),
		(right, top, right + length, top),
		(right, top - length, right, top),
		(left - length, bottom, left, bottom),
		(left, bottom, left, bottom + length),
		(right, bottom, right + length, bottom),
		(right, bottom, right, bottom + length),
	]
