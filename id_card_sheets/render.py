"""
Sheet rendering to printable PDF pages.
"""

# Standard Library
import json
import pathlib
import typing

# PIP3 modules
import PIL.Image
import reportlab.lib.utils
import reportlab.pdfbase.pdfmetrics
import reportlab.pdfbase.ttfonts
import reportlab.pdfgen.canvas

# local repo modules
import id_card_sheets as ics
import id_card_sheets.config
import id_card_sheets.fields
import id_card_sheets.layout


Record = ics.config.Record
LayoutConfig = ics.config.LayoutConfig
GlobalCardSettings = ics.config.GlobalCardSettings
SheetResult = ics.config.SheetResult
CutMarkType = ics.config.CutMarkType
CardSlot = ics.layout.CardSlot
ResolvedCard = ics.fields.ResolvedCard

mm_to_points = ics.config.mm_to_points
px_to_mm = ics.config.px_to_mm

DEFAULT_FONT_REGULAR = ics.config.DEFAULT_FONT_REGULAR
DEFAULT_FONT_BOLD = ics.config.DEFAULT_FONT_BOLD
CARD_PADDING_MM = ics.config.CARD_PADDING_MM
CARD_FRAME_PX = ics.config.CARD_FRAME_PX
SIGNATURE_BOX_WIDTH_MM = ics.config.SIGNATURE_BOX_WIDTH_MM
SIGNATURE_BOX_HEIGHT_MM = ics.config.SIGNATURE_BOX_HEIGHT_MM
CROP_MARK_LENGTH_MM = ics.config.CROP_MARK_LENGTH_MM
CROP_MARK_WIDTH_PX = ics.config.CROP_MARK_WIDTH_PX
BORDER_LINE_WIDTH = ics.config.BORDER_LINE_WIDTH
PROGRESS_BAR_WIDTH = ics.config.PROGRESS_BAR_WIDTH
MM_PER_INCH = ics.config.MM_PER_INCH
POINTS_PER_INCH = ics.config.POINTS_PER_INCH

ID_COLOR = "#333333"
NAME_COLOR = "#2D3748"
DATE_COLOR = "#218089"
LOGO_COLOR = "#333333"
BORDER_COLOR = "#999999"
ID_TOP_PAD_MM = 2.0
NAME_RAISE_MM = 4.0


#============================================
def print_progress(prefix: str, current: int, total: int) -> None:
	"""
	Print a simple progress bar.

	Args:
		prefix: Label text.
		current: Current count.
		total: Total count.
	"""
	if total <= 0:
		return
	percent = int(round((current / total) * 100.0))
	filled = int(round(PROGRESS_BAR_WIDTH * percent / 100.0))
	bar = "#" * filled + "-" * (PROGRESS_BAR_WIDTH - filled)
	print(f"{prefix} [{bar}] {current}/{total} ({percent}%)", end="\r")


#============================================
def parse_hex_color(value: str) -> tuple[float, float, float]:
	"""
	Parse a hex color string into RGB floats.

	Args:
		value: Color string like "#AABBCC".

	Returns:
		Tuple of (r, g, b) in 0.0-1.0 range.
	"""
	if not value or not value.startswith("#") or len(value) != 7:
		return (0.0, 0.0, 0.0)
	red = int(value[1:3], 16) / 255.0
	green = int(value[3:5], 16) / 255.0
	blue = int(value[5:7], 16) / 255.0
	return (red, green, blue)


#============================================
def font_size_mm(size_pt: float) -> float:
	return size_pt * MM_PER_INCH / POINTS_PER_INCH


#============================================
def load_logo(path: pathlib.Path) -> reportlab.lib.utils.ImageReader:
	"""
	Load a custom logo image.

	Args:
		path: Image path.

	Returns:
		ImageReader for the logo.
	"""
	if not path.is_file():
		raise FileNotFoundError(f"Logo file not found: {path}")
	image = PIL.Image.open(path)
	image.load()
	if image.mode not in ("RGB", "RGBA"):
		image = image.convert("RGBA")
	return reportlab.lib.utils.ImageReader(image)


class _SheetCanvas:
	"""
	Canvas wrapper taking millimeters from the top-left paper corner.
	"""

	def __init__(self, pdf: reportlab.pdfgen.canvas.Canvas, page_height_mm: float):
		self.pdf = pdf
		self.page_height_mm = page_height_mm

	def x(self, value_mm: float) -> float:
		return mm_to_points(value_mm)

	def y(self, value_mm: float) -> float:
		return mm_to_points(self.page_height_mm - value_mm)

	def rect(self, x_mm: float, y_mm: float, width_mm: float, height_mm: float, stroke: int, fill: int) -> None:
		self.pdf.rect(
			self.x(x_mm),
			self.y(y_mm + height_mm),
			mm_to_points(width_mm),
			mm_to_points(height_mm),
			stroke=stroke,
			fill=fill,
		)

	def line(self, x0: float, y0: float, x1: float, y1: float) -> None:
		self.pdf.line(self.x(x0), self.y(y0), self.x(x1), self.y(y1))


#============================================
def fit_font_size(text: str, font_name: str, font_size: float, max_width_mm: float) -> float:
	"""
	Shrink a font size so the text fits a width.

	Args:
		text: Text to draw.
		font_name: ReportLab font name.
		font_size: Requested size in points.
		max_width_mm: Available width in millimeters.

	Returns:
		Font size in points, never larger than requested.
	"""
	width = reportlab.pdfbase.pdfmetrics.stringWidth(text, font_name, font_size)
	max_width = mm_to_points(max_width_mm)
	if width <= 0.0 or max_width <= 0.0 or width <= max_width:
		return font_size
	return font_size * max_width / width


#============================================
def _font_name_for(path: str) -> str:
	return "Card-" + pathlib.Path(path).stem


#============================================
def card_font_names(settings: GlobalCardSettings) -> dict[str, str]:
	"""
	Name the fonts used for card text.

	A regular font without a bold one is used for bold text too. Without
	any font file the built-in Helvetica faces are used; they only cover
	WinAnsi characters.

	Args:
		settings: Global card settings.

	Returns:
		Dict with "regular" and "bold" ReportLab font names.
	"""
	fonts = {
		"regular": DEFAULT_FONT_REGULAR,
		"bold": DEFAULT_FONT_BOLD,
	}
	if settings.font_path:
		fonts["regular"] = _font_name_for(settings.font_path)
		fonts["bold"] = fonts["regular"]
	if settings.font_bold_path:
		fonts["bold"] = _font_name_for(settings.font_bold_path)
	return fonts


#============================================
def register_card_fonts(settings: GlobalCardSettings) -> dict[str, str]:
	"""
	Register TrueType fonts for card text.

	Args:
		settings: Global card settings.

	Returns:
		Dict with "regular" and "bold" ReportLab font names.
	"""
	for path in (settings.font_path, settings.font_bold_path):
		if not path:
			continue
		if not pathlib.Path(path).is_file():
			raise FileNotFoundError(f"Font file not found: {path}")
		font = reportlab.pdfbase.ttfonts.TTFont(_font_name_for(path), path)
		reportlab.pdfbase.pdfmetrics.registerFont(font)
	return card_font_names(settings)


#============================================
def draw_default_logo(sheet: _SheetCanvas, x_mm: float, y_mm: float, size_mm: float) -> None:
	"""
	Draw the placeholder logo badge.

	Args:
		sheet: Sheet canvas.
		x_mm: Left edge.
		y_mm: Top edge.
		size_mm: Badge side length.
	"""
	pdf = sheet.pdf
	color = parse_hex_color(LOGO_COLOR)
	pdf.setFillColorRGB(color[0], color[1], color[2])
	pdf.roundRect(
		sheet.x(x_mm),
		sheet.y(y_mm + size_mm),
		mm_to_points(size_mm),
		mm_to_points(size_mm),
		mm_to_points(size_mm * 0.2),
		stroke=0,
		fill=1,
	)
	center_x = x_mm + size_mm / 2.0
	center_y = y_mm + size_mm / 2.0
	pdf.setFillColorRGB(1.0, 1.0, 1.0)
	pdf.circle(sheet.x(center_x), sheet.y(center_y), mm_to_points(size_mm * 0.35), stroke=0, fill=1)

	# upward chevron
	arm = size_mm * 0.125
	pdf.setStrokeColorRGB(color[0], color[1], color[2])
	pdf.setLineWidth(mm_to_points(size_mm * 0.05))
	pdf.setLineCap(1)
	pdf.setLineJoin(1)
	sheet.line(center_x - arm, center_y + arm / 2.0, center_x, center_y - arm / 2.0)
	sheet.line(center_x, center_y - arm / 2.0, center_x + arm, center_y + arm / 2.0)


#============================================
def draw_logo(
	sheet: _SheetCanvas,
	x_mm: float,
	y_mm: float,
	size_mm: float,
	logo: reportlab.lib.utils.ImageReader | None,
) -> None:
	"""
	Draw the custom logo fitted into a square, or the placeholder badge.
	"""
	if logo is None:
		draw_default_logo(sheet, x_mm, y_mm, size_mm)
		return
	sheet.pdf.drawImage(
		logo,
		sheet.x(x_mm),
		sheet.y(y_mm + size_mm),
		width=mm_to_points(size_mm),
		height=mm_to_points(size_mm),
		mask="auto",
		preserveAspectRatio=True,
		anchor="c",
	)


#============================================
def draw_cut_marks(sheet: _SheetCanvas, slot: CardSlot, cut_mark_type: CutMarkType) -> None:
	"""
	Draw cutting guides around a card.

	Args:
		sheet: Sheet canvas.
		slot: Card cell.
		cut_mark_type: Guide style.
	"""
	pdf = sheet.pdf
	if cut_mark_type == CutMarkType.BORDER:
		color = parse_hex_color(BORDER_COLOR)
		pdf.setStrokeColorRGB(color[0], color[1], color[2])
		pdf.setLineWidth(BORDER_LINE_WIDTH)
		pdf.setDash(3, 2)
		sheet.rect(slot.x_mm, slot.y_mm, slot.width_mm, slot.height_mm, stroke=1, fill=0)
		pdf.setDash()
	elif cut_mark_type == CutMarkType.CROP:
		pdf.setStrokeColorRGB(0.0, 0.0, 0.0)
		pdf.setLineWidth(mm_to_points(px_to_mm(CROP_MARK_WIDTH_PX)))
		for x0, y0, x1, y1 in ics.layout.compute_crop_marks(slot, CROP_MARK_LENGTH_MM):
			sheet.line(x0, y0, x1, y1)


#============================================
def draw_card(
	sheet: _SheetCanvas,
	card: ResolvedCard,
	slot: CardSlot,
	settings: GlobalCardSettings,
	logo: reportlab.lib.utils.ImageReader | None,
	fonts: dict[str, str] | None = None,
) -> None:
	"""
	Draw one ID card into its cell.

	Args:
		sheet: Sheet canvas.
		card: Resolved card fields.
		slot: Card cell.
		settings: Global card settings.
		logo: Custom logo, or None for the placeholder.
		fonts: Font names from register_card_fonts, Helvetica when None.
	"""
	if fonts is None:
		fonts = card_font_names(settings)
	bold_font = fonts["bold"]
	pdf = sheet.pdf
	draw_cut_marks(sheet, slot, settings.cut_mark_type)

	frame_mm = px_to_mm(CARD_FRAME_PX)
	pdf.setFillColorRGB(1.0, 1.0, 1.0)
	pdf.setStrokeColorRGB(0.0, 0.0, 0.0)
	pdf.setLineWidth(mm_to_points(frame_mm))
	sheet.rect(
		slot.x_mm + frame_mm / 2.0,
		slot.y_mm + frame_mm / 2.0,
		slot.width_mm - frame_mm,
		slot.height_mm - frame_mm,
		stroke=1,
		fill=1,
	)

	inner_left = slot.x_mm + frame_mm + CARD_PADDING_MM
	inner_right = slot.x_mm + slot.width_mm - frame_mm - CARD_PADDING_MM
	inner_top = slot.y_mm + frame_mm + CARD_PADDING_MM
	inner_bottom = slot.y_mm + slot.height_mm - frame_mm - CARD_PADDING_MM
	inner_width = inner_right - inner_left

	logo_mm = px_to_mm(settings.logo_size_px)
	draw_logo(sheet, inner_left, inner_top, logo_mm, logo)

	# identifier, top right
	id_width = inner_width - logo_mm
	id_size = fit_font_size(card.id, bold_font, settings.font_sizes.id, id_width)
	color = parse_hex_color(ID_COLOR)
	pdf.setFillColorRGB(color[0], color[1], color[2])
	pdf.setFont(bold_font, id_size)
	id_baseline = inner_top + ID_TOP_PAD_MM + font_size_mm(id_size) * 0.8
	pdf.drawRightString(sheet.x(inner_right), sheet.y(id_baseline), card.id)

	# name, centered
	name_text = card.name.upper()
	if name_text:
		name_size = fit_font_size(name_text, bold_font, settings.font_sizes.name, inner_width)
		color = parse_hex_color(NAME_COLOR)
		pdf.setFillColorRGB(color[0], color[1], color[2])
		pdf.setFont(bold_font, name_size)
		name_center = slot.y_mm + slot.height_mm / 2.0 - NAME_RAISE_MM + px_to_mm(settings.name_offset_px)
		name_baseline = name_center + font_size_mm(name_size) * 0.35
		center_x = slot.x_mm + slot.width_mm / 2.0
		pdf.drawCentredString(sheet.x(center_x), sheet.y(name_baseline), name_text)

	# signature box, bottom right
	pdf.setFillColorRGB(1.0, 1.0, 1.0)
	pdf.setStrokeColorRGB(0.0, 0.0, 0.0)
	pdf.setLineWidth(mm_to_points(frame_mm))
	box_left = inner_right - SIGNATURE_BOX_WIDTH_MM
	box_top = inner_bottom - SIGNATURE_BOX_HEIGHT_MM
	sheet.rect(box_left, box_top, SIGNATURE_BOX_WIDTH_MM, SIGNATURE_BOX_HEIGHT_MM, stroke=1, fill=1)

	# date, bottom left
	date_width = max(0.0, box_left - inner_left - CARD_PADDING_MM)
	date_size = fit_font_size(card.date, bold_font, settings.font_sizes.date, date_width)
	color = parse_hex_color(DATE_COLOR)
	pdf.setFillColorRGB(color[0], color[1], color[2])
	pdf.setFont(bold_font, date_size)
	pdf.drawString(sheet.x(inner_left), sheet.y(inner_bottom), card.date)


#============================================
def render_sheets_to_pdf(
	records: typing.Sequence[Record],
	output_path: pathlib.Path,
	layout: LayoutConfig,
	settings: GlobalCardSettings,
	logo_path: pathlib.Path | None = None,
	verbose: bool = False,
) -> SheetResult:
	"""
	Render all records onto printable sheets.

	No file is written when there are no records.

	Args:
		records: Records in print order.
		output_path: Output PDF path.
		layout: Resolved layout.
		settings: Global card settings.
		logo_path: Optional custom logo image.
		verbose: Print a progress bar.

	Returns:
		SheetResult.
	"""
	pages = ics.layout.paginate(records, layout.cards_per_page)
	result = SheetResult(
		total_cards=len(records),
		pages=len(pages),
		cards_per_page=layout.cards_per_page,
		cols=layout.cols,
		rows=layout.rows,
	)
	if not pages:
		return result

	logo = None
	if logo_path is not None:
		logo = load_logo(logo_path)
	fonts = register_card_fonts(settings)

	slots = ics.layout.compute_card_slots(layout, settings.card_width_mm, settings.card_height_mm)
	page_size = (mm_to_points(layout.width), mm_to_points(layout.height))
	output_path.parent.mkdir(parents=True, exist_ok=True)
	pdf = reportlab.pdfgen.canvas.Canvas(str(output_path), pagesize=page_size)
	pdf.setTitle("ID card sheets")
	sheet = _SheetCanvas(pdf, layout.height)

	for page_index, page_records in enumerate(pages):
		if page_index > 0:
			pdf.showPage()
		offset = ics.layout.page_record_offset(page_index, layout.cards_per_page)
		cards = ics.fields.resolve_all(page_records, settings, offset)
		for card, slot in zip(cards, slots):
			draw_card(sheet, card, slot, settings, logo, fonts)
		if verbose:
			print_progress("Sheets", page_index + 1, len(pages))
	if verbose:
		print("")

	pdf.save()
	return result


#============================================
def render_single_preview(
	record: Record,
	output_path: pathlib.Path,
	settings: GlobalCardSettings,
	logo_path: pathlib.Path | None = None,
) -> None:
	"""
	Render the design preview of one card on a page its own size.

	Crop marks get room around the card when enabled.

	Args:
		record: Record to preview.
		output_path: Output PDF path.
		settings: Global card settings.
		logo_path: Optional custom logo image.
	"""
	logo = None
	if logo_path is not None:
		logo = load_logo(logo_path)
	fonts = register_card_fonts(settings)

	bleed = 0.0
	if settings.cut_mark_type == CutMarkType.CROP:
		bleed = CROP_MARK_LENGTH_MM
	page_width = settings.card_width_mm + 2.0 * bleed
	page_height = settings.card_height_mm + 2.0 * bleed
	slot = CardSlot(
		index=0,
		row=0,
		col=0,
		x_mm=bleed,
		y_mm=bleed,
		width_mm=settings.card_width_mm,
		height_mm=settings.card_height_mm,
	)

	output_path.parent.mkdir(parents=True, exist_ok=True)
	pdf = reportlab.pdfgen.canvas.Canvas(
		str(output_path),
		pagesize=(mm_to_points(page_width), mm_to_points(page_height)),
	)
	pdf.setTitle("ID card preview")
	sheet = _SheetCanvas(pdf, page_height)
	card = ics.fields.resolve_fields(record, 0, settings)
	draw_card(sheet, card, slot, settings, logo, fonts)
	pdf.save()


#============================================
def write_manifest(
	manifest_path: pathlib.Path,
	result: SheetResult,
	layout: LayoutConfig,
	settings: GlobalCardSettings,
) -> None:
	"""
	Write a manifest JSON file.

	Args:
		manifest_path: Output path.
		result: Sheet result.
		layout: Resolved layout.
		settings: Global card settings.
	"""
	data = {
		"total_cards": result.total_cards,
		"pages": result.pages,
		"cards_per_page": result.cards_per_page,
		"layout": {
			"paper": layout.name,
			"paper_id": layout.paper_id.value if layout.paper_id else None,
			"width": layout.width,
			"height": layout.height,
			"cols": layout.cols,
			"rows": layout.rows,
			"margin": layout.margin,
			"gap": layout.gap,
		},
		"card": {
			"width": settings.card_width_mm,
			"height": settings.card_height_mm,
			"cut_mark_type": settings.cut_mark_type.value,
			"start_id": settings.start_id,
			"global_date": settings.global_date,
			"font_sizes": {
				"name": settings.font_sizes.name,
				"id": settings.font_sizes.id,
				"date": settings.font_sizes.date,
			},
		},
		"fonts": card_font_names(settings),
	}
	with manifest_path.open("w", encoding="utf-8") as handle:
		json.dump(data, handle, indent=2, sort_keys=True)
