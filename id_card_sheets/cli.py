"""
CLI entry points for rendering ID card sheets.
"""

# Standard Library
import argparse
import pathlib
import time

# local repo modules
import id_card_sheets as ics
import id_card_sheets.config
import id_card_sheets.layout
import id_card_sheets.records
import id_card_sheets.render


GlobalCardSettings = ics.config.GlobalCardSettings
ManualGridConfig = ics.config.ManualGridConfig
FontSizes = ics.config.FontSizes
PaperSizeId = ics.config.PaperSizeId
CutMarkType = ics.config.CutMarkType
ColumnMapping = ics.records.ColumnMapping

DEFAULT_CARD_WIDTH_MM = ics.config.DEFAULT_CARD_WIDTH_MM
DEFAULT_CARD_HEIGHT_MM = ics.config.DEFAULT_CARD_HEIGHT_MM
DEFAULT_START_ID = ics.config.DEFAULT_START_ID
DEFAULT_GLOBAL_DATE = ics.config.DEFAULT_GLOBAL_DATE
DEFAULT_LOGO_SIZE_PX = ics.config.DEFAULT_LOGO_SIZE_PX
DEFAULT_NAME_FONT_SIZE = ics.config.DEFAULT_NAME_FONT_SIZE
DEFAULT_ID_FONT_SIZE = ics.config.DEFAULT_ID_FONT_SIZE
DEFAULT_DATE_FONT_SIZE = ics.config.DEFAULT_DATE_FONT_SIZE
UNIT_CONVERSION = ics.config.UNIT_CONVERSION


#============================================
def build_settings(args: argparse.Namespace) -> GlobalCardSettings:
	"""
	Build global card settings from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		GlobalCardSettings.
	"""
	card_width = DEFAULT_CARD_WIDTH_MM
	if args.card_width is not None:
		card_width = ics.config.from_display_unit(args.card_width, args.unit)
	card_height = DEFAULT_CARD_HEIGHT_MM
	if args.card_height is not None:
		card_height = ics.config.from_display_unit(args.card_height, args.unit)

	settings = GlobalCardSettings(
		card_width_mm=card_width,
		card_height_mm=card_height,
		start_id=args.start_id,
		global_date=args.global_date,
		font_sizes=FontSizes(
			name=args.name_size,
			id=args.id_size,
			date=args.date_size,
		),
		cut_mark_type=ics.config.parse_cut_mark_type(args.cut_marks),
		logo_size_px=args.logo_size,
		name_offset_px=args.name_offset,
		font_path=args.font_path,
		font_bold_path=args.font_bold_path,
	)
	return settings


#============================================
def build_manual_grid(args: argparse.Namespace) -> ManualGridConfig:
	"""
	Build the manual grid override from CLI args.

	Args:
		args: Parsed argparse namespace.

	Returns:
		ManualGridConfig.
	"""
	return ManualGridConfig(
		enabled=args.manual_grid,
		cols=args.cols,
		rows=args.rows,
	)


#============================================
def build_column_mapping(args: argparse.Namespace, headers: list[str]) -> ColumnMapping:
	"""
	Detect the column mapping, then apply explicit column options.

	Args:
		args: Parsed argparse namespace.
		headers: CSV headers.

	Returns:
		ColumnMapping.
	"""
	mapping = ics.records.detect_column_mapping(headers)
	if args.name_column is not None:
		mapping.name = args.name_column
	if args.id_column is not None:
		mapping.id = args.id_column
	if args.date_column is not None:
		mapping.date = args.date_column
	return mapping


#============================================
def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
	"""
	Parse command line arguments.

	Args:
		argv: Argument list, sys.argv when None.

	Returns:
		Parsed argparse namespace.
	"""
	parser = argparse.ArgumentParser(description="Render ID card records onto printable sheets.")
	parser.add_argument("data", nargs="?", default=None, help="CSV file of card records (sample records when omitted).")

	input_group = parser.add_argument_group("Input")
	input_group.add_argument("--name-column", dest="name_column", default=None, help="Column holding the name.")
	input_group.add_argument("--id-column", dest="id_column", default=None, help="Column holding the ID / UT number.")
	input_group.add_argument("--date-column", dest="date_column", default=None, help="Column holding the date.")

	output_group = parser.add_argument_group("Output")
	output_group.add_argument("-o", "--output", dest="output_path", required=True, help="Output PDF path.")
	output_group.add_argument("-m", "--manifest", dest="manifest_path", default=None, help="Output manifest JSON path.")

	layout_group = parser.add_argument_group("Layout")
	layout_group.add_argument(
		"-s", "--paper", dest="paper",
		choices=[member.value for member in PaperSizeId],
		help="Paper size.",
	)
	layout_group.add_argument("-g", "--manual-grid", dest="manual_grid", action="store_true", help="Use --cols and --rows.")
	layout_group.add_argument("-G", "--auto-grid", dest="manual_grid", action="store_false", help="Fit as many cards as possible.")
	layout_group.add_argument("--cols", dest="cols", type=int, help="Manual grid columns.")
	layout_group.add_argument("--rows", dest="rows", type=int, help="Manual grid rows.")

	card_group = parser.add_argument_group("Card")
	card_group.add_argument("-W", "--card-width", dest="card_width", type=float, default=None, help="Card width in --unit.")
	card_group.add_argument("-H", "--card-height", dest="card_height", type=float, default=None, help="Card height in --unit.")
	card_group.add_argument("-u", "--unit", dest="unit", choices=list(UNIT_CONVERSION), help="Unit for card dimensions.")
	card_group.add_argument(
		"-k", "--cut-marks", dest="cut_marks",
		choices=[member.value for member in CutMarkType],
		help="Cutting guides around each card.",
	)
	card_group.add_argument("--logo", dest="logo_path", default=None, help="Custom logo image.")
	card_group.add_argument("--logo-size", dest="logo_size", type=float, help="Logo size in px.")
	card_group.add_argument("--name-size", dest="name_size", type=float, help="Name font size in pt.")
	card_group.add_argument("--id-size", dest="id_size", type=float, help="ID font size in pt.")
	card_group.add_argument("--date-size", dest="date_size", type=float, help="Date font size in pt.")
	card_group.add_argument("--name-offset", dest="name_offset", type=float, help="Name vertical offset in px.")
	card_group.add_argument("--font", dest="font_path", default=None, help="TrueType font for card text.")
	card_group.add_argument("--font-bold", dest="font_bold_path", default=None, help="Bold TrueType font for card text.")

	field_group = parser.add_argument_group("Fields")
	field_group.add_argument("--start-id", dest="start_id", help="First generated ID number.")
	field_group.add_argument("--date", dest="global_date", help="Date shown when a record has none.")

	behavior_group = parser.add_argument_group("Behavior")
	behavior_group.add_argument(
		"-p", "--single-preview",
		dest="single_preview",
		action="store_true",
		help="Render only the first record on a card-sized page.",
	)
	behavior_group.add_argument(
		"-n", "--dry-run",
		dest="dry_run",
		action="store_true",
		help="Print the layout and page count without rendering.",
	)

	parser.set_defaults(
		paper=PaperSizeId.A4.value,
		manual_grid=False,
		cols=2,
		rows=5,
		unit="mm",
		cut_marks=CutMarkType.NONE.value,
		logo_size=DEFAULT_LOGO_SIZE_PX,
		name_size=DEFAULT_NAME_FONT_SIZE,
		id_size=DEFAULT_ID_FONT_SIZE,
		date_size=DEFAULT_DATE_FONT_SIZE,
		name_offset=0.0,
		start_id=DEFAULT_START_ID,
		global_date=DEFAULT_GLOBAL_DATE,
		single_preview=False,
		dry_run=False,
	)

	args = parser.parse_args(argv)
	return args


#============================================
def load_input_records(args: argparse.Namespace) -> list[ics.config.Record]:
	"""
	Load records from the data file, or fall back to sample records.

	Args:
		args: Parsed argparse namespace.

	Returns:
		List of Record entries.
	"""
	if args.data is None:
		print("No data file given, using sample records")
		return list(ics.records.DEFAULT_RECORDS)
	data_path = pathlib.Path(args.data)
	headers, rows = ics.records.read_csv_rows(data_path)
	mapping = build_column_mapping(args, headers)
	print(f"Data file: {data_path}")
	print(f"Columns: name={mapping.name!r} id={mapping.id!r} date={mapping.date!r}")
	return ics.records.rows_to_records(rows, mapping)


#============================================
def run_pipeline(args: argparse.Namespace) -> None:
	"""
	Run the pipeline from records to printable sheets.

	Args:
		args: Parsed argparse namespace.
	"""
	print("ID card sheet pipeline")
	print(f"Output PDF: {args.output_path}")
	if args.manifest_path:
		print(f"Manifest: {args.manifest_path}")

	start_time = time.perf_counter()
	records = load_input_records(args)
	print(f"Records loaded: {len(records)}")

	settings = build_settings(args)
	manual_grid = build_manual_grid(args)
	logo_path = None
	if args.logo_path:
		logo_path = pathlib.Path(args.logo_path)
	output_path = pathlib.Path(args.output_path)

	if args.single_preview:
		if not records:
			print("No records to preview.")
			return
		ics.render.render_single_preview(records[0], output_path, settings, logo_path)
		print(f"Preview written: {output_path}")
		return

	layout = ics.layout.resolve_layout(
		args.paper,
		settings.card_width_mm,
		settings.card_height_mm,
		manual_grid,
	)
	total_pages = ics.layout.count_pages(len(records), layout.cards_per_page)
	print(f"Paper: {layout.name} ({layout.width:g} x {layout.height:g} mm)")
	print(f"Card: {settings.card_width_mm:g} x {settings.card_height_mm:g} mm")
	print(f"Grid: {layout.cols} x {layout.rows} ({layout.cards_per_page} / page)")
	print(f"Cut marks: {settings.cut_mark_type.value}")
	print(f"Pages: {total_pages}")
	if args.dry_run:
		print("Dry run, skipping rendering.")
		return

	render_start = time.perf_counter()
	result = ics.render.render_sheets_to_pdf(
		records,
		output_path,
		layout,
		settings,
		logo_path,
		verbose=True,
	)
	render_end = time.perf_counter()
	if result.pages == 0:
		print("No records, no sheets written.")
		return
	print(f"Pages written: {result.pages}")
	print(f"Cards printed: {result.total_cards}")

	manifest_path = args.manifest_path
	if manifest_path is None:
		manifest_path = f"{output_path}.json"
	ics.render.write_manifest(pathlib.Path(manifest_path), result, layout, settings)

	total_time = time.perf_counter() - start_time
	print(
		"Timing: render={:.2f}s total={:.2f}s".format(
			render_end - render_start,
			total_time,
		)
	)
	print(f"Manifest written: {manifest_path}")


#============================================
def main() -> None:
	"""
	Main entry point.
	"""
	args = parse_args()
	run_pipeline(args)
