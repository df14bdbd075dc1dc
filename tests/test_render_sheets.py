import json
import pathlib

import PIL.Image
import pypdf
import pytest
import reportlab

import id_card_sheets.config
import id_card_sheets.layout
import id_card_sheets.render


config = id_card_sheets.config
layout = id_card_sheets.layout
render = id_card_sheets.render
Record = config.Record

BUNDLED_BOLD_FONT = pathlib.Path(reportlab.__file__).parent / "fonts" / "VeraBd.ttf"
SYSTEM_UNICODE_FONT = pathlib.Path("/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf")


#============================================
def _make_records(count: int) -> list[Record]:
	"""
	Build records, every third one with its own ID and date.

	Args:
		count: Number of records.

	Returns:
		List of Record entries.
	"""
	result = []
	for index in range(count):
		if index % 3 == 0:
			result.append(Record(name=f"Person {index}", id=f"X{index}", date="31/12/2025"))
		else:
			result.append(Record(name=f"Person {index}"))
	return result


#============================================
def _page_size_mm(page: pypdf.PageObject) -> tuple[float, float]:
	"""
	Read a PDF page size in millimeters.

	Args:
		page: pypdf page.

	Returns:
		Tuple of (width, height).
	"""
	width = float(page.mediabox.width) / config.POINTS_PER_MM
	height = float(page.mediabox.height) / config.POINTS_PER_MM
	return (width, height)


#============================================
@pytest.mark.parametrize("cut_mark_type", list(config.CutMarkType))
def test_render_a4_sheets(tmp_path: pathlib.Path, cut_mark_type: config.CutMarkType) -> None:
	"""
	Twenty records on A4 give three pages the size of the paper.
	"""
	settings = config.GlobalCardSettings(cut_mark_type=cut_mark_type)
	resolved = layout.resolve_layout("A4", settings.card_width_mm, settings.card_height_mm)
	output_path = tmp_path / "sheets.pdf"
	result = render.render_sheets_to_pdf(_make_records(20), output_path, resolved, settings)

	assert result.pages == 3
	assert result.total_cards == 20
	assert result.cards_per_page == 8
	reader = pypdf.PdfReader(str(output_path))
	assert len(reader.pages) == 3
	width, height = _page_size_mm(reader.pages[0])
	assert width == pytest.approx(210.0, abs=0.01)
	assert height == pytest.approx(297.0, abs=0.01)


#============================================
def test_rendered_text_uses_resolved_fields(tmp_path: pathlib.Path) -> None:
	"""
	Generated IDs continue across pages and record IDs are kept.
	"""
	settings = config.GlobalCardSettings(start_id="010701", global_date="02/03/2025")
	resolved = layout.resolve_layout("A4", settings.card_width_mm, settings.card_height_mm)
	output_path = tmp_path / "sheets.pdf"
	render.render_sheets_to_pdf(_make_records(10), output_path, resolved, settings)

	reader = pypdf.PdfReader(str(output_path))
	first_page = reader.pages[0].extract_text()
	second_page = reader.pages[1].extract_text()
	assert "X0" in first_page
	assert "UT010702" in first_page
	assert "PERSON 1" in first_page
	assert "02/03/2025" in first_page
	# index 8 is on page two
	assert "UT010709" in second_page
	assert "X9" in second_page


#============================================
def test_no_records_writes_no_sheet(tmp_path: pathlib.Path) -> None:
	"""
	An empty record list renders zero pages and no file.
	"""
	settings = config.GlobalCardSettings()
	resolved = layout.resolve_layout("A4", settings.card_width_mm, settings.card_height_mm)
	output_path = tmp_path / "empty.pdf"
	result = render.render_sheets_to_pdf([], output_path, resolved, settings)
	assert result.pages == 0
	assert not output_path.exists()


#============================================
def test_single_card_paper(tmp_path: pathlib.Path) -> None:
	"""
	CR80 paper renders one card per page.
	"""
	settings = config.GlobalCardSettings()
	resolved = layout.resolve_layout("CR80", settings.card_width_mm, settings.card_height_mm)
	output_path = tmp_path / "cr80.pdf"
	result = render.render_sheets_to_pdf(_make_records(4), output_path, resolved, settings)
	assert result.pages == 4
	reader = pypdf.PdfReader(str(output_path))
	width, height = _page_size_mm(reader.pages[0])
	assert width == pytest.approx(85.6, abs=0.01)
	assert height == pytest.approx(54.0, abs=0.01)


#============================================
def test_custom_logo(tmp_path: pathlib.Path) -> None:
	"""
	A custom logo image renders in place of the placeholder.
	"""
	logo_path = tmp_path / "logo.png"
	PIL.Image.new("RGBA", (64, 32), (0, 128, 128, 255)).save(logo_path)
	settings = config.GlobalCardSettings()
	resolved = layout.resolve_layout("A4", settings.card_width_mm, settings.card_height_mm)
	output_path = tmp_path / "logo.pdf"
	result = render.render_sheets_to_pdf(_make_records(2), output_path, resolved, settings, logo_path)
	assert result.pages == 1
	assert output_path.stat().st_size > 0


#============================================
def test_missing_logo_raises(tmp_path: pathlib.Path) -> None:
	"""
	A missing logo file raises FileNotFoundError.
	"""
	settings = config.GlobalCardSettings()
	resolved = layout.resolve_layout("A4", settings.card_width_mm, settings.card_height_mm)
	with pytest.raises(FileNotFoundError):
		render.render_sheets_to_pdf(_make_records(1), tmp_path / "x.pdf", resolved, settings, tmp_path / "nope.png")


#============================================
def test_single_preview_page_size(tmp_path: pathlib.Path) -> None:
	"""
	The design preview page is the card size, plus room for crop marks.
	"""
	plain = config.GlobalCardSettings()
	output_path = tmp_path / "preview.pdf"
	render.render_single_preview(Record(name="Aliyar Arafath"), output_path, plain)
	width, height = _page_size_mm(pypdf.PdfReader(str(output_path)).pages[0])
	assert width == pytest.approx(85.6, abs=0.01)
	assert height == pytest.approx(54.0, abs=0.01)

	cropped = config.GlobalCardSettings(cut_mark_type=config.CutMarkType.CROP)
	output_path = tmp_path / "preview_crop.pdf"
	render.render_single_preview(Record(name="Aliyar Arafath"), output_path, cropped)
	width, height = _page_size_mm(pypdf.PdfReader(str(output_path)).pages[0])
	assert width == pytest.approx(85.6 + 2 * config.CROP_MARK_LENGTH_MM, abs=0.01)
	assert height == pytest.approx(54.0 + 2 * config.CROP_MARK_LENGTH_MM, abs=0.01)


#============================================
def test_fit_font_size_shrinks_long_text() -> None:
	"""
	Long text is shrunk to fit; short text keeps its size.
	"""
	assert render.fit_font_size("AB", config.DEFAULT_FONT_BOLD, 16.0, 80.0) == 16.0
	long_text = "W" * 80
	size = render.fit_font_size(long_text, config.DEFAULT_FONT_BOLD, 16.0, 80.0)
	assert size < 16.0


#============================================
def test_write_manifest(tmp_path: pathlib.Path) -> None:
	"""
	The manifest records the layout and the page count.
	"""
	settings = config.GlobalCardSettings(cut_mark_type=config.CutMarkType.BORDER)
	resolved = layout.resolve_layout("A3", settings.card_width_mm, settings.card_height_mm)
	result = config.SheetResult(total_cards=30, pages=2, cards_per_page=21, cols=3, rows=7)
	manifest_path = tmp_path / "manifest.json"
	render.write_manifest(manifest_path, result, resolved, settings)
	data = json.loads(manifest_path.read_text(encoding="utf-8"))
	assert data["pages"] == 2
	assert data["layout"]["paper_id"] == "A3"
	assert data["layout"]["cols"] == 3
	assert data["card"]["cut_mark_type"] == "border"


#============================================
def _page_base_fonts(page: pypdf.PageObject) -> list[str]:
	"""
	List the base font names used on a page.

	Args:
		page: pypdf page.

	Returns:
		List of BaseFont names.
	"""
	fonts = page["/Resources"]["/Font"]
	return [str(fonts[key].get_object()["/BaseFont"]) for key in fonts]


#============================================
def test_card_font_names() -> None:
	"""
	Without font files Helvetica is used; a regular font covers bold too.
	"""
	plain = render.card_font_names(config.GlobalCardSettings())
	assert plain == {"regular": config.DEFAULT_FONT_REGULAR, "bold": config.DEFAULT_FONT_BOLD}
	regular_only = render.card_font_names(config.GlobalCardSettings(font_path="/fonts/Sans.ttf"))
	assert regular_only == {"regular": "Card-Sans", "bold": "Card-Sans"}
	both = render.card_font_names(
		config.GlobalCardSettings(font_path="/fonts/Sans.ttf", font_bold_path="/fonts/Sans-Bold.ttf")
	)
	assert both["bold"] == "Card-Sans-Bold"


#============================================
def test_registered_font_replaces_helvetica(tmp_path: pathlib.Path) -> None:
	"""
	A TrueType bold font is embedded and used for all card text.
	"""
	settings = config.GlobalCardSettings(font_bold_path=str(BUNDLED_BOLD_FONT))
	resolved = layout.resolve_layout("A4", settings.card_width_mm, settings.card_height_mm)
	output_path = tmp_path / "ttf.pdf"
	render.render_sheets_to_pdf([Record(name="Zoe Perera")], output_path, resolved, settings)
	page = pypdf.PdfReader(str(output_path)).pages[0]
	base_fonts = _page_base_fonts(page)
	assert base_fonts
	assert not any("Helvetica" in name for name in base_fonts)
	assert "ZOE PERERA" in page.extract_text()


#============================================
def test_non_latin_name_with_unicode_font(tmp_path: pathlib.Path) -> None:
	"""
	Names outside WinAnsi survive when a covering font is given.
	"""
	if not SYSTEM_UNICODE_FONT.exists():
		pytest.skip("DejaVuSans-Bold.ttf not installed.")
	settings = config.GlobalCardSettings(font_bold_path=str(SYSTEM_UNICODE_FONT))
	resolved = layout.resolve_layout("A4", settings.card_width_mm, settings.card_height_mm)
	output_path = tmp_path / "unicode.pdf"
	records = [Record(name="Zoë Łukasz"), Record(name="Анна Перера")]
	render.render_sheets_to_pdf(records, output_path, resolved, settings)
	text = pypdf.PdfReader(str(output_path)).pages[0].extract_text()
	assert "ŁUKASZ" in text
	assert "АННА ПЕРЕРА" in text
	assert "■" not in text


#============================================
def test_missing_font_raises(tmp_path: pathlib.Path) -> None:
	"""
	A missing font file raises FileNotFoundError.
	"""
	settings = config.GlobalCardSettings(font_path=str(tmp_path / "nope.ttf"))
	with pytest.raises(FileNotFoundError):
		render.render_single_preview(Record(name="X"), tmp_path / "x.pdf", settings)
