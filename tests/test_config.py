import pytest

import id_card_sheets.config


config = id_card_sheets.config


#============================================
def test_paper_table() -> None:
	"""
	The paper table holds the four supported sizes in millimeters.
	"""
	sizes = {paper_id.value: (paper.width, paper.height) for paper_id, paper in config.PAPER_SIZES.items()}
	assert sizes == {
		"A4": (210.0, 297.0),
		"A3": (297.0, 420.0),
		"A2": (420.0, 594.0),
		"CR80": (85.6, 54.0),
	}


#============================================
def test_get_paper_size() -> None:
	"""
	Paper ids resolve from enum members or any-case strings.
	"""
	paper_id, paper = config.get_paper_size("a3")
	assert paper_id == config.PaperSizeId.A3
	assert paper.width == 297.0
	assert config.get_paper_size(config.PaperSizeId.A2)[1].name == "A2"
	with pytest.raises(ValueError):
		config.get_paper_size("B5")


#============================================
@pytest.mark.parametrize(
	"value,expected",
	[
		("none", config.CutMarkType.NONE),
		("Border", config.CutMarkType.BORDER),
		("crop", config.CutMarkType.CROP),
		(True, config.CutMarkType.BORDER),
		(False, config.CutMarkType.NONE),
		(None, config.CutMarkType.NONE),
		(config.CutMarkType.CROP, config.CutMarkType.CROP),
	],
)
def test_parse_cut_mark_type(value, expected: config.CutMarkType) -> None:
	"""
	Cut mark modes parse from strings and the older boolean form.
	"""
	assert config.parse_cut_mark_type(value) == expected


#============================================
def test_parse_cut_mark_type_rejects_unknown() -> None:
	"""
	Unknown cut mark types are rejected.
	"""
	with pytest.raises(ValueError):
		config.parse_cut_mark_type("dotted")


#============================================
def test_display_unit_conversion() -> None:
	"""
	Card dimensions convert between mm, cm, and px.
	"""
	assert config.to_display_unit(85.6, "cm") == 8.56
	assert config.from_display_unit(8.56, "cm") == pytest.approx(85.6)
	assert config.to_display_unit(54.0, "mm") == 54.0
	assert config.to_display_unit(85.6, "px") == 323.53
	assert config.from_display_unit(100, "px") == pytest.approx(26.4583)
	with pytest.raises(ValueError):
		config.to_display_unit(1.0, "in")


#============================================
def test_mm_to_points() -> None:
	"""
	25.4 mm is one inch.
	"""
	assert config.mm_to_points(25.4) == pytest.approx(72.0)


#============================================
def test_default_settings() -> None:
	"""
	Defaults match the standard CR80 card.
	"""
	settings = config.GlobalCardSettings()
	assert settings.card_width_mm == 85.6
	assert settings.card_height_mm == 54.0
	assert settings.cut_mark_type == config.CutMarkType.NONE
	assert settings.font_sizes == config.FontSizes(name=16.0, id=24.0, date=14.0)
