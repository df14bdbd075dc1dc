import math

import pytest

import id_card_sheets.config
import id_card_sheets.layout


layout = id_card_sheets.layout
Record = id_card_sheets.config.Record


#============================================
def _make_records(count: int) -> list[Record]:
	"""
	Build numbered records.

	Args:
		count: Number of records.

	Returns:
		List of Record entries.
	"""
	return [Record(name=f"Person {index}") for index in range(count)]


#============================================
@pytest.mark.parametrize("count", [0, 1, 7, 8, 9, 23])
@pytest.mark.parametrize("per_page", [1, 3, 8, 10])
def test_pages_concatenate_to_input(count: int, per_page: int) -> None:
	"""
	Concatenated pages reproduce the records in order, none dropped or repeated.
	"""
	records = _make_records(count)
	pages = layout.paginate(records, per_page)
	flattened = [record for page in pages for record in page]
	assert flattened == records
	assert len(pages) == math.ceil(count / per_page)
	assert layout.count_pages(count, per_page) == len(pages)


#============================================
def test_page_sizes_and_short_last_page() -> None:
	"""
	All pages are full except possibly the last, which is not padded.
	"""
	records = _make_records(10)
	pages = layout.paginate(records, 4)
	assert [len(page) for page in pages] == [4, 4, 2]
	assert pages[2] == records[8:10]


#============================================
def test_empty_records_give_no_pages() -> None:
	"""
	No records means no sheets, not one empty sheet.
	"""
	assert layout.paginate([], 8) == []
	assert layout.count_pages(0, 8) == 0


#============================================
def test_exact_multiple_has_no_trailing_page() -> None:
	"""
	A record count divisible by the page size fills every page.
	"""
	pages = layout.paginate(_make_records(16), 8)
	assert len(pages) == 2
	assert all(len(page) == 8 for page in pages)


#============================================
def test_non_positive_page_size_treated_as_one() -> None:
	"""
	A page size below 1 passed directly falls back to one card per page.
	"""
	records = _make_records(3)
	assert layout.paginate(records, 0) == [[records[0]], [records[1]], [records[2]]]
	assert layout.count_pages(3, 0) == 3


#============================================
def test_page_record_offset() -> None:
	"""
	The first record on page i sits at i * cards_per_page.
	"""
	assert layout.page_record_offset(0, 8) == 0
	assert layout.page_record_offset(3, 8) == 24


#============================================
def test_paginate_with_resolved_layout() -> None:
	"""
	Pagination follows the resolved A4 layout.
	"""
	config = id_card_sheets.config
	resolved = layout.resolve_layout("A4", config.DEFAULT_CARD_WIDTH_MM, config.DEFAULT_CARD_HEIGHT_MM)
	pages = layout.paginate(_make_records(20), resolved.cards_per_page)
	assert [len(page) for page in pages] == [8, 8, 4]
