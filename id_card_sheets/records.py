"""
Record ingestion: column mapping and CSV loading.
"""

# Standard Library
import csv
import dataclasses
import pathlib
import typing

# local repo modules
import id_card_sheets as ics
import id_card_sheets.config


Record = ics.config.Record

UNKNOWN_NAME = ics.config.UNKNOWN_NAME

DEFAULT_RECORDS = [
	Record(name="Aliyar Arafath", id="UT010701"),
	Record(name="Sarah Jenkins", id="UT010702"),
	Record(name="Mohamed Riaz", id="UT010703"),
	Record(name="Kavindi Perera", id="UT010704"),
	Record(name="John Doe", id="UT010705"),
	Record(name="Jane Smith", id="UT010706"),
	Record(name="Michael Brown", id="UT010707"),
	Record(name="Emily Davis", id="UT010708"),
]


@dataclasses.dataclass
class ColumnMapping:
	name: str = ""
	id: str = ""
	date: str = ""


#============================================
def detect_column_mapping(headers: list[str]) -> ColumnMapping:
	"""
	Guess which columns hold the name, identifier, and date.

	Args:
		headers: Column headers in sheet order.

	Returns:
		ColumnMapping; unmatched fields are empty strings.
	"""
	mapping = ColumnMapping()
	for header in headers:
		lower = header.lower()
		if "name" in lower:
			mapping.name = header
		elif "ut" in lower or "id" in lower:
			mapping.id = header
		elif "date" in lower:
			mapping.date = header
	if not mapping.name and headers:
		mapping.name = headers[0]
	return mapping


#============================================
def _cell_text(row: typing.Mapping[str, typing.Any], column: str) -> str | None:
	value = row.get(column)
	if value is None:
		return None
	text = str(value)
	if not text:
		return None
	return text


#============================================
def rows_to_records(
	rows: typing.Iterable[typing.Mapping[str, typing.Any]],
	mapping: ColumnMapping,
) -> list[Record]:
	"""
	Convert sheet rows into card records.

	Args:
		rows: Row dicts keyed by header.
		mapping: Column mapping.

	Returns:
		List of Record entries in row order.
	"""
	records: list[Record] = []
	for row in rows:
		if mapping.name:
			name = _cell_text(row, mapping.name) or ""
		else:
			name = UNKNOWN_NAME
		record_id = None
		if mapping.id:
			record_id = _cell_text(row, mapping.id)
		record_date = None
		if mapping.date:
			record_date = _cell_text(row, mapping.date)
		records.append(Record(name=name, id=record_id, date=record_date))
	return records


#============================================
def read_csv_rows(path: pathlib.Path) -> tuple[list[str], list[dict[str, str]]]:
	"""
	Read a CSV file into headers and row dicts.

	Args:
		path: CSV path.

	Returns:
		Tuple of (headers, rows).
	"""
	if not path.is_file():
		raise FileNotFoundError(f"Data file not found: {path}")
	with path.open("r", encoding="utf-8-sig", newline="") as handle:
		reader = csv.DictReader(handle)
		rows = [dict(row) for row in reader]
		headers = list(reader.fieldnames or [])
	return (headers, rows)


#============================================
def load_records(
	path: pathlib.Path,
	mapping: ColumnMapping | None = None,
) -> tuple[list[Record], ColumnMapping]:
	"""
	Load card records from a CSV file.

	Args:
		path: CSV path.
		mapping: Column mapping, detected from the headers when None.

	Returns:
		Tuple of (records, mapping used).
	"""
	headers, rows = read_csv_rows(path)
	if mapping is None:
		mapping = detect_column_mapping(headers)
	records = rows_to_records(rows, mapping)
	return (records, mapping)
