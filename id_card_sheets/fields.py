"""
Per-card field resolution for displayed identifiers and dates.
"""

# Standard Library
import dataclasses
import re
import typing

# local repo modules
import id_card_sheets as ics
import id_card_sheets.config


Record = ics.config.Record
GlobalCardSettings = ics.config.GlobalCardSettings

ID_PREFIX = ics.config.ID_PREFIX
ID_DIGITS = ics.config.ID_DIGITS
DEFAULT_GLOBAL_DATE = ics.config.DEFAULT_GLOBAL_DATE

LEADING_INTEGER_RE = re.compile(r"^[+-]?[0-9]+")


@dataclasses.dataclass(frozen=True)
class ResolvedCard:
	name: str
	id: str
	date: str
	index: int


#============================================
def parse_start_id(text: str | None) -> int:
	"""
	Parse the numeric seed for generated identifiers.

	Leading ASCII digits are used, so "12ab" gives 12. Text without
	leading digits gives 0.

	Args:
		text: Start ID text.

	Returns:
		Integer seed.
	"""
	if text is None:
		return 0
	match = LEADING_INTEGER_RE.match(str(text).strip())
	if match is None:
		return 0
	return int(match.group(0))


#============================================
def format_generated_id(number: int) -> str:
	"""
	Format a generated identifier like UT010704.

	Args:
		number: Sequence number.

	Returns:
		Prefixed, zero-padded identifier. Padding is applied to the
		decimal text, so -3 gives UT0000-3.
	"""
	return ID_PREFIX + str(number).rjust(ID_DIGITS, "0")


#============================================
def resolve_id(record: Record, index: int, start_id: str | None) -> str:
	"""
	Pick the record identifier, or generate one from the start ID.

	Args:
		record: Card record.
		index: Position of the record in the full sequence.
		start_id: Start ID text.

	Returns:
		Identifier to display.
	"""
	if record.id:
		return record.id
	return format_generated_id(parse_start_id(start_id) + index)


#============================================
def resolve_date(record: Record, global_date: str | None) -> str:
	"""
	Pick the record date, or fall back to the global default date.

	The date is display text and is never parsed. An empty global date
	falls back to the built-in default so a card always shows a date.
	"""
	if record.date:
		return record.date
	if global_date:
		return global_date
	return DEFAULT_GLOBAL_DATE


#============================================
def resolve_fields(record: Record, index: int, settings: GlobalCardSettings) -> ResolvedCard:
	"""
	Resolve the displayed fields of one card.

	Depends only on the record, its sequence index, and the settings.

	Args:
		record: Card record.
		index: Position of the record in the full sequence.
		settings: Global card settings.

	Returns:
		ResolvedCard.
	"""
	return ResolvedCard(
		name=record.name or "",
		id=resolve_id(record, index, settings.start_id),
		date=resolve_date(record, settings.global_date),
		index=index,
	)


#============================================
def resolve_all(
	records: typing.Sequence[Record],
	settings: GlobalCardSettings,
	offset: int = 0,
) -> list[ResolvedCard]:
	"""
	Resolve a run of records starting at a sequence offset.

	Args:
		records: Records in print order.
		settings: Global card settings.
		offset: Sequence index of the first record.

	Returns:
		List of ResolvedCard entries.
	"""
	return [
		resolve_fields(record, offset + position, settings)
		for position, record in enumerate(records)
	]
