from datetime import datetime, timedelta, timezone

import pytest

from clipm.errors import InvalidInputError
from clipm.models import ClipEntry, ContentType, from_timestamp, to_timestamp


class TestContentType:
    @pytest.mark.parametrize("value", ["text", "password"])
    def test_round_trip(self, value):
        assert str(ContentType.parse(value)) == value

    @pytest.mark.parametrize("member", list(ContentType))
    def test_parse_of_format_is_identity(self, member):
        assert ContentType.parse(str(member)) is member

    @pytest.mark.parametrize("value", ["bogus", "html", "TEXT", "Password", "", " text"])
    def test_unknown_rejected(self, value):
        with pytest.raises(InvalidInputError):
            ContentType.parse(value)


class TestTimestamps:
    def test_storage_form_is_utc_with_microseconds(self):
        dt = datetime(2026, 2, 17, 10, 30, tzinfo=timezone.utc)
        assert to_timestamp(dt) == "2026-02-17T10:30:00.000000+00:00"

    def test_other_offsets_normalized(self):
        dt = datetime(2026, 2, 17, 19, 30, tzinfo=timezone(timedelta(hours=9)))
        assert to_timestamp(dt) == "2026-02-17T10:30:00.000000+00:00"

    def test_round_trip(self):
        dt = datetime(2026, 2, 17, 10, 30, 1, 250, tzinfo=timezone.utc)
        assert from_timestamp(to_timestamp(dt)) == dt

    def test_naive_text_read_as_utc(self):
        assert from_timestamp("2026-02-17T10:30:00").tzinfo is not None

    def test_lexicographic_order_is_chronological(self):
        earlier = datetime(2026, 2, 17, 10, 30, 0, tzinfo=timezone.utc)
        later = earlier + timedelta(microseconds=1)
        assert to_timestamp(earlier) < to_timestamp(later)

    def test_nanoseconds_truncated_to_microseconds(self):
        dt = from_timestamp("2026-02-17T10:30:00.123456789+00:00")
        assert dt == datetime(2026, 2, 17, 10, 30, 0, 123456, tzinfo=timezone.utc)

    def test_zulu_suffix(self):
        dt = from_timestamp("2026-02-17T10:30:00.123456789Z")
        assert dt == datetime(2026, 2, 17, 10, 30, 0, 123456, tzinfo=timezone.utc)

    def test_garbage_still_rejected(self):
        with pytest.raises(ValueError):
            from_timestamp("yesterday")


class TestCapture:
    def test_capture_computes_byte_size(self):
        entry = ClipEntry.capture("héllo")
        assert entry.byte_size == 6
        assert entry.id is None
        assert entry.content_type == ContentType.TEXT

    def test_capture_stamps_aware_time(self):
        entry = ClipEntry.capture("hello")
        assert entry.created_at.tzinfo is not None

    def test_capture_keeps_label_and_type(self):
        entry = ClipEntry.capture("hunter2", ContentType.PASSWORD, "bank")
        assert entry.is_password
        assert entry.label == "bank"

    def test_capture_rejects_empty(self):
        with pytest.raises(InvalidInputError):
            ClipEntry.capture("")
