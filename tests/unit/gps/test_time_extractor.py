"""Unit tests for deriving a trusted timestamp from parsed records."""

import datetime as dt

from gps_timesync.gps_core.parsers import (
    FixValidity,
    GGARecord,
    GLLRecord,
    NMEADate,
    RMCRecord,
    TimeExtractor,
    UtcTime,
    ZDARecord,
    parse_sentence,
    validate_sentence,
)
from gps_timesync.gps_core.parsers.time_extractor import build_timestamp
from tests.infrastructure.helpers import SAMPLE_GGA, SAMPLE_RMC, gga, gll, rmc, zda

UTC = dt.timezone.utc


def feed(extractor, *sentences):
    fix = None
    for sentence in sentences:
        fix = extractor.update(parse_sentence(validate_sentence(sentence)))
    return fix


class TestBuildTimestamp:

    def test_combines_date_and_time_in_utc(self):
        record = RMCRecord(
            time=UtcTime(23, 59, 59, 500000),
            date=NMEADate(31, 12, 99, two_digit_year=True),
            validity=FixValidity.VALID,
        )
        assert build_timestamp(record) == dt.datetime(1999, 12, 31, 23, 59, 59, 500000, tzinfo=UTC)


class TestTimeExtractor:
    """Test fix confirmation rules."""

    def test_no_records(self):
        assert TimeExtractor().current() is None

    def test_valid_rmc_is_confirmed(self):
        fix = feed(TimeExtractor(), SAMPLE_RMC)
        assert fix.confirmed is True
        assert fix.timestamp == dt.datetime(1994, 3, 23, 12, 35, 19, tzinfo=UTC)
        assert fix.sources == ("RMC",)

    def test_void_rmc_yields_nothing(self):
        assert feed(TimeExtractor(), rmc(status="V")) is None

    def test_invalid_then_valid_rmc(self):
        extractor = TimeExtractor()
        assert feed(extractor, rmc(time="123518", status="V")) is None
        fix = feed(extractor, rmc(time="123519", status="A"))
        assert fix.confirmed
        assert fix.timestamp.second == 19

    def test_valid_then_void_rmc(self):
        """A later void status withdraws the fix."""
        extractor = TimeExtractor()
        assert feed(extractor, SAMPLE_RMC).confirmed
        assert feed(extractor, rmc(time="123520", status="V")) is None

    def test_time_only_sentences_never_produce_a_fix(self):
        extractor = TimeExtractor()
        assert feed(extractor, SAMPLE_GGA, gll()) is None

    def test_zda_alone_is_unconfirmed(self):
        fix = feed(TimeExtractor(), zda())
        assert fix is not None
        assert fix.confirmed is False
        assert fix.timestamp == dt.datetime(2002, 7, 4, 20, 15, 30, tzinfo=UTC)

    def test_zda_confirmed_by_same_second_gga(self):
        extractor = TimeExtractor()
        fix = feed(extractor, gga(time="201530.00"), zda(time="201530.00"))
        assert fix.confirmed is True
        assert fix.sources == ("ZDA", "GGA")

    def test_zda_confirmed_by_gga_sent_after(self):
        extractor = TimeExtractor()
        feed(extractor, zda(time="201530.00"))
        fix = feed(extractor, gga(time="201530.00"))
        assert fix.confirmed is True

    def test_zda_not_confirmed_by_stale_status(self):
        extractor = TimeExtractor()
        fix = feed(extractor, gll(time="201529"), zda(time="201530.00"))
        assert fix.confirmed is False

    def test_zda_suppressed_when_latest_status_invalid(self):
        extractor = TimeExtractor()
        assert feed(extractor, gga(time="201530", quality="0"), zda(time="201530.00")) is None

    def test_unknown_status_does_not_replace_known_status(self):
        extractor = TimeExtractor()
        feed(extractor, gga(time="201530", quality="1"), gga(time="201530", quality=""))
        assert extractor.last_status_record.validity is FixValidity.VALID

    def test_latest_dated_record_wins(self):
        extractor = TimeExtractor()
        feed(extractor, SAMPLE_RMC, zda())
        assert isinstance(extractor.last_dated_record, ZDARecord)

    def test_received_at_from_dated_record(self):
        record = ZDARecord(time=UtcTime(1, 2, 3), date=NMEADate(1, 1, 2024), received_at=12.0)
        status = GLLRecord(time=UtcTime(1, 2, 3), validity=FixValidity.VALID)
        extractor = TimeExtractor()
        extractor.update(status)
        fix = extractor.update(record)
        assert fix.confirmed
        assert fix.received_at == 12.0

    def test_reset(self):
        extractor = TimeExtractor()
        feed(extractor, SAMPLE_RMC)
        extractor.reset()
        assert extractor.current() is None
        assert extractor.last_dated_record is None
        assert extractor.last_status_record is None

    def test_gga_record_without_date(self):
        extractor = TimeExtractor()
        record = GGARecord(time=UtcTime(0, 0, 0), fix_quality=1, validity=FixValidity.VALID)
        assert extractor.update(record) is None
        assert extractor.last_status_record is record
