import logging

import pytest

from mac_oui import AddressError, Database, EmptyDatasetError, default_database
from mac_oui.errors import BuildError, DuplicatePrefix, SkippedRow
from mac_oui.records import BlockSize


@pytest.fixture
def db(make_row):
    return Database.build_from_rows(
        [
            make_row("70:B3:D5", name="Ieee Registration Authority", line=2),
            make_row("00:03:93", name="Apple, Inc", line=3),
            make_row("00:05:02", name="Apple, Inc", line=4),
            make_row("00:0A:27", name="Apple, Inc", line=5),
            make_row("00:1B:C5:00:10:00/36", name="Openrb.com Direct Sia", block="IAB", line=6),
            make_row("00:0C:29", name="Vmware, Inc", line=7),
        ]
    )


def test_lookup_ieee_block(db):
    rec = db.lookup("70:B3:D5:E7:4F:81")
    assert rec.company_name == "Ieee Registration Authority"
    assert rec.is_private is False


def test_lookup_no_match_and_malformed(db):
    assert db.lookup("02:00:00:00:00:01") is None
    with pytest.raises(AddressError):
        db.lookup("70:B3:D5:E7:4F")


def test_lookup_is_deterministic(db):
    assert db.lookup("00-0a-27-01-02-03") is db.lookup("00:0A:27:01:02:03")


def test_lookup_by_manufacturer(db):
    apple = db.lookup_by_manufacturer("Apple, Inc")
    assert len(apple) == 3
    assert all(r.company_name == "Apple, Inc" for r in apple)
    assert [r.oui for r in apple] == ["00:03:93", "00:05:02", "00:0A:27"]
    assert db.lookup_by_manufacturer("APPLE, INC") == apple
    assert db.lookup_by_manufacturer("  apple, inc ") == apple
    assert db.lookup_by_manufacturer("Apple") == ()


def test_search_manufacturers(db):
    assert len(db.search_manufacturers("apple")) == 3
    assert [r.company_name for r in db.search_manufacturers("INC")] == [
        "Apple, Inc",
        "Apple, Inc",
        "Apple, Inc",
        "Vmware, Inc",
    ]


def test_statistics(db):
    assert db.total_records == 6
    assert len(db) == 6
    assert len(db.all_records()) == 6
    assert db.unique_manufacturers() == [
        "Apple, Inc",
        "Ieee Registration Authority",
        "Openrb.com Direct Sia",
        "Vmware, Inc",
    ]
    assert "00:0C:29" in db.unique_ouis()
    assert db.block_size_counts() == {BlockSize.MA_L: 5, BlockSize.IAB: 1}
    assert db.warnings == ()


def test_all_records_is_read_only(db):
    records = db.all_records()
    assert isinstance(records, tuple)
    with pytest.raises(AttributeError):
        records[0].company_name = "changed"


def test_warnings_side_channel(make_row):
    db = Database.build_from_rows(
        [
            make_row("00:00:0C", name="First", line=2),
            make_row("bogus", line=3),
            make_row("00:00:0C", name="Second", line=4),
        ]
    )
    assert len(db) == 1
    assert db.lookup("00:00:0C:00:00:01").company_name == "Second"
    assert [type(w) for w in db.warnings] == [SkippedRow, DuplicatePrefix]


def test_empty_dataset_fails(make_row):
    with pytest.raises(EmptyDatasetError) as exc:
        Database.build_from_rows([make_row("bogus"), make_row("", line=3)])
    assert exc.value.skipped == 2
    assert isinstance(exc.value, BuildError)

    with pytest.raises(EmptyDatasetError):
        Database.build_from_rows([])


def test_from_csv_file(tmp_path):
    p = tmp_path / "oui.csv"
    p.write_text(
        "Prefix,IsPrivate,CompanyName,CompanyAddress,CountryCode,BlockSize,DateCreated,DateUpdated\n"
        "00:00:0C,0,Cisco Systems,San Jose,US,MA-L,1998-04-22,2015-11-17\n",
        encoding="utf-8",
    )
    db = Database.from_csv_file(p)
    assert db.lookup("00:00:0c:aa:bb:cc").company_name == "Cisco Systems"


def test_default_database():
    db = default_database()
    assert db is default_database()
    assert db.warnings == ()

    rec = db.lookup("70:B3:D5:E7:4F:81")
    assert rec.company_name == "Ieee Registration Authority"
    assert rec.is_private is False

    apple = db.lookup_by_manufacturer("Apple, Inc")
    assert len(apple) == 3

    cid = db.lookup("9A:A2:45:12:34:56")
    assert cid.block_size is BlockSize.CID
    assert cid.is_private is True

    hidden = db.lookup("8C:1F:64:00:10:FF")
    assert hidden.details_private is True


def test_build_summary_logged_at_info(make_row, caplog):
    caplog.set_level(logging.INFO, logger="mac_oui.database")
    Database.build_from_rows([make_row("00:00:0C"), make_row("bogus", line=3)])

    info = [
        r.getMessage()
        for r in caplog.records
        if r.name == "mac_oui.database" and r.levelno == logging.INFO
    ]
    assert info == ["Built OUI database: 1 records, 1 warnings"]
