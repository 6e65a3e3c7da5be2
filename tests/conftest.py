import pytest

from mac_oui.records import RawRow


def _make_row(
    prefix,
    name="Acme Corp",
    block="MA-L",
    line=2,
    created="2015-01-01",
    updated="2015-06-01",
    private="0",
):
    return RawRow(
        prefix=prefix,
        is_private=private,
        company_name=name,
        company_address="1 Main Street",
        country_code="us",
        block_size=block,
        date_created=created,
        date_updated=updated,
        line=line,
    )


@pytest.fixture
def make_row():
    return _make_row
