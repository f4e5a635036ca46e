from datetime import date

import pytest

from chronohatch.batches import BatchFields, InMemoryBatchStore
from chronohatch.batches.manager import BatchManager
from chronohatch.core import FixedClock
from chronohatch.scheduling import BatchTimeline
from chronohatch.species import default_species_table


def _sequential_ids():
    counter = iter(range(1, 10_000))
    return lambda: f"batch{next(counter)}"


@pytest.fixture
def species_table():
    return default_species_table()


@pytest.fixture
def clock():
    return FixedClock(date(2024, 1, 10))


@pytest.fixture
def store():
    return InMemoryBatchStore(id_factory=_sequential_ids())


@pytest.fixture
def manager(store, clock, species_table):
    return BatchManager(store, species_table=species_table, clock=clock)


@pytest.fixture
def pekin_fields():
    return BatchFields(
        name="Pekin spring",
        species_id="pekin_duck",
        start_date=date(2024, 1, 1),
        number_of_eggs=12,
    )


@pytest.fixture
def pekin_timeline():
    return BatchTimeline(
        id="b1", name="Pekin spring", start_date=date(2024, 1, 1), species_id="pekin_duck"
    )
