"""Create/read/update/delete behavior against an in-memory source table."""

import pytest

from source_store.sources.repository import SourcesRepository
from source_store.sources.schemas import Source
from source_store.storage.errors import PersistenceError


@pytest.fixture
def repo(memory_database) -> SourcesRepository:
    return SourcesRepository(memory_database)


def _fields(source: Source) -> tuple:
    return (source.name, source.url, source.description)


class TestCreateThenRead:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "source",
        [
            Source(name="Example Source", url="https://example.com", description="Example description"),
            Source(name="Name Only"),
            Source(name="O'Reilly; DROP TABLE source;--", url=None, description="quotes ' and \" survive"),
        ],
    )
    async def test_read_back_matches(self, repo: SourcesRepository, source: Source) -> None:
        await repo.create(source)

        fetched = await repo.get_by_id(source.id)

        assert fetched is not None
        assert fetched.id == source.id
        assert _fields(fetched) == _fields(source)

    @pytest.mark.asyncio
    async def test_read_returns_fresh_copy(self, repo: SourcesRepository) -> None:
        source = await repo.create(Source(name="Original"))

        first = await repo.get_by_id(source.id)
        first.name = "Changed in memory only"
        second = await repo.get_by_id(source.id)

        assert second.name == "Original"

    @pytest.mark.asyncio
    async def test_ids_are_distinct(self, repo: SourcesRepository) -> None:
        a = await repo.create(Source(name="A"))
        b = await repo.create(Source(name="B"))

        assert a.id > 0
        assert b.id > 0
        assert a.id != b.id

    @pytest.mark.asyncio
    async def test_null_name_is_rejected(self, repo: SourcesRepository, memory_database) -> None:
        with pytest.raises(PersistenceError):
            await repo.create(Source(name=None))

        assert memory_database.rows == {}


class TestGetAll:
    @pytest.mark.asyncio
    async def test_empty_table(self, repo: SourcesRepository) -> None:
        assert await repo.get_all() == []

    @pytest.mark.asyncio
    async def test_n_creates_yield_n_records(self, repo: SourcesRepository) -> None:
        created = [await repo.create(Source(name=f"Source {i}")) for i in range(5)]

        everything = await repo.get_all()

        assert len(everything) == 5
        assert {s.id for s in everything} == {s.id for s in created}
        for source in created:
            fetched = await repo.get_by_id(source.id)
            assert fetched.name == source.name


class TestUpdate:
    @pytest.mark.asyncio
    async def test_description_change_round_trip(self, repo: SourcesRepository) -> None:
        source = await repo.create(
            Source(name="Example Source", url="https://example.com", description="Old")
        )

        source.description = "New"
        await repo.update(source)
        fetched = await repo.get_by_id(source.id)

        assert fetched.description == "New"
        assert fetched.name == "Example Source"
        assert fetched.url == "https://example.com"

    @pytest.mark.asyncio
    async def test_missing_id_leaves_table_unchanged(
        self, repo: SourcesRepository, memory_database
    ) -> None:
        await repo.create(Source(name="Keep me", url="https://keep.example"))
        before = {k: dict(v) for k, v in memory_database.rows.items()}

        await repo.update(Source(id=9999, name="Ghost"))

        assert memory_database.rows == before
        assert await repo.get_by_id(9999) is None

    @pytest.mark.asyncio
    async def test_clearing_optional_fields(self, repo: SourcesRepository) -> None:
        source = await repo.create(
            Source(name="Full", url="https://full.example", description="desc")
        )

        await repo.update(Source(id=source.id, name="Full"))
        fetched = await repo.get_by_id(source.id)

        assert fetched.url is None
        assert fetched.description is None


class TestDelete:
    @pytest.mark.asyncio
    async def test_deleted_id_reads_as_absent(self, repo: SourcesRepository) -> None:
        source = await repo.create(Source(name="Short lived"))

        await repo.delete(source.id)

        assert await repo.get_by_id(source.id) is None

    @pytest.mark.asyncio
    async def test_missing_id_is_noop(self, repo: SourcesRepository) -> None:
        await repo.create(Source(name="Survivor"))

        await repo.delete(12345)

        assert [s.name for s in await repo.get_all()] == ["Survivor"]

    @pytest.mark.asyncio
    async def test_ids_not_reused_after_delete(self, repo: SourcesRepository) -> None:
        first = await repo.create(Source(name="First"))
        await repo.delete(first.id)

        second = await repo.create(Source(name="Second"))

        assert second.id != first.id


class TestExampleScenario:
    @pytest.mark.asyncio
    async def test_full_lifecycle(self, repo: SourcesRepository) -> None:
        source = Source(
            name="Example Source",
            url="https://example.com",
            description="Example description",
        )

        await repo.create(source)
        assert source.id is not None and source.id > 0

        everything = await repo.get_all()
        assert everything == [source]

        source.description = "Updated description"
        await repo.update(source)
        fetched = await repo.get_by_id(source.id)
        assert fetched.description == "Updated description"

        await repo.delete(source.id)
        assert all(s.id != source.id for s in await repo.get_all())
