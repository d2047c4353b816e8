"""Tests for the debounced catalog search session."""

import asyncio

import pytest

from edhforge.models.card import CardRecord
from edhforge.models.failure import CatalogError
from edhforge.services.catalog_client import CatalogPage
from edhforge.services.search_session import CatalogSearchSession, dedupe_printings

DEBOUNCE = 0.02


def _card(name: str, set_code: str | None = "set", card_id: str | None = None) -> CardRecord:
    return CardRecord(
        id=card_id or f"{name}-{set_code}",
        name=name,
        type_line="Creature",
        set_code=set_code,
    )


class FakeCatalog:
    """In-memory catalog whose responses can be held back per query."""

    def __init__(self) -> None:
        self.pages: dict[tuple[str, int], CatalogPage] = {}
        self.errors: dict[str, CatalogError] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.calls: list[tuple[str, int]] = []
        self.completed: list[tuple[str, int]] = []

    async def search_cards(self, query: str, page: int = 1) -> CatalogPage:
        self.calls.append((query, page))
        gate = self.gates.get(query)
        if gate is not None:
            await gate.wait()
        self.completed.append((query, page))
        if query in self.errors:
            raise self.errors[query]
        return self.pages.get((query, page), CatalogPage())


@pytest.fixture
def catalog() -> FakeCatalog:
    return FakeCatalog()


async def _wait_for_calls(catalog: FakeCatalog, n: int) -> None:
    while len(catalog.calls) < n:
        await asyncio.sleep(0.001)


class TestDedupePrintings:
    """Tests for (name, set) deduplication."""

    def test_keeps_first_of_exact_repeats(self) -> None:
        first = _card("Sol Ring", "c21", card_id="1")
        repeat = _card("Sol Ring", "c21", card_id="2")

        assert dedupe_printings([first, repeat]) == [first]

    def test_distinct_printings_kept(self) -> None:
        cards = [_card("Sol Ring", "c21"), _card("Sol Ring", "cmr"), _card("Arcane Signet", "c21")]

        assert dedupe_printings(cards) == cards


class TestSearch:
    """Tests for direct searches."""

    @pytest.mark.asyncio
    async def test_blank_query_not_sent(self, catalog: FakeCatalog) -> None:
        session = CatalogSearchSession(catalog, debounce_seconds=DEBOUNCE)

        result = await session.search("   ")

        assert result is not None
        assert result.items == ()
        assert result.has_more is False
        assert catalog.calls == []

    @pytest.mark.asyncio
    async def test_results_deduplicated(self, catalog: FakeCatalog) -> None:
        catalog.pages[("ring", 1)] = CatalogPage(
            items=[_card("Sol Ring", "c21", "1"), _card("Sol Ring", "c21", "2")],
            has_more=True,
        )
        session = CatalogSearchSession(catalog, debounce_seconds=DEBOUNCE)

        await session.search("ring")

        assert [c.id for c in session.items] == ["1"]
        assert session.has_more is True
        assert session.error is None
        assert session.loading is False

    @pytest.mark.asyncio
    async def test_page_replaces_previous(self, catalog: FakeCatalog) -> None:
        catalog.pages[("elf", 1)] = CatalogPage(items=[_card("Elf A")], has_more=True)
        catalog.pages[("elf", 2)] = CatalogPage(items=[_card("Elf B")], has_more=False)
        session = CatalogSearchSession(catalog, debounce_seconds=DEBOUNCE)

        await session.search("elf", 1)
        await session.search("elf", 2)

        assert [c.name for c in session.items] == ["Elf B"]
        assert session.current_page == 2
        assert session.has_more is False

    @pytest.mark.asyncio
    async def test_page_must_be_positive(self, catalog: FakeCatalog) -> None:
        session = CatalogSearchSession(catalog, debounce_seconds=DEBOUNCE)

        with pytest.raises(ValueError, match="Page must be >= 1"):
            await session.search("elf", 0)

        assert catalog.calls == []

    @pytest.mark.asyncio
    async def test_error_clears_results_keeps_query(self, catalog: FakeCatalog) -> None:
        catalog.pages[("elf", 1)] = CatalogPage(items=[_card("Elf A")])
        catalog.errors["broken"] = CatalogError("Failed to search cards: HTTP 500")
        session = CatalogSearchSession(catalog, debounce_seconds=DEBOUNCE)
        await session.search("elf")

        with pytest.raises(CatalogError):
            await session.search("broken")

        assert session.items == ()
        assert session.result.query == "broken"
        assert session.error == "Failed to search cards: HTTP 500"
        assert session.loading is False

    @pytest.mark.asyncio
    async def test_stale_response_discarded(self, catalog: FakeCatalog) -> None:
        """A slow reply to an older query never overwrites a newer one."""
        catalog.pages[("old", 1)] = CatalogPage(items=[_card("Old")])
        catalog.pages[("new", 1)] = CatalogPage(items=[_card("New")])
        catalog.gates["old"] = asyncio.Event()
        session = CatalogSearchSession(catalog, debounce_seconds=DEBOUNCE)

        slow = asyncio.create_task(session.search("old"))
        await _wait_for_calls(catalog, 1)
        await session.search("new")
        catalog.gates["old"].set()

        assert await slow is None
        assert [c.name for c in session.items] == ["New"]
        assert session.result.query == "new"

    @pytest.mark.asyncio
    async def test_stale_failure_discarded(self, catalog: FakeCatalog) -> None:
        catalog.errors["old"] = CatalogError("boom")
        catalog.pages[("new", 1)] = CatalogPage(items=[_card("New")])
        catalog.gates["old"] = asyncio.Event()
        session = CatalogSearchSession(catalog, debounce_seconds=DEBOUNCE)

        slow = asyncio.create_task(session.search("old"))
        await _wait_for_calls(catalog, 1)
        await session.search("new")
        catalog.gates["old"].set()

        assert await slow is None
        assert session.error is None
        assert [c.name for c in session.items] == ["New"]


class TestDebounce:
    """Tests for typed-query debouncing."""

    @pytest.mark.asyncio
    async def test_only_stable_text_is_sent(self, catalog: FakeCatalog) -> None:
        session = CatalogSearchSession(catalog, debounce_seconds=DEBOUNCE)

        for text in ("e", "el", "elf"):
            session.set_query(text)
        await session.wait_idle()

        assert catalog.calls == [("elf", 1)]
        assert session.stable_query == "elf"
        assert session.query == "elf"

    @pytest.mark.asyncio
    async def test_typing_does_not_cancel_in_flight(self, catalog: FakeCatalog) -> None:
        catalog.gates["elf"] = asyncio.Event()
        catalog.pages[("elves", 1)] = CatalogPage(items=[_card("Elves")])
        session = CatalogSearchSession(catalog, debounce_seconds=DEBOUNCE)

        session.set_query("elf")
        await _wait_for_calls(catalog, 1)
        session.set_query("elves")
        catalog.gates["elf"].set()
        await session.wait_idle()

        assert ("elf", 1) in catalog.completed
        assert catalog.calls == [("elf", 1), ("elves", 1)]
        assert [c.name for c in session.items] == ["Elves"]

    @pytest.mark.asyncio
    async def test_debounced_failure_recorded(self, catalog: FakeCatalog) -> None:
        catalog.errors["elf"] = CatalogError("Catalog down")
        session = CatalogSearchSession(catalog, debounce_seconds=DEBOUNCE)

        session.set_query("elf")
        await session.wait_idle()

        assert session.error == "Catalog down"
        assert session.result.query == "elf"

    @pytest.mark.asyncio
    async def test_go_to_page_uses_stable_query(self, catalog: FakeCatalog) -> None:
        """Navigation skips the timer and ignores unsettled typing."""
        catalog.pages[("elf", 2)] = CatalogPage(items=[_card("Elf Page Two")])
        session = CatalogSearchSession(catalog, debounce_seconds=DEBOUNCE)
        session.set_query("elf")
        await session.wait_idle()

        session.set_query("elf lord")
        result = await session.go_to_page(2)

        assert result is not None
        assert catalog.calls[-1] == ("elf", 2)
        assert [c.name for c in session.items] == ["Elf Page Two"]
        await session.close()

    @pytest.mark.asyncio
    async def test_close_cancels_scheduled(self, catalog: FakeCatalog) -> None:
        session = CatalogSearchSession(catalog, debounce_seconds=DEBOUNCE)

        session.set_query("elf")
        await session.close()
        await asyncio.sleep(DEBOUNCE * 2)

        assert catalog.calls == []

    @pytest.mark.asyncio
    async def test_close_cancels_in_flight_and_clears_loading(
        self, catalog: FakeCatalog
    ) -> None:
        catalog.gates["elf"] = asyncio.Event()
        session = CatalogSearchSession(catalog, debounce_seconds=DEBOUNCE)

        session.set_query("elf")
        await _wait_for_calls(catalog, 1)
        assert session.loading is True

        await session.close()

        assert session.loading is False
        assert catalog.completed == []
