"""
Tests for FactState and FactEngine.
"""

import asyncio

import pytest

from wikifact.categories import (
    AllCategories,
    CustomCategory,
    EntropyMode,
    PredefinedCategory,
)
from wikifact.entropy import EntropyEngine, choose_article, entropy_sample, fold_seed
from wikifact.errors import EmptyCategoryError, NoArticlesAvailableError
from wikifact.facts import FactEngine, FactState
from wikifact.sampling import CategorySampler


class GatedFetcher:
    """Random-article fetcher whose first call waits until released."""

    def __init__(self, first, second):
        self.gate = asyncio.Event()
        self.first = first
        self.second = second
        self.calls = 0

    async def fetch_random_article(self):
        self.calls += 1
        if self.calls == 1:
            await self.gate.wait()
            if isinstance(self.first, Exception):
                raise self.first
            return self.first
        return self.second


class TestFactState:
    """Tests for FactState."""

    def test_defaults(self):
        state = FactState()
        assert state.selector == AllCategories()
        assert state.current_article is None
        assert state.current_title is None
        assert state.fragment == ""

    def test_begin_request_selects(self):
        state = FactState()
        ticket = state.begin_request(PredefinedCategory("art"))

        assert ticket == 1
        assert state.fragment == "#art"
        assert state.is_current(ticket)

    def test_newer_request_wins(self, articles):
        state = FactState()
        old = state.begin_request(PredefinedCategory("art"))
        new = state.begin_request(PredefinedCategory("animals"))

        assert not state.commit(old, articles[0])
        assert state.current_article is None
        assert state.commit(new, articles[1])
        assert state.current_title == articles[1].title


class TestLoadFact:
    """Tests for FactEngine.load_fact()."""

    def test_all_categories(self, fake_fetcher, articles):
        fetcher = fake_fetcher(random_articles=articles)
        engine = FactEngine(client=fetcher)

        article = asyncio.run(engine.load_fact(AllCategories()))

        assert article == articles[0]
        assert engine.state.current_article == articles[0]
        assert fetcher.random_calls == 1
        assert fetcher.listing_calls == []

    def test_predefined_category(self, fake_fetcher, listing_pages):
        """Physics with 1001 members: three listing calls, one article fetch."""
        ids = list(range(1, 1002))
        fetcher = fake_fetcher(category_pages=listing_pages(ids))
        engine = FactEngine(client=fetcher)

        article = asyncio.run(engine.load_fact(PredefinedCategory("physics")))

        assert [title for title, _ in fetcher.listing_calls] == ["Category:Physics"] * 3
        assert len(fetcher.fetched_ids) == 1
        assert fetcher.fetched_ids[0] in ids
        assert fetcher.random_calls == 0
        assert engine.state.current_article == article
        assert engine.state.fragment == "#physics"

    def test_unknown_key(self, fake_fetcher, listing_pages):
        fetcher = fake_fetcher(category_pages=listing_pages([1]))
        engine = FactEngine(client=fetcher)

        asyncio.run(engine.load_fact(PredefinedCategory("chemistry")))

        assert fetcher.listing_calls == [("Category:Chemistry", None)]

    def test_custom_category(self, fake_fetcher, listing_pages):
        fetcher = fake_fetcher(category_pages=listing_pages([1, 2]))
        engine = FactEngine(client=fetcher)
        selector = CustomCategory("Category:Impressionist painters", "Impressionist painters")

        asyncio.run(engine.load_fact(selector))

        assert fetcher.listing_calls == [("Category:Impressionist painters", None)]

    def test_empty_category(self, fake_fetcher):
        engine = FactEngine(client=fake_fetcher())

        with pytest.raises(EmptyCategoryError):
            asyncio.run(engine.load_fact(PredefinedCategory("art")))

        assert engine.state.current_article is None
        assert engine.state.fragment == "#art"

    def test_entropy_not_direct(self, fake_fetcher):
        engine = FactEngine(client=fake_fetcher())

        with pytest.raises(ValueError):
            asyncio.run(engine.load_fact(EntropyMode()))

    def test_uses_given_sampler(self, fake_fetcher, listing_pages):
        fetcher = fake_fetcher(category_pages=listing_pages(list(range(50))))
        engine = FactEngine(client=fetcher, sampler=CategorySampler(fetcher, pool_cap=10))

        asyncio.run(engine.load_fact(PredefinedCategory("art")))

        assert fetcher.fetched_ids[0] < 10

    def test_stale_result_dropped(self, articles):
        """A slow response for an older selection never replaces a newer one."""

        async def scenario():
            fetcher = GatedFetcher(articles[0], articles[1])
            engine = FactEngine(client=fetcher)
            slow = asyncio.create_task(engine.load_fact(AllCategories()))
            await asyncio.sleep(0)
            fast = await engine.load_fact(AllCategories())
            fetcher.gate.set()
            return await slow, fast, engine.state

        slow, fast, state = asyncio.run(scenario())

        assert slow is None
        assert fast == articles[1]
        assert state.current_article == articles[1]

    def test_stale_failure_dropped(self, articles, failing_fetch):
        async def scenario():
            fetcher = GatedFetcher(failing_fetch, articles[1])
            engine = FactEngine(client=fetcher)
            slow = asyncio.create_task(engine.load_fact(AllCategories()))
            await asyncio.sleep(0)
            await engine.load_fact(AllCategories())
            fetcher.gate.set()
            return await slow

        assert asyncio.run(scenario()) is None


class TestEntropyCollection:
    """Tests for FactEngine entropy mode."""

    def _engine(self, fetcher):
        return FactEngine(
            client=fetcher,
            entropy_factory=lambda: EntropyEngine(fetcher, batch_size=4, window_ms=0),
        )

    def test_completes_with_article(self, fake_fetcher, articles):
        fetcher = fake_fetcher(random_articles=articles)
        engine = self._engine(fetcher)
        outcomes = []

        async def scenario():
            task = engine.begin_entropy_collection(lambda article, error: outcomes.append((article, error)))
            recorded = engine.record_pointer(10, 20, 1000)
            await task
            return recorded

        assert asyncio.run(scenario()) is True

        expected = choose_article(articles, fold_seed([entropy_sample(10, 20, 1000, 0)]))
        assert outcomes == [(expected, None)]
        assert engine.state.current_article == expected
        assert engine.state.selector == EntropyMode()
        assert engine.state.fragment == "#~entropy"

    def test_reports_failure(self, fake_fetcher, failing_fetch):
        engine = self._engine(fake_fetcher(random_articles=[failing_fetch]))
        outcomes = []

        async def scenario():
            await engine.begin_entropy_collection(lambda article, error: outcomes.append((article, error)))

        asyncio.run(scenario())

        assert len(outcomes) == 1
        article, error = outcomes[0]
        assert article is None
        assert isinstance(error, NoArticlesAvailableError)

    def test_superseded_collection_silent(self, fake_fetcher, articles):
        engine = self._engine(fake_fetcher(random_articles=articles))
        outcomes = []

        async def scenario():
            task = engine.begin_entropy_collection(lambda article, error: outcomes.append((article, error)))
            engine.state.begin_request(AllCategories())
            await task

        asyncio.run(scenario())

        assert outcomes == []
        assert engine.state.current_article is None

    def test_reselect_while_window_open(self, fake_fetcher, articles):
        """Entropy, another category, entropy again: the newest window reports back."""
        engine = self._engine(fake_fetcher(random_articles=articles))
        outcomes = []

        async def scenario():
            first = engine.begin_entropy_collection(
                lambda article, error: outcomes.append(("first", article, error))
            )
            await engine.load_fact(AllCategories())
            second = engine.begin_entropy_collection(
                lambda article, error: outcomes.append(("second", article, error))
            )
            recorded = engine.record_pointer(3, 4, 500)
            await asyncio.gather(first, second)
            return recorded

        assert asyncio.run(scenario()) is True

        assert len(outcomes) == 1
        label, article, error = outcomes[0]
        assert label == "second"
        assert error is None
        assert article in articles
        assert engine.state.current_article == article
        assert engine.state.selector == EntropyMode()
        assert engine.entropy.samples == [entropy_sample(3, 4, 500, 0)]

    def test_no_window_ignores_pointer(self, fake_fetcher):
        engine = self._engine(fake_fetcher())
        assert engine.record_pointer(1, 2, 3) is False

    def test_overlapping_resolve_entropy(self, articles):
        async def scenario():
            fetcher = GatedFetcher(articles[0], articles[1])
            engine = FactEngine(
                client=fetcher,
                entropy_factory=lambda: EntropyEngine(fetcher, batch_size=1, window_ms=0),
            )
            slow = asyncio.create_task(engine.resolve_entropy([(1, 2, 3)]))
            await asyncio.sleep(0)
            fast = await engine.resolve_entropy([(4, 5, 6)])
            fetcher.gate.set()
            return await slow, fast, engine.state

        slow, fast, state = asyncio.run(scenario())

        assert slow is None
        assert fast == articles[1]
        assert state.current_article == articles[1]

    def test_superseded_resolve_failure_dropped(self, articles, failing_fetch):
        async def scenario():
            fetcher = GatedFetcher(failing_fetch, articles[1])
            engine = FactEngine(
                client=fetcher,
                entropy_factory=lambda: EntropyEngine(fetcher, batch_size=1, window_ms=0),
            )
            slow = asyncio.create_task(engine.resolve_entropy([(1, 2, 3)]))
            await asyncio.sleep(0)
            engine.state.begin_request(PredefinedCategory("art"))
            fetcher.gate.set()
            return await slow

        assert asyncio.run(scenario()) is None

    def test_resolve_failure_raises(self, fake_fetcher, failing_fetch):
        engine = self._engine(fake_fetcher(random_articles=[failing_fetch]))

        with pytest.raises(NoArticlesAvailableError):
            asyncio.run(engine.resolve_entropy([(1, 2, 3)]))

    def test_resolve_entropy_avoids_previous(self, fake_fetcher, articles):
        engine = self._engine(fake_fetcher(random_articles=articles))
        samples = [(1, 2, 3), (4, 5, 6)]
        seed = fold_seed([entropy_sample(1, 2, 3, 0), entropy_sample(4, 5, 6, 1)])
        previous = choose_article(articles, seed).title

        article = asyncio.run(engine.resolve_entropy(samples, previous_title=previous))

        assert article.title != previous
        assert article == choose_article(articles, seed, previous)
        assert engine.state.current_article == article

    def test_resolve_entropy_defaults_to_shown_fact(self, fake_fetcher, articles):
        engine = self._engine(fake_fetcher(random_articles=articles))
        samples = [(7, 8, 9)]
        seed = fold_seed([entropy_sample(7, 8, 9, 0)])
        engine.state.current_article = choose_article(articles, seed)

        article = asyncio.run(engine.resolve_entropy(samples))

        assert article != choose_article(articles, seed)


class TestSearch:
    """Tests for FactEngine.search_categories()."""

    def test_delegates_to_client(self, fake_fetcher):
        fetcher = fake_fetcher()
        engine = FactEngine(client=fetcher)

        results = asyncio.run(engine.search_categories("hist"))

        assert fetcher.search_terms == ["hist"]
        assert results[0].title == "Category:History"
