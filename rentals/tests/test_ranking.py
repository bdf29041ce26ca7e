import pytest

from rentals.core.models import GeoPosition, Listing, SimpleCriteria
from rentals.core.ranking import (
    build_page,
    nearby,
    page_window,
    paginate,
    rank_listings,
    resolve_jump_page,
    search,
    total_pages,
)


def _listing(listing_id, price, lat=None, lon=None):
    return Listing(id=str(listing_id), title=f"Listing {listing_id}", area="Bangi", price=float(price), beds=1, lat=lat, lon=lon)


def _ids(ranked):
    return [item.listing.id for item in ranked]


def test_rank_by_price_without_position():
    listings = [_listing(1, 1200), _listing(2, 300), _listing(3, 700)]
    ranked = rank_listings(listings)
    assert _ids(ranked) == ["2", "3", "1"]
    assert all(item.distance_km is None for item in ranked)


def test_rank_by_price_is_stable_for_ties():
    listings = [_listing("a", 500), _listing("b", 400), _listing("c", 500), _listing("d", 500)]
    assert _ids(rank_listings(listings)) == ["b", "a", "c", "d"]


def test_rank_by_distance_puts_missing_coordinates_last():
    listings = [_listing(1, 1200, 0.0, 1.0), _listing(2, 300), _listing(3, 700, 0.0, 0.1)]
    ranked = rank_listings(listings, GeoPosition(0.0, 0.0))
    assert _ids(ranked) == ["3", "1", "2"]
    assert ranked[0].distance_km == pytest.approx(11.12, abs=0.05)
    assert ranked[1].distance_km == pytest.approx(111.19, abs=0.1)
    assert ranked[2].distance_km is None


def test_rank_by_distance_keeps_input_order_among_unknown():
    listings = [_listing("x", 1), _listing("y", 2, 0.0, 5.0), _listing("z", 3), _listing("w", 4, float("nan"), 0.0)]
    ranked = rank_listings(listings, GeoPosition(0.0, 0.0))
    assert _ids(ranked) == ["y", "x", "z", "w"]


def test_ranking_is_idempotent():
    listings = [_listing(i, price) for i, price in enumerate([5, 3, 3, 9, 1, 3])]
    assert _ids(rank_listings(listings)) == _ids(rank_listings(listings))


def test_ranking_does_not_mutate_input():
    listings = [_listing(1, 900), _listing(2, 100)]
    rank_listings(listings, GeoPosition(0.0, 0.0))
    assert [item.id for item in listings] == ["1", "2"]


def test_total_pages():
    assert total_pages(0) == 0
    assert total_pages(1) == 1
    assert total_pages(10) == 1
    assert total_pages(11) == 2
    assert total_pages(25, page_size=5) == 5


def test_pages_concatenate_to_full_sequence():
    items = list(range(37))
    pages = total_pages(len(items))
    assert pages == 4
    joined = [x for page in range(1, pages + 1) for x in paginate(items, page)]
    assert joined == items


def test_out_of_range_page_is_empty():
    items = list(range(5))
    assert paginate(items, 0) == []
    assert paginate(items, 2) == []
    assert paginate([], 1) == []


def test_page_window_reference_cases():
    assert page_window(0, 1) == []
    assert page_window(3, 1) == [1, 2, 3]
    assert page_window(20, 1) == [1, 2, 3, 4, 5, 6, 7]
    assert page_window(20, 10) == [7, 8, 9, 10, 11, 12, 13]
    assert page_window(20, 20) == [14, 15, 16, 17, 18, 19, 20]
    assert page_window(20, 18) == [14, 15, 16, 17, 18, 19, 20]
    assert page_window(10, 2) == [1, 2, 3, 4, 5, 6, 7]


def test_page_window_is_contiguous_and_contains_current():
    for total in range(1, 30):
        for current in range(1, total + 1):
            window = page_window(total, current)
            assert current in window
            assert len(window) == min(7, total)
            assert window == list(range(window[0], window[-1] + 1))
            assert window[0] >= 1 and window[-1] <= total


def test_resolve_jump_page():
    assert resolve_jump_page("3", 5) == 3
    assert resolve_jump_page(" 5 ", 5) == 5
    assert resolve_jump_page("6", 5) is None
    assert resolve_jump_page("0", 5) is None
    assert resolve_jump_page("abc", 5) is None
    assert resolve_jump_page("", 5) is None


def test_nearby_takes_first_four():
    ranked = rank_listings([_listing(i, i) for i in range(6)])
    assert _ids(nearby(ranked)) == ["0", "1", "2", "3"]


def test_search_example_without_position():
    listings = [_listing(1, 1200), _listing(2, 300), _listing(3, 700)]
    result = search(listings, SimpleCriteria(), page=1)
    assert _ids(result.items) == ["2", "3", "1"]
    assert result.total_pages == 1
    assert result.total_count == 3
    assert result.page_numbers == [1]


def test_search_empty_input():
    result = search([], SimpleCriteria())
    assert result.items == []
    assert result.total_pages == 0
    assert result.page_numbers == []


def test_search_paginates_filtered_results():
    listings = [_listing(i, 100 + i) for i in range(25)]
    result = search(listings, SimpleCriteria(price_bucket="low"), page=3)
    assert result.total_count == 25
    assert result.total_pages == 3
    assert _ids(result.items) == [str(i) for i in range(20, 25)]


def test_build_page_from_ranked_listings():
    ranked = rank_listings([_listing(i, 1000 - i) for i in range(12)])
    result = build_page(ranked, page=2)
    assert result.total_count == 12
    assert result.total_pages == 2
    assert _ids(result.items) == ["1", "0"]
    assert result.page_numbers == [1, 2]
