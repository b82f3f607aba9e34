import asyncio

import pytest

from storefront.core.exceptions import NotFoundError, ValidationError
from storefront.services.product_service import product_service
from storefront.services.review_service import review_service

from factories import make_product, make_session_factory, make_user


async def test_second_review_replaces_the_first(db):
    user = await make_user(db)
    product = await make_product(db)

    first = await review_service.submit_review(db, product.product_id, user.user_id, 2, "Meh")
    second = await review_service.submit_review(db, product.product_id, user.user_id, 5, "Grew on me")

    assert second.review_id == first.review_id
    assert second.rating == 5
    assert second.comment == "Grew on me"
    reviews = await review_service.list_reviews_for_product(db, product.product_id)
    assert len(reviews) == 1


async def test_concurrent_reviews_by_one_user_leave_a_single_row(db, concurrent_engine):
    user_id = (await make_user(db)).user_id
    product_id = (await make_product(db)).product_id
    await db.close()

    factory = make_session_factory(concurrent_engine)

    async def review(rating):
        async with factory() as session:
            return await review_service.submit_review(session, product_id, user_id, rating, f"Take {rating}")

    await asyncio.gather(*(review(rating) for rating in range(1, 6)))

    async with factory() as fresh:
        reviews = await review_service.list_reviews_for_product(fresh, product_id)
        summary = await review_service.get_rating_summary(fresh, product_id)
    assert len(reviews) == 1
    assert reviews[0].comment == f"Take {reviews[0].rating}"
    assert summary.review_count == 1


@pytest.mark.parametrize("rating", [0, 6, -1, 4.5, "5", True])
async def test_rating_must_be_an_integer_from_one_to_five(db, rating):
    user = await make_user(db)
    product = await make_product(db)

    with pytest.raises(ValidationError):
        await review_service.submit_review(db, product.product_id, user.user_id, rating)


async def test_review_requires_existing_product_and_user(db):
    user_id = (await make_user(db)).user_id
    product_id = (await make_product(db)).product_id

    with pytest.raises(NotFoundError):
        await review_service.submit_review(db, 999_999, user_id, 4)
    with pytest.raises(NotFoundError):
        await review_service.submit_review(db, product_id, 999_999, 4)
    assert (await review_service.get_rating_summary(db, product_id)).review_count == 0


async def test_rating_summary(db):
    product = await make_product(db)
    for rating in (5, 4, 4):
        user = await make_user(db)
        await review_service.submit_review(db, product.product_id, user.user_id, rating)

    summary = await review_service.get_rating_summary(db, product.product_id)

    assert summary.review_count == 3
    assert summary.average_rating == pytest.approx(4.33, abs=0.01)


async def test_rating_summary_without_reviews(db):
    product = await make_product(db)

    summary = await review_service.get_rating_summary(db, product.product_id)

    assert summary.review_count == 0
    assert summary.average_rating is None


async def test_delete_review_is_idempotent(db):
    user = await make_user(db)
    product = await make_product(db)
    await review_service.submit_review(db, product.product_id, user.user_id, 3)

    assert await review_service.delete_review(db, product.product_id, user.user_id) is True
    assert await review_service.delete_review(db, product.product_id, user.user_id) is False


async def test_reviews_go_away_with_their_product(db, session_factory):
    user = await make_user(db)
    product = await make_product(db)
    await review_service.submit_review(db, product.product_id, user.user_id, 3)

    await product_service.delete_product(db, product.product_id)

    async with session_factory() as fresh:
        summary = await review_service.get_rating_summary(fresh, product.product_id)
    assert summary.review_count == 0
