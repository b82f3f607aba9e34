import pydantic
import pytest

from storefront.core.exceptions import ConflictError, NotFoundError, ValidationError
from storefront.core.security import verify_password
from storefront.db.models import User
from storefront.schemas.user_schema import UserCreate, UserResponse, UserUpdate
from storefront.services.cart_service import cart_service
from storefront.services.order_service import order_service
from storefront.services.review_service import review_service
from storefront.services.user_service import user_service

from factories import make_product, make_user


async def test_register_stores_only_a_password_hash(db):
    user = await make_user(db, "alice", email="Alice@Example.COM", password="correct horse")

    assert user.password_hash != "correct horse"
    assert verify_password("correct horse", user.password_hash)
    assert user.email == "alice@example.com"
    assert user.is_admin is False
    assert user.email_verified is False
    assert "password" not in UserResponse.model_validate(user).model_dump()


async def test_username_is_unique_ignoring_case(db):
    await make_user(db, "Alice")

    with pytest.raises(ConflictError):
        await make_user(db, "alice")
    found = await user_service.get_user_by_username(db, "ALICE")
    assert found.username == "Alice"


async def test_email_is_unique(db):
    await make_user(db, "first", email="same@example.com")

    with pytest.raises(ConflictError):
        await make_user(db, "second", email="SAME@example.com")
    assert (await user_service.get_user_by_email(db, "Same@Example.com")).username == "first"


def test_registration_rejects_short_password():
    with pytest.raises(pydantic.ValidationError):
        UserCreate(username="bob", email="bob@example.com", password="short")


def test_password_limit_counts_bytes_not_characters():
    # 36 x "é" = 72 bytes; 37 ya no cabe en bcrypt
    UserCreate(username="bob", email="bob@example.com", password="é" * 36)
    with pytest.raises(pydantic.ValidationError):
        UserCreate(username="bob", email="bob@example.com", password="é" * 37)


async def test_register_user_rejects_password_over_bcrypt_limit(db):
    user_in = UserCreate.model_construct(
        username="bob", email="bob@example.com", password="é" * 72, is_admin=False
    )

    with pytest.raises(ValidationError):
        await user_service.register_user(db, user_in)
    assert await user_service.get_user_by_username(db, "bob") is None


async def test_profile_updates(db):
    user = await make_user(db)

    updated = await user_service.update_profile(db, user.user_id, UserUpdate(full_name="Bob Builder"))
    verified = await user_service.mark_email_verified(db, user.user_id)
    logged_in = await user_service.record_login(db, user.user_id)

    assert updated.full_name == "Bob Builder"
    assert verified.email_verified is True
    assert logged_in.last_login is not None
    with pytest.raises(NotFoundError):
        await user_service.update_profile(db, 999_999, UserUpdate(full_name="Nobody"))


async def test_delete_user_keeps_orders_and_drops_cart_and_reviews(db, session_factory):
    user = await make_user(db)
    product = await make_product(db)
    await cart_service.add_to_cart(db, user.user_id, product.product_id, 1)
    result = await order_service.checkout(db, user.user_id, "42 Main Street")
    await cart_service.add_to_cart(db, user.user_id, product.product_id, 2)
    await review_service.submit_review(db, product.product_id, user.user_id, 4)

    assert await user_service.delete_user(db, user.user_id) is True
    assert await user_service.delete_user(db, user.user_id) is False

    async with session_factory() as fresh:
        assert await fresh.get(User, user.user_id) is None
        order = await order_service.get_order(fresh, result.order_id)
        assert order.user_id is None
        assert len(order.items) == 1
        assert (await cart_service.get_cart(fresh, user.user_id)).is_empty
        assert (await review_service.get_rating_summary(fresh, product.product_id)).review_count == 0
