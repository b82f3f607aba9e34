import pytest

from storefront.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from storefront.db.models import OrderStatus, PaymentStatus
from storefront.schemas.order_schema import Order as OrderSchema
from storefront.services.cart_service import cart_service
from storefront.services.order_service import order_service

from factories import make_product, make_user


async def _place_order(db, user=None):
    user = user or await make_user(db)
    product = await make_product(db, price="12.50")
    await cart_service.add_to_cart(db, user.user_id, product.product_id, 2)
    result = await order_service.checkout(db, user.user_id, "42 Main Street")
    return user, result.order_id


async def test_order_follows_fulfilment_path(db):
    _, order_id = await _place_order(db)

    for status in ("processing", "shipped", "delivered"):
        order = await order_service.update_order_status(db, order_id, status)
        assert order.status == status


@pytest.mark.parametrize(
    "path, illegal",
    [
        ([], OrderStatus.SHIPPED),
        ([OrderStatus.PROCESSING], OrderStatus.DELIVERED),
        ([OrderStatus.PROCESSING, OrderStatus.SHIPPED], OrderStatus.CANCELLED),
        ([OrderStatus.CANCELLED], OrderStatus.PROCESSING),
    ],
)
async def test_illegal_status_transitions_are_rejected(db, path, illegal):
    _, order_id = await _place_order(db)
    for status in path:
        await order_service.update_order_status(db, order_id, status)

    with pytest.raises(ValidationError):
        await order_service.update_order_status(db, order_id, illegal)


async def test_setting_the_same_status_is_a_no_op(db):
    _, order_id = await _place_order(db)

    order = await order_service.update_order_status(db, order_id, OrderStatus.PENDING)

    assert order.status == "pending"


async def test_unknown_status_value(db):
    _, order_id = await _place_order(db)

    with pytest.raises(ValidationError):
        await order_service.update_order_status(db, order_id, "lost")
    with pytest.raises(ValidationError):
        await order_service.update_payment_status(db, order_id, "maybe")


async def test_payment_status_transitions(db):
    _, order_id = await _place_order(db)

    order = await order_service.update_payment_status(db, order_id, PaymentStatus.FAILED)
    assert order.payment_status == "failed"
    order = await order_service.update_payment_status(db, order_id, "paid")
    assert order.payment_status == "paid"
    order = await order_service.update_payment_status(db, order_id, "refunded")
    assert order.payment_status == "refunded"

    with pytest.raises(ValidationError):
        await order_service.update_payment_status(db, order_id, "paid")


async def test_tracking_number_and_notes(db):
    _, order_id = await _place_order(db)

    await order_service.set_tracking_number(db, order_id, "TRACK-123")
    order = await order_service.update_notes(db, order_id, "Leave at the door")

    assert order.tracking_number == "TRACK-123"
    assert order.notes == "Leave at the door"
    assert len(order.items) == 1


async def test_updates_on_missing_order(db):
    with pytest.raises(NotFoundError):
        await order_service.update_order_status(db, 999_999, "processing")
    with pytest.raises(NotFoundError):
        await order_service.set_tracking_number(db, 999_999, "X")


async def test_get_order_for_user_checks_ownership(db):
    owner, order_id = await _place_order(db)
    stranger = await make_user(db)

    order = await order_service.get_order_for_user(db, order_id, owner.user_id)
    assert order.order_id == order_id
    with pytest.raises(AuthorizationError):
        await order_service.get_order_for_user(db, order_id, stranger.user_id)
    with pytest.raises(NotFoundError):
        await order_service.get_order_for_user(db, 999_999, owner.user_id)
    assert await order_service.get_order(db, 999_999) is None


async def test_order_history_is_newest_first(db):
    user, first_id = await _place_order(db)
    _, second_id = await _place_order(db, user)

    orders = await order_service.list_orders_for_user(db, user.user_id)

    assert [o.order_id for o in orders] == [second_id, first_id]


async def test_order_read_model(db):
    _, order_id = await _place_order(db)

    order = OrderSchema.model_validate(await order_service.get_order(db, order_id))

    assert order.status is OrderStatus.PENDING
    assert order.items[0].quantity == 2
