import asyncio
from decimal import Decimal

import pydantic
import pytest

from storefront.core.exceptions import NotFoundError, ValidationError
from storefront.db.models import Product, ProductImage
from storefront.schemas.product_schema import ProductCreate, ProductImageCreate, ProductResponse, ProductUpdate
from storefront.services.cart_service import cart_service
from storefront.services.order_service import order_service
from storefront.services.product_service import product_service

from factories import make_category, make_product, make_session_factory, make_user


async def test_create_product_with_category(db):
    category = await make_category(db, "Books")
    product = await make_product(db, name="Novel", price="15.99", discount_price="12.99", category_id=category.category_id)

    loaded = ProductResponse.model_validate(await product_service.get_product(db, product.product_id))

    assert loaded.name == "Novel"
    assert loaded.category.name == "Books"
    assert loaded.discount_price == Decimal("12.99")
    assert product.effective_price == Decimal("12.99")


def test_schema_rejects_discount_above_price():
    with pytest.raises(pydantic.ValidationError):
        ProductCreate(name="Bad", price=Decimal("10.00"), discount_price=Decimal("11.00"))


async def test_create_product_with_missing_category(db):
    with pytest.raises(ValidationError):
        await make_product(db, category_id=999_999)


async def test_update_checks_discount_against_stored_price(db):
    product_id = (await make_product(db, price="10.00")).product_id

    with pytest.raises(ValidationError):
        await product_service.update_product(db, product_id, ProductUpdate(discount_price=Decimal("10.01")))

    updated = await product_service.update_product(
        db, product_id, ProductUpdate(price=Decimal("20.00"), discount_price=Decimal("18.00"))
    )
    assert updated.effective_price == Decimal("18.00")


@pytest.mark.parametrize("field", ["name", "price", "stock_quantity", "is_active"])
async def test_update_cannot_null_required_fields(db, session_factory, field):
    product_id = (await make_product(db, name="Keep", stock_quantity=7)).product_id

    with pytest.raises(ValidationError):
        await product_service.update_product(db, product_id, ProductUpdate(**{field: None}))

    async with session_factory() as fresh:
        stored = await fresh.get(Product, product_id)
    assert stored.name == "Keep"
    assert stored.price == Decimal("10.00")
    assert stored.stock_quantity == 7
    assert stored.is_active is True


async def test_update_missing_product(db):
    with pytest.raises(NotFoundError):
        await product_service.update_product(db, 999_999, ProductUpdate(name="Ghost"))


async def test_adjust_stock_never_goes_negative(db):
    product = await make_product(db, stock_quantity=3)

    assert await product_service.adjust_stock(db, product.product_id, 4) == 7
    assert await product_service.adjust_stock(db, product.product_id, -7) == 0
    with pytest.raises(ValidationError):
        await product_service.adjust_stock(db, product.product_id, -1)
    with pytest.raises(NotFoundError):
        await product_service.adjust_stock(db, 999_999, 1)


async def test_adding_a_primary_image_demotes_the_previous_one(db):
    product = await make_product(db)
    first = await product_service.add_image(db, product.product_id, ProductImageCreate(image_url="/a.jpg", is_primary=True))
    await product_service.add_image(db, product.product_id, ProductImageCreate(image_url="/b.jpg"))
    third = await product_service.add_image(db, product.product_id, ProductImageCreate(image_url="/c.jpg", is_primary=True))

    images = await product_service.list_images(db, product.product_id)

    assert [i.image_id for i in images if i.is_primary] == [third.image_id]
    assert images[0].image_id == third.image_id
    assert first.image_id in [i.image_id for i in images]


async def test_set_primary_image(db):
    product = await make_product(db)
    await product_service.add_image(db, product.product_id, ProductImageCreate(image_url="/a.jpg", is_primary=True))
    second = await product_service.add_image(db, product.product_id, ProductImageCreate(image_url="/b.jpg"))

    await product_service.set_primary_image(db, product.product_id, second.image_id)

    primaries = [i.image_id for i in await product_service.list_images(db, product.product_id) if i.is_primary]
    assert primaries == [second.image_id]


async def test_set_primary_image_of_another_product(db):
    product = await make_product(db)
    other = await make_product(db)
    image = await product_service.add_image(db, other.product_id, ProductImageCreate(image_url="/x.jpg"))

    with pytest.raises(NotFoundError):
        await product_service.set_primary_image(db, product.product_id, image.image_id)


async def test_concurrent_primary_images_leave_exactly_one_primary(db, concurrent_engine):
    product_id = (await make_product(db)).product_id
    await db.close()

    factory = make_session_factory(concurrent_engine)

    async def add_primary(n):
        async with factory() as session:
            return await product_service.add_image(
                session, product_id, ProductImageCreate(image_url=f"/{n}.jpg", is_primary=True)
            )

    await asyncio.gather(*(add_primary(n) for n in range(4)))

    async with factory() as fresh:
        images = await product_service.list_images(fresh, product_id)
    assert len(images) == 4
    assert len([i for i in images if i.is_primary]) == 1


async def test_delete_image(db):
    product = await make_product(db)
    image = await product_service.add_image(db, product.product_id, ProductImageCreate(image_url="/x.jpg"))

    assert await product_service.delete_image(db, image.image_id) is True
    assert await product_service.delete_image(db, image.image_id) is False
    assert await product_service.list_images(db, product.product_id) == []


async def test_delete_product_keeps_order_history(db, session_factory):
    user = await make_user(db)
    product = await make_product(db, name="Lamp", price="30.00")
    other_user = await make_user(db)
    image = await product_service.add_image(db, product.product_id, ProductImageCreate(image_url="/lamp.jpg", is_primary=True))
    await cart_service.add_to_cart(db, user.user_id, product.product_id, 1)
    result = await order_service.checkout(db, user.user_id, "42 Main Street")
    await cart_service.add_to_cart(db, other_user.user_id, product.product_id, 1)

    assert await product_service.delete_product(db, product.product_id) is True
    assert await product_service.delete_product(db, product.product_id) is False

    async with session_factory() as fresh:
        order = await order_service.get_order(fresh, result.order_id)
        assert order.items[0].product_id is None
        assert order.items[0].product_name == "Lamp"
        assert order.items[0].quantity == 1
        assert order.items[0].unit_price == Decimal("30.00")
        assert order.total_amount == Decimal("30.00")
        assert (await cart_service.get_cart(fresh, other_user.user_id)).is_empty
        assert await fresh.get(ProductImage, image.image_id) is None
