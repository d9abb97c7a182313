import pytest
from sqlalchemy import delete, func, inspect, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.schema import CreateIndex, CreateTable

from models import Cart, CartItem, Order, OrderItem, Product, User


def make_user(db, email="jane@example.com", **kwargs):
    user = User(email=email, password_hash="x", **kwargs)
    db.add(user)
    db.flush()
    return user


def make_product(db, sku="SKU-1", price_cents=1000, **kwargs):
    product = Product(sku=sku, name=f"Product {sku}", price_cents=price_cents, **kwargs)
    db.add(product)
    db.flush()
    return product


def make_order(db, user, **kwargs):
    values = dict(user=user, status="paid", subtotal_cents=0, total_cents=0)
    values.update(kwargs)
    order = Order(**values)
    db.add(order)
    db.flush()
    return order


def count(db, model):
    return db.scalar(select(func.count()).select_from(model))


def test_server_defaults(db):
    user = make_user(db)
    product = make_product(db)
    order = make_order(db, user)
    for obj in (user, product, order):
        db.refresh(obj)

    assert user.role == "customer"
    assert user.is_active is True
    assert user.created_at is not None
    assert product.currency == "USD"
    assert product.stock_quantity == 0
    assert product.is_active is True
    assert (order.tax_cents, order.shipping_cents, order.currency) == (0, 0, "USD")


def test_user_email_is_unique(db):
    make_user(db, email="dup@example.com")
    with pytest.raises(IntegrityError):
        make_user(db, email="dup@example.com")


def test_user_role_is_restricted(db):
    with pytest.raises(IntegrityError):
        make_user(db, role="owner")


def test_product_price_must_not_be_negative(db):
    with pytest.raises(IntegrityError):
        make_product(db, price_cents=-1)


def test_product_stock_must_not_be_negative(db):
    with pytest.raises(IntegrityError):
        make_product(db, stock_quantity=-5)


def test_product_sku_is_optional_but_unique(db):
    make_product(db, sku=None)
    make_product(db, sku=None)
    make_product(db, sku="TAKEN")
    with pytest.raises(IntegrityError):
        make_product(db, sku="TAKEN")


def test_one_cart_per_user_and_status(db):
    user = make_user(db)
    db.add_all([Cart(user=user, status="active"), Cart(user=user, status="abandoned")])
    db.flush()

    db.add(Cart(user=user, status="active"))
    with pytest.raises(IntegrityError):
        db.flush()


def test_cart_status_is_restricted(db):
    user = make_user(db)
    db.add(Cart(user=user, status="archived"))
    with pytest.raises(IntegrityError):
        db.flush()


def test_cart_item_quantity_must_be_positive(db):
    cart = Cart(user=make_user(db))
    db.add(CartItem(cart=cart, product=make_product(db), quantity=0, unit_price_cents=1000))
    with pytest.raises(IntegrityError):
        db.flush()


def test_cart_item_is_unique_per_product(db):
    cart = Cart(user=make_user(db))
    product = make_product(db)
    db.add(CartItem(cart=cart, product=product, quantity=1, unit_price_cents=1000))
    db.flush()

    db.add(CartItem(cart=cart, product=product, quantity=3, unit_price_cents=1000))
    with pytest.raises(IntegrityError):
        db.flush()


@pytest.mark.parametrize("status", ["pending", "paid", "shipped", "delivered", "cancelled", "refunded"])
def test_order_accepts_known_statuses(db, status):
    make_order(db, make_user(db), status=status)


def test_order_status_is_restricted(db):
    with pytest.raises(IntegrityError):
        make_order(db, make_user(db), status="lost")


@pytest.mark.parametrize("field", ["subtotal_cents", "tax_cents", "shipping_cents", "total_cents"])
def test_order_money_must_not_be_negative(db, field):
    with pytest.raises(IntegrityError):
        make_order(db, make_user(db), **{field: -1})


def test_order_item_is_unique_per_product(db):
    order = make_order(db, make_user(db))
    product = make_product(db)
    db.add(OrderItem(order=order, product=product, quantity=1, unit_price_cents=1000, line_total_cents=1000))
    db.flush()

    db.add(OrderItem(order=order, product=product, quantity=2, unit_price_cents=1000, line_total_cents=2000))
    with pytest.raises(IntegrityError):
        db.flush()


def test_order_item_quantity_must_be_positive(db):
    order = make_order(db, make_user(db))
    db.add(OrderItem(order=order, product=make_product(db), quantity=-1, unit_price_cents=1000, line_total_cents=0))
    with pytest.raises(IntegrityError):
        db.flush()


def test_deleting_product_in_a_cart_is_restricted(db):
    product = make_product(db)
    db.add(CartItem(cart=Cart(user=make_user(db)), product=product, quantity=1, unit_price_cents=1000))
    db.commit()

    with pytest.raises(IntegrityError):
        db.execute(delete(Product).where(Product.id == product.id))


def test_deleting_ordered_product_is_restricted(db):
    product = make_product(db)
    order = make_order(db, make_user(db))
    db.add(OrderItem(order=order, product=product, quantity=1, unit_price_cents=1000, line_total_cents=1000))
    db.commit()

    with pytest.raises(IntegrityError):
        db.execute(delete(Product).where(Product.id == product.id))


def test_deleting_user_cascades_to_carts_and_items(db):
    user = make_user(db)
    db.add(CartItem(cart=Cart(user=user), product=make_product(db), quantity=2, unit_price_cents=1000))
    db.commit()

    db.execute(delete(User).where(User.id == user.id))
    db.commit()

    assert count(db, Cart) == 0
    assert count(db, CartItem) == 0
    assert count(db, Product) == 1


def test_deleting_user_with_orders_is_restricted(db):
    user = make_user(db)
    make_order(db, user)
    db.commit()

    with pytest.raises(IntegrityError):
        db.execute(delete(User).where(User.id == user.id))


def test_deleting_order_cascades_to_items(db):
    order = make_order(db, make_user(db))
    db.add(OrderItem(order=order, product=make_product(db), quantity=1, unit_price_cents=1000, line_total_cents=1000))
    db.commit()

    db.execute(delete(Order).where(Order.id == order.id))
    db.commit()

    assert count(db, OrderItem) == 0


def test_postgresql_cart_constraint_is_deferrable():
    ddl = str(CreateTable(Cart.__table__).compile(dialect=postgresql.dialect()))
    assert "UNIQUE (user_id, status) DEFERRABLE INITIALLY IMMEDIATE" in ddl
    assert ddl.count("uq_carts_user_status") == 1


def test_sqlite_cart_constraint_is_plain_unique():
    ddl = str(CreateTable(Cart.__table__).compile(dialect=sqlite.dialect()))
    assert "UNIQUE (user_id, status)" in ddl
    assert "DEFERRABLE" not in ddl


def test_product_search_index_is_postgresql_gin(engine):
    index = next(i for i in Product.__table__.indexes if i.name == "idx_products_name_search")
    ddl = str(CreateIndex(index).compile(dialect=postgresql.dialect()))
    assert "USING gin" in ddl
    assert "to_tsvector" in ddl

    sqlite_indexes = {i["name"] for i in inspect(engine).get_indexes("products")}
    assert "idx_products_active" in sqlite_indexes
    assert "idx_products_name_search" not in sqlite_indexes


def test_expected_indexes_exist(engine):
    inspector = inspect(engine)
    expected = {
        "users": "idx_users_role",
        "carts": "idx_carts_user_id",
        "cart_items": "idx_cart_items_cart_id",
        "orders": "idx_orders_user_created_at",
        "order_items": "idx_order_items_order_id",
    }
    for table, index_name in expected.items():
        assert index_name in {i["name"] for i in inspector.get_indexes(table)}
