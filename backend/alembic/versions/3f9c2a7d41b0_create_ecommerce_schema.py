"""Create e-commerce schema

Revision ID: 3f9c2a7d41b0
Revises:
Create Date: 2026-10-19 09:12:44.381502

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# Revision identifiers used by Alembic
revision: str = '3f9c2a7d41b0'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id():
    return sa.BigInteger().with_variant(sa.Integer(), 'sqlite')


def _timestamps(with_updated_at=True):
    columns = [sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)]
    if with_updated_at:
        columns.append(sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False))
    return columns


def upgrade() -> None:
    """Upgrade schema."""
    is_postgresql = op.get_context().dialect.name == 'postgresql'

    # Parents first: users and products
    op.create_table(
        'users',
        sa.Column('id', _id(), primary_key=True),
        sa.Column('email', sa.Text(), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('full_name', sa.Text(), nullable=True),
        sa.Column('role', sa.Text(), server_default='customer', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('email', name='users_email_key'),
        sa.CheckConstraint("role IN ('customer', 'admin')", name='ck_users_role'),
    )
    op.create_index('idx_users_role', 'users', ['role'])

    op.create_table(
        'products',
        sa.Column('id', _id(), primary_key=True),
        sa.Column('sku', sa.Text(), nullable=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price_cents', sa.Integer(), nullable=False),
        sa.Column('currency', sa.Text(), server_default='USD', nullable=False),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('stock_quantity', sa.Integer(), server_default='0', nullable=False),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint('sku', name='products_sku_key'),
        sa.CheckConstraint('price_cents >= 0', name='ck_products_price_cents'),
        sa.CheckConstraint('stock_quantity >= 0', name='ck_products_stock_quantity'),
    )
    op.create_index('idx_products_active', 'products', ['is_active'])
    if is_postgresql:
        op.create_index(
            'idx_products_name_search',
            'products',
            [sa.text("to_tsvector('english', coalesce(name,'') || ' ' || coalesce(description,''))")],
            postgresql_using='gin',
        )

    # Carts and their items
    if is_postgresql:
        cart_owner_status = sa.UniqueConstraint(
            'user_id', 'status', name='uq_carts_user_status', deferrable=True, initially='IMMEDIATE'
        )
    else:
        cart_owner_status = sa.UniqueConstraint('user_id', 'status', name='uq_carts_user_status')

    op.create_table(
        'carts',
        sa.Column('id', _id(), primary_key=True),
        sa.Column('user_id', _id(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('status', sa.Text(), server_default='active', nullable=False),
        *_timestamps(),
        sa.CheckConstraint("status IN ('active', 'converted', 'abandoned')", name='ck_carts_status'),
        cart_owner_status,
    )
    op.create_index('idx_carts_user_id', 'carts', ['user_id'])

    op.create_table(
        'cart_items',
        sa.Column('id', _id(), primary_key=True),
        sa.Column('cart_id', _id(), sa.ForeignKey('carts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('product_id', _id(), sa.ForeignKey('products.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price_cents', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('quantity > 0', name='ck_cart_items_quantity'),
        sa.CheckConstraint('unit_price_cents >= 0', name='ck_cart_items_unit_price_cents'),
        sa.UniqueConstraint('cart_id', 'product_id', name='uq_cart_items_cart_product'),
    )
    op.create_index('idx_cart_items_cart_id', 'cart_items', ['cart_id'])

    # Orders and their items
    op.create_table(
        'orders',
        sa.Column('id', _id(), primary_key=True),
        sa.Column('user_id', _id(), sa.ForeignKey('users.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('status', sa.Text(), server_default='pending', nullable=False),
        sa.Column('subtotal_cents', sa.Integer(), nullable=False),
        sa.Column('tax_cents', sa.Integer(), server_default='0', nullable=False),
        sa.Column('shipping_cents', sa.Integer(), server_default='0', nullable=False),
        sa.Column('total_cents', sa.Integer(), nullable=False),
        sa.Column('currency', sa.Text(), server_default='USD', nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('pending', 'paid', 'shipped', 'delivered', 'cancelled', 'refunded')",
            name='ck_orders_status',
        ),
        sa.CheckConstraint('subtotal_cents >= 0', name='ck_orders_subtotal_cents'),
        sa.CheckConstraint('tax_cents >= 0', name='ck_orders_tax_cents'),
        sa.CheckConstraint('shipping_cents >= 0', name='ck_orders_shipping_cents'),
        sa.CheckConstraint('total_cents >= 0', name='ck_orders_total_cents'),
    )
    op.create_index('idx_orders_user_created_at', 'orders', ['user_id', sa.text('created_at DESC')])

    op.create_table(
        'order_items',
        sa.Column('id', _id(), primary_key=True),
        sa.Column('order_id', _id(), sa.ForeignKey('orders.id', ondelete='CASCADE'), nullable=False),
        sa.Column('product_id', _id(), sa.ForeignKey('products.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price_cents', sa.Integer(), nullable=False),
        sa.Column('line_total_cents', sa.Integer(), nullable=False),
        *_timestamps(with_updated_at=False),
        sa.CheckConstraint('quantity > 0', name='ck_order_items_quantity'),
        sa.CheckConstraint('unit_price_cents >= 0', name='ck_order_items_unit_price_cents'),
        sa.CheckConstraint('line_total_cents >= 0', name='ck_order_items_line_total_cents'),
        sa.UniqueConstraint('order_id', 'product_id', name='uq_order_items_order_product'),
    )
    op.create_index('idx_order_items_order_id', 'order_items', ['order_id'])


def downgrade() -> None:
    """Downgrade schema."""
    # Children first
    op.drop_index('idx_order_items_order_id', table_name='order_items')
    op.drop_table('order_items')
    op.drop_index('idx_orders_user_created_at', table_name='orders')
    op.drop_table('orders')
    op.drop_index('idx_cart_items_cart_id', table_name='cart_items')
    op.drop_table('cart_items')
    op.drop_index('idx_carts_user_id', table_name='carts')
    op.drop_table('carts')
    if op.get_context().dialect.name == 'postgresql':
        op.drop_index('idx_products_name_search', table_name='products')
    op.drop_index('idx_products_active', table_name='products')
    op.drop_table('products')
    op.drop_index('idx_users_role', table_name='users')
    op.drop_table('users')
