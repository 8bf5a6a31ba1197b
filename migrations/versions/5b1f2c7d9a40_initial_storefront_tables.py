"""initial storefront tables

Revision ID: 5b1f2c7d9a40
Revises:
Create Date: 2026-10-18 09:30:00.000000
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '5b1f2c7d9a40'
down_revision = None
branch_labels = None
depends_on = None

BIGINT = sa.BigInteger().with_variant(sa.Integer(), 'sqlite')


def upgrade():
    op.create_table(
        'kv_entry',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('namespace', sa.String(length=120), nullable=False),
        sa.Column('key', sa.String(length=64), nullable=False),
        sa.Column('value', sa.Text(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.UniqueConstraint('namespace', 'key', name='uq_kv_namespace_key'),
    )
    op.create_index('ix_kv_entry_namespace', 'kv_entry', ['namespace'])

    op.create_table(
        'product',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('category', sa.String(length=50), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('stock', sa.Integer(), nullable=False),
        sa.Column('is_available', sa.Boolean(), nullable=False),
        sa.Column('image_url', sa.String(length=255), nullable=False),
        sa.Column('rating', sa.Float(), nullable=True),
        sa.Column('extra', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_product_name', 'product', ['name'])
    op.create_index('ix_product_created_at', 'product', ['created_at'])

    op.create_table(
        'order',
        sa.Column('id', sa.String(length=32), primary_key=True),
        sa.Column('customer_id', sa.String(length=64), nullable=False),
        sa.Column('customer_name', sa.String(length=100), nullable=False),
        sa.Column('customer_phone', sa.String(length=20), nullable=False),
        sa.Column('subtotal', sa.Float(), nullable=False),
        sa.Column('delivery_fee', sa.Float(), nullable=False),
        sa.Column('tax', sa.Float(), nullable=False),
        sa.Column('total', sa.Float(), nullable=False),
        sa.Column('payment_method', sa.String(length=10), nullable=False),
        sa.Column('is_paid', sa.Boolean(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=False),
    )
    op.create_index('ix_order_status', 'order', ['status'])
    op.create_index('ix_order_customer_timestamp', 'order', ['customer_id', 'timestamp'])

    op.create_table(
        'order_item',
        sa.Column('id', BIGINT, primary_key=True),
        sa.Column('order_id', sa.String(length=32), sa.ForeignKey('order.id'), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.String(length=32), nullable=False),
        sa.Column('product_name', sa.String(length=100), nullable=False),
        sa.Column('size', sa.String(length=20), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price', sa.Float(), nullable=False),
        sa.Column('image_url', sa.String(length=255), nullable=False),
    )

    op.create_table(
        'order_status_log',
        sa.Column('id', BIGINT, primary_key=True),
        sa.Column('order_id', sa.String(length=32), sa.ForeignKey('order.id'), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('updated_by', sa.String(length=64), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=True),
    )


def downgrade():
    op.drop_table('order_status_log')
    op.drop_table('order_item')
    op.drop_index('ix_order_customer_timestamp', table_name='order')
    op.drop_index('ix_order_status', table_name='order')
    op.drop_table('order')
    op.drop_index('ix_product_created_at', table_name='product')
    op.drop_index('ix_product_name', table_name='product')
    op.drop_table('product')
    op.drop_index('ix_kv_entry_namespace', table_name='kv_entry')
    op.drop_table('kv_entry')
