"""create invoicing tables

Revision ID: a1f0c7d2e9b4
Revises:
Create Date: 2025-10-02 09:12:41.215337

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a1f0c7d2e9b4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'orders',
        sa.Column('order_id', sa.Integer(), primary_key=True),
        sa.Column('status', sa.String(32), nullable=False),
        sa.Column('customer_id', sa.Integer(), nullable=True),
        sa.Column('employee_id', sa.Integer(), nullable=True),
        sa.Column('subtotal', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('order_discount', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('line_item_discount', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('total_amount', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('applied_order_promotions_json', sa.Text(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_orders_status', 'orders', ['status'])
    op.create_index('ix_orders_customer_id', 'orders', ['customer_id'])
    op.create_index('idx_orders_customer_status', 'orders', ['customer_id', 'status'])

    op.create_table(
        'order_details',
        sa.Column('order_detail_id', sa.Integer(), primary_key=True),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('orders.order_id'), nullable=False),
        sa.Column('product_unit_id', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('price_at_purchase', sa.DECIMAL(12, 2), nullable=False),
        sa.Column('discount', sa.DECIMAL(12, 2), nullable=True, server_default='0'),
        sa.Column('promotion_detail_id', sa.Integer(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_order_details_order_id', 'order_details', ['order_id'])
    op.create_index('ix_order_details_product_unit_id', 'order_details', ['product_unit_id'])

    op.create_table(
        'sale_invoice_header',
        sa.Column('invoice_id', sa.Integer(), primary_key=True),
        sa.Column('invoice_number', sa.String(32), nullable=False, unique=True),
        sa.Column('invoice_date', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('order_id', sa.Integer(), sa.ForeignKey('orders.order_id'), nullable=False, unique=True),
        sa.Column('customer_id', sa.Integer(), nullable=True),
        sa.Column('employee_id', sa.Integer(), nullable=True),
        sa.Column('subtotal', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('total_discount', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('total_tax', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('total_amount', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('paid_amount', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('status', sa.String(32), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_sale_invoice_header_customer_id', 'sale_invoice_header', ['customer_id'])
    op.create_index('idx_sale_invoice_header_invoice_date', 'sale_invoice_header', ['invoice_date'])

    op.create_table(
        'sale_invoice_detail',
        sa.Column('invoice_detail_id', sa.Integer(), primary_key=True),
        sa.Column('invoice_id', sa.Integer(), sa.ForeignKey('sale_invoice_header.invoice_id', ondelete='CASCADE'), nullable=False),
        sa.Column('product_unit_id', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.DECIMAL(12, 2), nullable=False),
        sa.Column('discount_amount', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('line_total', sa.DECIMAL(12, 2), nullable=False),
        sa.Column('tax_amount', sa.DECIMAL(12, 2), nullable=False, server_default='0'),
        sa.Column('line_total_with_tax', sa.DECIMAL(12, 2), nullable=False),
        *_timestamps(),
    )
    op.create_index('ix_sale_invoice_detail_invoice_id', 'sale_invoice_detail', ['invoice_id'])
    op.create_index('ix_sale_invoice_detail_product_unit_id', 'sale_invoice_detail', ['product_unit_id'])

    op.create_table(
        'applied_order_promotions',
        sa.Column('applied_order_promotion_id', sa.Integer(), primary_key=True),
        sa.Column('invoice_id', sa.Integer(), sa.ForeignKey('sale_invoice_header.invoice_id', ondelete='CASCADE'), nullable=False),
        sa.Column('promotion_id', sa.String(64), nullable=True),
        sa.Column('promotion_name', sa.String(255), nullable=True),
        sa.Column('promotion_detail_id', sa.Integer(), nullable=True),
        sa.Column('promotion_summary', sa.String(1024), nullable=True),
        sa.Column('discount_type', sa.String(32), nullable=True),
        sa.Column('discount_value', sa.DECIMAL(12, 2), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_applied_order_promotions_invoice_id', 'applied_order_promotions', ['invoice_id'])

    op.create_table(
        'applied_promotions',
        sa.Column('applied_promotion_id', sa.Integer(), primary_key=True),
        sa.Column('invoice_detail_id', sa.Integer(), sa.ForeignKey('sale_invoice_detail.invoice_detail_id', ondelete='CASCADE'), nullable=False),
        sa.Column('promotion_id', sa.String(64), nullable=True),
        sa.Column('promotion_name', sa.String(255), nullable=True),
        sa.Column('promotion_line_id', sa.Integer(), nullable=True),
        sa.Column('promotion_detail_id', sa.Integer(), nullable=True),
        sa.Column('promotion_summary', sa.String(1024), nullable=True),
        sa.Column('discount_type', sa.String(32), nullable=True),
        sa.Column('discount_value', sa.DECIMAL(12, 2), nullable=True),
        sa.Column('source_line_item_id', sa.Integer(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_applied_promotions_invoice_detail_id', 'applied_promotions', ['invoice_detail_id'])

    op.create_table(
        'promotion_details',
        sa.Column('detail_id', sa.Integer(), primary_key=True),
        sa.Column('promotion_line_id', sa.Integer(), nullable=True),
        sa.Column('usage_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('usage_limit', sa.Integer(), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_promotion_details_promotion_line_id', 'promotion_details', ['promotion_line_id'])

    op.create_table(
        'warehouses',
        sa.Column('warehouse_id', sa.Integer(), primary_key=True),
        sa.Column('product_unit_id', sa.Integer(), nullable=False, unique=True),
        sa.Column('quantity_on_hand', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
    )

    op.create_table(
        'warehouse_transactions',
        sa.Column('transaction_id', sa.Integer(), primary_key=True),
        sa.Column('product_unit_id', sa.Integer(), nullable=False),
        sa.Column('before_quantity', sa.Integer(), nullable=False),
        sa.Column('quantity_change', sa.Integer(), nullable=False),
        sa.Column('new_quantity', sa.Integer(), nullable=False),
        sa.Column('transaction_type', sa.String(32), nullable=False),
        sa.Column('reference_id', sa.String(64), nullable=True),
        sa.Column('notes', sa.String(255), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_warehouse_transactions_product_unit_id', 'warehouse_transactions', ['product_unit_id'])
    op.create_index('idx_warehouse_transactions_reference', 'warehouse_transactions', ['reference_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('warehouse_transactions')
    op.drop_table('warehouses')
    op.drop_table('promotion_details')
    op.drop_table('applied_promotions')
    op.drop_table('applied_order_promotions')
    op.drop_table('sale_invoice_detail')
    op.drop_table('sale_invoice_header')
    op.drop_table('order_details')
    op.drop_table('orders')
