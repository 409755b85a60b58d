"""create catalog tables: categories, products, product_images

Revision ID: 3c1d9e7a2b40
Revises: 
Create Date: 2026-10-18 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '3c1d9e7a2b40'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table(
        'categories',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('slug', sa.String(120), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('level', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('parent_id', sa.Uuid(), sa.ForeignKey('categories.id')),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('parent_id', 'name', name='uq_categories_parent_name'),
        sa.UniqueConstraint('parent_id', 'slug', name='uq_categories_parent_slug'),
        sa.CheckConstraint('level >= 1 AND level <= 3', name='ck_categories_level'),
    )
    op.create_index('ix_categories_name', 'categories', ['name'])
    op.create_index('ix_categories_slug', 'categories', ['slug'])
    op.create_index('ix_categories_parent_id', 'categories', ['parent_id'])
    op.create_index('ix_categories_is_active', 'categories', ['is_active'])

    op.create_table(
        'products',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('sku', sa.String(100), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('description', sa.Text()),
        sa.Column('short_description', sa.String(100)),
        sa.Column('price', sa.Numeric(10, 2), nullable=False),
        sa.Column('compare_at_price', sa.Numeric(10, 2)),
        sa.Column('stock_quantity', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('low_stock_threshold', sa.Integer(), nullable=False, server_default='5'),
        sa.Column('track_quantity', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('compatible_models', sa.String(100)),
        sa.Column('weight', sa.Float()),
        sa.Column('dimensions', sa.String(100)),
        sa.Column('is_active', sa.Boolean(), server_default=sa.true()),
        sa.Column('is_featured', sa.Boolean(), server_default=sa.false()),
        sa.Column('meta_title', sa.String(255)),
        sa.Column('meta_description', sa.String(160)),
        sa.Column('category_id', sa.Uuid(), sa.ForeignKey('categories.id'), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint('price >= 0', name='ck_products_price'),
        sa.CheckConstraint('stock_quantity >= 0', name='ck_products_stock'),
    )
    op.create_index('ix_products_sku', 'products', ['sku'], unique=True)
    op.create_index('ix_products_slug', 'products', ['slug'], unique=True)
    op.create_index('ix_products_name', 'products', ['name'])
    op.create_index('ix_products_category_id', 'products', ['category_id'])
    op.create_index('ix_products_is_active', 'products', ['is_active'])
    op.create_index('ix_products_is_featured', 'products', ['is_featured'])

    op.create_table(
        'product_images',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('product_id', sa.Uuid(), sa.ForeignKey('products.id'), nullable=False),
        sa.Column('url', sa.String(500), nullable=False),
        sa.Column('alt_text', sa.String(255)),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
    )
    op.create_index('ix_product_images_product_id', 'product_images', ['product_id'])

def downgrade():
    op.drop_index('ix_product_images_product_id', table_name='product_images')
    op.drop_table('product_images')
    for index in (
        'ix_products_is_featured', 'ix_products_is_active', 'ix_products_category_id',
        'ix_products_name', 'ix_products_slug', 'ix_products_sku',
    ):
        op.drop_index(index, table_name='products')
    op.drop_table('products')
    for index in (
        'ix_categories_is_active', 'ix_categories_parent_id', 'ix_categories_slug', 'ix_categories_name',
    ):
        op.drop_index(index, table_name='categories')
    op.drop_table('categories')
