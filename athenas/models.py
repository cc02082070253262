from datetime import datetime

from athenas import db, ma

LOCALES = ('en', 'ar')


class Category(db.Model):
    __tablename__ = "categories"
    __table_args__ = (
        db.UniqueConstraint('slug', 'locale', name='uq_categories_slug_locale'),
        db.Index('idx_categories_locale', 'locale'),
    )
    id = db.Column('category_id', db.Integer, primary_key=True)
    slug = db.Column(db.String(120), nullable=False)
    locale = db.Column(db.String(2), nullable=False)
    name = db.Column(db.String(200), nullable=False)
    icon = db.Column(db.String(16), nullable=False, default='')
    order = db.Column(db.Integer, nullable=False, default=0)
    createdAt = db.Column('created_at', db.DateTime, default=datetime.utcnow, nullable=False)
    updatedAt = db.Column('updated_at', db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<Category {self.slug}/{self.locale}>'


class Product(db.Model):
    __tablename__ = "products"
    __table_args__ = (
        db.UniqueConstraint('slug', 'locale', name='uq_products_slug_locale'),
        db.Index('idx_products_locale', 'locale'),
        db.Index('idx_products_category', 'category', 'locale'),
        db.Index('idx_products_featured', 'featured', 'locale'),
        db.Index('idx_products_new', 'new', 'locale'),
    )
    id = db.Column('product_id', db.Integer, primary_key=True)
    slug = db.Column(db.String(120), nullable=False)
    locale = db.Column(db.String(2), nullable=False)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False, default='')
    # Category slug; not a foreign key, deleting a category leaves products alone.
    category = db.Column(db.String(120), nullable=False)
    image = db.Column(db.String(500), nullable=False, default='')
    gallery = db.Column(db.JSON, nullable=False, default=list)
    weight = db.Column(db.String(60), nullable=False, default='')
    minOrder = db.Column('min_order', db.String(120), nullable=False, default='')
    grade = db.Column(db.String(60), nullable=False, default='')
    featured = db.Column(db.Boolean, nullable=False, default=False)
    new = db.Column(db.Boolean, nullable=False, default=False)
    active = db.Column(db.Boolean, nullable=False, default=True)
    createdAt = db.Column('created_at', db.DateTime, default=datetime.utcnow, nullable=False)
    updatedAt = db.Column('updated_at', db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f'<Product {self.slug}/{self.locale}>'


class ProductSchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Product
        load_instance = False


class CategorySchema(ma.SQLAlchemyAutoSchema):
    class Meta:
        model = Category
        load_instance = False


product_schema = ProductSchema()
products_schema = ProductSchema(many=True)
category_schema = CategorySchema()
categories_schema = CategorySchema(many=True)
