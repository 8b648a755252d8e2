from flask import Blueprint, current_app, request
from flask_babel import gettext as _
from ..models import db, Product
from ..schemas import ProductCreate, ProductUpdate
from .utils import success, parse_body, get_or_404

products_blueprint = Blueprint('products', __name__)

# ----------------------------
# Company Products Management
# ----------------------------
@products_blueprint.route('/api/products', methods=['GET'])
def list_products():
    query = Product.query
    # Deactivated products stay hidden unless explicitly requested
    if request.args.get('include_inactive') != 'true':
        query = query.filter_by(is_active=True)
    products = query.order_by(Product.name).all()
    return success([p.to_dict() for p in products], count=len(products))

@products_blueprint.route('/api/products/<int:product_id>', methods=['GET'])
def get_product(product_id):
    product = get_or_404(Product, product_id, 'Product')
    return success(product.to_dict())

@products_blueprint.route('/api/products', methods=['POST'])
def add_product():
    data = parse_body(ProductCreate)
    new_product = Product(**data.model_dump(exclude_none=True))
    db.session.add(new_product)
    db.session.commit()

    current_app.logger.info("Created product %s (%s) at rate %s", new_product.id, new_product.name, new_product.worker_salary)
    return success(new_product.to_dict(), 201)

@products_blueprint.route('/api/products/<int:product_id>', methods=['PUT'])
def edit_product(product_id):
    product = get_or_404(Product, product_id, 'Product')
    data = parse_body(ProductUpdate)

    for field, value in data.changes().items():
        setattr(product, field, value)
    db.session.commit()

    current_app.logger.info("Updated product %s (%s)", product.id, product.name)
    return success(product.to_dict())

@products_blueprint.route('/api/products/<int:product_id>', methods=['DELETE'])
def delete_product(product_id):
    product = get_or_404(Product, product_id, 'Product')
    product.is_active = False
    db.session.commit()

    current_app.logger.info("Deactivated product %s (%s)", product.id, product.name)
    return success(message=_('Product deleted successfully'))
