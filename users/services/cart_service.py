from collections import OrderedDict
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from users.catalog import get_product
from users.helpers.errors import ValidationFailed

TWO_PLACES = Decimal('0.01')


def to_decimal(value):
    try:
        return Decimal(str(value if value not in (None, '') else 0))
    except InvalidOperation:
        return Decimal('0')


class CartItem:
    __slots__ = ('product', 'count')

    def __init__(self, product, count=1):
        self.product = product
        self.count = count

    @property
    def unit_price(self):
        sale_price = to_decimal(self.product.get('sale_price'))
        return sale_price if sale_price > 0 else to_decimal(self.product.get('mrp'))

    @property
    def line_total(self):
        return self.unit_price * self.count


class Cart:
    """Ordered product-id -> CartItem mapping as kept in the browser's local storage."""

    def __init__(self):
        self.items = OrderedDict()

    def __len__(self):
        return len(self.items)

    def __iter__(self):
        return iter(self.items.values())

    @property
    def is_empty(self):
        return not self.items

    def update_cart(self, product, delta):
        product_id = str(product['id'])
        item = self.items.get(product_id)

        if item is None:
            if delta > 0:
                self.items[product_id] = CartItem(product, 1)
            return self

        item.count += delta
        if item.count <= 0:
            del self.items[product_id]
        return self

    def remove(self, product_id):
        self.items.pop(str(product_id), None)
        return self

    def clear(self):
        self.items.clear()
        return self

    def total_price(self):
        total = sum((item.line_total for item in self), Decimal('0'))
        return total.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)

    def item_names(self):
        names = []
        for product_id, item in self.items.items():
            names.extend([product_id] * item.count)
        return ', '.join(names)

    def to_storage(self):
        return [
            {
                'product': {
                    'id': item.product['id'],
                    'name': item.product.get('name', ''),
                    'mrp': str(to_decimal(item.product.get('mrp'))),
                    'salePrice': str(to_decimal(item.product.get('sale_price'))),
                },
                'count': item.count
            }
            for item in self
        ]

    @classmethod
    def from_storage(cls, data):
        """Rebuild a cart from its stored form, pricing every entry from the catalog.

        Unknown products and non-positive counts are dropped.
        """
        if not isinstance(data, list):
            raise ValidationFailed('Cart must be a list', errors={'cart': 'cart must be a list of {product, count}'})

        cart = cls()
        for entry in data:
            if not isinstance(entry, dict):
                continue
            product_ref = entry.get('product') or {}
            product_id = product_ref.get('id') if isinstance(product_ref, dict) else product_ref
            product = get_product(product_id)
            if product is None:
                continue
            try:
                count = int(entry.get('count', 0))
            except (TypeError, ValueError):
                continue
            if count > 0:
                cart.update_cart(product, 1)
                cart.update_cart(product, count - 1)
        return cart

    def summary(self):
        return {
            'items': self.to_storage(),
            'item_count': sum(item.count for item in self),
            'total': str(self.total_price()),
            'item_name': self.item_names()
        }
