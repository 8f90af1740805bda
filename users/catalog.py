from decimal import Decimal
from django.utils.text import slugify

BUSINESS_ADMINISTRATION = 'Business Administration'
TAX_ADMINISTRATION = 'Tax Administration'
MANAGEMENT_ACCOUNTS = 'Management Accounts'
ANNUAL_FINANCIAL_STATEMENTS = 'Annual Financial Statements'
PACKAGES = 'Packages'

_PRICES = {
    BUSINESS_ADMINISTRATION: (Decimal('600.00'), Decimal('500.00')),
    TAX_ADMINISTRATION: (Decimal('500.00'), Decimal('500.00')),
    MANAGEMENT_ACCOUNTS: (Decimal('500.00'), Decimal('450.00')),
    ANNUAL_FINANCIAL_STATEMENTS: (Decimal('500.00'), Decimal('500.00')),
    PACKAGES: (Decimal('500.00'), Decimal('500.00')),
}

_SERVICES = [
    ('1', 'CIPC Annual Return Filing', BUSINESS_ADMINISTRATION),
    ('2', 'COIDA Workmens Compensation Registration', BUSINESS_ADMINISTRATION),
    ('3', 'COIDA Workmens Compensation Return Of Earnings', BUSINESS_ADMINISTRATION),
    ('4', 'BBBEE Affidavits - EME And QSE', BUSINESS_ADMINISTRATION),
    ('5', 'Formation Of Trust', BUSINESS_ADMINISTRATION),
    ('6', 'Newly Registered Company Pty Ltd', BUSINESS_ADMINISTRATION),
    ('7', 'Change Of Company Name', BUSINESS_ADMINISTRATION),
    ('8', 'Department of Social Development Registration', BUSINESS_ADMINISTRATION),
    ('9', 'CSD Profile Registration', BUSINESS_ADMINISTRATION),
    ('10', 'Formation Of Incorporation', BUSINESS_ADMINISTRATION),
    ('11', 'Change Of Registered Address', BUSINESS_ADMINISTRATION),
    ('12', 'CIPC Incorporation Documents - Post 2012', BUSINESS_ADMINISTRATION),
    ('13', 'Change Of Directors or Members', BUSINESS_ADMINISTRATION),
    ('14', 'SARS Notice of Objection / Appeal', TAX_ADMINISTRATION),
    ('15', 'SARS Company CC Trust Tax Returns', TAX_ADMINISTRATION),
    ('16', 'Department of Labour UIF Registration', TAX_ADMINISTRATION),
    ('17', 'SARS PAYE SDL Registration', TAX_ADMINISTRATION),
    ('18', 'SARS Non-profit Organization Income Tax Exemption', TAX_ADMINISTRATION),
    ('19', 'Efiling Profile Registration', TAX_ADMINISTRATION),
    ('20', 'VAT Registration', TAX_ADMINISTRATION),
    ('21', 'SARS Customs Registration', TAX_ADMINISTRATION),
    ('22', 'SARS Registered Representative', TAX_ADMINISTRATION),
    ('23', 'SARS Personal Income Tax Returns', TAX_ADMINISTRATION),
    ('24', 'Management Accounts', MANAGEMENT_ACCOUNTS),
    ('25', 'Annual Financial Statements', ANNUAL_FINANCIAL_STATEMENTS),
    ('26', 'Business Startup Package', PACKAGES),
    ('27', 'Comprehensive Business Package', PACKAGES),
    ('28', 'Non-Profit Organization Package', PACKAGES),
    ('29', 'Tax Compliance and Maintenance Package', PACKAGES),
]

PRODUCTS = {}
for _id, _name, _category in _SERVICES:
    _mrp, _sale = _PRICES[_category]
    PRODUCTS[_id] = {
        'id': _id,
        'name': _name,
        'slug': slugify(_name),
        'category': _category,
        'mrp': _mrp,
        'sale_price': _sale,
    }


def get_product(product_id):
    return PRODUCTS.get(str(product_id))


def list_products(category=None):
    products = PRODUCTS.values()
    if category:
        products = [p for p in products if p['category'].lower() == category.lower()]
    return list(products)


def serialize_product(product):
    return {
        'id': product['id'],
        'name': product['name'],
        'slug': product['slug'],
        'category': product['category'],
        'mrp': str(product['mrp']),
        'salePrice': str(product['sale_price']),
    }
