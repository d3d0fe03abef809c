"""
Per-schema row generators.

Each generator takes a row count, the parent rows already produced in the
same batch (keyed by schema name) and a ValueSampler, and returns exactly
`count` rows with sequential ids 1..count.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Callable, Dict, List, Mapping, Sequence, Union

from mockem.errors import UnknownSchemaError
from mockem.generator.sampling import ValueSampler
from mockem.models import Row, SchemaKind

Parents = Mapping[str, Sequence[Row]]
SchemaGenerator = Callable[[int, Parents, ValueSampler], List[Row]]

# [min, max) ranges for numeric fields
COMPANY_REVENUE_RANGE = (1_000_000, 51_000_000)
COMPANY_EMPLOYEES_RANGE = (10, 10_000)
OPPORTUNITY_AMOUNT_RANGE = (5_000, 505_000)
PROBABILITY_RANGE = (0, 100)
ACCOUNT_BALANCE_RANGE = (-500_000, 1_500_000)
TRANSACTION_AMOUNT_RANGE = (10, 10_010)
RATING_RANGE = (1, 6)
DEPARTMENT_BUDGET_RANGE = (100_000, 2_100_000)
SALARY_RANGE = (40_000, 180_000)
CAMPAIGN_BUDGET_RANGE = (5_000, 255_000)
CAMPAIGN_LENGTH_DAYS = (7, 187)
LEAD_SCORE_RANGE = (0, 100)
LEAD_TIME_DAYS_RANGE = (3, 45)
UNIT_COST_RANGE = (5, 1_005)
MARKUP_RANGE = (1.2, 2.5)
STOCK_LEVEL_RANGE = (0, 500)
ORDER_QUANTITY_RANGE = (1, 50)

# Date windows, in days
COMPANY_CREATED_WINDOW = 365
CLOSE_DATE_WINDOW = 180
ACCOUNT_OPENED_WINDOW = 5 * 365
TRANSACTION_WINDOW = 30
HIRE_DATE_WINDOW = 3 * 365
CAMPAIGN_START_WINDOW = 90
LEAD_CREATED_WINDOW = 90
ORDER_WINDOW = 30


def _company_name(sampler: ValueSampler) -> str:
    return f"{sampler.choice('company_prefixes')} {sampler.choice('company_suffixes')}"


def _slug(name: str) -> str:
    return "".join(ch for ch in name.lower() if ch.isalnum())


def generate_companies(count: int, parents: Parents, sampler: ValueSampler) -> List[Row]:
    rows = []
    for i in range(count):
        name = _company_name(sampler)
        rows.append({
            "id": i + 1,
            "name": name,
            "industry": sampler.choice("industries"),
            "size": sampler.choice("company_sizes"),
            "revenue": sampler.uniform(*COMPANY_REVENUE_RANGE),
            "employee_count": sampler.integer(*COMPANY_EMPLOYEES_RANGE),
            "website": f"https://www.{_slug(name)}.example.com",
            "city": sampler.faker.city(),
            "created_date": sampler.past_datetime(COMPANY_CREATED_WINDOW),
        })
    return rows


def generate_contacts(count: int, parents: Parents, sampler: ValueSampler) -> List[Row]:
    companies = parents.get(SchemaKind.COMPANIES.value)
    rows = []
    for i in range(count):
        first_name = sampler.choice("first_names")
        last_name = sampler.choice("last_names")
        rows.append({
            "id": i + 1,
            "company_id": sampler.reference(companies, i),
            "first_name": first_name,
            "last_name": last_name,
            "email": sampler.email(first_name, last_name, i),
            "phone": sampler.faker.phone_number(),
            "title": sampler.choice("job_titles"),
            "department": sampler.choice("contact_departments"),
        })
    return rows


def generate_opportunities(count: int, parents: Parents, sampler: ValueSampler) -> List[Row]:
    companies = parents.get(SchemaKind.COMPANIES.value)
    contacts = parents.get(SchemaKind.CONTACTS.value)
    rows = []
    for i in range(count):
        if companies:
            subject = companies[i % len(companies)]["name"]
        else:
            subject = sampler.choice("company_prefixes")
        rows.append({
            "id": i + 1,
            "company_id": sampler.reference(companies, i),
            "contact_id": sampler.reference(contacts, i),
            "name": f"{subject} - {sampler.choice('opportunity_types')}",
            "amount": sampler.uniform(*OPPORTUNITY_AMOUNT_RANGE),
            "stage": sampler.choice("opportunity_stages"),
            "probability": sampler.integer(*PROBABILITY_RANGE),
            "close_date": sampler.future_datetime(CLOSE_DATE_WINDOW),
        })
    return rows


def generate_accounts(count: int, parents: Parents, sampler: ValueSampler) -> List[Row]:
    rows = []
    for i in range(count):
        rows.append({
            "id": i + 1,
            "account_number": f"ACC-{sampler.digits(4)}-{i + 1:03d}",
            "name": sampler.choice("account_names"),
            "type": sampler.choice("account_types"),
            "currency": sampler.choice("currencies"),
            "balance": sampler.uniform(*ACCOUNT_BALANCE_RANGE),
            "opened_date": sampler.past_datetime(ACCOUNT_OPENED_WINDOW),
        })
    return rows


def generate_transactions(count: int, parents: Parents, sampler: ValueSampler) -> List[Row]:
    accounts = parents.get(SchemaKind.ACCOUNTS.value)
    vendors = parents.get(SchemaKind.VENDORS.value)
    rows = []
    for i in range(count):
        amount = sampler.uniform(*TRANSACTION_AMOUNT_RANGE)
        is_debit = sampler.integer(0, 2) == 0
        rows.append({
            "id": i + 1,
            "account_id": sampler.reference(accounts, i),
            "vendor_id": sampler.reference(vendors, i),
            "date": sampler.past_datetime(TRANSACTION_WINDOW),
            "description": f"{sampler.choice('transaction_descriptions')} #{i + 1}",
            "reference": f"TXN-{sampler.digits(8)}",
            "debit": amount if is_debit else None,
            "credit": None if is_debit else amount,
        })
    return rows


def generate_vendors(count: int, parents: Parents, sampler: ValueSampler) -> List[Row]:
    rows = []
    for i in range(count):
        rows.append({
            "id": i + 1,
            "name": _company_name(sampler),
            "category": sampler.choice("vendor_categories"),
            "payment_terms": sampler.choice("payment_terms"),
            "country": sampler.choice("countries"),
            "rating": sampler.uniform(*RATING_RANGE, ndigits=1),
        })
    return rows


def generate_departments(count: int, parents: Parents, sampler: ValueSampler) -> List[Row]:
    rows = []
    for i in range(count):
        rows.append({
            "id": i + 1,
            "name": sampler.choice("department_names"),
            "cost_center": f"CC-{100 + i + 1}",
            "location": sampler.choice("office_locations"),
            "budget": sampler.uniform(*DEPARTMENT_BUDGET_RANGE),
        })
    return rows


def generate_employees(count: int, parents: Parents, sampler: ValueSampler) -> List[Row]:
    departments = parents.get(SchemaKind.DEPARTMENTS.value)
    rows = []
    for i in range(count):
        first_name = sampler.choice("first_names")
        last_name = sampler.choice("last_names")
        rows.append({
            "id": i + 1,
            "employee_number": f"EMP{i + 1:04d}",
            "first_name": first_name,
            "last_name": last_name,
            "email": sampler.email(first_name, last_name, i),
            "department_id": sampler.reference(departments, i),
            "position": sampler.choice("positions"),
            # Manager is an employee generated earlier in this batch
            "manager_id": sampler.integer(1, i + 1) if i > 0 else None,
            "hire_date": sampler.past_datetime(HIRE_DATE_WINDOW),
            "salary": sampler.uniform(*SALARY_RANGE),
        })
    return rows


def generate_campaigns(count: int, parents: Parents, sampler: ValueSampler) -> List[Row]:
    rows = []
    for i in range(count):
        start_date = sampler.future_datetime(CAMPAIGN_START_WINDOW)
        length = sampler.integer(*CAMPAIGN_LENGTH_DAYS)
        rows.append({
            "id": i + 1,
            "name": f"{sampler.choice('campaign_themes')} {start_date.year}",
            "type": sampler.choice("campaign_types"),
            "channel": sampler.choice("campaign_channels"),
            "status": sampler.choice("campaign_statuses"),
            "budget": sampler.uniform(*CAMPAIGN_BUDGET_RANGE),
            "start_date": start_date,
            "end_date": start_date + timedelta(days=length),
            "target_audience": sampler.choice("target_audiences"),
        })
    return rows


def generate_leads(count: int, parents: Parents, sampler: ValueSampler) -> List[Row]:
    campaigns = parents.get(SchemaKind.CAMPAIGNS.value)
    rows = []
    for i in range(count):
        first_name = sampler.choice("first_names")
        last_name = sampler.choice("last_names")
        rows.append({
            "id": i + 1,
            "campaign_id": sampler.reference(campaigns, i),
            "first_name": first_name,
            "last_name": last_name,
            "email": sampler.email(first_name, last_name, i),
            "company": _company_name(sampler),
            "source": sampler.choice("lead_sources"),
            "score": sampler.integer(*LEAD_SCORE_RANGE),
            "status": sampler.choice("lead_statuses"),
            "created_date": sampler.past_datetime(LEAD_CREATED_WINDOW),
        })
    return rows


def generate_suppliers(count: int, parents: Parents, sampler: ValueSampler) -> List[Row]:
    rows = []
    for i in range(count):
        name = _company_name(sampler)
        rows.append({
            "id": i + 1,
            "name": name,
            "category": sampler.choice("supplier_categories"),
            "country": sampler.choice("countries"),
            "contact_email": f"sales@{_slug(name)}.example.com",
            "lead_time_days": sampler.integer(*LEAD_TIME_DAYS_RANGE),
            "rating": sampler.uniform(*RATING_RANGE, ndigits=1),
        })
    return rows


def generate_products(count: int, parents: Parents, sampler: ValueSampler) -> List[Row]:
    suppliers = parents.get(SchemaKind.SUPPLIERS.value)
    rows = []
    for i in range(count):
        unit_cost = sampler.uniform(*UNIT_COST_RANGE)
        markup = sampler.uniform(*MARKUP_RANGE)
        rows.append({
            "id": i + 1,
            "supplier_id": sampler.reference(suppliers, i),
            "sku": f"SKU-{sampler.digits(5)}-{i + 1:03d}",
            "name": f"{sampler.choice('product_adjectives')} {sampler.choice('product_nouns')}",
            "category": sampler.choice("product_categories"),
            "unit_cost": unit_cost,
            "unit_price": round(unit_cost * markup, 2),
            "stock_level": sampler.integer(*STOCK_LEVEL_RANGE),
        })
    return rows


def generate_orders(count: int, parents: Parents, sampler: ValueSampler) -> List[Row]:
    products = parents.get(SchemaKind.PRODUCTS.value)
    rows = []
    for i in range(count):
        quantity = sampler.integer(*ORDER_QUANTITY_RANGE)
        if products:
            unit_price = products[i % len(products)]["unit_price"]
        else:
            unit_price = sampler.uniform(*UNIT_COST_RANGE)
        rows.append({
            "id": i + 1,
            "product_id": sampler.reference(products, i),
            "order_number": f"ORD-{sampler.digits(6)}",
            "customer_name": f"{sampler.choice('first_names')} {sampler.choice('last_names')}",
            "order_date": sampler.past_datetime(ORDER_WINDOW),
            "quantity": quantity,
            "status": sampler.choice("order_statuses"),
            "total_amount": round(unit_price * quantity, 2),
        })
    return rows


GENERATORS: Dict[SchemaKind, SchemaGenerator] = {
    SchemaKind.COMPANIES: generate_companies,
    SchemaKind.CONTACTS: generate_contacts,
    SchemaKind.OPPORTUNITIES: generate_opportunities,
    SchemaKind.ACCOUNTS: generate_accounts,
    SchemaKind.TRANSACTIONS: generate_transactions,
    SchemaKind.VENDORS: generate_vendors,
    SchemaKind.EMPLOYEES: generate_employees,
    SchemaKind.DEPARTMENTS: generate_departments,
    SchemaKind.CAMPAIGNS: generate_campaigns,
    SchemaKind.LEADS: generate_leads,
    SchemaKind.PRODUCTS: generate_products,
    SchemaKind.ORDERS: generate_orders,
    SchemaKind.SUPPLIERS: generate_suppliers,
}

_missing = set(SchemaKind) - set(GENERATORS)
if _missing:
    raise RuntimeError(f"No generator registered for: {sorted(k.value for k in _missing)}")


def generate_schema(
    schema: Union[SchemaKind, str],
    count: int,
    parents: Parents,
    sampler: ValueSampler,
) -> List[Row]:
    """Dispatch to the generator for `schema`; unknown names fail loudly."""
    try:
        kind = SchemaKind(schema)
    except ValueError:
        raise UnknownSchemaError(str(schema)) from None
    return GENERATORS[kind](count, parents, sampler)
