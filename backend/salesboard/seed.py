# Overview: Demo users, sale records and customer view defaults loaded at start-up.

from __future__ import annotations

from .extensions import db
from .models import FieldVisibility, Role, SaleRecord, User


STARK_CUSTOMER_ID = "CISTARK001"
WAYNE_CUSTOMER_ID = "CIWAYNE001"

INITIAL_USERS = [
    {"id": 1, "username": "admin", "password": "password", "role": Role.ADMIN.value},
    {"id": 2, "username": "STARKINDUSTRIES", "password": STARK_CUSTOMER_ID, "role": Role.CUSTOMER.value},
    {"id": 3, "username": "WAYNEENTERPRISES", "password": WAYNE_CUSTOMER_ID, "role": Role.CUSTOMER.value},
]

INITIAL_SALE_RECORDS = [
    {
        "id": 1,
        "date": "2023-10-26",
        "time": "14:30",
        "customer_id": STARK_CUSTOMER_ID,
        "customer_name": "Stark Industries",
        "product_name": "Arc Reactor Core",
        "product_id": "P001",
        "salesperson": "Tony Stark",
        "region": "North America",
        "quantity": 10,
        "unit_price": 50000,
        "discount": 0.1,
        "total_amount": 450000,
    },
    {
        "id": 2,
        "date": "2023-10-27",
        "time": "09:15",
        "customer_id": WAYNE_CUSTOMER_ID,
        "customer_name": "Wayne Enterprises",
        "product_name": "Grappling Hook",
        "product_id": "P002",
        "salesperson": "Lucius Fox",
        "region": "North America",
        "quantity": 100,
        "unit_price": 1500,
        "discount": 0.05,
        "total_amount": 142500,
    },
    {
        "id": 3,
        "date": "2023-10-27",
        "time": "13:45",
        "customer_id": STARK_CUSTOMER_ID,
        "customer_name": "Stark Industries",
        "product_name": "Repulsor Gauntlet",
        "product_id": "P003",
        "salesperson": "Pepper Potts",
        "region": "EMEA",
        "quantity": 2,
        "unit_price": 120000,
        "discount": 0,
        "total_amount": 240000,
    },
]

# What customers see until an administrator changes it
DEFAULT_CUSTOMER_VISIBLE_FIELDS = {
    "date": True,
    "time": True,
    "customer_id": True,
    "customer_name": True,
    "product_name": True,
    "product_id": True,
    "salesperson": True,
    "region": False,
    "quantity": True,
    "unit_price": True,
    "discount": False,
    "total_amount": True,
    "image": True,
}


def seed_demo_data() -> None:
    """Load the demo data into an empty store. Idempotent."""
    if db.session.query(User).count() == 0:
        for row in INITIAL_USERS:
            db.session.add(User(**row))
    if db.session.query(SaleRecord).count() == 0:
        for row in INITIAL_SALE_RECORDS:
            db.session.add(SaleRecord(**row))
    seed_customer_visibility()
    db.session.commit()


def seed_customer_visibility() -> None:
    """Default customer view; the only seed needed when demo data is off."""
    if db.session.query(FieldVisibility).count() > 0:
        return
    for position, (field, shown) in enumerate(DEFAULT_CUSTOMER_VISIBLE_FIELDS.items()):
        db.session.add(FieldVisibility(field=field, is_visible=shown, position=position))
