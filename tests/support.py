"""
Shared fixtures for the test suite

Each test case gets its own in-memory SQLite database; StaticPool keeps
one connection alive so every session sees the same tables.
"""
from datetime import date
from decimal import Decimal

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.models import Base, Booking, Client, Customer, Service, Staff

# 2024-01-15 is a Monday
MONDAY = date(2024, 1, 15)
SUNDAY = date(2024, 1, 14)

PASSWORD = "s3cret-pass"


def make_session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine, sessionmaker(autocommit=False, autoflush=False, bind=engine)


def add_client(db, email="owner@example.com", name="Sunset Barbers", status="active"):
    client = Client(
        email=email,
        hashed_password=Client.hash_password(PASSWORD),
        name=name,
        status=status,
    )
    db.add(client)
    db.commit()
    return client


def add_service(db, client, name="Haircut", duration=30, price="25.00"):
    service = Service(
        client_id=client.id,
        name=name,
        duration=duration,
        price=Decimal(price),
        booking_enabled=True,
        active=True,
    )
    db.add(service)
    db.commit()
    return service


def add_staff(db, client, name="Alex", working_hours=None, active=True, **fields):
    staff = Staff(
        client_id=client.id,
        name=name,
        working_hours=working_hours,
        active=active,
        **fields
    )
    db.add(staff)
    db.commit()
    return staff


def add_customer(db, client, name="Jamie", email="jamie@example.com"):
    customer = Customer(client_id=client.id, name=name, email=email, status="active")
    db.add(customer)
    db.commit()
    return customer


def add_booking(db, client, service, staff=None, booking_date=MONDAY, booking_time="10:00",
                duration=30, status="pending", customer=None):
    booking = Booking(
        client_id=client.id,
        service_id=service.id,
        staff_id=staff.id if staff else None,
        customer_id=customer.id if customer else None,
        booking_date=booking_date,
        booking_time=booking_time,
        duration=duration,
        price=service.price,
        status=status,
    )
    db.add(booking)
    db.commit()
    return booking
