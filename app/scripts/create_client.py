#!/usr/bin/env python3
"""
Script to create a client (business owner) with a service and a staff member
Usage: python -m app.scripts.create_client
"""
import sys
from decimal import Decimal

from sqlalchemy.orm import Session

from app.config.database import SessionLocal, create_tables
from app.models import Client, ClientStatus, Service, Staff
from app.repositories.staff_repository import DEFAULT_WORKING_HOURS


def create_client_with_staff():
    """Create a demo client with one service and one staff member"""
    create_tables()
    db: Session = SessionLocal()

    try:
        client = Client(
            email="owner@example.com",
            hashed_password=Client.hash_password("changeme123"),
            name="Sunset Barbers",
            phone="+1234567890",
            status=ClientStatus.ACTIVE.value,
        )
        db.add(client)
        db.flush()  # Get the ID without committing

        print(f"\n✅ Created client: {client.name}")
        print(f"   Client ID: {client.id}")
        print(f"   Login: {client.email} / changeme123")

        service = Service(
            client_id=client.id,
            name="Haircut",
            description="Classic cut and style",
            price=Decimal("25.00"),
            duration=30,
            booking_enabled=True,
            active=True,
        )
        staff = Staff(
            client_id=client.id,
            name="Alex",
            email="alex@example.com",
            working_hours=[entry.model_dump(mode="json") for entry in DEFAULT_WORKING_HOURS],
            active=True,
        )
        db.add_all([service, staff])
        db.commit()

        print(f"\n✅ Created service: {service.name} (ID {service.id}, {service.duration} min)")
        print(f"✅ Created staff member: {staff.name} (ID {staff.id})")
        print("\nWorking hours:")
        for entry in staff.working_hours:
            if entry["is_working"]:
                print(f"  {entry['day'].capitalize()}: {entry['start_time']} - {entry['end_time']}")
            else:
                print(f"  {entry['day'].capitalize()}: CLOSED")
        print()

        return client.id

    except Exception as e:
        db.rollback()
        print(f"\n❌ Error creating client: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
    finally:
        db.close()


if __name__ == "__main__":
    create_client_with_staff()
