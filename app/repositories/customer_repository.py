from typing import Optional

from app.models.customer import Customer
from app.repositories.base import BaseRepository


class CustomerRepository(BaseRepository):
    """Customers of a client"""

    def get(self, client_id: int, customer_id: int) -> Optional[Customer]:
        return self.session.query(Customer).filter(
            Customer.id == customer_id,
            Customer.client_id == client_id
        ).first()

    def get_by_email(self, client_id: int, email: str) -> Optional[Customer]:
        return self.session.query(Customer).filter(
            Customer.client_id == client_id,
            Customer.email == email
        ).first()

    def get_or_create_by_email(
            self,
            client_id: int,
            name: str,
            email: str,
            phone: Optional[str] = None
    ) -> Customer:
        """
        Find a customer by email within the tenant, refreshing name and phone,
        or create one when none exists.
        """
        customer = self.get_by_email(client_id, email)
        if customer:
            customer.name = name
            if phone:
                customer.phone = phone
            self.session.flush()
            return customer

        return self.add(Customer(
            client_id=client_id,
            name=name,
            email=email,
            phone=phone,
            status="active",
        ))
