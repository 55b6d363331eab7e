"""Customer data access."""

from payportal.abstract import Repository

from .entities import Customer


class CustomerRepository(Repository[Customer]):
    """Repository for customer accounts."""

    async def get_by_account_number(self, account_number: str) -> Customer | None:
        return await self.select_one(Customer.account_number == account_number)
