"""Base service class for domain services."""


class Service:
    """Base service for domain business logic.

    Services receive repositories (and other services) through their
    constructor so they can be resolved by FastAPI or built by hand:

        ```python
        class PaymentService(Service):
            def __init__(self, payment_repo: Annotated[PaymentRepository, Depends()]) -> None:
                self._payment_repo = payment_repo

        @router.get("/payments")
        async def list_payments(service: Annotated[PaymentService, Depends()]):
            ...

        async with get_session_context() as session:
            service = PaymentService(PaymentRepository(session))
        ```
    """
