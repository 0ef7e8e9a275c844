"""CreateOrder Use Case

Prices a checkout, reserves the next order number and seeds the delivery
milestones.
"""

import logging
from decimal import Decimal
from libs.result import Result, Return, Error
from src.app.services.unit_of_work import UnitOfWork
from src.app.services.event_publisher import EventPublisher, DomainEvent, publish_safely
from src.app.repositories.order_repository import OrderRepository, OrderNumberConflictError
from src.app.repositories.order_item_repository import OrderItemRepository
from src.app.repositories.order_milestone_repository import OrderMilestoneRepository
from src.domain.base import generate_uuid, utcnow
from src.domain.milestones import build_milestones
from src.domain.order import Order, OrderItem
from src.domain.pricing import calculate_discount, calculate_tax, estimate_delivery, to_money
from .dtos import CreateOrderCommandDTO, OrderResponseDTO

logger = logging.getLogger(__name__)

DEFAULT_CUSTOMER_EMAIL = "customer@example.com"
MAX_ORDER_NUMBER_ATTEMPTS = 5


class CreateOrder:
    """
    Use Case: Create a new order

    Business Rules:
    1. subtotal = sum(unit_price * quantity)
    2. Discount from the fixed code table; unknown codes give 0 (not an error)
    3. tax = round((subtotal - discount) * 21%, 2); total = subtotal - discount + tax
    4. order_number comes from the repository sequence (ORD-NNNNNN); when a
       concurrent checkout takes the same number the transaction is rolled
       back and a fresh number is drawn
    5. estimated_delivery = now + longest item lead time
    6. Four default milestones, the first already completed
    7. The total must be positive (INVALID_ORDER_TOTAL); a free order could
       never be charged

    Flow:
    1. Price items and order
    2. Reserve order number and persist the order (retry on conflict)
    3. Persist items and milestones
    4. Commit
    5. Publish order_created (after commit, fire-and-forget)
    """

    def __init__(
        self,
        uow: UnitOfWork,
        order_repo: OrderRepository,
        item_repo: OrderItemRepository,
        milestone_repo: OrderMilestoneRepository,
        event_publisher: EventPublisher,
        currency: str = "EUR",
    ):
        self.uow = uow
        self.order_repo = order_repo
        self.item_repo = item_repo
        self.milestone_repo = milestone_repo
        self.event_publisher = event_publisher
        self.currency = currency

    async def execute(self, command: CreateOrderCommandDTO) -> Result[OrderResponseDTO]:
        """
        Execute order creation

        Args:
            command: CreateOrderCommandDTO with customer, items, addresses and codes

        Returns:
            Result[OrderResponseDTO]: Created order with items and milestones or error
        """
        try:
            now = utcnow()
            order_id = generate_uuid()

            # Step 1: Price
            items = [
                OrderItem(
                    order_id=order_id,
                    product_id=line.product_id,
                    product_name=line.product_name,
                    delivery_time=line.delivery_time or "",
                    quantity=line.quantity,
                    unit_price=to_money(line.unit_price),
                    total_price=to_money(line.unit_price * line.quantity),
                    customizations=line.customizations,
                    created_at=now,
                )
                for line in command.items
            ]
            subtotal = to_money(sum((item.total_price for item in items), Decimal("0")))
            discount_amount = calculate_discount(subtotal, command.discount_code)
            tax_amount = calculate_tax(subtotal - discount_amount)
            total = subtotal - discount_amount + tax_amount

            estimated_delivery = estimate_delivery(
                (line.delivery_time for line in command.items), now
            )

            if total <= 0:
                return Return.err(
                    Error(
                        code="INVALID_ORDER_TOTAL",
                        message="Order total must be greater than zero",
                        reason=f"Computed total is {total}",
                    )
                )

            # Step 2: Reserve order number and persist the order
            billing = command.billing_address
            customer_name = " ".join(
                part for part in (billing.get("first_name"), billing.get("last_name")) if part
            )
            order_fields = dict(
                id=order_id,
                customer_id=command.customer_id,
                customer_name=customer_name,
                customer_email=billing.get("email") or DEFAULT_CUSTOMER_EMAIL,
                customer_phone=billing.get("phone"),
                subtotal=subtotal,
                discount_amount=discount_amount,
                discount_code=command.discount_code,
                tax_amount=tax_amount,
                total=total,
                currency=self.currency,
                payment_method_id=command.payment_method_id,
                billing_address=billing,
                shipping_address=command.shipping_address,
                notes=command.notes,
                estimated_delivery=estimated_delivery,
                created_at=now,
                updated_at=now,
            )

            created_order = None
            for attempt in range(1, MAX_ORDER_NUMBER_ATTEMPTS + 1):
                order_number = await self.order_repo.generate_order_number()
                try:
                    created_order = await self.order_repo.create(
                        Order(order_number=order_number, **order_fields)
                    )
                    break
                except OrderNumberConflictError as e:
                    await self.uow.rollback()
                    logger.warning(f"{e}; retrying ({attempt}/{MAX_ORDER_NUMBER_ATTEMPTS})")

            if created_order is None:
                return Return.err(
                    Error(
                        code="CREATE_ORDER_FAILED",
                        message="Failed to create order",
                        reason=f"No free order number after {MAX_ORDER_NUMBER_ATTEMPTS} attempts",
                    )
                )

            # Step 3: Persist items and milestones
            created_items = await self.item_repo.create_many(items)
            milestones = await self.milestone_repo.create_many(
                build_milestones(order_id, now, estimated_delivery)
            )

            # Step 4: Commit
            await self.uow.commit()

            logger.info(
                f"Order {created_order.order_number} created for customer {command.customer_id} "
                f"(total {total} {self.currency})"
            )

            # Step 5: Analytics
            await publish_safely(
                self.event_publisher,
                DomainEvent(
                    name="order_created",
                    aggregate_type="order",
                    aggregate_id=created_order.id,
                    payload={
                        "order_number": created_order.order_number,
                        "value": str(total),
                        "currency": self.currency,
                        "items": [
                            {
                                "product_id": item.product_id,
                                "product_name": item.product_name,
                                "quantity": item.quantity,
                                "price": str(item.unit_price),
                            }
                            for item in created_items
                        ],
                    },
                ),
            )

            return Return.ok(OrderResponseDTO.from_entities(created_order, created_items, milestones))

        except Exception as e:
            await self.uow.rollback()
            return Return.err(
                Error(
                    code="CREATE_ORDER_FAILED",
                    message="Failed to create order",
                    reason=str(e),
                )
            )
