from .unit_of_work import SqlAlchemyUnitOfWork
from .notification_service import (
    LoggingNotificationService,
    WebhookNotificationService,
    CompositeNotificationService,
    create_notification_service,
)
from .event_publisher import (
    LoggingEventPublisher,
    WebhookEventPublisher,
    create_event_publisher,
)
from .payment_gateway import (
    SimulatedPaymentGateway,
    HttpPaymentGateway,
    create_payment_gateway,
)
from .pdf_service import ReportLabPdfService

__all__ = [
    "SqlAlchemyUnitOfWork",
    "LoggingNotificationService",
    "WebhookNotificationService",
    "CompositeNotificationService",
    "create_notification_service",
    "LoggingEventPublisher",
    "WebhookEventPublisher",
    "create_event_publisher",
    "SimulatedPaymentGateway",
    "HttpPaymentGateway",
    "create_payment_gateway",
    "ReportLabPdfService",
]
