from .unit_of_work import UnitOfWork
from .notification_service import NotificationService
from .payment_gateway import PaymentGateway
from .event_publisher import EventPublisher, DomainEvent, publish_safely
from .pdf_service import PdfService

__all__ = [
    "UnitOfWork",
    "NotificationService",
    "PaymentGateway",
    "EventPublisher",
    "DomainEvent",
    "publish_safely",
    "PdfService",
]
